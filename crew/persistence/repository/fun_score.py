"""PostgreSQL implementation of FunScore repository."""

from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID, uuid4

import logfire
from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from crew.domain.model import FunScore, ScoreHistoryEntry
from crew.domain.model.common import utc_now
from crew.domain.repository.fun_score import FunScoreRepository
from crew.domain.value import FunScoreId, GroupId, UserId
from crew.persistence.mappers import fun_score_to_dict, row_to_fun_score
from crew.persistence.tables import fun_score_history_table, fun_scores_table


class PostgresFunScoreRepository(FunScoreRepository):
    """PostgreSQL implementation of FunScoreRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch_history(
        self, score_ids: list[UUID]
    ) -> dict[UUID, list[Dict[str, Any]]]:
        """Fetch history rows for multiple scores, oldest first."""
        if not score_ids:
            return {}

        stmt = (
            select(fun_score_history_table)
            .where(fun_score_history_table.c.fun_score_id.in_(score_ids))
            .order_by(fun_score_history_table.c.seq)
        )
        result = await self.session.execute(stmt)

        history: dict[UUID, list[Dict[str, Any]]] = defaultdict(list)
        for row in result.fetchall():
            history[row.fun_score_id].append(row._asdict())
        return history

    async def _hydrate(self, rows: Sequence[Any]) -> List[FunScore]:
        history = await self._fetch_history([row.id for row in rows])
        return [row_to_fun_score(row._asdict(), history.get(row.id, [])) for row in rows]

    async def find(self, user_id: UserId, group_id: GroupId) -> Optional[FunScore]:
        """Find the score for (user, group)."""
        with logfire.span(
            "fun_score_repository.find", user_id=str(user_id), group_id=str(group_id)
        ):
            stmt = select(fun_scores_table).where(
                fun_scores_table.c.user_id == user_id,
                fun_scores_table.c.group_id == group_id,
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if not row:
                return None
            scores = await self._hydrate([row])
            return scores[0]

    async def find_by_user(self, user_id: UserId) -> List[FunScore]:
        """Find all of a user's scores."""
        stmt = (
            select(fun_scores_table)
            .where(fun_scores_table.c.user_id == user_id)
            .order_by(fun_scores_table.c.seq)
        )
        result = await self.session.execute(stmt)
        return await self._hydrate(result.fetchall())

    async def get_or_create(
        self, user_id: UserId, group_id: GroupId, default_score: int
    ) -> FunScore:
        """Insert a default record unless one exists, then load it."""
        with logfire.span(
            "fun_score_repository.get_or_create",
            user_id=str(user_id),
            group_id=str(group_id),
        ):
            now = utc_now()
            stmt = (
                pg_insert(fun_scores_table)
                .values(
                    id=uuid4(),
                    user_id=user_id,
                    group_id=group_id,
                    current_score=default_score,
                    last_calculated=now,
                    created_at=now,
                    updated_at=now,
                )
                .on_conflict_do_nothing(constraint="uq_fun_score_user_group")
            )
            await self.session.execute(stmt)

            score = await self.find(user_id, group_id)
            if score is None:
                raise RuntimeError("Fun score row missing after insert")
            return score

    async def find_top_by_group(
        self, group_id: GroupId, limit: int, user_ids: Sequence[UserId]
    ) -> List[FunScore]:
        """Find a group's top scores among user_ids; history is not loaded."""
        with logfire.span(
            "fun_score_repository.find_top_by_group", group_id=str(group_id)
        ):
            stmt = (
                select(fun_scores_table)
                .where(fun_scores_table.c.group_id == group_id)
                .where(fun_scores_table.c.user_id.in_(list(user_ids)))
                .order_by(
                    fun_scores_table.c.current_score.desc(),
                    fun_scores_table.c.seq.asc(),
                )
                .limit(limit)
            )
            result = await self.session.execute(stmt)
            return [row_to_fun_score(row._asdict()) for row in result.fetchall()]

    async def save(self, score: FunScore) -> FunScore:
        """Update the score row; history rows are untouched."""
        with logfire.span("fun_score_repository.save", score_id=str(score.id)):
            values = fun_score_to_dict(score)
            values.pop("id")
            values.pop("created_at")
            await self.session.execute(
                update(fun_scores_table)
                .where(fun_scores_table.c.id == score.id)
                .values(**values)
            )
            return score

    async def append_history(
        self, score_id: FunScoreId, entry: ScoreHistoryEntry
    ) -> None:
        """Insert one history row."""
        await self.session.execute(
            fun_score_history_table.insert().values(
                fun_score_id=score_id,
                score=entry.score,
                reason=entry.reason,
                change=entry.change,
                recorded_at=entry.recorded_at,
            )
        )

    async def delete_by_user(self, user_id: UserId) -> None:
        """Delete a user's scores; history rows cascade."""
        await self.session.execute(
            delete(fun_scores_table).where(fun_scores_table.c.user_id == user_id)
        )

    async def delete_by_group(self, group_id: GroupId) -> None:
        """Delete a group's scores; history rows cascade."""
        await self.session.execute(
            delete(fun_scores_table).where(fun_scores_table.c.group_id == group_id)
        )
