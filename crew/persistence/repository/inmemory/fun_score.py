"""In-memory Fun Score repository for testing."""

from typing import List, Optional, Sequence
from uuid import uuid4

from crew.domain.model import FunScore, ScoreHistoryEntry
from crew.domain.repository.fun_score import FunScoreRepository
from crew.domain.value import FunScoreId, GroupId, UserId


class InMemoryFunScoreRepository(FunScoreRepository):
    """In-memory implementation of FunScoreRepository for testing.

    Records are kept in insertion order, which doubles as storage order for
    leaderboard ties. History is stored apart from the record, as in the
    database.
    """

    def __init__(self) -> None:
        self._scores: dict[tuple[UserId, GroupId], FunScore] = {}
        self._history: dict[FunScoreId, list[ScoreHistoryEntry]] = {}

    def _with_history(self, score: FunScore) -> FunScore:
        return score.model_copy(update={"history": list(self._history.get(score.id, []))})

    async def find(self, user_id: UserId, group_id: GroupId) -> Optional[FunScore]:
        score = self._scores.get((user_id, group_id))
        return self._with_history(score) if score else None

    async def find_by_user(self, user_id: UserId) -> List[FunScore]:
        return [
            self._with_history(s) for (uid, _), s in self._scores.items() if uid == user_id
        ]

    async def get_or_create(
        self, user_id: UserId, group_id: GroupId, default_score: int
    ) -> FunScore:
        key = (user_id, group_id)
        if key not in self._scores:
            self._scores[key] = FunScore(
                id=FunScoreId(uuid4()),
                user_id=user_id,
                group_id=group_id,
                current_score=default_score,
            )
        return self._with_history(self._scores[key])

    async def find_top_by_group(
        self, group_id: GroupId, limit: int, user_ids: Sequence[UserId]
    ) -> List[FunScore]:
        wanted = set(user_ids)
        scores = [
            s for (uid, gid), s in self._scores.items() if gid == group_id and uid in wanted
        ]
        # sorted() is stable, so ties keep insertion order
        scores = sorted(scores, key=lambda s: s.current_score, reverse=True)
        return [self._with_history(s) for s in scores[:limit]]

    async def save(self, score: FunScore) -> FunScore:
        key = (score.user_id, score.group_id)
        self._scores[key] = score.model_copy(update={"history": []})
        return self._with_history(score)

    async def append_history(
        self, score_id: FunScoreId, entry: ScoreHistoryEntry
    ) -> None:
        self._history.setdefault(score_id, []).append(entry)

    async def delete_by_user(self, user_id: UserId) -> None:
        for key in [k for k in self._scores if k[0] == user_id]:
            self._history.pop(self._scores.pop(key).id, None)

    async def delete_by_group(self, group_id: GroupId) -> None:
        for key in [k for k in self._scores if k[1] == group_id]:
            self._history.pop(self._scores.pop(key).id, None)
