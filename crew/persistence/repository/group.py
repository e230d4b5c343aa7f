"""PostgreSQL implementation of Group repository."""

from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import logfire
from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crew.domain.error import ConflictError
from crew.domain.model import Group, GroupMember
from crew.domain.repository.group import GroupRepository
from crew.domain.value import GroupId, InviteCode, UserId
from crew.persistence.mappers import group_member_to_dict, group_to_dict, row_to_group
from crew.persistence.repository.common import like_pattern
from crew.persistence.tables import group_members_table, groups_table


class PostgresGroupRepository(GroupRepository):
    """PostgreSQL implementation of GroupRepository.

    Members live in group_members; their order is the insertion sequence.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch_members(
        self, group_ids: list[UUID]
    ) -> dict[UUID, list[Dict[str, Any]]]:
        """Fetch members for multiple groups in a single query.

        Args:
            group_ids: List of group IDs

        Returns:
            Dict mapping group_id -> member rows in join order
        """
        if not group_ids:
            return {}

        stmt = (
            select(group_members_table)
            .where(group_members_table.c.group_id.in_(group_ids))
            .order_by(group_members_table.c.seq)
        )
        result = await self.session.execute(stmt)

        members: dict[UUID, list[Dict[str, Any]]] = defaultdict(list)
        for row in result.fetchall():
            members[row.group_id].append(row._asdict())
        return members

    async def _hydrate(self, rows: Sequence[Any]) -> List[Group]:
        members = await self._fetch_members([row.id for row in rows])
        return [row_to_group(row._asdict(), members.get(row.id, [])) for row in rows]

    def _search_filter(self, search: Optional[str]):
        if not search:
            return None
        pattern = like_pattern(search)
        return or_(
            groups_table.c.name.ilike(pattern, escape="\\"),
            groups_table.c.description.ilike(pattern, escape="\\"),
        )

    async def find_by_id(
        self, group_id: GroupId, for_update: bool = False
    ) -> Optional[Group]:
        """Find a group by ID, optionally locking its row."""
        with logfire.span(
            "group_repository.find_by_id", group_id=str(group_id), for_update=for_update
        ):
            stmt = select(groups_table).where(groups_table.c.id == group_id)
            if for_update:
                stmt = stmt.with_for_update()
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if not row:
                return None
            groups = await self._hydrate([row])
            return groups[0]

    async def find_by_ids(self, group_ids: Sequence[GroupId]) -> List[Group]:
        """Find several groups at once."""
        if not group_ids:
            return []
        stmt = select(groups_table).where(groups_table.c.id.in_(list(group_ids)))
        result = await self.session.execute(stmt)
        return await self._hydrate(result.fetchall())

    async def find_by_invite_code(self, invite_code: InviteCode) -> Optional[Group]:
        """Find an active group by invite code."""
        with logfire.span("group_repository.find_by_invite_code"):
            stmt = select(groups_table).where(
                groups_table.c.invite_code == str(invite_code),
                groups_table.c.is_active.is_(True),
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if not row:
                return None
            groups = await self._hydrate([row])
            return groups[0]

    async def invite_code_exists(self, invite_code: InviteCode) -> bool:
        """Check if an invite code is taken (active or inactive groups)."""
        stmt = (
            select(func.count())
            .select_from(groups_table)
            .where(groups_table.c.invite_code == str(invite_code))
        )
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def find_by_member(
        self, user_id: UserId, active_only: bool = True
    ) -> List[Group]:
        """Find groups containing the user, newest first."""
        with logfire.span("group_repository.find_by_member", user_id=str(user_id)):
            stmt = (
                select(groups_table)
                .join(
                    group_members_table,
                    group_members_table.c.group_id == groups_table.c.id,
                )
                .where(group_members_table.c.user_id == user_id)
                .order_by(groups_table.c.created_at.desc())
            )
            if active_only:
                stmt = stmt.where(groups_table.c.is_active.is_(True))
            result = await self.session.execute(stmt)
            return await self._hydrate(result.fetchall())

    async def save(self, group: Group) -> Group:
        """Save a group and replace its member list."""
        with logfire.span(
            "group_repository.save",
            group_id=str(group.id),
            members=group.member_count,
        ):
            group_dict = group_to_dict(group)
            exists = await self.session.execute(
                select(groups_table.c.id).where(groups_table.c.id == group.id)
            )

            if exists.fetchone():
                stmt = (
                    groups_table.update()
                    .where(groups_table.c.id == group.id)
                    .values(**group_dict)
                )
            else:
                logfire.info("Inserting new group", group_id=str(group.id))
                stmt = groups_table.insert().values(**group_dict)

            try:
                async with self.session.begin_nested():
                    await self.session.execute(stmt)
            except IntegrityError as e:
                logfire.warn("Group save conflict", group_id=str(group.id), error=str(e))
                raise ConflictError("Invite code is already in use") from e

            await self.session.execute(
                delete(group_members_table).where(
                    group_members_table.c.group_id == group.id
                )
            )
            if group.members:
                await self.session.execute(
                    group_members_table.insert(),
                    [group_member_to_dict(group.id, m) for m in group.members],
                )

            return group

    async def add_member(self, group_id: GroupId, member: GroupMember) -> bool:
        """Append a member, ignoring duplicates atomically."""
        with logfire.span(
            "group_repository.add_member",
            group_id=str(group_id),
            user_id=str(member.user_id),
        ):
            stmt = (
                pg_insert(group_members_table)
                .values(**group_member_to_dict(group_id, member))
                .on_conflict_do_nothing(constraint="uq_group_member")
                .returning(group_members_table.c.seq)
            )
            result = await self.session.execute(stmt)
            return result.first() is not None

    async def delete(self, group_id: GroupId) -> None:
        """Hard delete a group; member rows cascade."""
        with logfire.span("group_repository.delete", group_id=str(group_id)):
            await self.session.execute(
                delete(groups_table).where(groups_table.c.id == group_id)
            )

    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[Group]:
        """List groups newest first with an optional name/description filter."""
        with logfire.span(
            "group_repository.search", search=search, limit=limit, offset=offset
        ):
            stmt = select(groups_table)
            condition = self._search_filter(search)
            if condition is not None:
                stmt = stmt.where(condition)
            stmt = (
                stmt.order_by(groups_table.c.created_at.desc()).limit(limit).offset(offset)
            )
            result = await self.session.execute(stmt)
            return await self._hydrate(result.fetchall())

    async def count(self, search: Optional[str] = None) -> int:
        """Count groups matching an optional filter."""
        stmt = select(func.count()).select_from(groups_table)
        condition = self._search_filter(search)
        if condition is not None:
            stmt = stmt.where(condition)
        result = await self.session.execute(stmt)
        return result.scalar() or 0
