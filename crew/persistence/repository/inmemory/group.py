"""In-memory group repository for testing."""

from typing import List, Optional, Sequence

from crew.domain.error import ConflictError
from crew.domain.model import Group, GroupMember
from crew.domain.repository.group import GroupRepository
from crew.domain.value import GroupId, InviteCode, UserId


class InMemoryGroupRepository(GroupRepository):
    """In-memory implementation of GroupRepository for testing."""

    def __init__(self) -> None:
        self._groups: dict[GroupId, Group] = {}

    def _matching(self, search: Optional[str]) -> List[Group]:
        groups = list(self._groups.values())
        if search:
            needle = search.lower()
            groups = [
                g
                for g in groups
                if needle in g.name.lower() or needle in (g.description or "").lower()
            ]
        groups.sort(key=lambda g: g.created_at, reverse=True)
        return groups

    async def find_by_id(
        self, group_id: GroupId, for_update: bool = False
    ) -> Optional[Group]:
        # Single-threaded store; nothing to lock
        return self._groups.get(group_id)

    async def find_by_ids(self, group_ids: Sequence[GroupId]) -> List[Group]:
        return [self._groups[gid] for gid in group_ids if gid in self._groups]

    async def find_by_invite_code(self, invite_code: InviteCode) -> Optional[Group]:
        for group in self._groups.values():
            if group.invite_code == invite_code and group.is_active:
                return group
        return None

    async def invite_code_exists(self, invite_code: InviteCode) -> bool:
        return any(g.invite_code == invite_code for g in self._groups.values())

    async def find_by_member(
        self, user_id: UserId, active_only: bool = True
    ) -> List[Group]:
        groups = [
            g
            for g in self._groups.values()
            if g.is_member(user_id) and (g.is_active or not active_only)
        ]
        groups.sort(key=lambda g: g.created_at, reverse=True)
        return groups

    async def save(self, group: Group) -> Group:
        for other in self._groups.values():
            if other.id != group.id and other.invite_code == group.invite_code:
                raise ConflictError("Invite code is already in use")
        self._groups[group.id] = group
        return group

    async def add_member(self, group_id: GroupId, member: GroupMember) -> bool:
        group = self._groups.get(group_id)
        if group is None or group.is_member(member.user_id):
            return False
        self._groups[group_id] = group.model_copy(
            update={"members": [*group.members, member]}
        )
        return True

    async def delete(self, group_id: GroupId) -> None:
        self._groups.pop(group_id, None)

    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[Group]:
        return self._matching(search)[offset : offset + limit]

    async def count(self, search: Optional[str] = None) -> int:
        return len(self._matching(search))
