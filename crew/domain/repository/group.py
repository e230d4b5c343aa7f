"""Group repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from crew.domain.model.group import Group, GroupMember
from crew.domain.value import GroupId, InviteCode, UserId


class GroupRepository(ABC):
    """Repository for Group aggregate.

    A group is stored together with its ordered member list.
    """

    @abstractmethod
    async def find_by_id(
        self, group_id: GroupId, for_update: bool = False
    ) -> Optional[Group]:
        """Find a group by ID.

        Args:
            group_id: The group's unique identifier
            for_update: Lock the group row until the transaction ends, so
                membership checks and inserts that follow are serialized

        Returns:
            The group with its members if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, group_ids: Sequence[GroupId]) -> List[Group]:
        """Find several groups at once; missing IDs are skipped."""
        pass

    @abstractmethod
    async def find_by_invite_code(self, invite_code: InviteCode) -> Optional[Group]:
        """Find an active group by invite code.

        Args:
            invite_code: Uppercased invite code

        Returns:
            The active group using this code, None otherwise
        """
        pass

    @abstractmethod
    async def invite_code_exists(self, invite_code: InviteCode) -> bool:
        """Check whether any group (active or not) uses an invite code."""
        pass

    @abstractmethod
    async def find_by_member(
        self, user_id: UserId, active_only: bool = True
    ) -> List[Group]:
        """Find the groups a user belongs to, newest first.

        Args:
            user_id: The member's user ID
            active_only: Skip deactivated groups

        Returns:
            Groups containing the user
        """
        pass

    @abstractmethod
    async def save(self, group: Group) -> Group:
        """Save a group (create or update) and replace its member list.

        Args:
            group: The group to save

        Returns:
            The saved group

        Raises:
            ConflictError: If the invite code is already taken
        """
        pass

    @abstractmethod
    async def add_member(self, group_id: GroupId, member: GroupMember) -> bool:
        """Append a member unless the user is already one.

        Uses an atomic insert that ignores duplicates.

        Args:
            group_id: The group to join
            member: The new member entry

        Returns:
            True if the member was added, False if already present
        """
        pass

    @abstractmethod
    async def delete(self, group_id: GroupId) -> None:
        """Hard delete a group and its member list."""
        pass

    @abstractmethod
    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[Group]:
        """List groups newest first, optionally filtered by name or description."""
        pass

    @abstractmethod
    async def count(self, search: Optional[str] = None) -> int:
        """Count groups matching the same filter as search()."""
        pass
