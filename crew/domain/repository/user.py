"""User repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from crew.domain.model.user import User
from crew.domain.value import Email, UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, user_ids: Sequence[UserId]) -> List[User]:
        """Find several users at once; missing IDs are skipped.

        Args:
            user_ids: User IDs to load

        Returns:
            The users found, in no particular order
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """Find a user by email (case-insensitive).

        Args:
            email: Normalized email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> None:
        """Hard delete a user row.

        Related records are removed by the caller beforehand.

        Args:
            user_id: The user to delete
        """
        pass

    @abstractmethod
    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[User]:
        """List users newest first, optionally filtered by name or email.

        Args:
            search: Case-insensitive substring matched against name and email
            limit: Maximum number of users to return
            offset: Number of users to skip

        Returns:
            Matching users
        """
        pass

    @abstractmethod
    async def count(self, search: Optional[str] = None) -> int:
        """Count users matching the same filter as search()."""
        pass

    @abstractmethod
    async def count_active(self) -> int:
        """Count users whose account is active."""
        pass
