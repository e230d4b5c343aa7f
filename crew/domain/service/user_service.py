"""User domain service."""

from typing import Any, Sequence

import logfire

from crew.domain.error import NotFoundError, ValidationError
from crew.domain.model import User
from crew.domain.model.common import utc_now
from crew.domain.repository import UserRepository
from crew.domain.value import Email, UserId

from .base import Service


class UserService(Service):
    """Domain service for user operations."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def find_by_id(self, user_id: UserId) -> User | None:
        return await self.user_repository.find_by_id(user_id)

    async def get_by_ids(self, user_ids: Sequence[UserId]) -> dict[UserId, User]:
        """Load several users keyed by ID; unknown IDs are absent."""
        if not user_ids:
            return {}
        users = await self.user_repository.find_by_ids(list(set(user_ids)))
        return {user.id: user for user in users}

    async def find_by_email(self, email: Email) -> User | None:
        with logfire.span("user_service.find_by_email"):
            return await self.user_repository.find_by_email(email)

    async def save(self, user: User) -> User:
        with logfire.span("user_service.save", user_id=str(user.id)):
            saved = await self.user_repository.save(user)
            logfire.info("User saved", user_id=str(saved.id))
            return saved

    async def update_user(self, user: User, changes: dict[str, Any]) -> User:
        """Apply profile and flag changes to a user.

        Args:
            user: User to update
            changes: Any of name, email, bio, is_active, is_admin

        Returns:
            Saved user

        Raises:
            ValidationError: If the new email belongs to another user
        """
        with logfire.span(
            "user_service.update_user",
            user_id=str(user.id),
            fields=sorted(changes.keys()),
        ):
            if "email" in changes:
                email = Email(changes["email"])
                existing = await self.user_repository.find_by_email(email)
                if existing and existing.id != user.id:
                    logfire.warn("Email already taken", user_id=str(user.id))
                    raise ValidationError("Email is already in use")
                changes = {**changes, "email": email}

            updated = User.model_validate(
                {**user.model_dump(), **changes, "updated_at": utc_now()}
            )
            return await self.save(updated)

    async def delete(self, user_id: UserId) -> None:
        with logfire.span("user_service.delete", user_id=str(user_id)):
            await self.user_repository.delete(user_id)
            logfire.info("User deleted", user_id=str(user_id))

    async def search(
        self, search: str | None = None, limit: int = 10, offset: int = 0
    ) -> tuple[list[User], int]:
        """Page through users newest first.

        Returns:
            Tuple of (users on this page, total matching users)
        """
        with logfire.span("user_service.search", search=search, limit=limit):
            users = await self.user_repository.search(search, limit, offset)
            total = await self.user_repository.count(search)
            return users, total

    async def count(self) -> int:
        return await self.user_repository.count()

    async def count_active(self) -> int:
        return await self.user_repository.count_active()
