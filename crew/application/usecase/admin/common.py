"""Shared admin helpers."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from crew.domain.error import ForbiddenError
from crew.domain.model import User
from crew.domain.service import UserService
from crew.domain.value import UserId


class AdminRequest(BaseModel):
    """Base for admin requests; carries the acting user."""

    requester_id: UUID


class PageRequest(AdminRequest):
    """Paginated, searchable listing."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


async def require_platform_admin(user_service: UserService, requester_id: UUID) -> User:
    """Load the requester and check the platform admin flag.

    Raises:
        ForbiddenError: If the requester is missing, inactive or not an admin
    """
    user = await user_service.find_by_id(UserId(requester_id))
    if user is None or not user.is_active or not user.is_admin:
        logfire.warn("Admin access denied", user_id=str(requester_id))
        raise ForbiddenError("Admin access required")
    return user
