"""Create group use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from crew.application.usecase.base import BaseUseCase
from crew.application.view import GroupView, build_group_views
from crew.domain.service import GroupService, UserService
from crew.domain.value import UserId


class CreateGroupRequest(BaseModel):
    """Create group request."""

    user_id: UUID  # Creator, becomes admin
    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    is_private: bool = False
    require_approval: bool = False
    max_members: int | None = Field(default=None, ge=1, le=1000)


class CreateGroupUseCase(BaseUseCase[CreateGroupRequest, GroupView]):
    """Use case for creating a group."""

    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        """Initialize create group use case.

        Args:
            group_service: Group domain service
            user_service: User domain service
        """
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: CreateGroupRequest) -> GroupView:
        """Execute create group flow.

        Steps:
        1. Draw a unique invite code (via GroupService)
        2. Save the group with the creator as admin member

        Raises:
            ConflictError: If no unique invite code could be drawn
        """
        user_id = UserId(request.user_id)
        with logfire.span("create_group.execute", user_id=str(user_id)):
            group = await self.group_service.create_group(
                name=request.name,
                admin_id=user_id,
                description=request.description,
                is_private=request.is_private,
                require_approval=request.require_approval,
                max_members=request.max_members,
            )
            views = await build_group_views([group], self.user_service, user_id)
            return views[0]
