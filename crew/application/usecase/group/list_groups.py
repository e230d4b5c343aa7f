"""List groups use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import GroupView, build_group_views
from crew.domain.service import GroupService, UserService
from crew.domain.value import UserId


class ListGroupsRequest(BaseModel):
    """List groups request."""

    user_id: UUID


class ListGroupsUseCase:
    """Use case for listing the active groups a user belongs to."""

    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: ListGroupsRequest) -> list[GroupView]:
        """Return the user's groups, newest first."""
        user_id = UserId(request.user_id)
        groups = await self.group_service.list_for_user(user_id)
        return await build_group_views(groups, self.user_service, viewer_id=user_id)
