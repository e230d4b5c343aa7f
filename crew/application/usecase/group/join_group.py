"""Join group use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import GroupView, build_group_views
from crew.domain.service import GroupService, UserService
from crew.domain.value import UserId


class JoinGroupRequest(BaseModel):
    """Join group request."""

    user_id: UUID
    invite_code: str


class JoinGroupUseCase:
    """Use case for joining a group with an invite code."""

    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: JoinGroupRequest) -> GroupView:
        """Join the group the code belongs to.

        Raises:
            NotFoundError: If the code matches no active group
            ValidationError: If already a member or the group is full
        """
        user_id = UserId(request.user_id)
        group = await self.group_service.join(request.invite_code, user_id)
        views = await build_group_views([group], self.user_service, user_id)
        return views[0]
