"""Leave group use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.domain.service import GroupService
from crew.domain.value import GroupId, UserId


class LeaveGroupRequest(BaseModel):
    """Leave group request."""

    group_id: UUID
    user_id: UUID


class LeaveGroupResponse(BaseModel):
    """Outcome of leaving a group."""

    group_deleted: bool  # True when the last member left
    new_admin_id: UUID | None = None  # Set when admin rights moved


class LeaveGroupUseCase:
    """Use case for leaving a group."""

    def __init__(self, group_service: GroupService) -> None:
        self.group_service = group_service

    async def execute(self, request: LeaveGroupRequest) -> LeaveGroupResponse:
        """Leave the group.

        Raises:
            NotFoundError: If the group does not exist
            ValidationError: If the user is not a member
        """
        user_id = UserId(request.user_id)
        group_id = GroupId(request.group_id)
        was_admin = (await self.group_service.get_group(group_id)).is_admin(user_id)

        group = await self.group_service.leave(group_id, user_id)
        if group is None:
            return LeaveGroupResponse(group_deleted=True)

        return LeaveGroupResponse(
            group_deleted=False,
            new_admin_id=group.admin_id if was_admin else None,
        )
