"""Update group use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from crew.application.view import GroupView, build_group_views
from crew.domain.service import GroupService, UserService
from crew.domain.value import GroupId, UserId


class UpdateGroupRequest(BaseModel):
    """Update group request.

    Only fields that are set are changed.
    """

    group_id: UUID
    user_id: UUID  # Requesting user, must be the group admin
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    is_private: bool | None = None
    require_approval: bool | None = None
    max_members: int | None = Field(default=None, ge=1, le=1000)


class UpdateGroupUseCase:
    """Use case for the group admin to edit a group."""

    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: UpdateGroupRequest) -> GroupView:
        """Apply the changes.

        Raises:
            NotFoundError: If the group does not exist
            ForbiddenError: If the requester is not the group admin
            ValidationError: If max_members is below the member count
        """
        user_id = UserId(request.user_id)
        with logfire.span("update_group.execute", group_id=str(request.group_id)):
            group = await self.group_service.require_admin(
                GroupId(request.group_id), user_id
            )
            changes = {
                k: v
                for k, v in request.model_dump(
                    exclude={"group_id", "user_id"}, exclude_unset=True
                ).items()
                if v is not None or k == "description"
            }
            updated = await self.group_service.update_group(group, changes)
            views = await build_group_views([updated], self.user_service, user_id)
            return views[0]
