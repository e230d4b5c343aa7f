"""Get group use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import (
    EventView,
    GroupView,
    build_event_views,
    build_group_views,
)
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import GroupId, UserId


class GetGroupRequest(BaseModel):
    """Get group request."""

    group_id: UUID
    user_id: UUID  # Requesting user, must be a member


class GetGroupResponse(BaseModel):
    """Group details with its latest events."""

    group: GroupView
    recent_events: list[EventView]
    upcoming_events_count: int


class GetGroupUseCase:
    """Use case for viewing a group."""

    def __init__(
        self,
        group_service: GroupService,
        event_service: EventService,
        user_service: UserService,
    ) -> None:
        """Initialize get group use case.

        Args:
            group_service: Group domain service
            event_service: Event domain service
            user_service: User domain service
        """
        self.group_service = group_service
        self.event_service = event_service
        self.user_service = user_service

    async def execute(self, request: GetGroupRequest) -> GetGroupResponse:
        """Return the group, its 5 latest events and its upcoming event count.

        Raises:
            NotFoundError: If the group does not exist
            ForbiddenError: If the requester is not a member
        """
        user_id = UserId(request.user_id)
        group = await self.group_service.require_member(
            GroupId(request.group_id), user_id
        )

        recent = await self.event_service.recent_for_group(group.id, limit=5)
        upcoming = await self.event_service.count_upcoming([group.id])

        views = await build_group_views([group], self.user_service, user_id)
        return GetGroupResponse(
            group=views[0],
            recent_events=await build_event_views(
                recent, self.user_service, self.group_service
            ),
            upcoming_events_count=upcoming,
        )
