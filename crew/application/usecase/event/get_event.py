"""Get event use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import EventView, build_event_views
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import EventId, UserId


class GetEventRequest(BaseModel):
    """Get event request."""

    event_id: UUID
    user_id: UUID


class GetEventUseCase:
    """Use case for viewing an event."""

    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: GetEventRequest) -> EventView:
        """Return the event if the user belongs to one of its groups.

        Raises:
            NotFoundError: If the event does not exist
            ForbiddenError: If the user belongs to none of the event's groups
        """
        event = await self.event_service.require_access(
            EventId(request.event_id), UserId(request.user_id)
        )
        views = await build_event_views([event], self.user_service, self.group_service)
        return views[0]
