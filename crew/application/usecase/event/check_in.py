"""Check-in use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import EventView, build_event_views
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import Coordinates, EventId, UserId


class CheckInRequest(BaseModel):
    """Check-in request."""

    event_id: UUID
    user_id: UUID
    location: Coordinates | None = None


class CheckInUseCase:
    """Use case for checking in to an event."""

    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: CheckInRequest) -> EventView:
        """Check the user in and return the updated event.

        Raises:
            NotFoundError: If the event does not exist
            ValidationError: If outside the check-in window, the user has not
                RSVPed going, or the event is cancelled
        """
        event = await self.event_service.check_in(
            EventId(request.event_id), UserId(request.user_id), request.location
        )
        views = await build_event_views([event], self.user_service, self.group_service)
        return views[0]
