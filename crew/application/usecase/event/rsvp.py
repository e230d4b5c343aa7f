"""RSVP use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import EventView, build_event_views
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import EventId, RsvpStatus, UserId


class RsvpRequest(BaseModel):
    """RSVP request."""

    event_id: UUID
    user_id: UUID
    status: RsvpStatus


class RsvpUseCase:
    """Use case for answering an event invitation."""

    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        """Initialize RSVP use case.

        Args:
            event_service: Event domain service
            group_service: Group domain service
            user_service: User domain service
        """
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: RsvpRequest) -> EventView:
        """Record the RSVP and return the updated event.

        The user's Fun Score in the event's group is recalculated.

        Raises:
            NotFoundError: If the event does not exist
            ForbiddenError: If the user belongs to none of the event's groups
            ValidationError: If the event is cancelled or at capacity
        """
        event = await self.event_service.rsvp(
            EventId(request.event_id), UserId(request.user_id), request.status
        )
        views = await build_event_views([event], self.user_service, self.group_service)
        return views[0]
