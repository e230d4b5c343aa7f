"""Delete event use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.domain.service import EventService
from crew.domain.value import EventId, UserId


class DeleteEventRequest(BaseModel):
    """Delete event request."""

    event_id: UUID
    user_id: UUID  # Requesting user, must be the organizer


class DeleteEventUseCase:
    """Use case for the organizer deleting an event."""

    def __init__(self, event_service: EventService) -> None:
        self.event_service = event_service

    async def execute(self, request: DeleteEventRequest) -> None:
        await self.event_service.delete_event(
            EventId(request.event_id), requester_id=UserId(request.user_id)
        )
