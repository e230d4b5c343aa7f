"""Update event use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from crew.application.view import EventView, build_event_views
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import EventId, EventLocation, EventStatus, UserId


class EventChanges(BaseModel):
    """Mutable event fields. Only fields that are set are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    date_time: datetime | None = None
    location: EventLocation | None = None
    invited_group_ids: list[UUID] | None = None
    max_attendees: int | None = Field(default=None, ge=1)
    tags: list[str] | None = None
    is_public: bool | None = None
    status: EventStatus | None = None

    def to_changes(self) -> dict:
        """Set fields as a dict, dropping explicit nulls on required fields."""
        nullable = {"description", "max_attendees"}
        return {
            k: v
            for k, v in self.model_dump(exclude_unset=True).items()
            if v is not None or k in nullable
        }


class UpdateEventRequest(EventChanges):
    """Update event request."""

    event_id: UUID
    user_id: UUID  # Requesting user, must be the organizer


class UpdateEventUseCase:
    """Use case for the organizer editing an event."""

    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: UpdateEventRequest) -> EventView:
        """Apply the changes.

        Raises:
            NotFoundError: If the event does not exist
            ForbiddenError: If the requester is not the organizer
            ValidationError: If a new date is not in the future
        """
        with logfire.span("update_event.execute", event_id=str(request.event_id)):
            changes = request.to_changes()
            changes.pop("event_id", None)
            changes.pop("user_id", None)

            event = await self.event_service.update_event(
                EventId(request.event_id), changes, requester_id=UserId(request.user_id)
            )
            views = await build_event_views([event], self.user_service, self.group_service)
            return views[0]
