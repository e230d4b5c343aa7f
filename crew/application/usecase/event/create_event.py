"""Create event use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from crew.application.view import EventView, build_event_views
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import EventLocation, GroupId, UserId


class CreateEventRequest(BaseModel):
    """Create event request."""

    organizer_id: UUID
    group_id: UUID
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    date_time: datetime
    location: EventLocation
    invited_group_ids: list[UUID] = []
    max_attendees: int | None = Field(default=None, ge=1)
    tags: list[str] = []
    is_public: bool = False


class CreateEventUseCase:
    """Use case for a group member creating an event."""

    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        """Initialize create event use case.

        Args:
            event_service: Event domain service
            group_service: Group domain service
            user_service: User domain service
        """
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: CreateEventRequest) -> EventView:
        """Create the event.

        Raises:
            ValidationError: If the date is not in the future
            NotFoundError: If the group or an invited group does not exist
            ForbiddenError: If the organizer is not a group member
        """
        with logfire.span(
            "create_event.execute",
            organizer_id=str(request.organizer_id),
            group_id=str(request.group_id),
        ):
            event = await self.event_service.create_event(
                title=request.title,
                description=request.description,
                date_time=request.date_time,
                location=request.location,
                group_id=GroupId(request.group_id),
                organizer_id=UserId(request.organizer_id),
                invited_group_ids=[GroupId(g) for g in request.invited_group_ids],
                max_attendees=request.max_attendees,
                tags=request.tags,
                is_public=request.is_public,
            )
            views = await build_event_views([event], self.user_service, self.group_service)
            return views[0]
