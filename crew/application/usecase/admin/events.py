"""Admin event management."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from crew.application.usecase.event.update_event import EventChanges
from crew.application.view import EventView, Page, build_event_views
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import EventId, EventLocation, GroupId, UserId

from .common import AdminRequest, PageRequest, require_platform_admin


class AdminEventRequest(AdminRequest):
    event_id: UUID


class AdminCreateEventRequest(AdminRequest):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    date_time: datetime
    location: EventLocation
    group_id: UUID
    organizer_id: UUID


class AdminUpdateEventRequest(EventChanges):
    requester_id: UUID
    event_id: UUID


class _AdminEventUseCase:
    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def _view(self, event) -> EventView:
        views = await build_event_views([event], self.user_service, self.group_service)
        return views[0]


class AdminListEventsUseCase(_AdminEventUseCase):
    """Use case for paging through all events, newest first."""

    async def execute(self, request: PageRequest) -> Page[EventView]:
        await require_platform_admin(self.user_service, request.requester_id)
        events, total = await self.event_service.search(
            request.search, request.limit, request.offset
        )
        items = await build_event_views(events, self.user_service, self.group_service)
        return Page[EventView].build(items, request.page, request.limit, total)


class AdminCreateEventUseCase(_AdminEventUseCase):
    async def execute(self, request: AdminCreateEventRequest) -> EventView:
        """Create an event; the organizer need not belong to the group.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            NotFoundError: If the organizer or group does not exist
            ValidationError: If the date is not in the future
        """
        await require_platform_admin(self.user_service, request.requester_id)
        organizer = await self.user_service.get_by_id(UserId(request.organizer_id))
        event = await self.event_service.create_event(
            title=request.title,
            description=request.description,
            date_time=request.date_time,
            location=request.location,
            group_id=GroupId(request.group_id),
            organizer_id=organizer.id,
            require_membership=False,
        )
        return await self._view(event)


class AdminUpdateEventUseCase(_AdminEventUseCase):
    async def execute(self, request: AdminUpdateEventRequest) -> EventView:
        await require_platform_admin(self.user_service, request.requester_id)
        changes = request.to_changes()
        changes.pop("requester_id", None)
        changes.pop("event_id", None)
        event = await self.event_service.update_event(EventId(request.event_id), changes)
        return await self._view(event)


class AdminDeleteEventUseCase(_AdminEventUseCase):
    async def execute(self, request: AdminEventRequest) -> None:
        await require_platform_admin(self.user_service, request.requester_id)
        await self.event_service.delete_event(EventId(request.event_id))
