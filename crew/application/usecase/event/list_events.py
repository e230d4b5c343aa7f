"""Event listing use cases."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import EventView, build_event_views
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import GroupId, UserId


class ListUserEventsRequest(BaseModel):
    user_id: UUID


class ListGroupEventsRequest(BaseModel):
    group_id: UUID
    user_id: UUID  # Requesting user, must be a member


class ListUserEventsUseCase:
    """Use case for listing events across all of a user's groups."""

    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: ListUserEventsRequest) -> list[EventView]:
        events = await self.event_service.list_for_user(UserId(request.user_id))
        return await build_event_views(events, self.user_service, self.group_service)


class ListGroupEventsUseCase:
    """Use case for listing the events of one group."""

    def __init__(
        self,
        event_service: EventService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        self.event_service = event_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: ListGroupEventsRequest) -> list[EventView]:
        """List events whose primary or invited group is this group.

        Raises:
            NotFoundError: If the group does not exist
            ForbiddenError: If the requester is not a member
        """
        events = await self.event_service.list_for_group(
            GroupId(request.group_id), UserId(request.user_id)
        )
        return await build_event_views(events, self.user_service, self.group_service)
