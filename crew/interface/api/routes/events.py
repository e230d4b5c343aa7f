"""Event routes."""

from datetime import datetime
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field

from crew.application.usecase.auth import GetCurrentUserUseCase
from crew.application.usecase.event import (
    AttendanceStatsRequest,
    AttendanceStatsResponse,
    AttendanceStatsUseCase,
    CheckInRequest,
    CheckInUseCase,
    CreateEventRequest,
    CreateEventUseCase,
    DeleteEventRequest,
    DeleteEventUseCase,
    EventChanges,
    GetEventRequest,
    GetEventUseCase,
    ListUserEventsRequest,
    ListUserEventsUseCase,
    RsvpRequest,
    RsvpUseCase,
    UpdateEventRequest,
    UpdateEventUseCase,
)
from crew.application.view import EventView
from crew.domain.value import Coordinates, EventLocation, RsvpStatus
from crew.interface.api.envelope import ApiResponse, ok
from crew.interface.api.security import authenticate, bearer_scheme

router = APIRouter(prefix="/events", tags=["events"], route_class=DishkaRoute)


class CreateEventAPIRequest(BaseModel):
    """API request for creating an event."""

    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    date_time: datetime
    location: EventLocation
    group_id: UUID
    invited_group_ids: list[UUID] = []
    max_attendees: int | None = Field(default=None, ge=1)
    tags: list[str] = []
    is_public: bool = False


class RsvpAPIRequest(BaseModel):
    status: RsvpStatus


class CheckInAPIRequest(BaseModel):
    location: Coordinates | None = None


# /user routes are declared before /{event_id}
@router.get("/user")
async def list_user_events(
    list_user_events_use_case: FromDishka[ListUserEventsUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[list[EventView]]:
    """List events across all of the current user's groups, soonest first."""
    user = await authenticate(credentials, get_current_user_use_case)
    events = await list_user_events_use_case.execute(ListUserEventsRequest(user_id=user.id))
    return ok(events)


@router.get("/user/attendance-stats")
async def attendance_stats(
    attendance_stats_use_case: FromDishka[AttendanceStatsUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[AttendanceStatsResponse]:
    """Attendance statistics and reliability label for the current user."""
    user = await authenticate(credentials, get_current_user_use_case)
    stats = await attendance_stats_use_case.execute(
        AttendanceStatsRequest(user_id=user.id)
    )
    return ok(stats)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(
    request: CreateEventAPIRequest,
    create_event_use_case: FromDishka[CreateEventUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[EventView]:
    """Create an event in one of the current user's groups.

    Args:
        request: Event details
        create_event_use_case: Create event use case from DI
        get_current_user_use_case: Get current user use case from DI
        credentials: Bearer token

    Returns:
        The new event
    """
    user = await authenticate(credentials, get_current_user_use_case)
    event = await create_event_use_case.execute(
        CreateEventRequest(organizer_id=user.id, **request.model_dump())
    )
    return ok(event, "Event created successfully")


@router.get("/{event_id}")
async def get_event(
    event_id: UUID,
    get_event_use_case: FromDishka[GetEventUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[EventView]:
    user = await authenticate(credentials, get_current_user_use_case)
    event = await get_event_use_case.execute(
        GetEventRequest(event_id=event_id, user_id=user.id)
    )
    return ok(event)


@router.put("/{event_id}")
async def update_event(
    event_id: UUID,
    request: EventChanges,
    update_event_use_case: FromDishka[UpdateEventUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[EventView]:
    """Update an event. Organizer only; omitted fields are left unchanged."""
    user = await authenticate(credentials, get_current_user_use_case)
    event = await update_event_use_case.execute(
        UpdateEventRequest(
            event_id=event_id,
            user_id=user.id,
            **request.model_dump(exclude_unset=True),
        )
    )
    return ok(event, "Event updated successfully")


@router.delete("/{event_id}")
async def delete_event(
    event_id: UUID,
    delete_event_use_case: FromDishka[DeleteEventUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[None]:
    user = await authenticate(credentials, get_current_user_use_case)
    await delete_event_use_case.execute(
        DeleteEventRequest(event_id=event_id, user_id=user.id)
    )
    return ok(message="Event deleted successfully")


@router.put("/{event_id}/rsvp")
async def rsvp(
    event_id: UUID,
    request: RsvpAPIRequest,
    rsvp_use_case: FromDishka[RsvpUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[EventView]:
    """RSVP going, maybe or not_going; a later RSVP overwrites an earlier one."""
    user = await authenticate(credentials, get_current_user_use_case)
    event = await rsvp_use_case.execute(
        RsvpRequest(event_id=event_id, user_id=user.id, status=request.status)
    )
    return ok(event, "RSVP updated successfully")


@router.post("/{event_id}/checkin")
async def check_in(
    event_id: UUID,
    check_in_use_case: FromDishka[CheckInUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    request: CheckInAPIRequest | None = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[EventView]:
    """Check in within 24 hours of the event; requires a going RSVP."""
    user = await authenticate(credentials, get_current_user_use_case)
    event = await check_in_use_case.execute(
        CheckInRequest(
            event_id=event_id,
            user_id=user.id,
            location=request.location if request else None,
        )
    )
    return ok(event, "Checked in successfully")
