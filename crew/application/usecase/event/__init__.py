"""Event use cases."""

from .attendance_stats import (
    AttendanceStatsRequest,
    AttendanceStatsResponse,
    AttendanceStatsUseCase,
)
from .check_in import CheckInRequest, CheckInUseCase
from .create_event import CreateEventRequest, CreateEventUseCase
from .delete_event import DeleteEventRequest, DeleteEventUseCase
from .get_event import GetEventRequest, GetEventUseCase
from .list_events import (
    ListGroupEventsRequest,
    ListGroupEventsUseCase,
    ListUserEventsRequest,
    ListUserEventsUseCase,
)
from .rsvp import RsvpRequest, RsvpUseCase
from .update_event import EventChanges, UpdateEventRequest, UpdateEventUseCase

__all__ = [
    "AttendanceStatsRequest",
    "AttendanceStatsResponse",
    "AttendanceStatsUseCase",
    "CheckInRequest",
    "CheckInUseCase",
    "CreateEventRequest",
    "CreateEventUseCase",
    "DeleteEventRequest",
    "DeleteEventUseCase",
    "EventChanges",
    "GetEventRequest",
    "GetEventUseCase",
    "ListGroupEventsRequest",
    "ListGroupEventsUseCase",
    "ListUserEventsRequest",
    "ListUserEventsUseCase",
    "RsvpRequest",
    "RsvpUseCase",
    "UpdateEventRequest",
    "UpdateEventUseCase",
]
