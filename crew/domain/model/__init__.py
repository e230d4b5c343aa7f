"""Domain model entities for Crew."""

from crew.domain.model.event import Attendee, Event
from crew.domain.model.fun_score import (
    AttendanceStats,
    FunScore,
    ScoreHistoryEntry,
    ScoreMetrics,
)
from crew.domain.model.group import Group, GroupMember, GroupSettings
from crew.domain.model.user import User

__all__ = [
    "User",
    "Group",
    "GroupMember",
    "GroupSettings",
    "Event",
    "Attendee",
    "FunScore",
    "ScoreHistoryEntry",
    "ScoreMetrics",
    "AttendanceStats",
]
