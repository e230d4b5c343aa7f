"""Domain value objects for Crew."""

from crew.domain.value.identifiers import EventId, FunScoreId, GroupId, UserId
from crew.domain.value.types import (
    Coordinates,
    Email,
    EventLocation,
    EventStatus,
    InviteCode,
    MemberRole,
    ReliabilityLabel,
    RsvpStatus,
    ScoreTier,
)

__all__ = [
    # Identifiers
    "UserId",
    "GroupId",
    "EventId",
    "FunScoreId",
    # Types
    "Coordinates",
    "Email",
    "EventLocation",
    "EventStatus",
    "InviteCode",
    "MemberRole",
    "ReliabilityLabel",
    "RsvpStatus",
    "ScoreTier",
]
