"""Domain value objects for Crew.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import Field, field_validator

from crew.domain.value.common import RootValueObject, ValueObject


class MemberRole(str, Enum):
    """Role of a user inside a group."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


class RsvpStatus(str, Enum):
    """A user's stated intention to attend an event."""

    GOING = "going"
    MAYBE = "maybe"
    NOT_GOING = "not_going"


class EventStatus(str, Enum):
    """Lifecycle status of an event."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ReliabilityLabel(str, Enum):
    """Coarse label derived from a user's attendance rate."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def from_rate(cls, attendance_rate: int) -> "ReliabilityLabel":
        """Label an attendance percentage."""
        if attendance_rate >= 80:
            return cls.HIGH
        if attendance_rate >= 60:
            return cls.MEDIUM
        return cls.LOW


class ScoreTier(str, Enum):
    """Credit-score style band for a Fun Score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "Very Poor"

    @classmethod
    def from_score(cls, score: int) -> "ScoreTier":
        """Band a score."""
        if score >= 750:
            return cls.EXCELLENT
        if score >= 650:
            return cls.GOOD
        if score >= 550:
            return cls.FAIR
        if score >= 450:
            return cls.POOR
        return cls.VERY_POOR


class Email(RootValueObject[str]):
    """Email address, stored lowercased so lookups are case-insensitive."""

    @field_validator("root")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Trim, lowercase and sanity-check the address."""
        v = v.strip().lower()
        if not re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", v):
            raise ValueError("Invalid email address")
        if len(v) > 255:
            raise ValueError("Email must be at most 255 characters")
        return v


class InviteCode(RootValueObject[str]):
    """Group invite code: uppercase letters and digits.

    Codes are compared case-insensitively, so input is uppercased.
    """

    @field_validator("root")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Uppercase and validate the code."""
        v = v.strip().upper()
        if not re.match(r"^[A-Z0-9]{4,16}$", v):
            raise ValueError("Invite code must be 4-16 letters or digits")
        return v


class Coordinates(ValueObject):
    """Geographic point."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class EventLocation(ValueObject):
    """Structured event location.

    Older events stored a bare string; that string becomes ``name``.
    """

    name: str = Field(min_length=1, max_length=200)
    address: str | None = Field(default=None, max_length=300)
    coordinates: Coordinates | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        v = v.strip()
        if not v:
            raise ValueError("Event location is required")
        return v
