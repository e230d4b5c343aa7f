"""Event aggregate root.

Events belong to a primary group and may invite further groups. Each event
owns its attendee records, at most one per user.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from crew.domain.model.common import DomainModel, ensure_utc, utc_now
from crew.domain.value import (
    Coordinates,
    EventId,
    EventLocation,
    EventStatus,
    GroupId,
    RsvpStatus,
    UserId,
)

EVENT_SCHEMA_VERSION = 2


class Attendee(DomainModel):
    """A user's RSVP and check-in state for one event."""

    user_id: UserId
    status: RsvpStatus
    rsvp_at: datetime = Field(default_factory=utc_now)
    checked_in: bool = False
    check_in_time: Optional[datetime] = None
    check_in_location: Optional[Coordinates] = None


class Event(DomainModel):
    """Event aggregate root."""

    id: EventId
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    date_time: datetime
    location: EventLocation
    organizer_id: UserId
    group_id: GroupId
    invited_group_ids: List[GroupId] = Field(default_factory=list)
    max_attendees: Optional[int] = Field(default=None, ge=1)
    tags: List[str] = Field(default_factory=list, max_length=10)
    is_public: bool = False
    status: EventStatus = EventStatus.UPCOMING
    attendees: List[Attendee] = Field(default_factory=list)
    schema_version: int = EVENT_SCHEMA_VERSION
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Event title is required")
        return v

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @field_validator("location", mode="before")
    @classmethod
    def upgrade_flat_location(cls, v: Any) -> Any:
        """Older events stored the location as a plain string."""
        if isinstance(v, str):
            return {"name": v}
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        tags = [t.strip() for t in v if t.strip()]
        for tag in tags:
            if len(tag) > 20:
                raise ValueError("Tags must be at most 20 characters")
        return tags

    @model_validator(mode="after")
    def validate_invited_groups(self) -> "Event":
        """Invited groups are unique and exclude the primary group."""
        if self.group_id in self.invited_group_ids:
            raise ValueError("The primary group cannot also be invited")
        if len(self.invited_group_ids) != len(set(self.invited_group_ids)):
            raise ValueError("Invited groups must be unique")
        user_ids = [a.user_id for a in self.attendees]
        if len(user_ids) != len(set(user_ids)):
            raise ValueError("A user can only have one attendee record per event")
        return self

    def find_attendee(self, user_id: UserId) -> Attendee | None:
        """Return the attendee record for a user, if any."""
        for attendee in self.attendees:
            if attendee.user_id == user_id:
                return attendee
        return None

    @property
    def eligible_group_ids(self) -> List[GroupId]:
        """Groups whose members may view and RSVP to this event."""
        return [self.group_id, *self.invited_group_ids]

    @property
    def attendee_count(self) -> int:
        """Number of attendees who RSVP'd going."""
        return sum(1 for a in self.attendees if a.status == RsvpStatus.GOING)

    @property
    def checked_in_count(self) -> int:
        return sum(1 for a in self.attendees if a.checked_in)

    @property
    def is_full(self) -> bool:
        if self.max_attendees is None:
            return False
        return self.attendee_count >= self.max_attendees

    @property
    def is_cancelled(self) -> bool:
        return self.status == EventStatus.CANCELLED

    def is_past(self, now: datetime | None = None) -> bool:
        return self.date_time < (now or utc_now())


def normalize_invited_groups(
    group_id: GroupId, invited_group_ids: List[GroupId] | None
) -> List[GroupId]:
    """Drop duplicates and the primary group, keeping first-seen order."""
    result: List[GroupId] = []
    for invited in invited_group_ids or []:
        if invited != group_id and invited not in result:
            result.append(invited)
    return result
