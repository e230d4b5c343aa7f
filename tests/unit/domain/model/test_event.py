"""Unit tests for the Event aggregate."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from crew.domain.model import Attendee, Event
from crew.domain.model.event import normalize_invited_groups
from crew.domain.value import (
    EventId,
    EventLocation,
    EventStatus,
    GroupId,
    RsvpStatus,
    UserId,
)


def build_event(**kwargs) -> Event:
    data = {
        "id": EventId(uuid4()),
        "title": "Picnic",
        "date_time": datetime.now(timezone.utc) + timedelta(days=1),
        "location": EventLocation(name="Park"),
        "organizer_id": UserId(uuid4()),
        "group_id": GroupId(uuid4()),
    }
    data.update(kwargs)
    return Event(**data)


class TestEventValidation:
    def test_legacy_string_location_becomes_name(self):
        event = build_event(location="Old pub")

        assert event.location == EventLocation(name="Old pub")

    def test_naive_date_time_is_treated_as_utc(self):
        event = build_event(date_time=datetime(2030, 1, 1, 18, 0))

        assert event.date_time.tzinfo is not None
        assert event.date_time.utcoffset() == timedelta(0)

    def test_primary_group_cannot_be_invited(self):
        group_id = GroupId(uuid4())

        with pytest.raises(ValidationError):
            build_event(group_id=group_id, invited_group_ids=[group_id])

    def test_one_attendee_record_per_user(self):
        user_id = UserId(uuid4())

        with pytest.raises(ValidationError):
            build_event(
                attendees=[
                    Attendee(user_id=user_id, status=RsvpStatus.GOING),
                    Attendee(user_id=user_id, status=RsvpStatus.MAYBE),
                ]
            )

    def test_blank_tags_dropped(self):
        event = build_event(tags=[" bbq ", "  "])

        assert event.tags == ["bbq"]

    def test_overlong_tag_rejected(self):
        with pytest.raises(ValidationError):
            build_event(tags=["x" * 21])


class TestEventCounts:
    def test_attendee_count_counts_only_going(self):
        # Arrange
        event = build_event(
            max_attendees=2,
            attendees=[
                Attendee(user_id=UserId(uuid4()), status=RsvpStatus.GOING, checked_in=True),
                Attendee(user_id=UserId(uuid4()), status=RsvpStatus.MAYBE),
                Attendee(user_id=UserId(uuid4()), status=RsvpStatus.NOT_GOING),
            ],
        )

        # Assert
        assert event.attendee_count == 1
        assert event.checked_in_count == 1
        assert not event.is_full

    def test_is_full(self):
        event = build_event(
            max_attendees=1,
            attendees=[Attendee(user_id=UserId(uuid4()), status=RsvpStatus.GOING)],
        )

        assert event.is_full

    def test_unlimited_never_full(self):
        event = build_event(
            attendees=[Attendee(user_id=UserId(uuid4()), status=RsvpStatus.GOING)]
        )

        assert not event.is_full

    def test_cancelled(self):
        assert build_event(status=EventStatus.CANCELLED).is_cancelled

    def test_eligible_groups(self):
        group_id, invited = GroupId(uuid4()), GroupId(uuid4())
        event = build_event(group_id=group_id, invited_group_ids=[invited])

        assert event.eligible_group_ids == [group_id, invited]


def test_normalize_invited_groups_drops_primary_and_duplicates():
    primary, a, b = GroupId(uuid4()), GroupId(uuid4()), GroupId(uuid4())

    assert normalize_invited_groups(primary, [a, primary, b, a]) == [a, b]
    assert normalize_invited_groups(primary, None) == []
