"""Unit tests for EventService."""

from datetime import timedelta
from uuid import uuid4

from dishka import AsyncContainer
import pytest

from crew.domain.error import ForbiddenError, NotFoundError, ValidationError
from crew.domain.model.common import utc_now
from crew.domain.repository import EventRepository
from crew.domain.service import (
    EventService,
    FunScoreService,
    GroupService,
    UserService,
)
from crew.domain.value import (
    Coordinates,
    EventLocation,
    EventStatus,
    GroupId,
    RsvpStatus,
)
from tests.conftest import make_event, make_group, make_user, move_event
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateEvent:
    """Tests for EventService.create_event()."""

    @pytest.mark.asyncio
    async def test_member_creates_event(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)

        # Act
        event = await make_event(
            event_service, group, alice, title=" Pub quiz ", tags=["quiz"]
        )

        # Assert
        assert event.title == "Pub quiz"
        assert event.organizer_id == alice.id
        assert event.group_id == group.id
        assert event.status == EventStatus.UPCOMING
        assert event.attendees == []
        assert event.tags == ["quiz"]

    @pytest.mark.asyncio
    async def test_past_date_rejected(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)

        with pytest.raises(ValidationError) as exc_info:
            await make_event(event_service, group, alice, starts_in=-timedelta(minutes=1))

        assert str(exc_info.value) == "Event date must be in the future"

    @pytest.mark.asyncio
    async def test_non_member_cannot_create(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice)

        with pytest.raises(ForbiddenError):
            await make_event(event_service, group, bob)

    @pytest.mark.asyncio
    async def test_invited_groups_normalized_and_checked(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        home = await make_group(group_service, alice)
        other = await make_group(group_service, bob)

        # Act
        event = await make_event(
            event_service,
            home,
            alice,
            invited_group_ids=[other.id, home.id, other.id],
        )

        # Assert
        assert event.invited_group_ids == [other.id]
        with pytest.raises(NotFoundError):
            await make_event(
                event_service, home, alice, invited_group_ids=[GroupId(uuid4())]
            )


class TestUpdateEvent:
    """Tests for EventService.update_event()."""

    @pytest.mark.asyncio
    async def test_only_organizer_may_update(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice)

        with pytest.raises(ForbiddenError) as exc_info:
            await event_service.update_event(event.id, {"title": "Mine"}, bob.id)
        assert str(exc_info.value) == "Only the event organizer can update this event"

        updated = await event_service.update_event(event.id, {"title": "Mine"}, alice.id)
        assert updated.title == "Mine"

    @pytest.mark.asyncio
    async def test_new_date_must_be_in_future(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(event_service, group, alice)

        with pytest.raises(ValidationError):
            await event_service.update_event(
                event.id, {"date_time": utc_now() - timedelta(hours=1)}, alice.id
            )

    @pytest.mark.asyncio
    async def test_unchanged_past_date_is_kept(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        event_repository = await unit_env.get(EventRepository)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(event_service, group, alice)
        past = await move_event(event_repository, event, utc_now() - timedelta(days=1))

        # Act
        updated = await event_service.update_event(
            event.id,
            {"date_time": past.date_time, "status": EventStatus.COMPLETED},
            alice.id,
        )

        # Assert
        assert updated.date_time == past.date_time
        assert updated.status == EventStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_update_keeps_attendees(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice)
        await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)

        await event_service.update_event(event.id, {"title": "Renamed"}, alice.id)

        fetched = await event_service.get_event(event.id)
        assert fetched.title == "Renamed"
        assert fetched.attendee_count == 1


class TestRsvp:
    """Tests for EventService.rsvp()."""

    @pytest.mark.asyncio
    async def test_rsvp_overwrites_previous_answer(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice)

        # Act
        await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)
        event = await event_service.rsvp(event.id, bob.id, RsvpStatus.MAYBE)

        # Assert
        assert len(event.attendees) == 1
        assert event.find_attendee(bob.id).status == RsvpStatus.MAYBE
        assert event.attendee_count == 0

    @pytest.mark.asyncio
    async def test_invited_group_member_may_rsvp(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        carol = await make_user(user_service, "Carol")
        home = await make_group(group_service, alice)
        other = await make_group(group_service, bob)
        event = await make_event(event_service, home, alice, invited_group_ids=[other.id])

        event = await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)

        assert event.attendee_count == 1
        with pytest.raises(ForbiddenError):
            await event_service.rsvp(event.id, carol.id, RsvpStatus.GOING)

    @pytest.mark.asyncio
    async def test_capacity_applies_to_new_going_answers(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice, max_attendees=1)
        await event_service.rsvp(event.id, alice.id, RsvpStatus.GOING)

        # Act / Assert
        with pytest.raises(ValidationError) as exc_info:
            await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)
        assert str(exc_info.value) == "This event is at maximum capacity"

        # Re-affirming going and answering maybe are still allowed
        await event_service.rsvp(event.id, alice.id, RsvpStatus.GOING)
        event = await event_service.rsvp(event.id, bob.id, RsvpStatus.MAYBE)
        assert event.attendee_count == 1

    @pytest.mark.asyncio
    async def test_cancelled_event_rejects_rsvp(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(event_service, group, alice)
        await event_service.update_event(
            event.id, {"status": EventStatus.CANCELLED}, alice.id
        )

        with pytest.raises(ValidationError) as exc_info:
            await event_service.rsvp(event.id, alice.id, RsvpStatus.GOING)

        assert str(exc_info.value) == "Cannot RSVP to a cancelled event"


class TestCheckIn:
    """Tests for EventService.check_in()."""

    @pytest.mark.asyncio
    async def test_check_in_within_window(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(
            event_service, group, alice, starts_in=timedelta(hours=23, minutes=59)
        )
        await event_service.rsvp(event.id, alice.id, RsvpStatus.GOING)
        here = Coordinates(latitude=51.5, longitude=-0.12)

        # Act
        event = await event_service.check_in(event.id, alice.id, here)

        # Assert
        attendee = event.find_attendee(alice.id)
        assert attendee.checked_in
        assert attendee.check_in_time is not None
        assert attendee.check_in_location == here
        assert event.checked_in_count == 1

    @pytest.mark.asyncio
    async def test_check_in_outside_window_rejected(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(
            event_service, group, alice, starts_in=timedelta(hours=24, minutes=1)
        )
        await event_service.rsvp(event.id, alice.id, RsvpStatus.GOING)

        with pytest.raises(ValidationError) as exc_info:
            await event_service.check_in(event.id, alice.id)

        assert (
            str(exc_info.value)
            == "Check-in is only available within 24 hours of the event"
        )

    @pytest.mark.asyncio
    async def test_check_in_after_start_within_window(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        event_repository = await unit_env.get(EventRepository)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(event_service, group, alice)
        await event_service.rsvp(event.id, alice.id, RsvpStatus.GOING)
        await move_event(event_repository, event, utc_now() - timedelta(hours=2))

        event = await event_service.check_in(event.id, alice.id)

        assert event.find_attendee(alice.id).checked_in

    @pytest.mark.asyncio
    async def test_requires_going_rsvp(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice, starts_in=timedelta(hours=1))

        # Act / Assert
        with pytest.raises(ValidationError) as no_rsvp:
            await event_service.check_in(event.id, bob.id)
        assert str(no_rsvp.value) == "You must RSVP before checking in"

        await event_service.rsvp(event.id, bob.id, RsvpStatus.MAYBE)
        with pytest.raises(ValidationError) as maybe:
            await event_service.check_in(event.id, bob.id)
        assert str(maybe.value) == "Only attendees who are going can check in"

    @pytest.mark.asyncio
    async def test_repeat_check_in_overwrites_location(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(event_service, group, alice, starts_in=timedelta(hours=1))
        await event_service.rsvp(event.id, alice.id, RsvpStatus.GOING)
        second = Coordinates(latitude=1, longitude=2)

        await event_service.check_in(event.id, alice.id, Coordinates(latitude=0, longitude=0))
        event = await event_service.check_in(event.id, alice.id, second)

        assert event.find_attendee(alice.id).check_in_location == second
        assert event.checked_in_count == 1

    @pytest.mark.asyncio
    async def test_check_in_raises_score(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        fun_score_service = await unit_env.get(FunScoreService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice, starts_in=timedelta(hours=1))
        await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)

        # Act
        await event_service.check_in(event.id, bob.id)

        # Assert
        score = await fun_score_service.find_score(bob.id, group.id)
        assert score is not None
        assert score.current_score == 510
        assert score.metrics.events_attended == 1
        assert score.history[-1].change == 10
        assert score.history[-1].reason == "Checked in: Board games"

    @pytest.mark.asyncio
    async def test_changing_rsvp_after_check_in_clears_it(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice, starts_in=timedelta(hours=1))
        await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)
        await event_service.check_in(event.id, bob.id, Coordinates(latitude=1, longitude=2))

        # Act
        event = await event_service.rsvp(event.id, bob.id, RsvpStatus.MAYBE)

        # Assert
        attendee = event.find_attendee(bob.id)
        assert attendee.status == RsvpStatus.MAYBE
        assert attendee.checked_in is False
        assert attendee.check_in_time is None
        assert attendee.check_in_location is None
        assert event.checked_in_count == 0


class TestListing:
    """Tests for event listings and cleanup."""

    @pytest.mark.asyncio
    async def test_list_for_user_soonest_first(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        g1 = await make_group(group_service, alice)
        g2 = await make_group(group_service, alice)
        await make_group(group_service, bob)
        later = await make_event(event_service, g1, alice, starts_in=timedelta(days=5))
        sooner = await make_event(event_service, g2, alice, starts_in=timedelta(days=1))

        events = await event_service.list_for_user(alice.id)

        assert [e.id for e in events] == [sooner.id, later.id]
        assert await event_service.list_for_user(bob.id) == []

    @pytest.mark.asyncio
    async def test_list_for_group_requires_membership(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice)
        await make_event(event_service, group, alice)

        assert len(await event_service.list_for_group(group.id, alice.id)) == 1
        with pytest.raises(ForbiddenError):
            await event_service.list_for_group(group.id, bob.id)

    @pytest.mark.asyncio
    async def test_remove_user(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        alices = await make_event(event_service, group, alice)
        bobs = await make_event(event_service, group, bob)
        await event_service.rsvp(bobs.id, alice.id, RsvpStatus.GOING)

        # Act
        await event_service.remove_user(alice.id)

        # Assert
        with pytest.raises(NotFoundError):
            await event_service.get_event(alices.id)
        assert (await event_service.get_event(bobs.id)).attendees == []

    @pytest.mark.asyncio
    async def test_location_is_structured(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        location = EventLocation(
            name="Lido",
            address="1 Park Rd",
            coordinates=Coordinates(latitude=10, longitude=20),
        )

        event = await make_event(event_service, group, alice, location=location)

        assert event.location == location
