"""Unit tests for event use cases."""

from datetime import timedelta

from dishka import AsyncContainer
import pytest

from crew.application.usecase.event import (
    AttendanceStatsRequest,
    AttendanceStatsUseCase,
    CheckInRequest,
    CheckInUseCase,
    CreateEventRequest,
    CreateEventUseCase,
    GetEventRequest,
    GetEventUseCase,
    RsvpRequest,
    RsvpUseCase,
    UpdateEventRequest,
    UpdateEventUseCase,
)
from crew.domain.error import ForbiddenError
from crew.domain.model.common import utc_now
from crew.domain.service import GroupService, UserService
from crew.domain.value import EventLocation, ReliabilityLabel, RsvpStatus
from tests.conftest import make_group, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestEventUseCases:
    @pytest.mark.asyncio
    async def test_create_rsvp_check_in_flow(self, unit_env: AsyncContainer):
        # Arrange
        user_service = await unit_env.get(UserService)
        group_service = await unit_env.get(GroupService)
        create = await unit_env.get(CreateEventUseCase)
        rsvp = await unit_env.get(RsvpUseCase)
        check_in = await unit_env.get(CheckInUseCase)
        get_event = await unit_env.get(GetEventUseCase)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)

        # Act
        created = await create.execute(
            CreateEventRequest(
                organizer_id=alice.id,
                group_id=group.id,
                title="Picnic",
                date_time=utc_now() + timedelta(hours=3),
                location=EventLocation(name="Park"),
            )
        )
        await rsvp.execute(
            RsvpRequest(event_id=created.id, user_id=bob.id, status=RsvpStatus.GOING)
        )
        await check_in.execute(CheckInRequest(event_id=created.id, user_id=bob.id))
        fetched = await get_event.execute(
            GetEventRequest(event_id=created.id, user_id=alice.id)
        )

        # Assert
        assert created.organizer.name == "Alice"
        assert created.group.name == group.name
        assert fetched.attendee_count == 1
        assert fetched.checked_in_count == 1
        assert fetched.attendees[0].user.name == "Bob"
        assert fetched.attendees[0].checked_in

    @pytest.mark.asyncio
    async def test_update_only_set_fields(self, unit_env: AsyncContainer):
        user_service = await unit_env.get(UserService)
        group_service = await unit_env.get(GroupService)
        create = await unit_env.get(CreateEventUseCase)
        update = await unit_env.get(UpdateEventUseCase)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        created = await create.execute(
            CreateEventRequest(
                organizer_id=alice.id,
                group_id=group.id,
                title="Picnic",
                description="Bring food",
                date_time=utc_now() + timedelta(days=1),
                location=EventLocation(name="Park"),
                max_attendees=10,
            )
        )

        updated = await update.execute(
            UpdateEventRequest(event_id=created.id, user_id=alice.id, title="BBQ")
        )

        assert updated.title == "BBQ"
        assert updated.description == "Bring food"
        assert updated.max_attendees == 10
        with pytest.raises(ForbiddenError):
            await update.execute(
                UpdateEventRequest(event_id=created.id, user_id=bob.id, title="Mine")
            )

    @pytest.mark.asyncio
    async def test_attendance_stats_for_new_user(self, unit_env: AsyncContainer):
        user_service = await unit_env.get(UserService)
        stats = await unit_env.get(AttendanceStatsUseCase)
        alice = await make_user(user_service, "Alice")

        response = await stats.execute(AttendanceStatsRequest(user_id=alice.id))

        assert response.attendance_rate == 100
        assert response.reliability == ReliabilityLabel.HIGH
        assert response.total_events == 0
