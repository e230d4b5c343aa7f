"""Unit tests for FunScoreService."""

from datetime import timedelta

from dishka import AsyncContainer
import pytest

from crew.domain.model import ScoreMetrics
from crew.domain.model.common import utc_now
from crew.domain.repository import EventRepository, FunScoreRepository
from crew.domain.service import (
    EventService,
    FunScoreService,
    GroupService,
    UserService,
)
from crew.domain.service.fun_score_service import round_half_up
from crew.domain.value import EventStatus, ReliabilityLabel, RsvpStatus
from tests.conftest import make_event, make_group, make_user, move_event
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


@pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4999, 2), (507.5, 508), (0, 0)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


class TestCalculateTarget:
    """Tests for FunScoreService.calculate_target()."""

    @pytest.mark.asyncio
    async def test_weights(self, unit_env: AsyncContainer):
        fun_score_service = await unit_env.get(FunScoreService)

        target = fun_score_service.calculate_target(
            ScoreMetrics(events_attended=3, events_hosted=2, no_shows=1)
        )

        assert target == 500 + 30 + 30 - 25

    @pytest.mark.asyncio
    async def test_clamped_to_range(self, unit_env: AsyncContainer):
        fun_score_service = await unit_env.get(FunScoreService)

        assert fun_score_service.calculate_target(ScoreMetrics(no_shows=40)) == 300
        assert fun_score_service.calculate_target(ScoreMetrics(events_attended=100)) == 850


class TestRecalculate:
    """Tests for FunScoreService.recalculate()."""

    @pytest.mark.asyncio
    async def test_no_show_lowers_score(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        event_repository = await unit_env.get(EventRepository)
        fun_score_service = await unit_env.get(FunScoreService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice)
        await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)
        await move_event(event_repository, event, utc_now() - timedelta(days=2))

        # Act
        score = await fun_score_service.recalculate(bob.id, group.id, reason="Nightly")

        # Assert
        assert score.current_score == 475
        assert score.metrics.no_shows == 1
        assert score.metrics.attendance_rate == 0
        assert score.metrics.total_rsvps == 1
        assert [(h.change, h.reason) for h in score.history] == [(-25, "Nightly")]

    @pytest.mark.asyncio
    async def test_hosting_past_event_raises_score(self, unit_env: AsyncContainer):
        event_service = await unit_env.get(EventService)
        event_repository = await unit_env.get(EventRepository)
        fun_score_service = await unit_env.get(FunScoreService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        await make_event(event_service, group, alice)
        past = await make_event(event_service, group, alice)
        await move_event(event_repository, past, utc_now() - timedelta(days=3))

        score = await fun_score_service.recalculate(alice.id, group.id)

        assert score.current_score == 515
        assert score.metrics.events_hosted == 1
        assert score.metrics.hosting_frequency == 100

    @pytest.mark.asyncio
    async def test_cancelled_events_ignored(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        event_repository = await unit_env.get(EventRepository)
        fun_score_service = await unit_env.get(FunScoreService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)
        event = await make_event(event_service, group, alice)
        await event_service.rsvp(event.id, bob.id, RsvpStatus.GOING)
        await event_service.update_event(
            event.id, {"status": EventStatus.CANCELLED}, alice.id
        )
        await move_event(event_repository, event, utc_now() - timedelta(days=2))

        # Act
        score = await fun_score_service.recalculate(bob.id, group.id)

        # Assert
        assert score.current_score == 500
        assert score.metrics.no_shows == 0
        assert score.metrics.total_rsvps == 1
        assert score.history == []

    @pytest.mark.asyncio
    async def test_unchanged_score_adds_no_history(self, unit_env: AsyncContainer):
        fun_score_service = await unit_env.get(FunScoreService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)

        first = await fun_score_service.recalculate(alice.id, group.id)
        second = await fun_score_service.recalculate(alice.id, group.id)

        assert first.current_score == second.current_score == 500
        assert second.history == []
        assert second.last_calculated >= first.last_calculated

    @pytest.mark.asyncio
    async def test_recalculate_group_scores_every_member(self, unit_env: AsyncContainer):
        fun_score_service = await unit_env.get(FunScoreService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)

        scores = await fun_score_service.recalculate_group(group)

        assert [s.user_id for s in scores] == [alice.id, bob.id]


class TestQueries:
    """Tests for score queries."""

    @pytest.mark.asyncio
    async def test_overall_score_defaults_without_records(self, unit_env: AsyncContainer):
        fun_score_service = await unit_env.get(FunScoreService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")

        assert await fun_score_service.get_overall_score(alice.id) == (500, 0)

    @pytest.mark.asyncio
    async def test_overall_score_rounds_mean_half_up(self, unit_env: AsyncContainer):
        # Arrange
        fun_score_service = await unit_env.get(FunScoreService)
        fun_score_repository = await unit_env.get(FunScoreRepository)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        g1 = await make_group(group_service, alice)
        g2 = await make_group(group_service, alice)
        score = await fun_score_service.get_or_create_score(alice.id, g1.id)
        await fun_score_repository.save(score.model_copy(update={"current_score": 515}))
        await fun_score_service.get_or_create_score(alice.id, g2.id)

        # Act
        overall, group_count = await fun_score_service.get_overall_score(alice.id)

        # Assert
        assert overall == 508
        assert group_count == 2

    @pytest.mark.asyncio
    async def test_leaderboard_orders_by_score(self, unit_env: AsyncContainer):
        # Arrange
        fun_score_service = await unit_env.get(FunScoreService)
        fun_score_repository = await unit_env.get(FunScoreRepository)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        carol = await make_user(user_service, "Carol")
        group = await make_group(group_service, alice, bob, carol)
        for user, value in ((alice, 500), (bob, 620), (carol, 500)):
            score = await fun_score_service.get_or_create_score(user.id, group.id)
            await fun_score_repository.save(
                score.model_copy(update={"current_score": value})
            )

        # Act
        board = await fun_score_service.get_leaderboard(group.id)

        # Assert
        assert [s.user_id for s in board] == [bob.id, alice.id, carol.id]


class TestAttendanceStats:
    """Tests for FunScoreService.get_attendance_stats()."""

    @pytest.mark.asyncio
    async def test_no_history_is_perfect(self, unit_env: AsyncContainer):
        fun_score_service = await unit_env.get(FunScoreService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")

        stats = await fun_score_service.get_attendance_stats(alice.id, [])

        assert stats.attendance_rate == 100
        assert stats.total_events == 0
        assert stats.reliability == ReliabilityLabel.HIGH

    @pytest.mark.asyncio
    async def test_counts_attended_no_shows_and_upcoming(self, unit_env: AsyncContainer):
        # Arrange
        event_service = await unit_env.get(EventService)
        event_repository = await unit_env.get(EventRepository)
        fun_score_service = await unit_env.get(FunScoreService)
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, bob, alice)

        attended = await make_event(event_service, group, bob, starts_in=timedelta(hours=1))
        await event_service.rsvp(attended.id, alice.id, RsvpStatus.GOING)
        await event_service.check_in(attended.id, alice.id)
        await move_event(event_repository, attended, utc_now() - timedelta(days=3))

        missed = await make_event(event_service, group, bob)
        await event_service.rsvp(missed.id, alice.id, RsvpStatus.GOING)
        await move_event(event_repository, missed, utc_now() - timedelta(days=2))

        await make_event(event_service, group, bob, starts_in=timedelta(days=4))

        # Act
        stats = await fun_score_service.get_attendance_stats(alice.id, [group.id])

        # Assert
        assert stats.total_rsvps == 2
        assert stats.attended_events == 1
        assert stats.no_shows == 1
        assert stats.attendance_rate == 50
        assert stats.upcoming_events == 1
        assert stats.total_events == 3
        assert stats.hosted_events == 0
        assert stats.reliability == ReliabilityLabel.LOW
