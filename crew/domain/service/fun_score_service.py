"""Fun Score domain service.

A score is rebuilt from a user's attendance metrics in one group:

    target = default + attend_points * attended
                     + host_points * hosted
                     - no_show_penalty * no_shows

clamped to [min_score, max_score]. A history entry is appended whenever the
score actually changes.
"""

import math
from datetime import datetime
from typing import Sequence

import logfire

from crew.config import ScoringSettings
from crew.domain.model import (
    AttendanceStats,
    Event,
    FunScore,
    Group,
    ScoreHistoryEntry,
    ScoreMetrics,
)
from crew.domain.model.common import utc_now
from crew.domain.repository import EventRepository, FunScoreRepository
from crew.domain.value import GroupId, RsvpStatus, UserId

from .base import Service


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


class FunScoreService(Service):
    """Domain service for Fun Score calculation and queries."""

    def __init__(
        self,
        fun_score_repository: FunScoreRepository,
        event_repository: EventRepository,
        scoring_settings: ScoringSettings,
    ) -> None:
        """Initialize Fun Score service.

        Args:
            fun_score_repository: Fun Score repository
            event_repository: Event repository, source of attendance data
            scoring_settings: Scoring weights and bounds
        """
        self.fun_score_repository = fun_score_repository
        self.event_repository = event_repository
        self.scoring_settings = scoring_settings

    async def get_overall_score(self, user_id: UserId) -> tuple[int, int]:
        """Average a user's scores across all of their groups.

        Returns:
            Tuple of (rounded mean score, number of groups with a score);
            the default score when the user has none
        """
        with logfire.span("fun_score_service.get_overall_score", user_id=str(user_id)):
            scores = await self.fun_score_repository.find_by_user(user_id)
            if not scores:
                return self.scoring_settings.default_score, 0

            mean = sum(s.current_score for s in scores) / len(scores)
            return round_half_up(mean), len(scores)

    async def get_or_create_score(self, user_id: UserId, group_id: GroupId) -> FunScore:
        """Return a user's score in a group, creating a default one if needed."""
        with logfire.span(
            "fun_score_service.get_or_create_score",
            user_id=str(user_id),
            group_id=str(group_id),
        ):
            return await self.fun_score_repository.get_or_create(
                user_id, group_id, self.scoring_settings.default_score
            )

    async def find_score(self, user_id: UserId, group_id: GroupId) -> FunScore | None:
        return await self.fun_score_repository.find(user_id, group_id)

    async def get_leaderboard(self, group: Group) -> list[FunScore]:
        """Top records of the group's current members, highest first.

        Records left behind by former members stay stored but are not ranked.
        """
        with logfire.span("fun_score_service.get_leaderboard", group_id=str(group.id)):
            return await self.fun_score_repository.find_top_by_group(
                group.id, self.scoring_settings.leaderboard_size, group.member_ids
            )

    def calculate_metrics(
        self, user_id: UserId, events: Sequence[Event], now: datetime
    ) -> ScoreMetrics:
        """Derive attendance metrics for one user from a group's events.

        Cancelled events count towards total_rsvps only. A no-show is a going
        RSVP without check-in on an event that has already started.
        """
        active = [e for e in events if not e.is_cancelled]
        past = [e for e in active if e.is_past(now)]

        attended = 0
        for event in active:
            attendee = event.find_attendee(user_id)
            if attendee and attendee.status == RsvpStatus.GOING and attendee.checked_in:
                attended += 1

        no_shows = 0
        for event in past:
            attendee = event.find_attendee(user_id)
            if attendee and attendee.status == RsvpStatus.GOING and not attendee.checked_in:
                no_shows += 1

        hosted = sum(1 for e in past if e.organizer_id == user_id)
        total_rsvps = sum(1 for e in events if e.find_attendee(user_id))

        resolved = attended + no_shows
        attendance_rate = round_half_up(attended / resolved * 100) if resolved else 100
        hosting_frequency = round_half_up(hosted / len(past) * 100) if past else 0

        return ScoreMetrics(
            events_attended=attended,
            events_hosted=hosted,
            total_rsvps=total_rsvps,
            no_shows=no_shows,
            attendance_rate=attendance_rate,
            hosting_frequency=hosting_frequency,
        )

    def calculate_target(self, metrics: ScoreMetrics) -> int:
        s = self.scoring_settings
        target = (
            s.default_score
            + s.attend_points * metrics.events_attended
            + s.host_points * metrics.events_hosted
            - s.no_show_penalty * metrics.no_shows
        )
        return max(s.min_score, min(s.max_score, target))

    async def recalculate(
        self, user_id: UserId, group_id: GroupId, reason: str = "Score recalculated"
    ) -> FunScore:
        """Recompute a user's score in a group from the group's events.

        Args:
            user_id: User to score
            group_id: Group whose events are considered
            reason: Recorded with the history entry if the score changes

        Returns:
            The updated score record
        """
        with logfire.span(
            "fun_score_service.recalculate",
            user_id=str(user_id),
            group_id=str(group_id),
        ):
            score = await self.get_or_create_score(user_id, group_id)
            events = await self.event_repository.find_by_group(group_id)
            now = utc_now()

            metrics = self.calculate_metrics(user_id, events, now)
            target = self.calculate_target(metrics)
            change = target - score.current_score

            updated = score.model_copy(
                update={
                    "current_score": target,
                    "metrics": metrics,
                    "last_calculated": now,
                    "updated_at": now,
                }
            )
            saved = await self.fun_score_repository.save(updated)

            if change != 0:
                entry = ScoreHistoryEntry(
                    score=target, reason=reason, change=change, recorded_at=now
                )
                await self.fun_score_repository.append_history(score.id, entry)
                saved = saved.model_copy(update={"history": [*saved.history, entry]})
                logfire.info(
                    "Fun score changed",
                    user_id=str(user_id),
                    group_id=str(group_id),
                    score=target,
                    change=change,
                )

            return saved

    async def recalculate_group(self, group: Group) -> list[FunScore]:
        """Recompute the score of every member of a group."""
        with logfire.span(
            "fun_score_service.recalculate_group",
            group_id=str(group.id),
            members=group.member_count,
        ):
            return [
                await self.recalculate(member_id, group.id, reason="Periodic recalculation")
                for member_id in group.member_ids
            ]

    async def get_attendance_stats(
        self, user_id: UserId, group_ids: Sequence[GroupId]
    ) -> AttendanceStats:
        """Summarize a user's attendance over events in their groups.

        Args:
            user_id: The user
            group_ids: The user's groups; only events whose primary group is
                one of these are considered

        Returns:
            Attendance statistics
        """
        with logfire.span(
            "fun_score_service.get_attendance_stats", user_id=str(user_id)
        ):
            now = utc_now()
            hosted = await self.event_repository.count_hosted(user_id, now)

            if group_ids:
                events = await self.event_repository.find_for_groups(group_ids)
                upcoming = await self.event_repository.count_upcoming_for_groups(
                    group_ids, now
                )
            else:
                events, upcoming = [], 0

            past = [e for e in events if e.group_id in group_ids and e.is_past(now)]

            total_rsvps = attended = no_shows = 0
            for event in past:
                attendee = event.find_attendee(user_id)
                if attendee is None or attendee.status != RsvpStatus.GOING:
                    continue
                total_rsvps += 1
                if attendee.checked_in:
                    attended += 1
                else:
                    no_shows += 1

            rate = round_half_up(attended / total_rsvps * 100) if total_rsvps else 100

            return AttendanceStats(
                attendance_rate=rate,
                total_events=len(past) + upcoming,
                attended_events=attended,
                hosted_events=hosted,
                upcoming_events=upcoming,
                total_rsvps=total_rsvps,
                no_shows=no_shows,
            )

    async def delete_for_user(self, user_id: UserId) -> None:
        """Remove all of a user's score records."""
        with logfire.span("fun_score_service.delete_for_user", user_id=str(user_id)):
            await self.fun_score_repository.delete_by_user(user_id)
