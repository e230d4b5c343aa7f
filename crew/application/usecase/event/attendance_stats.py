"""Attendance statistics use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from crew.domain.model import AttendanceStats
from crew.domain.service import FunScoreService, GroupService
from crew.domain.value import ReliabilityLabel, UserId


class AttendanceStatsRequest(BaseModel):
    user_id: UUID


class AttendanceStatsResponse(BaseModel):
    """Attendance statistics with a reliability label."""

    attendance_rate: int
    total_events: int
    attended_events: int
    hosted_events: int
    upcoming_events: int
    total_rsvps: int
    no_shows: int
    reliability: ReliabilityLabel

    @classmethod
    def from_stats(cls, stats: AttendanceStats) -> "AttendanceStatsResponse":
        return cls(**stats.model_dump(), reliability=stats.reliability)


class AttendanceStatsUseCase:
    """Use case for a user's attendance statistics across their groups."""

    def __init__(
        self, fun_score_service: FunScoreService, group_service: GroupService
    ) -> None:
        """Initialize attendance stats use case.

        Args:
            fun_score_service: Fun Score domain service
            group_service: Group domain service
        """
        self.fun_score_service = fun_score_service
        self.group_service = group_service

    async def execute(self, request: AttendanceStatsRequest) -> AttendanceStatsResponse:
        user_id = UserId(request.user_id)
        with logfire.span("attendance_stats.execute", user_id=str(user_id)):
            groups = await self.group_service.list_for_user(user_id)
            stats = await self.fun_score_service.get_attendance_stats(
                user_id, [g.id for g in groups]
            )
            return AttendanceStatsResponse.from_stats(stats)
