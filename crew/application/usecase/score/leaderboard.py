"""Leaderboard use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.application.view import UserSummary, user_summary
from crew.domain.model import ScoreMetrics
from crew.domain.service import FunScoreService, GroupService, UserService
from crew.domain.value import GroupId, ScoreTier, UserId


class LeaderboardRequest(BaseModel):
    group_id: UUID
    requester_id: UUID


class LeaderboardEntry(BaseModel):
    rank: int  # 1-based
    user_id: UUID
    user: UserSummary | None
    score: int
    tier: ScoreTier
    metrics: ScoreMetrics


class LeaderboardUseCase:
    """Use case for a group's Fun Score ranking."""

    def __init__(
        self,
        fun_score_service: FunScoreService,
        group_service: GroupService,
        user_service: UserService,
    ) -> None:
        self.fun_score_service = fun_score_service
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: LeaderboardRequest) -> list[LeaderboardEntry]:
        """Rank the group's score records, highest first.

        Raises:
            NotFoundError: If the group does not exist
            ForbiddenError: If the requester is not a member
        """
        group = await self.group_service.require_member(
            GroupId(request.group_id), UserId(request.requester_id)
        )
        scores = await self.fun_score_service.get_leaderboard(group)
        users = await self.user_service.get_by_ids([s.user_id for s in scores])

        return [
            LeaderboardEntry(
                rank=rank,
                user_id=score.user_id,
                user=user_summary(users.get(score.user_id)),
                score=score.current_score,
                tier=score.tier,
                metrics=score.metrics,
            )
            for rank, score in enumerate(scores, start=1)
        ]
