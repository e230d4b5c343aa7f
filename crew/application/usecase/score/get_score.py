"""Get Fun Score use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel

from crew.domain.error import NotFoundError
from crew.domain.model import ScoreMetrics
from crew.domain.service import FunScoreService, GroupService
from crew.domain.value import GroupId, ScoreTier, UserId


class GetScoreRequest(BaseModel):
    """Get score request.

    Without group_id the overall score across all groups is returned.
    """

    user_id: UUID  # Whose score
    requester_id: UUID
    group_id: UUID | None = None


class GetScoreResponse(BaseModel):
    user_id: UUID
    group_id: UUID | None = None
    score: int
    tier: ScoreTier
    group_count: int | None = None  # Overall score only
    metrics: ScoreMetrics | None = None
    last_calculated: datetime | None = None


class GetScoreUseCase:
    """Use case for reading a user's Fun Score."""

    def __init__(
        self, fun_score_service: FunScoreService, group_service: GroupService
    ) -> None:
        """Initialize get score use case.

        Args:
            fun_score_service: Fun Score domain service
            group_service: Group domain service (membership checks)
        """
        self.fun_score_service = fun_score_service
        self.group_service = group_service

    async def execute(self, request: GetScoreRequest) -> GetScoreResponse:
        """Return the overall or per-group score.

        A per-group score is created with the default value on first read.

        Raises:
            NotFoundError: If the group does not exist or the user is not in it
            ForbiddenError: If the requester is not a member of the group
        """
        user_id = UserId(request.user_id)
        with logfire.span(
            "get_score.execute",
            user_id=str(user_id),
            group_id=str(request.group_id) if request.group_id else None,
        ):
            if request.group_id is None:
                score, count = await self.fun_score_service.get_overall_score(user_id)
                return GetScoreResponse(
                    user_id=user_id,
                    score=score,
                    tier=ScoreTier.from_score(score),
                    group_count=count,
                )

            group = await self.group_service.require_member(
                GroupId(request.group_id), UserId(request.requester_id)
            )
            if not group.is_member(user_id):
                raise NotFoundError(
                    "User", str(user_id), "User is not a member of this group"
                )

            record = await self.fun_score_service.get_or_create_score(user_id, group.id)
            return GetScoreResponse(
                user_id=user_id,
                group_id=group.id,
                score=record.current_score,
                tier=record.tier,
                metrics=record.metrics,
                last_calculated=record.last_calculated,
            )
