"""Score history use case."""

from uuid import UUID

from pydantic import BaseModel

from crew.domain.model import ScoreHistoryEntry
from crew.domain.service import FunScoreService, GroupService
from crew.domain.value import GroupId, UserId


class ScoreHistoryRequest(BaseModel):
    user_id: UUID
    group_id: UUID
    requester_id: UUID


class ScoreHistoryResponse(BaseModel):
    history: list[ScoreHistoryEntry]
    current_score: int | None  # None when the user has no record yet


class ScoreHistoryUseCase:
    """Use case for reading a user's score history in a group.

    Unlike GetScoreUseCase this never creates a record.
    """

    def __init__(
        self, fun_score_service: FunScoreService, group_service: GroupService
    ) -> None:
        self.fun_score_service = fun_score_service
        self.group_service = group_service

    async def execute(self, request: ScoreHistoryRequest) -> ScoreHistoryResponse:
        group = await self.group_service.require_member(
            GroupId(request.group_id), UserId(request.requester_id)
        )
        record = await self.fun_score_service.find_score(UserId(request.user_id), group.id)
        if record is None:
            return ScoreHistoryResponse(history=[], current_score=None)
        return ScoreHistoryResponse(
            history=record.history, current_score=record.current_score
        )
