"""Recalculate group scores use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from crew.application.view import ScoreView, score_view
from crew.domain.service import FunScoreService, GroupService
from crew.domain.value import GroupId, UserId


class RecalculateGroupRequest(BaseModel):
    group_id: UUID
    requester_id: UUID


class RecalculateGroupUseCase:
    """Use case for rescoring every member of a group.

    Picks up events that ended since the members' last RSVP or check-in.
    """

    def __init__(
        self, fun_score_service: FunScoreService, group_service: GroupService
    ) -> None:
        self.fun_score_service = fun_score_service
        self.group_service = group_service

    async def execute(self, request: RecalculateGroupRequest) -> list[ScoreView]:
        """Recalculate and return all members' scores.

        Raises:
            NotFoundError: If the group does not exist
            ForbiddenError: If the requester is not a member
        """
        with logfire.span("recalculate_group.execute", group_id=str(request.group_id)):
            group = await self.group_service.require_member(
                GroupId(request.group_id), UserId(request.requester_id)
            )
            scores = await self.fun_score_service.recalculate_group(group)
            return [score_view(s) for s in scores]
