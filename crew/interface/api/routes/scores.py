"""Fun Score routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from crew.application.usecase.auth import GetCurrentUserUseCase
from crew.application.usecase.score import (
    GetScoreRequest,
    GetScoreResponse,
    GetScoreUseCase,
    LeaderboardEntry,
    LeaderboardRequest,
    LeaderboardUseCase,
    RecalculateGroupRequest,
    RecalculateGroupUseCase,
    ScoreHistoryRequest,
    ScoreHistoryResponse,
    ScoreHistoryUseCase,
)
from crew.application.view import ScoreView
from crew.interface.api.envelope import ApiResponse, ok
from crew.interface.api.security import authenticate, bearer_scheme

router = APIRouter(prefix="/scores", tags=["scores"], route_class=DishkaRoute)


@router.get("/user/{user_id}")
async def get_user_score(
    user_id: UUID,
    get_score_use_case: FromDishka[GetScoreUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    group_id: UUID | None = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GetScoreResponse]:
    """Get a user's score in one group, or averaged over all groups.

    Args:
        user_id: Whose score
        get_score_use_case: Get score use case from DI
        get_current_user_use_case: Get current user use case from DI
        group_id: Optional group; omit for the overall score
        credentials: Bearer token

    Returns:
        Score, tier and (per group) metrics
    """
    user = await authenticate(credentials, get_current_user_use_case)
    score = await get_score_use_case.execute(
        GetScoreRequest(user_id=user_id, requester_id=user.id, group_id=group_id)
    )
    return ok(score)


@router.get("/leaderboard/{group_id}")
async def leaderboard(
    group_id: UUID,
    leaderboard_use_case: FromDishka[LeaderboardUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[list[LeaderboardEntry]]:
    """Top scores in a group, highest first."""
    user = await authenticate(credentials, get_current_user_use_case)
    entries = await leaderboard_use_case.execute(
        LeaderboardRequest(group_id=group_id, requester_id=user.id)
    )
    return ok(entries)


@router.get("/history/{user_id}")
async def score_history(
    user_id: UUID,
    group_id: UUID,
    score_history_use_case: FromDishka[ScoreHistoryUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[ScoreHistoryResponse]:
    user = await authenticate(credentials, get_current_user_use_case)
    history = await score_history_use_case.execute(
        ScoreHistoryRequest(user_id=user_id, group_id=group_id, requester_id=user.id)
    )
    return ok(history)


@router.post("/recalculate/{group_id}")
async def recalculate_group(
    group_id: UUID,
    recalculate_group_use_case: FromDishka[RecalculateGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[list[ScoreView]]:
    """Recalculate every member's score in a group."""
    user = await authenticate(credentials, get_current_user_use_case)
    scores = await recalculate_group_use_case.execute(
        RecalculateGroupRequest(group_id=group_id, requester_id=user.id)
    )
    return ok(scores, "Scores recalculated")
