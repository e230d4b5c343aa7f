"""Fun Score use cases."""

from .get_score import GetScoreRequest, GetScoreResponse, GetScoreUseCase
from .leaderboard import LeaderboardEntry, LeaderboardRequest, LeaderboardUseCase
from .recalculate_group import RecalculateGroupRequest, RecalculateGroupUseCase
from .score_history import (
    ScoreHistoryRequest,
    ScoreHistoryResponse,
    ScoreHistoryUseCase,
)

__all__ = [
    "GetScoreRequest",
    "GetScoreResponse",
    "GetScoreUseCase",
    "LeaderboardEntry",
    "LeaderboardRequest",
    "LeaderboardUseCase",
    "RecalculateGroupRequest",
    "RecalculateGroupUseCase",
    "ScoreHistoryRequest",
    "ScoreHistoryResponse",
    "ScoreHistoryUseCase",
]
