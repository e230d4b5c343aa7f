"""Fun Score aggregate root.

A Fun Score is a per-(user, group) reputation in the range 300..850,
rebuilt from attendance behaviour. History is append-only.
"""

from datetime import datetime
from typing import List

from pydantic import Field

from crew.domain.model.common import DomainModel, utc_now
from crew.domain.value import (
    FunScoreId,
    GroupId,
    ReliabilityLabel,
    ScoreTier,
    UserId,
)

MIN_SCORE = 300
MAX_SCORE = 850
DEFAULT_SCORE = 500


class ScoreHistoryEntry(DomainModel):
    """One recorded score change."""

    score: int = Field(ge=MIN_SCORE, le=MAX_SCORE)
    reason: str
    change: int
    recorded_at: datetime = Field(default_factory=utc_now)


class ScoreMetrics(DomainModel):
    """Attendance metrics a score was derived from."""

    events_attended: int = Field(default=0, ge=0)
    events_hosted: int = Field(default=0, ge=0)
    total_rsvps: int = Field(default=0, ge=0)
    no_shows: int = Field(default=0, ge=0)
    attendance_rate: int = Field(default=100, ge=0, le=100)
    hosting_frequency: int = Field(default=0, ge=0, le=100)


class FunScore(DomainModel):
    """Fun Score aggregate root, unique per (user_id, group_id)."""

    id: FunScoreId
    user_id: UserId
    group_id: GroupId
    current_score: int = Field(default=DEFAULT_SCORE, ge=MIN_SCORE, le=MAX_SCORE)
    history: List[ScoreHistoryEntry] = Field(default_factory=list)
    metrics: ScoreMetrics = Field(default_factory=ScoreMetrics)
    last_calculated: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def tier(self) -> ScoreTier:
        return ScoreTier.from_score(self.current_score)


class AttendanceStats(DomainModel):
    """A user's attendance record across all of their groups."""

    attendance_rate: int
    total_events: int
    attended_events: int
    hosted_events: int
    upcoming_events: int
    total_rsvps: int
    no_shows: int

    @property
    def reliability(self) -> ReliabilityLabel:
        return ReliabilityLabel.from_rate(self.attendance_rate)
