"""Fun Score repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from crew.domain.model.fun_score import FunScore, ScoreHistoryEntry
from crew.domain.value import FunScoreId, GroupId, UserId


class FunScoreRepository(ABC):
    """Repository for FunScore aggregate.

    Records are unique per (user_id, group_id). History entries are only
    ever appended.
    """

    @abstractmethod
    async def find(self, user_id: UserId, group_id: GroupId) -> Optional[FunScore]:
        """Find the score record for a user in a group.

        Args:
            user_id: The user
            group_id: The group

        Returns:
            The score with its history if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: UserId) -> List[FunScore]:
        """Find every score record a user has, across groups."""
        pass

    @abstractmethod
    async def get_or_create(
        self, user_id: UserId, group_id: GroupId, default_score: int
    ) -> FunScore:
        """Return the record for (user, group), creating a default one if missing.

        Creation is an atomic insert that ignores an existing row, so two
        concurrent callers end up with the same record.

        Args:
            user_id: The user
            group_id: The group
            default_score: Score for a newly created record

        Returns:
            The existing or newly created record
        """
        pass

    @abstractmethod
    async def find_top_by_group(
        self, group_id: GroupId, limit: int, user_ids: Sequence[UserId]
    ) -> List[FunScore]:
        """Find a group's records by descending score, restricted to user_ids.

        Records of users outside user_ids (former members) are skipped before
        the limit applies. Ties keep storage (insertion) order. History may be
        left unloaded; leaderboards do not need it.
        """
        pass

    @abstractmethod
    async def save(self, score: FunScore) -> FunScore:
        """Update current score, metrics and timestamps of a record.

        History is not written here; see append_history.
        """
        pass

    @abstractmethod
    async def append_history(
        self, score_id: FunScoreId, entry: ScoreHistoryEntry
    ) -> None:
        """Append one history entry to a record."""
        pass

    @abstractmethod
    async def delete_by_user(self, user_id: UserId) -> None:
        """Delete every record belonging to a user."""
        pass

    @abstractmethod
    async def delete_by_group(self, group_id: GroupId) -> None:
        """Delete every record belonging to a group."""
        pass
