"""Event repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from crew.domain.model.event import Event
from crew.domain.value import Coordinates, EventId, GroupId, RsvpStatus, UserId


class EventRepository(ABC):
    """Repository for Event aggregate.

    Attendee records are stored separately from the event row so that RSVPs
    and check-ins can be written atomically without rewriting the event.
    """

    @abstractmethod
    async def find_by_id(
        self, event_id: EventId, for_update: bool = False
    ) -> Optional[Event]:
        """Find an event by ID.

        Args:
            event_id: The event's unique identifier
            for_update: Lock the event row until the transaction ends, so
                capacity checks and RSVP writes that follow are serialized

        Returns:
            The event with its attendees if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_for_groups(self, group_ids: Sequence[GroupId]) -> List[Event]:
        """Find events whose primary or invited group is in group_ids.

        Args:
            group_ids: Groups to match against

        Returns:
            Matching events ordered by ascending date_time
        """
        pass

    @abstractmethod
    async def find_by_group(self, group_id: GroupId) -> List[Event]:
        """Find events whose primary group is group_id, ascending date_time."""
        pass

    @abstractmethod
    async def find_recent_for_group(
        self, group_id: GroupId, limit: int = 5
    ) -> List[Event]:
        """Find a group's events with the latest date_time first."""
        pass

    @abstractmethod
    async def count_upcoming_for_groups(
        self, group_ids: Sequence[GroupId], after: datetime
    ) -> int:
        """Count primary-group events scheduled after a point in time."""
        pass

    @abstractmethod
    async def count_hosted(self, organizer_id: UserId, before: datetime) -> int:
        """Count events a user organized that took place before a point in time."""
        pass

    @abstractmethod
    async def save(self, event: Event) -> Event:
        """Save an event row (create or update).

        Attendee records are not touched; use upsert_rsvp and
        record_check_in for those.

        Args:
            event: The event to save

        Returns:
            The saved event, with its stored attendees
        """
        pass

    @abstractmethod
    async def upsert_rsvp(
        self,
        event_id: EventId,
        user_id: UserId,
        status: RsvpStatus,
        rsvp_at: datetime,
    ) -> None:
        """Create or overwrite a user's RSVP in one atomic statement.

        Status and rsvp_at are replaced. An existing record keeps its check-in
        state while it stays going; any other status clears it.

        Args:
            event_id: The event
            user_id: The attendee
            status: New RSVP status
            rsvp_at: Timestamp of this RSVP
        """
        pass

    @abstractmethod
    async def record_check_in(
        self,
        event_id: EventId,
        user_id: UserId,
        check_in_time: datetime,
        location: Optional[Coordinates] = None,
    ) -> None:
        """Mark an existing attendee record as checked in."""
        pass

    @abstractmethod
    async def delete(self, event_id: EventId) -> None:
        """Hard delete an event and its attendee records."""
        pass

    @abstractmethod
    async def delete_by_group(self, group_id: GroupId) -> int:
        """Delete every event whose primary group is group_id.

        Also removes group_id from other events' invited groups.

        Returns:
            Number of events deleted
        """
        pass

    @abstractmethod
    async def delete_by_organizer(self, organizer_id: UserId) -> int:
        """Delete every event a user organized; returns the count."""
        pass

    @abstractmethod
    async def remove_attendee_records(self, user_id: UserId) -> None:
        """Remove a user's attendee records from every event."""
        pass

    @abstractmethod
    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[Event]:
        """List events newest first, optionally filtered by title or description."""
        pass

    @abstractmethod
    async def count(self, search: Optional[str] = None) -> int:
        """Count events matching the same filter as search()."""
        pass
