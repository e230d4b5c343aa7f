"""In-memory event repository for testing."""

from datetime import datetime
from typing import List, Optional, Sequence

from crew.domain.model import Attendee, Event
from crew.domain.repository.event import EventRepository
from crew.domain.value import Coordinates, EventId, GroupId, RsvpStatus, UserId


# Check-in only belongs to going attendees
CLEARED_CHECK_IN = {"checked_in": False, "check_in_time": None, "check_in_location": None}


class InMemoryEventRepository(EventRepository):
    """In-memory implementation of EventRepository for testing.

    Attendees are kept on the stored Event; the upsert and check-in methods
    replace the stored copy.
    """

    def __init__(self) -> None:
        self._events: dict[EventId, Event] = {}

    def _matching(self, search: Optional[str]) -> List[Event]:
        events = list(self._events.values())
        if search:
            needle = search.lower()
            events = [
                e
                for e in events
                if needle in e.title.lower() or needle in (e.description or "").lower()
            ]
        events.sort(key=lambda e: e.created_at, reverse=True)
        return events

    async def find_by_id(
        self, event_id: EventId, for_update: bool = False
    ) -> Optional[Event]:
        return self._events.get(event_id)

    async def find_for_groups(self, group_ids: Sequence[GroupId]) -> List[Event]:
        wanted = set(group_ids)
        events = [
            e
            for e in self._events.values()
            if e.group_id in wanted or wanted.intersection(e.invited_group_ids)
        ]
        return sorted(events, key=lambda e: e.date_time)

    async def find_by_group(self, group_id: GroupId) -> List[Event]:
        events = [e for e in self._events.values() if e.group_id == group_id]
        return sorted(events, key=lambda e: e.date_time)

    async def find_recent_for_group(
        self, group_id: GroupId, limit: int = 5
    ) -> List[Event]:
        events = [e for e in self._events.values() if e.group_id == group_id]
        return sorted(events, key=lambda e: e.date_time, reverse=True)[:limit]

    async def count_upcoming_for_groups(
        self, group_ids: Sequence[GroupId], after: datetime
    ) -> int:
        wanted = set(group_ids)
        return sum(
            1
            for e in self._events.values()
            if e.group_id in wanted and e.date_time > after
        )

    async def count_hosted(self, organizer_id: UserId, before: datetime) -> int:
        return sum(
            1
            for e in self._events.values()
            if e.organizer_id == organizer_id and e.date_time < before
        )

    async def save(self, event: Event) -> Event:
        existing = self._events.get(event.id)
        attendees = existing.attendees if existing else []
        stored = event.model_copy(update={"attendees": attendees})
        self._events[event.id] = stored
        return stored

    async def upsert_rsvp(
        self,
        event_id: EventId,
        user_id: UserId,
        status: RsvpStatus,
        rsvp_at: datetime,
    ) -> None:
        event = self._events.get(event_id)
        if event is None:
            return

        attendees = list(event.attendees)
        for i, attendee in enumerate(attendees):
            if attendee.user_id == user_id:
                update: dict = {"status": status, "rsvp_at": rsvp_at}
                if status != RsvpStatus.GOING:
                    update.update(CLEARED_CHECK_IN)
                attendees[i] = attendee.model_copy(update=update)
                break
        else:
            attendees.append(Attendee(user_id=user_id, status=status, rsvp_at=rsvp_at))

        self._events[event_id] = event.model_copy(update={"attendees": attendees})

    async def record_check_in(
        self,
        event_id: EventId,
        user_id: UserId,
        check_in_time: datetime,
        location: Optional[Coordinates] = None,
    ) -> None:
        event = self._events.get(event_id)
        if event is None:
            return

        attendees = [
            a.model_copy(
                update={
                    "checked_in": True,
                    "check_in_time": check_in_time,
                    "check_in_location": location,
                }
            )
            if a.user_id == user_id
            else a
            for a in event.attendees
        ]
        self._events[event_id] = event.model_copy(update={"attendees": attendees})

    async def delete(self, event_id: EventId) -> None:
        self._events.pop(event_id, None)

    async def delete_by_group(self, group_id: GroupId) -> int:
        doomed = [eid for eid, e in self._events.items() if e.group_id == group_id]
        for event_id in doomed:
            del self._events[event_id]

        for event_id, event in list(self._events.items()):
            if group_id in event.invited_group_ids:
                self._events[event_id] = event.model_copy(
                    update={
                        "invited_group_ids": [
                            g for g in event.invited_group_ids if g != group_id
                        ]
                    }
                )
        return len(doomed)

    async def delete_by_organizer(self, organizer_id: UserId) -> int:
        doomed = [
            eid for eid, e in self._events.items() if e.organizer_id == organizer_id
        ]
        for event_id in doomed:
            del self._events[event_id]
        return len(doomed)

    async def remove_attendee_records(self, user_id: UserId) -> None:
        for event_id, event in list(self._events.items()):
            if event.find_attendee(user_id):
                self._events[event_id] = event.model_copy(
                    update={
                        "attendees": [a for a in event.attendees if a.user_id != user_id]
                    }
                )

    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[Event]:
        return self._matching(search)[offset : offset + limit]

    async def count(self, search: Optional[str] = None) -> int:
        return len(self._matching(search))
