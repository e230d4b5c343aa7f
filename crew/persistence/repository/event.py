"""PostgreSQL implementation of Event repository."""

from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import logfire
from sqlalchemy import delete, func, literal, or_, select, update
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from crew.domain.model import Event
from crew.domain.repository.event import EventRepository
from crew.domain.value import Coordinates, EventId, GroupId, RsvpStatus, UserId
from crew.persistence.mappers import event_to_dict, row_to_event
from crew.persistence.repository.common import like_pattern
from crew.persistence.tables import event_attendees_table, events_table


class PostgresEventRepository(EventRepository):
    """PostgreSQL implementation of EventRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch_attendees(
        self, event_ids: list[UUID]
    ) -> dict[UUID, list[Dict[str, Any]]]:
        """Fetch attendee rows for multiple events in a single query.

        Args:
            event_ids: List of event IDs

        Returns:
            Dict mapping event_id -> attendee rows in RSVP order
        """
        if not event_ids:
            return {}

        stmt = (
            select(event_attendees_table)
            .where(event_attendees_table.c.event_id.in_(event_ids))
            .order_by(event_attendees_table.c.seq)
        )
        result = await self.session.execute(stmt)

        attendees: dict[UUID, list[Dict[str, Any]]] = defaultdict(list)
        for row in result.fetchall():
            attendees[row.event_id].append(row._asdict())
        return attendees

    async def _hydrate(self, rows: Sequence[Any]) -> List[Event]:
        attendees = await self._fetch_attendees([row.id for row in rows])
        return [row_to_event(row._asdict(), attendees.get(row.id, [])) for row in rows]

    @staticmethod
    def _in_groups(group_ids: Sequence[GroupId]):
        """Primary group in group_ids, or any invited group in group_ids."""
        ids = list(group_ids)
        return or_(
            events_table.c.group_id.in_(ids),
            events_table.c.invited_group_ids.overlap(ids),
        )

    def _search_filter(self, search: Optional[str]):
        if not search:
            return None
        pattern = like_pattern(search)
        return or_(
            events_table.c.title.ilike(pattern, escape="\\"),
            events_table.c.description.ilike(pattern, escape="\\"),
        )

    async def find_by_id(
        self, event_id: EventId, for_update: bool = False
    ) -> Optional[Event]:
        """Find an event by ID, optionally locking its row."""
        with logfire.span(
            "event_repository.find_by_id", event_id=str(event_id), for_update=for_update
        ):
            stmt = select(events_table).where(events_table.c.id == event_id)
            if for_update:
                stmt = stmt.with_for_update()
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if not row:
                return None
            events = await self._hydrate([row])
            return events[0]

    async def find_for_groups(self, group_ids: Sequence[GroupId]) -> List[Event]:
        """Find events of any of the groups, soonest first."""
        if not group_ids:
            return []
        with logfire.span("event_repository.find_for_groups", groups=len(group_ids)):
            stmt = (
                select(events_table)
                .where(self._in_groups(group_ids))
                .order_by(events_table.c.date_time.asc())
            )
            result = await self.session.execute(stmt)
            return await self._hydrate(result.fetchall())

    async def find_by_group(self, group_id: GroupId) -> List[Event]:
        """Find events whose primary group is group_id."""
        with logfire.span("event_repository.find_by_group", group_id=str(group_id)):
            stmt = (
                select(events_table)
                .where(events_table.c.group_id == group_id)
                .order_by(events_table.c.date_time.asc())
            )
            result = await self.session.execute(stmt)
            return await self._hydrate(result.fetchall())

    async def find_recent_for_group(
        self, group_id: GroupId, limit: int = 5
    ) -> List[Event]:
        """Find a group's events, latest date_time first."""
        stmt = (
            select(events_table)
            .where(events_table.c.group_id == group_id)
            .order_by(events_table.c.date_time.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return await self._hydrate(result.fetchall())

    async def count_upcoming_for_groups(
        self, group_ids: Sequence[GroupId], after: datetime
    ) -> int:
        """Count primary-group events after a point in time."""
        if not group_ids:
            return 0
        stmt = (
            select(func.count())
            .select_from(events_table)
            .where(
                events_table.c.group_id.in_(list(group_ids)),
                events_table.c.date_time > after,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_hosted(self, organizer_id: UserId, before: datetime) -> int:
        """Count past events organized by a user."""
        stmt = (
            select(func.count())
            .select_from(events_table)
            .where(
                events_table.c.organizer_id == organizer_id,
                events_table.c.date_time < before,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def save(self, event: Event) -> Event:
        """Save an event row (create or update)."""
        with logfire.span("event_repository.save", event_id=str(event.id)):
            event_dict = event_to_dict(event)
            exists = await self.session.execute(
                select(events_table.c.id).where(events_table.c.id == event.id)
            )

            if exists.fetchone():
                stmt = (
                    events_table.update()
                    .where(events_table.c.id == event.id)
                    .values(**event_dict)
                )
            else:
                logfire.info(
                    "Inserting new event",
                    event_id=str(event.id),
                    group_id=str(event.group_id),
                )
                stmt = events_table.insert().values(**event_dict)

            await self.session.execute(stmt)

            saved = await self.find_by_id(event.id)
            return saved if saved else event

    async def upsert_rsvp(
        self,
        event_id: EventId,
        user_id: UserId,
        status: RsvpStatus,
        rsvp_at: datetime,
    ) -> None:
        """Insert or overwrite an RSVP with INSERT ... ON CONFLICT DO UPDATE."""
        with logfire.span(
            "event_repository.upsert_rsvp",
            event_id=str(event_id),
            user_id=str(user_id),
            status=status.value,
        ):
            stmt = pg_insert(event_attendees_table).values(
                event_id=event_id,
                user_id=user_id,
                status=status.value,
                rsvp_at=rsvp_at,
                checked_in=False,
            )
            changes: dict[str, Any] = dict(
                status=stmt.excluded.status, rsvp_at=stmt.excluded.rsvp_at
            )
            if status != RsvpStatus.GOING:
                # Check-in only belongs to going attendees
                changes.update(
                    checked_in=False,
                    check_in_time=None,
                    check_in_latitude=None,
                    check_in_longitude=None,
                )
            stmt = stmt.on_conflict_do_update(constraint="uq_event_attendee", set_=changes)
            await self.session.execute(stmt)

    async def record_check_in(
        self,
        event_id: EventId,
        user_id: UserId,
        check_in_time: datetime,
        location: Optional[Coordinates] = None,
    ) -> None:
        """Mark an attendee as checked in."""
        with logfire.span(
            "event_repository.record_check_in",
            event_id=str(event_id),
            user_id=str(user_id),
        ):
            stmt = (
                update(event_attendees_table)
                .where(
                    event_attendees_table.c.event_id == event_id,
                    event_attendees_table.c.user_id == user_id,
                )
                .values(
                    checked_in=True,
                    check_in_time=check_in_time,
                    check_in_latitude=location.latitude if location else None,
                    check_in_longitude=location.longitude if location else None,
                )
            )
            await self.session.execute(stmt)

    async def delete(self, event_id: EventId) -> None:
        """Hard delete an event; attendee rows cascade."""
        with logfire.span("event_repository.delete", event_id=str(event_id)):
            await self.session.execute(
                delete(events_table).where(events_table.c.id == event_id)
            )

    async def delete_by_group(self, group_id: GroupId) -> int:
        """Delete a group's events and drop it from other events' invitations."""
        with logfire.span("event_repository.delete_by_group", group_id=str(group_id)):
            result = await self.session.execute(
                delete(events_table)
                .where(events_table.c.group_id == group_id)
                .returning(events_table.c.id)
            )
            deleted = len(result.fetchall())

            await self.session.execute(
                update(events_table)
                .where(events_table.c.invited_group_ids.any(group_id))
                .values(
                    invited_group_ids=func.array_remove(
                        events_table.c.invited_group_ids,
                        literal(group_id, type_=PG_UUID),
                    )
                )
            )
            return deleted

    async def delete_by_organizer(self, organizer_id: UserId) -> int:
        """Delete every event organized by a user."""
        with logfire.span(
            "event_repository.delete_by_organizer", organizer_id=str(organizer_id)
        ):
            result = await self.session.execute(
                delete(events_table)
                .where(events_table.c.organizer_id == organizer_id)
                .returning(events_table.c.id)
            )
            return len(result.fetchall())

    async def remove_attendee_records(self, user_id: UserId) -> None:
        """Remove a user's attendee rows from every event."""
        await self.session.execute(
            delete(event_attendees_table).where(
                event_attendees_table.c.user_id == user_id
            )
        )

    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[Event]:
        """List events newest first with an optional title/description filter."""
        with logfire.span(
            "event_repository.search", search=search, limit=limit, offset=offset
        ):
            stmt = select(events_table)
            condition = self._search_filter(search)
            if condition is not None:
                stmt = stmt.where(condition)
            stmt = (
                stmt.order_by(events_table.c.created_at.desc()).limit(limit).offset(offset)
            )
            result = await self.session.execute(stmt)
            return await self._hydrate(result.fetchall())

    async def count(self, search: Optional[str] = None) -> int:
        """Count events matching an optional filter."""
        stmt = select(func.count()).select_from(events_table)
        condition = self._search_filter(search)
        if condition is not None:
            stmt = stmt.where(condition)
        result = await self.session.execute(stmt)
        return result.scalar() or 0
