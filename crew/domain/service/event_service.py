"""Event domain service.

Implements the per-attendee RSVP and check-in state machine:

    no_rsvp -> going | maybe | not_going   (RSVP, any status overwrites)
    going   -> going + checked_in          (check-in, repeatable)

No transition removes an attendee record.
"""

from datetime import datetime, timedelta
from typing import Any, Sequence
from uuid import uuid4

import logfire

from crew.config import EventSettings
from crew.domain.error import ForbiddenError, NotFoundError, ValidationError
from crew.domain.model import Event
from crew.domain.model.common import ensure_utc, utc_now
from crew.domain.model.event import normalize_invited_groups
from crew.domain.repository import EventRepository
from crew.domain.value import (
    Coordinates,
    EventId,
    EventLocation,
    GroupId,
    RsvpStatus,
    UserId,
)

from .base import Service
from .fun_score_service import FunScoreService
from .group_service import GroupService


class EventService(Service):
    """Domain service for events, RSVPs and check-ins."""

    def __init__(
        self,
        event_repository: EventRepository,
        group_service: GroupService,
        fun_score_service: FunScoreService,
        event_settings: EventSettings,
    ) -> None:
        """Initialize event service.

        Args:
            event_repository: Event repository
            group_service: Group domain service (membership gate)
            fun_score_service: Fun Score service, notified of attendance changes
            event_settings: Event engine settings
        """
        self.event_repository = event_repository
        self.group_service = group_service
        self.fun_score_service = fun_score_service
        self.event_settings = event_settings

    async def get_event(self, event_id: EventId) -> Event:
        """Get event by ID.

        Raises:
            NotFoundError: If event not found
        """
        with logfire.span("event_service.get_event", event_id=str(event_id)):
            event = await self.event_repository.find_by_id(event_id)
            if not event:
                logfire.warn("Event not found", event_id=str(event_id))
                raise NotFoundError("Event", str(event_id))
            return event

    async def require_access(self, event_id: EventId, user_id: UserId) -> Event:
        """Load an event the user may see.

        Access is granted to members of the primary group or of any invited
        group.

        Raises:
            NotFoundError: If event not found
            ForbiddenError: If the user belongs to none of the event's groups
        """
        event = await self.get_event(event_id)
        groups = await self.group_service.get_groups(event.eligible_group_ids)
        if not any(group.is_member(user_id) for group in groups):
            logfire.warn(
                "Event access denied", event_id=str(event_id), user_id=str(user_id)
            )
            raise ForbiddenError("You are not a member of this event's group")
        return event

    async def _require_groups_exist(self, group_ids: Sequence[GroupId]) -> None:
        if not group_ids:
            return
        found = {g.id for g in await self.group_service.get_groups(group_ids)}
        for group_id in group_ids:
            if group_id not in found:
                raise NotFoundError("Group", str(group_id), "Invited group not found")

    async def create_event(
        self,
        title: str,
        date_time: datetime,
        location: EventLocation,
        group_id: GroupId,
        organizer_id: UserId,
        description: str | None = None,
        invited_group_ids: Sequence[GroupId] | None = None,
        max_attendees: int | None = None,
        tags: Sequence[str] | None = None,
        is_public: bool = False,
        require_membership: bool = True,
    ) -> Event:
        """Create an event in a group.

        Args:
            title: Event title
            date_time: When the event takes place; must be in the future
            location: Structured location
            group_id: Primary group
            organizer_id: Organizing user
            description: Optional description
            invited_group_ids: Further groups whose members may attend
            max_attendees: Optional capacity for going RSVPs
            tags: Optional tags
            is_public: Visibility flag
            require_membership: Whether the organizer must belong to the group

        Returns:
            Saved event with no attendees

        Raises:
            ValidationError: If the date is not in the future
            NotFoundError: If the group or an invited group does not exist
            ForbiddenError: If the organizer is not a member of the group
        """
        with logfire.span(
            "event_service.create_event",
            group_id=str(group_id),
            organizer_id=str(organizer_id),
            title=title,
        ):
            now = utc_now()
            date_time = ensure_utc(date_time)
            if date_time <= now:
                raise ValidationError("Event date must be in the future")

            group = await self.group_service.get_group(group_id)
            if require_membership and not group.is_member(organizer_id):
                raise ForbiddenError("You must be a member of the group to create events")

            invited = normalize_invited_groups(group_id, list(invited_group_ids or []))
            await self._require_groups_exist(invited)

            event = Event(
                id=EventId(uuid4()),
                title=title,
                description=description,
                date_time=date_time,
                location=location,
                organizer_id=organizer_id,
                group_id=group_id,
                invited_group_ids=invited,
                max_attendees=max_attendees,
                tags=list(tags or []),
                is_public=is_public,
                created_at=now,
                updated_at=now,
            )
            saved = await self.event_repository.save(event)
            logfire.info("Event created", event_id=str(saved.id), group_id=str(group_id))
            return saved

    async def update_event(
        self,
        event_id: EventId,
        changes: dict[str, Any],
        requester_id: UserId | None = None,
    ) -> Event:
        """Replace mutable fields of an event.

        A changed date_time must be in the future; an unchanged one is kept
        even if it has passed.

        Args:
            event_id: Event to update
            changes: Fields to replace
            requester_id: Must be the organizer; None skips the check

        Returns:
            Saved event

        Raises:
            NotFoundError: If the event or an invited group does not exist
            ForbiddenError: If the requester is not the organizer
            ValidationError: If a new date_time is not in the future
        """
        with logfire.span(
            "event_service.update_event",
            event_id=str(event_id),
            fields=sorted(changes.keys()),
        ):
            event = await self.get_event(event_id)
            if requester_id is not None and event.organizer_id != requester_id:
                logfire.warn(
                    "Event update denied",
                    event_id=str(event_id),
                    user_id=str(requester_id),
                )
                raise ForbiddenError("Only the event organizer can update this event")

            changes = dict(changes)
            now = utc_now()

            if changes.get("date_time") is not None:
                new_date_time = ensure_utc(changes["date_time"])
                if new_date_time != event.date_time and new_date_time <= now:
                    raise ValidationError("Event date must be in the future")
                changes["date_time"] = new_date_time

            if "invited_group_ids" in changes:
                invited = normalize_invited_groups(
                    event.group_id, changes["invited_group_ids"]
                )
                await self._require_groups_exist(invited)
                changes["invited_group_ids"] = invited

            updated = Event.model_validate(
                {**event.model_dump(), **changes, "updated_at": now}
            )
            saved = await self.event_repository.save(updated)
            logfire.info("Event updated", event_id=str(saved.id))
            return saved

    async def delete_event(
        self, event_id: EventId, requester_id: UserId | None = None
    ) -> None:
        """Delete an event; requester_id, when given, must be the organizer."""
        with logfire.span("event_service.delete_event", event_id=str(event_id)):
            event = await self.get_event(event_id)
            if requester_id is not None and event.organizer_id != requester_id:
                raise ForbiddenError("Only the event organizer can delete this event")
            await self.event_repository.delete(event.id)
            logfire.info("Event deleted", event_id=str(event_id))

    async def rsvp(self, event_id: EventId, user_id: UserId, status: RsvpStatus) -> Event:
        """Record a user's RSVP, overwriting any earlier one.

        Returns:
            The event after the RSVP

        Raises:
            NotFoundError: If event not found
            ForbiddenError: If the user belongs to none of the event's groups
            ValidationError: If the event is cancelled or full
        """
        with logfire.span(
            "event_service.rsvp",
            event_id=str(event_id),
            user_id=str(user_id),
            status=status.value,
        ):
            await self.require_access(event_id, user_id)

            # Capacity is checked against the locked row so concurrent RSVPs queue
            event = await self.event_repository.find_by_id(event_id, for_update=True)
            if event is None:
                raise NotFoundError("Event", str(event_id))
            if event.is_cancelled:
                raise ValidationError("Cannot RSVP to a cancelled event")

            existing = event.find_attendee(user_id)
            already_going = existing is not None and existing.status == RsvpStatus.GOING
            if status == RsvpStatus.GOING and not already_going and event.is_full:
                logfire.warn("Event at capacity", event_id=str(event_id))
                raise ValidationError("This event is at maximum capacity")

            await self.event_repository.upsert_rsvp(event.id, user_id, status, utc_now())
            logfire.info(
                "RSVP recorded",
                event_id=str(event_id),
                user_id=str(user_id),
                status=status.value,
            )

            await self._rescore(event, user_id, f"RSVP {status.value}: {event.title}")
            return await self.get_event(event_id)

    async def check_in(
        self,
        event_id: EventId,
        user_id: UserId,
        location: Coordinates | None = None,
    ) -> Event:
        """Check a going attendee in to an event.

        Allowed within the configured window either side of the event time.
        Checking in again overwrites the time and location.

        Raises:
            NotFoundError: If event not found
            ValidationError: If outside the window, no RSVP, not going, or
                the event is cancelled
        """
        with logfire.span(
            "event_service.check_in", event_id=str(event_id), user_id=str(user_id)
        ):
            event = await self.get_event(event_id)
            now = utc_now()

            window = timedelta(hours=self.event_settings.check_in_window_hours)
            if abs(now - event.date_time) > window:
                raise ValidationError(
                    f"Check-in is only available within "
                    f"{self.event_settings.check_in_window_hours} hours of the event"
                )

            attendee = event.find_attendee(user_id)
            if attendee is None:
                raise ValidationError("You must RSVP before checking in")
            if attendee.status != RsvpStatus.GOING:
                raise ValidationError("Only attendees who are going can check in")
            if event.is_cancelled:
                raise ValidationError("Cannot check in to a cancelled event")

            await self.event_repository.record_check_in(event.id, user_id, now, location)
            logfire.info("Checked in", event_id=str(event_id), user_id=str(user_id))

            await self._rescore(event, user_id, f"Checked in: {event.title}")
            return await self.get_event(event_id)

    async def _rescore(self, event: Event, user_id: UserId, reason: str) -> None:
        """Recalculate the user's score in the event's group if they belong to it."""
        group = await self.group_service.find_group(event.group_id)
        if group and group.is_member(user_id):
            await self.fun_score_service.recalculate(user_id, group.id, reason=reason)

    async def list_for_user(self, user_id: UserId) -> list[Event]:
        """Events visible through any of the user's groups, soonest first."""
        with logfire.span("event_service.list_for_user", user_id=str(user_id)):
            groups = await self.group_service.list_for_user(user_id)
            if not groups:
                return []
            return await self.event_repository.find_for_groups([g.id for g in groups])

    async def list_for_group(self, group_id: GroupId, requester_id: UserId) -> list[Event]:
        """Events of a group (primary or invited), soonest first.

        Raises:
            NotFoundError: If group not found
            ForbiddenError: If the requester is not a member
        """
        with logfire.span("event_service.list_for_group", group_id=str(group_id)):
            await self.group_service.require_member(group_id, requester_id)
            return await self.event_repository.find_for_groups([group_id])

    async def recent_for_group(self, group_id: GroupId, limit: int = 5) -> list[Event]:
        return await self.event_repository.find_recent_for_group(group_id, limit)

    async def count_upcoming(self, group_ids: Sequence[GroupId]) -> int:
        if not group_ids:
            return 0
        return await self.event_repository.count_upcoming_for_groups(
            list(group_ids), utc_now()
        )

    async def remove_user(self, user_id: UserId) -> None:
        """Delete a user's organized events and their attendee records."""
        with logfire.span("event_service.remove_user", user_id=str(user_id)):
            deleted = await self.event_repository.delete_by_organizer(user_id)
            await self.event_repository.remove_attendee_records(user_id)
            logfire.info("User events removed", user_id=str(user_id), deleted=deleted)

    async def search(
        self, search: str | None = None, limit: int = 10, offset: int = 0
    ) -> tuple[list[Event], int]:
        with logfire.span("event_service.search", search=search, limit=limit):
            events = await self.event_repository.search(search, limit, offset)
            total = await self.event_repository.count(search)
            return events, total

    async def count(self) -> int:
        return await self.event_repository.count()
