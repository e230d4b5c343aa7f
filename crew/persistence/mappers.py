"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Iterable, List
from uuid import UUID

from crew.domain.model import (
    Attendee,
    Event,
    FunScore,
    Group,
    GroupMember,
    GroupSettings,
    ScoreHistoryEntry,
    ScoreMetrics,
    User,
)
from crew.domain.value import (
    Coordinates,
    Email,
    EventId,
    EventStatus,
    FunScoreId,
    GroupId,
    InviteCode,
    MemberRole,
    RsvpStatus,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        name=row["name"],
        email=Email(row["email"]),
        password_hash=row["password_hash"],
        bio=row.get("bio"),
        is_admin=row["is_admin"],
        is_active=row["is_active"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": user.id,
        "name": user.name,
        "email": str(user.email),
        "password_hash": user.password_hash,
        "bio": user.bio,
        "is_admin": user.is_admin,
        "is_active": user.is_active,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def row_to_group_member(row: Dict[str, Any]) -> GroupMember:
    return GroupMember(
        user_id=UserId(_uuid(row["user_id"])),
        role=MemberRole(row["role"]),
        joined_at=row["joined_at"],
    )


def row_to_group(row: Dict[str, Any], member_rows: Iterable[Dict[str, Any]]) -> Group:
    """Convert a group row plus its ordered member rows to a Group.

    Args:
        row: Group row as dict
        member_rows: Member rows for this group, in join order

    Returns:
        Group domain model
    """
    return Group(
        id=GroupId(_uuid(row["id"])),
        name=row["name"],
        description=row.get("description"),
        invite_code=InviteCode(row["invite_code"]),
        admin_id=UserId(_uuid(row["admin_id"])),
        members=[row_to_group_member(m) for m in member_rows],
        is_active=row["is_active"],
        settings=GroupSettings(
            is_private=row["is_private"],
            require_approval=row["require_approval"],
            max_members=row["max_members"],
        ),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def group_to_dict(group: Group) -> Dict[str, Any]:
    """Convert Group to a groups-table dict (members are stored separately)."""
    return {
        "id": group.id,
        "name": group.name,
        "description": group.description,
        "invite_code": str(group.invite_code),
        "admin_id": group.admin_id,
        "is_active": group.is_active,
        "is_private": group.settings.is_private,
        "require_approval": group.settings.require_approval,
        "max_members": group.settings.max_members,
        "created_at": group.created_at,
        "updated_at": group.updated_at,
    }


def group_member_to_dict(group_id: GroupId, member: GroupMember) -> Dict[str, Any]:
    return {
        "group_id": group_id,
        "user_id": member.user_id,
        "role": member.role.value,
        "joined_at": member.joined_at,
    }


def row_to_attendee(row: Dict[str, Any]) -> Attendee:
    """Convert an event_attendees row to an Attendee."""
    location = None
    if row.get("check_in_latitude") is not None and row.get("check_in_longitude") is not None:
        location = Coordinates(
            latitude=row["check_in_latitude"], longitude=row["check_in_longitude"]
        )

    return Attendee(
        user_id=UserId(_uuid(row["user_id"])),
        status=RsvpStatus(row["status"]),
        rsvp_at=row["rsvp_at"],
        checked_in=row["checked_in"],
        check_in_time=row.get("check_in_time"),
        check_in_location=location,
    )


def row_to_event(row: Dict[str, Any], attendee_rows: Iterable[Dict[str, Any]]) -> Event:
    """Convert an event row plus its attendee rows to an Event.

    A plain string location from older rows is upgraded by the model.

    Args:
        row: Event row as dict
        attendee_rows: Attendee rows for this event, in RSVP order

    Returns:
        Event domain model
    """
    return Event(
        id=EventId(_uuid(row["id"])),
        title=row["title"],
        description=row.get("description"),
        date_time=row["date_time"],
        location=row["location"],
        organizer_id=UserId(_uuid(row["organizer_id"])),
        group_id=GroupId(_uuid(row["group_id"])),
        invited_group_ids=[GroupId(_uuid(g)) for g in row.get("invited_group_ids") or []],
        max_attendees=row.get("max_attendees"),
        tags=list(row.get("tags") or []),
        is_public=row["is_public"],
        status=EventStatus(row["status"]),
        attendees=[row_to_attendee(a) for a in attendee_rows],
        schema_version=row.get("schema_version", 2),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def event_to_dict(event: Event) -> Dict[str, Any]:
    """Convert Event to an events-table dict (attendees are stored separately)."""
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "date_time": event.date_time,
        "location": event.location.model_dump(mode="json", exclude_none=True),
        "organizer_id": event.organizer_id,
        "group_id": event.group_id,
        "invited_group_ids": list(event.invited_group_ids),
        "max_attendees": event.max_attendees,
        "tags": list(event.tags),
        "is_public": event.is_public,
        "status": event.status.value,
        "schema_version": event.schema_version,
        "created_at": event.created_at,
        "updated_at": event.updated_at,
    }


def row_to_history_entry(row: Dict[str, Any]) -> ScoreHistoryEntry:
    return ScoreHistoryEntry(
        score=row["score"],
        reason=row["reason"],
        change=row["change"],
        recorded_at=row["recorded_at"],
    )


def row_to_fun_score(
    row: Dict[str, Any], history_rows: Iterable[Dict[str, Any]] = ()
) -> FunScore:
    """Convert a fun_scores row plus its history rows to a FunScore."""
    history: List[ScoreHistoryEntry] = [row_to_history_entry(h) for h in history_rows]
    return FunScore(
        id=FunScoreId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        group_id=GroupId(_uuid(row["group_id"])),
        current_score=row["current_score"],
        history=history,
        metrics=ScoreMetrics(
            events_attended=row["events_attended"],
            events_hosted=row["events_hosted"],
            total_rsvps=row["total_rsvps"],
            no_shows=row["no_shows"],
            attendance_rate=row["attendance_rate"],
            hosting_frequency=row["hosting_frequency"],
        ),
        last_calculated=row["last_calculated"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def fun_score_to_dict(score: FunScore) -> Dict[str, Any]:
    """Convert FunScore to a fun_scores-table dict (history is stored separately)."""
    return {
        "id": score.id,
        "user_id": score.user_id,
        "group_id": score.group_id,
        "current_score": score.current_score,
        "events_attended": score.metrics.events_attended,
        "events_hosted": score.metrics.events_hosted,
        "total_rsvps": score.metrics.total_rsvps,
        "no_shows": score.metrics.no_shows,
        "attendance_rate": score.metrics.attendance_rate,
        "hosting_frequency": score.metrics.hosting_frequency,
        "last_calculated": score.last_calculated,
        "created_at": score.created_at,
        "updated_at": score.updated_at,
    }
