"""Response views shared by use cases.

Views are the JSON shapes returned to clients. They embed display summaries
of referenced users and groups instead of bare IDs.
"""

from datetime import datetime
from typing import Generic, Iterable, Mapping, TypeVar
from uuid import UUID

from pydantic import BaseModel

from crew.domain.model import Attendee, Event, FunScore, Group, ScoreMetrics, User
from crew.domain.service import GroupService, UserService
from crew.domain.value import (
    Coordinates,
    EventLocation,
    EventStatus,
    GroupId,
    MemberRole,
    RsvpStatus,
    ScoreTier,
    UserId,
)

T = TypeVar("T")


class UserSummary(BaseModel):
    """Display summary of a user."""

    id: UUID
    name: str
    email: str


class GroupSummary(BaseModel):
    """Display summary of a group."""

    id: UUID
    name: str


class UserView(BaseModel):
    """Full user profile (never includes the password hash)."""

    id: UUID
    name: str
    email: str
    bio: str | None
    is_admin: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime
    groups: list[GroupSummary] = []


class MemberView(BaseModel):
    user_id: UUID
    user: UserSummary | None
    role: MemberRole
    joined_at: datetime


class GroupSettingsView(BaseModel):
    is_private: bool
    require_approval: bool
    max_members: int


class GroupView(BaseModel):
    """A group as seen by one of its members.

    user_role and is_admin describe the viewing user.
    """

    id: UUID
    name: str
    description: str | None
    invite_code: str
    admin_id: UUID
    admin: UserSummary | None
    members: list[MemberView]
    member_count: int
    is_active: bool
    settings: GroupSettingsView
    created_at: datetime
    updated_at: datetime
    user_role: MemberRole | None = None
    is_admin: bool = False


class AttendeeView(BaseModel):
    user_id: UUID
    user: UserSummary | None
    status: RsvpStatus
    rsvp_at: datetime
    checked_in: bool
    check_in_time: datetime | None
    check_in_location: Coordinates | None


class EventView(BaseModel):
    """An event with organizer, group and attendee summaries."""

    id: UUID
    title: str
    description: str | None
    date_time: datetime
    location: EventLocation
    organizer_id: UUID
    organizer: UserSummary | None
    group_id: UUID
    group: GroupSummary | None
    invited_groups: list[GroupSummary]
    max_attendees: int | None
    tags: list[str]
    is_public: bool
    status: EventStatus
    attendees: list[AttendeeView]
    attendee_count: int
    checked_in_count: int
    schema_version: int
    created_at: datetime
    updated_at: datetime


class ScoreView(BaseModel):
    """A score record in one group."""

    user_id: UUID
    group_id: UUID
    score: int
    tier: ScoreTier
    metrics: ScoreMetrics
    last_calculated: datetime


class Pagination(BaseModel):
    current: int
    pages: int
    total: int


class Page(BaseModel, Generic[T]):
    """One page of a listing."""

    items: list[T]
    pagination: Pagination

    @classmethod
    def build(cls, items: list[T], page: int, limit: int, total: int) -> "Page[T]":
        pages = (total + limit - 1) // limit if limit else 0
        return cls(
            items=items,
            pagination=Pagination(current=page, pages=pages, total=total),
        )


def user_summary(user: User | None) -> UserSummary | None:
    if user is None:
        return None
    return UserSummary(id=user.id, name=user.name, email=str(user.email))


def group_summary(group: Group | None) -> GroupSummary | None:
    if group is None:
        return None
    return GroupSummary(id=group.id, name=group.name)


def user_view(user: User, groups: Iterable[Group] = ()) -> UserView:
    return UserView(
        id=user.id,
        name=user.name,
        email=str(user.email),
        bio=user.bio,
        is_admin=user.is_admin,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
        groups=[GroupSummary(id=g.id, name=g.name) for g in groups],
    )


def group_view(
    group: Group,
    users: Mapping[UserId, User],
    viewer_id: UserId | None = None,
) -> GroupView:
    """Build a group view.

    Args:
        group: The group
        users: Loaded users keyed by ID (members and admin)
        viewer_id: User the view is built for, if any
    """
    return GroupView(
        id=group.id,
        name=group.name,
        description=group.description,
        invite_code=str(group.invite_code),
        admin_id=group.admin_id,
        admin=user_summary(users.get(group.admin_id)),
        members=[
            MemberView(
                user_id=m.user_id,
                user=user_summary(users.get(m.user_id)),
                role=m.role,
                joined_at=m.joined_at,
            )
            for m in group.members
        ],
        member_count=group.member_count,
        is_active=group.is_active,
        settings=GroupSettingsView(
            is_private=group.settings.is_private,
            require_approval=group.settings.require_approval,
            max_members=group.settings.max_members,
        ),
        created_at=group.created_at,
        updated_at=group.updated_at,
        user_role=group.member_role(viewer_id) if viewer_id else None,
        is_admin=group.is_admin(viewer_id) if viewer_id else False,
    )


def _attendee_view(attendee: Attendee, users: Mapping[UserId, User]) -> AttendeeView:
    return AttendeeView(
        user_id=attendee.user_id,
        user=user_summary(users.get(attendee.user_id)),
        status=attendee.status,
        rsvp_at=attendee.rsvp_at,
        checked_in=attendee.checked_in,
        check_in_time=attendee.check_in_time,
        check_in_location=attendee.check_in_location,
    )


def event_view(
    event: Event,
    users: Mapping[UserId, User],
    groups: Mapping[GroupId, Group],
) -> EventView:
    """Build an event view from preloaded users and groups."""
    return EventView(
        id=event.id,
        title=event.title,
        description=event.description,
        date_time=event.date_time,
        location=event.location,
        organizer_id=event.organizer_id,
        organizer=user_summary(users.get(event.organizer_id)),
        group_id=event.group_id,
        group=group_summary(groups.get(event.group_id)),
        invited_groups=[
            GroupSummary(id=g.id, name=g.name)
            for gid in event.invited_group_ids
            if (g := groups.get(gid)) is not None
        ],
        max_attendees=event.max_attendees,
        tags=event.tags,
        is_public=event.is_public,
        status=event.status,
        attendees=[_attendee_view(a, users) for a in event.attendees],
        attendee_count=event.attendee_count,
        checked_in_count=event.checked_in_count,
        schema_version=event.schema_version,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )


def score_view(score: FunScore) -> ScoreView:
    return ScoreView(
        user_id=score.user_id,
        group_id=score.group_id,
        score=score.current_score,
        tier=score.tier,
        metrics=score.metrics,
        last_calculated=score.last_calculated,
    )


async def build_event_views(
    events: list[Event],
    user_service: UserService,
    group_service: GroupService,
) -> list[EventView]:
    """Load the users and groups referenced by events and build their views."""
    user_ids: list[UserId] = []
    group_ids: list[GroupId] = []
    for event in events:
        user_ids.append(event.organizer_id)
        user_ids.extend(a.user_id for a in event.attendees)
        group_ids.extend(event.eligible_group_ids)

    users = await user_service.get_by_ids(user_ids)
    groups = {g.id: g for g in await group_service.get_groups(list(set(group_ids)))}
    return [event_view(event, users, groups) for event in events]


async def build_group_views(
    groups: list[Group],
    user_service: UserService,
    viewer_id: UserId | None = None,
) -> list[GroupView]:
    """Load the members of groups and build their views."""
    user_ids = [uid for group in groups for uid in group.member_ids]
    user_ids.extend(group.admin_id for group in groups)
    users = await user_service.get_by_ids(user_ids)
    return [group_view(group, users, viewer_id) for group in groups]
