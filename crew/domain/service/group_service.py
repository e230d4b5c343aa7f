"""Group domain service.

Owns the membership gate: every group-scoped operation checks membership
fresh from the store.
"""

import secrets
import string
from typing import Any, Sequence
from uuid import uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from crew.config import GroupRegistrySettings
from crew.domain.error import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from crew.domain.model import Group, GroupMember, GroupSettings
from crew.domain.model.common import utc_now
from crew.domain.repository import (
    EventRepository,
    FunScoreRepository,
    GroupRepository,
)
from crew.domain.value import GroupId, InviteCode, MemberRole, UserId

from .base import Service

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


class GroupService(Service):
    """Domain service for group registry operations."""

    def __init__(
        self,
        group_repository: GroupRepository,
        event_repository: EventRepository,
        fun_score_repository: FunScoreRepository,
        group_settings: GroupRegistrySettings,
    ) -> None:
        """Initialize group service.

        Args:
            group_repository: Group repository
            event_repository: Event repository, for cascading deletes
            fun_score_repository: Fun Score repository, for cascading deletes
            group_settings: Group registry settings
        """
        self.group_repository = group_repository
        self.event_repository = event_repository
        self.fun_score_repository = fun_score_repository
        self.group_settings = group_settings

    async def get_group(self, group_id: GroupId) -> Group:
        """Get group by ID.

        Raises:
            NotFoundError: If group not found
        """
        with logfire.span("group_service.get_group", group_id=str(group_id)):
            group = await self.group_repository.find_by_id(group_id)
            if not group:
                logfire.warn("Group not found", group_id=str(group_id))
                raise NotFoundError("Group", str(group_id))
            return group

    async def find_group(self, group_id: GroupId) -> Group | None:
        return await self.group_repository.find_by_id(group_id)

    async def get_groups(self, group_ids: Sequence[GroupId]) -> list[Group]:
        if not group_ids:
            return []
        return await self.group_repository.find_by_ids(list(group_ids))

    async def require_member(self, group_id: GroupId, user_id: UserId) -> Group:
        """Load a group and check the user belongs to it.

        Args:
            group_id: Group ID
            user_id: User who must be a member

        Returns:
            The group

        Raises:
            NotFoundError: If group not found
            ForbiddenError: If the user is not a member
        """
        group = await self.get_group(group_id)
        if not group.is_member(user_id):
            logfire.warn(
                "Membership check failed",
                group_id=str(group_id),
                user_id=str(user_id),
            )
            raise ForbiddenError("You are not a member of this group")
        return group

    async def require_admin(self, group_id: GroupId, user_id: UserId) -> Group:
        group = await self.get_group(group_id)
        if not group.is_admin(user_id):
            logfire.warn(
                "Admin check failed", group_id=str(group_id), user_id=str(user_id)
            )
            raise ForbiddenError("Only the group admin can perform this action")
        return group

    async def list_for_user(
        self, user_id: UserId, active_only: bool = True
    ) -> list[Group]:
        with logfire.span("group_service.list_for_user", user_id=str(user_id)):
            return await self.group_repository.find_by_member(user_id, active_only)

    async def generate_invite_code(self) -> InviteCode:
        """Draw random invite codes until one is unused.

        Returns:
            An invite code no group currently uses

        Raises:
            ConflictError: If every attempt collided
        """
        length = self.group_settings.invite_code_length
        attempts = self.group_settings.invite_code_attempts

        with logfire.span("group_service.generate_invite_code"):
            for attempt in range(1, attempts + 1):
                code = InviteCode(
                    "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))
                )
                if not await self.group_repository.invite_code_exists(code):
                    return code
                logfire.debug("Invite code collision", attempt=attempt)

            logfire.error("Invite code space exhausted", attempts=attempts)
            raise ConflictError("Could not generate a unique invite code")

    async def create_group(
        self,
        name: str,
        admin_id: UserId,
        description: str | None = None,
        is_private: bool = False,
        require_approval: bool = False,
        max_members: int | None = None,
    ) -> Group:
        """Create a group with the given user as its admin and first member.

        Returns:
            Saved group
        """
        with logfire.span(
            "group_service.create_group", name=name, admin_id=str(admin_id)
        ):
            now = utc_now()
            group = Group(
                id=GroupId(uuid4()),
                name=name.strip(),
                description=description,
                invite_code=await self.generate_invite_code(),
                admin_id=admin_id,
                members=[
                    GroupMember(user_id=admin_id, role=MemberRole.ADMIN, joined_at=now)
                ],
                settings=GroupSettings(
                    is_private=is_private,
                    require_approval=require_approval,
                    max_members=max_members or self.group_settings.default_max_members,
                ),
                created_at=now,
                updated_at=now,
            )
            saved = await self.group_repository.save(group)
            logfire.info(
                "Group created",
                group_id=str(saved.id),
                invite_code=str(saved.invite_code),
            )
            return saved

    async def update_group(self, group: Group, changes: dict[str, Any]) -> Group:
        """Apply changes to a group.

        Args:
            group: Group to update
            changes: Any of name, description, is_active, is_private,
                require_approval, max_members

        Returns:
            Saved group

        Raises:
            ValidationError: If max_members is below the member count
        """
        with logfire.span(
            "group_service.update_group",
            group_id=str(group.id),
            fields=sorted(changes.keys()),
        ):
            changes = dict(changes)
            data = group.model_dump()
            for field in ("is_private", "require_approval", "max_members"):
                if field in changes:
                    data["settings"][field] = changes.pop(field)

            max_members = data["settings"]["max_members"]
            if max_members < group.member_count:
                raise ValidationError(
                    "Maximum members cannot be less than the current member count"
                )

            if "name" in changes and changes["name"] is not None:
                changes["name"] = changes["name"].strip()

            updated = Group.model_validate({**data, **changes, "updated_at": utc_now()})
            saved = await self.group_repository.save(updated)
            logfire.info("Group updated", group_id=str(saved.id))
            return saved

    async def join(self, invite_code: str, user_id: UserId) -> Group:
        """Join the active group using an invite code.

        Args:
            invite_code: Code as entered by the user (any case)
            user_id: Joining user

        Returns:
            The group after joining

        Raises:
            NotFoundError: If no active group has this code
            ValidationError: If already a member or the group is full
        """
        with logfire.span("group_service.join", user_id=str(user_id)):
            try:
                code = InviteCode(invite_code)
            except PydanticValidationError:
                raise NotFoundError("Group", invite_code, "Invalid invite code")

            group = await self.group_repository.find_by_invite_code(code)
            if not group:
                logfire.warn("Invalid invite code", invite_code=str(code))
                raise NotFoundError("Group", str(code), "Invalid invite code")

            # Re-read under a row lock; concurrent joins queue here
            group = await self.group_repository.find_by_id(group.id, for_update=True)
            if not group:
                raise NotFoundError("Group", str(code), "Invalid invite code")
            if group.is_member(user_id):
                raise ValidationError("You are already a member of this group")
            if group.is_full:
                logfire.warn("Group at capacity", group_id=str(group.id))
                raise ValidationError("This group is at maximum capacity")

            added = await self.group_repository.add_member(
                group.id, GroupMember(user_id=user_id, role=MemberRole.MEMBER)
            )
            if not added:
                raise ValidationError("You are already a member of this group")

            logfire.info("User joined group", group_id=str(group.id), user_id=str(user_id))
            return await self.get_group(group.id)

    async def leave(self, group_id: GroupId, user_id: UserId) -> Group | None:
        """Remove a user from a group.

        When the admin leaves, the earliest remaining member becomes admin.
        When the last member leaves, the group is deleted.

        Returns:
            The updated group, or None if it was deleted

        Raises:
            NotFoundError: If group not found
            ValidationError: If the user is not a member
        """
        with logfire.span(
            "group_service.leave", group_id=str(group_id), user_id=str(user_id)
        ):
            group = await self.get_group(group_id)
            if not group.is_member(user_id):
                raise ValidationError("You are not a member of this group")

            remaining = [m for m in group.members if m.user_id != user_id]
            if not remaining:
                await self.delete_group(group.id)
                logfire.info("Last member left, group deleted", group_id=str(group_id))
                return None

            admin_id = group.admin_id
            if group.is_admin(user_id):
                successor = remaining[0]
                remaining[0] = successor.model_copy(update={"role": MemberRole.ADMIN})
                admin_id = successor.user_id
                logfire.info(
                    "Group admin transferred",
                    group_id=str(group_id),
                    new_admin_id=str(admin_id),
                )

            updated = group.model_copy(
                update={
                    "members": remaining,
                    "admin_id": admin_id,
                    "updated_at": utc_now(),
                }
            )
            return await self.group_repository.save(updated)

    async def delete_group(self, group_id: GroupId) -> None:
        """Delete a group together with its events and score records."""
        with logfire.span("group_service.delete_group", group_id=str(group_id)):
            events_deleted = await self.event_repository.delete_by_group(group_id)
            await self.fun_score_repository.delete_by_group(group_id)
            await self.group_repository.delete(group_id)
            logfire.info(
                "Group deleted", group_id=str(group_id), events_deleted=events_deleted
            )

    async def search(
        self, search: str | None = None, limit: int = 10, offset: int = 0
    ) -> tuple[list[Group], int]:
        with logfire.span("group_service.search", search=search, limit=limit):
            groups = await self.group_repository.search(search, limit, offset)
            total = await self.group_repository.count(search)
            return groups, total

    async def count(self) -> int:
        return await self.group_repository.count()
