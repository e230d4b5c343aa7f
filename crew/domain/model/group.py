"""Group aggregate root.

A group owns an ordered member list. Order matters: when the admin leaves,
the earliest remaining member inherits the admin role.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from crew.domain.model.common import DomainModel, utc_now
from crew.domain.value import GroupId, InviteCode, MemberRole, UserId


class GroupMember(DomainModel):
    """A user's membership in a group."""

    user_id: UserId
    role: MemberRole = MemberRole.MEMBER
    joined_at: datetime = Field(default_factory=utc_now)


class GroupSettings(DomainModel):
    """Per-group settings."""

    is_private: bool = False
    require_approval: bool = False
    max_members: int = Field(default=50, ge=1, le=1000)


class Group(DomainModel):
    """Group aggregate root.

    Invariants:
    - the admin is a member with role admin
    - at most one member entry per user
    """

    id: GroupId
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=300)
    invite_code: InviteCode
    admin_id: UserId
    members: List[GroupMember] = Field(default_factory=list)
    is_active: bool = True
    settings: GroupSettings = Field(default_factory=GroupSettings)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def validate_members(self) -> "Group":
        """Check member uniqueness and the admin's membership."""
        user_ids = [m.user_id for m in self.members]
        if len(user_ids) != len(set(user_ids)):
            raise ValueError("A user can only be a member of a group once")

        admin = self.find_member(self.admin_id)
        if admin is None or admin.role != MemberRole.ADMIN:
            raise ValueError("Group admin must be a member with the admin role")
        return self

    def find_member(self, user_id: UserId) -> GroupMember | None:
        """Return the member entry for a user, if any."""
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def is_member(self, user_id: UserId) -> bool:
        return self.find_member(user_id) is not None

    def is_admin(self, user_id: UserId) -> bool:
        return self.admin_id == user_id

    def member_role(self, user_id: UserId) -> MemberRole | None:
        member = self.find_member(user_id)
        return member.role if member else None

    @property
    def member_ids(self) -> List[UserId]:
        return [m.user_id for m in self.members]

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.settings.max_members
