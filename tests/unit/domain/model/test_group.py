"""Unit tests for the Group aggregate."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from crew.domain.model import Group, GroupMember, GroupSettings
from crew.domain.value import GroupId, InviteCode, MemberRole, UserId


def build_group(admin_id: UserId, members: list[GroupMember], **kwargs) -> Group:
    return Group(
        id=GroupId(uuid4()),
        name="Climbers",
        invite_code=InviteCode("ABC123"),
        admin_id=admin_id,
        members=members,
        **kwargs,
    )


class TestGroupInvariants:
    def test_admin_must_be_member(self):
        admin_id = UserId(uuid4())

        with pytest.raises(ValidationError):
            build_group(admin_id, [GroupMember(user_id=UserId(uuid4()))])

    def test_admin_must_have_admin_role(self):
        admin_id = UserId(uuid4())

        with pytest.raises(ValidationError):
            build_group(admin_id, [GroupMember(user_id=admin_id, role=MemberRole.MEMBER)])

    def test_duplicate_members_rejected(self):
        admin_id = UserId(uuid4())
        other = UserId(uuid4())

        with pytest.raises(ValidationError):
            build_group(
                admin_id,
                [
                    GroupMember(user_id=admin_id, role=MemberRole.ADMIN),
                    GroupMember(user_id=other),
                    GroupMember(user_id=other),
                ],
            )


class TestGroupMembership:
    def test_membership_queries(self):
        # Arrange
        admin_id = UserId(uuid4())
        member_id = UserId(uuid4())
        group = build_group(
            admin_id,
            [
                GroupMember(user_id=admin_id, role=MemberRole.ADMIN),
                GroupMember(user_id=member_id),
            ],
        )

        # Assert
        assert group.is_member(member_id)
        assert not group.is_member(UserId(uuid4()))
        assert group.is_admin(admin_id)
        assert not group.is_admin(member_id)
        assert group.member_role(member_id) == MemberRole.MEMBER
        assert group.member_ids == [admin_id, member_id]
        assert group.member_count == 2

    def test_is_full_at_max_members(self):
        admin_id = UserId(uuid4())
        group = build_group(
            admin_id,
            [
                GroupMember(user_id=admin_id, role=MemberRole.ADMIN),
                GroupMember(user_id=UserId(uuid4())),
            ],
            settings=GroupSettings(max_members=2),
        )

        assert group.is_full
