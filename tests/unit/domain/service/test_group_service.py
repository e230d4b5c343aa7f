"""Unit tests for GroupService."""

from dishka import AsyncContainer
import pytest

from crew.domain.error import ForbiddenError, NotFoundError, ValidationError
from crew.domain.repository import EventRepository, FunScoreRepository
from crew.domain.service import (
    EventService,
    FunScoreService,
    GroupService,
    UserService,
)
from crew.domain.value import MemberRole
from tests.conftest import make_event, make_group, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateGroup:
    """Tests for GroupService.create_group()."""

    @pytest.mark.asyncio
    async def test_creator_is_admin_and_only_member(self, unit_env: AsyncContainer):
        # Arrange
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")

        # Act
        group = await group_service.create_group("  Hikers ", alice.id)

        # Assert
        assert group.name == "Hikers"
        assert group.admin_id == alice.id
        assert group.member_ids == [alice.id]
        assert group.member_role(alice.id) == MemberRole.ADMIN
        assert group.settings.max_members == 50
        assert len(str(group.invite_code)) == 6
        assert str(group.invite_code).isalnum()
        assert str(group.invite_code) == str(group.invite_code).upper()

    @pytest.mark.asyncio
    async def test_invite_codes_are_unique(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")

        groups = [await group_service.create_group(f"G{i}", alice.id) for i in range(20)]

        assert len({str(g.invite_code) for g in groups}) == 20


class TestJoinGroup:
    """Tests for GroupService.join()."""

    @pytest.mark.asyncio
    async def test_join_is_case_insensitive(self, unit_env: AsyncContainer):
        # Arrange
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await group_service.create_group("Hikers", alice.id)

        # Act
        joined = await group_service.join(str(group.invite_code).lower(), bob.id)

        # Assert
        assert joined.member_ids == [alice.id, bob.id]
        assert joined.member_role(bob.id) == MemberRole.MEMBER

    @pytest.mark.asyncio
    async def test_join_twice_rejected(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await group_service.create_group("Hikers", alice.id)

        with pytest.raises(ValidationError) as exc_info:
            await group_service.join(str(group.invite_code), alice.id)

        assert str(exc_info.value) == "You are already a member of this group"

    @pytest.mark.asyncio
    async def test_unknown_code(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")

        with pytest.raises(NotFoundError) as exc_info:
            await group_service.join("ZZZZZZ", alice.id)
        assert str(exc_info.value) == "Invalid invite code"

        with pytest.raises(NotFoundError):
            await group_service.join("!!", alice.id)

    @pytest.mark.asyncio
    async def test_full_group_rejects_join(self, unit_env: AsyncContainer):
        # Arrange
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        carol = await make_user(user_service, "Carol")
        group = await make_group(group_service, alice, bob, max_members=2)

        # Act / Assert
        with pytest.raises(ValidationError) as exc_info:
            await group_service.join(str(group.invite_code), carol.id)
        assert str(exc_info.value) == "This group is at maximum capacity"

    @pytest.mark.asyncio
    async def test_inactive_group_not_joinable(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await group_service.create_group("Hikers", alice.id)
        await group_service.update_group(group, {"is_active": False})

        with pytest.raises(NotFoundError):
            await group_service.join(str(group.invite_code), bob.id)


class TestLeaveGroup:
    """Tests for GroupService.leave()."""

    @pytest.mark.asyncio
    async def test_admin_leaving_promotes_earliest_member(self, unit_env: AsyncContainer):
        # Arrange
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        carol = await make_user(user_service, "Carol")
        group = await make_group(group_service, alice, bob, carol)

        # Act
        updated = await group_service.leave(group.id, alice.id)

        # Assert
        assert updated is not None
        assert updated.admin_id == bob.id
        assert updated.member_ids == [bob.id, carol.id]
        assert updated.member_role(bob.id) == MemberRole.ADMIN
        assert updated.member_role(carol.id) == MemberRole.MEMBER

    @pytest.mark.asyncio
    async def test_member_leaving_keeps_admin(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)

        updated = await group_service.leave(group.id, bob.id)

        assert updated is not None
        assert updated.admin_id == alice.id
        assert updated.member_ids == [alice.id]

    @pytest.mark.asyncio
    async def test_last_member_leaving_deletes_group_and_events(
        self, unit_env: AsyncContainer
    ):
        # Arrange
        group_service = await unit_env.get(GroupService)
        event_service = await unit_env.get(EventService)
        fun_score_service = await unit_env.get(FunScoreService)
        event_repository = await unit_env.get(EventRepository)
        fun_score_repository = await unit_env.get(FunScoreRepository)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)
        event = await make_event(event_service, group, alice)
        await fun_score_service.get_or_create_score(alice.id, group.id)

        # Act
        result = await group_service.leave(group.id, alice.id)

        # Assert
        assert result is None
        assert await group_service.find_group(group.id) is None
        assert await event_repository.find_by_id(event.id) is None
        assert await fun_score_repository.find(alice.id, group.id) is None

    @pytest.mark.asyncio
    async def test_non_member_cannot_leave(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice)

        with pytest.raises(ValidationError):
            await group_service.leave(group.id, bob.id)


class TestGates:
    """Tests for membership and admin gates."""

    @pytest.mark.asyncio
    async def test_require_member(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice)

        assert (await group_service.require_member(group.id, alice.id)).id == group.id
        with pytest.raises(ForbiddenError):
            await group_service.require_member(group.id, bob.id)

    @pytest.mark.asyncio
    async def test_require_admin(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)

        with pytest.raises(ForbiddenError) as exc_info:
            await group_service.require_admin(group.id, bob.id)

        assert str(exc_info.value) == "Only the group admin can perform this action"


class TestUpdateGroup:
    """Tests for GroupService.update_group()."""

    @pytest.mark.asyncio
    async def test_updates_name_and_settings(self, unit_env: AsyncContainer):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        group = await make_group(group_service, alice)

        updated = await group_service.update_group(
            group, {"name": " Climbers ", "is_private": True, "max_members": 10}
        )

        assert updated.name == "Climbers"
        assert updated.settings.is_private
        assert updated.settings.max_members == 10
        assert updated.invite_code == group.invite_code

    @pytest.mark.asyncio
    async def test_max_members_below_member_count_rejected(
        self, unit_env: AsyncContainer
    ):
        group_service = await unit_env.get(GroupService)
        user_service = await unit_env.get(UserService)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await make_group(group_service, alice, bob)

        with pytest.raises(ValidationError):
            await group_service.update_group(group, {"max_members": 1})
