"""Unit tests for group use cases."""

from datetime import timedelta

from dishka import AsyncContainer
import pytest

from crew.application.usecase.group import (
    CreateGroupRequest,
    CreateGroupUseCase,
    GetGroupRequest,
    GetGroupUseCase,
    JoinGroupRequest,
    JoinGroupUseCase,
    LeaveGroupRequest,
    LeaveGroupUseCase,
    ListGroupsRequest,
    ListGroupsUseCase,
    UpdateGroupRequest,
    UpdateGroupUseCase,
)
from crew.domain.error import ForbiddenError
from crew.domain.service import EventService, GroupService, UserService
from crew.domain.value import MemberRole
from tests.conftest import make_event, make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestGroupUseCases:
    @pytest.mark.asyncio
    async def test_create_and_join_views(self, unit_env: AsyncContainer):
        # Arrange
        user_service = await unit_env.get(UserService)
        create = await unit_env.get(CreateGroupUseCase)
        join = await unit_env.get(JoinGroupUseCase)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")

        # Act
        created = await create.execute(
            CreateGroupRequest(user_id=alice.id, name="Hikers", max_members=5)
        )
        joined = await join.execute(
            JoinGroupRequest(user_id=bob.id, invite_code=created.invite_code.lower())
        )

        # Assert
        assert created.is_admin
        assert created.user_role == MemberRole.ADMIN
        assert created.admin.name == "Alice"
        assert created.settings.max_members == 5
        assert joined.member_count == 2
        assert joined.user_role == MemberRole.MEMBER
        assert not joined.is_admin
        assert [m.user.name for m in joined.members] == ["Alice", "Bob"]

    @pytest.mark.asyncio
    async def test_list_groups_only_own(self, unit_env: AsyncContainer):
        user_service = await unit_env.get(UserService)
        create = await unit_env.get(CreateGroupUseCase)
        list_groups = await unit_env.get(ListGroupsUseCase)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        await create.execute(CreateGroupRequest(user_id=alice.id, name="Hikers"))
        await create.execute(CreateGroupRequest(user_id=bob.id, name="Readers"))

        groups = await list_groups.execute(ListGroupsRequest(user_id=alice.id))

        assert [g.name for g in groups] == ["Hikers"]

    @pytest.mark.asyncio
    async def test_get_group_with_recent_and_upcoming(self, unit_env: AsyncContainer):
        # Arrange
        user_service = await unit_env.get(UserService)
        event_service = await unit_env.get(EventService)
        group_service = await unit_env.get(GroupService)
        create = await unit_env.get(CreateGroupUseCase)
        get_group = await unit_env.get(GetGroupUseCase)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        view = await create.execute(CreateGroupRequest(user_id=alice.id, name="Hikers"))
        group = await group_service.get_group(view.id)
        for days in range(1, 8):
            await make_event(event_service, group, alice, starts_in=timedelta(days=days))

        # Act
        response = await get_group.execute(
            GetGroupRequest(group_id=group.id, user_id=alice.id)
        )

        # Assert
        assert response.group.id == group.id
        assert len(response.recent_events) == 5
        assert response.upcoming_events_count == 7
        with pytest.raises(ForbiddenError):
            await get_group.execute(GetGroupRequest(group_id=group.id, user_id=bob.id))

    @pytest.mark.asyncio
    async def test_update_requires_group_admin(self, unit_env: AsyncContainer):
        user_service = await unit_env.get(UserService)
        create = await unit_env.get(CreateGroupUseCase)
        join = await unit_env.get(JoinGroupUseCase)
        update = await unit_env.get(UpdateGroupUseCase)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await create.execute(
            CreateGroupRequest(user_id=alice.id, name="Hikers", description="Walks")
        )
        await join.execute(JoinGroupRequest(user_id=bob.id, invite_code=group.invite_code))

        with pytest.raises(ForbiddenError):
            await update.execute(
                UpdateGroupRequest(group_id=group.id, user_id=bob.id, name="Mine")
            )
        updated = await update.execute(
            UpdateGroupRequest(group_id=group.id, user_id=alice.id, is_private=True)
        )

        assert updated.name == "Hikers"
        assert updated.description == "Walks"
        assert updated.settings.is_private

    @pytest.mark.asyncio
    async def test_leave_reports_admin_transfer_and_deletion(
        self, unit_env: AsyncContainer
    ):
        # Arrange
        user_service = await unit_env.get(UserService)
        create = await unit_env.get(CreateGroupUseCase)
        join = await unit_env.get(JoinGroupUseCase)
        leave = await unit_env.get(LeaveGroupUseCase)
        alice = await make_user(user_service, "Alice")
        bob = await make_user(user_service, "Bob")
        group = await create.execute(CreateGroupRequest(user_id=alice.id, name="Hikers"))
        await join.execute(JoinGroupRequest(user_id=bob.id, invite_code=group.invite_code))

        # Act
        first = await leave.execute(LeaveGroupRequest(group_id=group.id, user_id=alice.id))
        last = await leave.execute(LeaveGroupRequest(group_id=group.id, user_id=bob.id))

        # Assert
        assert not first.group_deleted
        assert first.new_admin_id == bob.id
        assert last.group_deleted
        assert last.new_admin_id is None
