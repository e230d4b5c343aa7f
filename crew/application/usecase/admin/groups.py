"""Admin group management."""

from uuid import UUID

from pydantic import Field

from crew.application.view import GroupView, Page, build_group_views
from crew.domain.service import GroupService, UserService
from crew.domain.value import GroupId, UserId

from .common import AdminRequest, PageRequest, require_platform_admin


class AdminGroupRequest(AdminRequest):
    group_id: UUID


class AdminCreateGroupRequest(AdminRequest):
    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    admin_id: UUID


class AdminUpdateGroupRequest(AdminRequest):
    """Only fields that are set are changed."""

    group_id: UUID
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    is_active: bool | None = None


class AdminListGroupsUseCase:
    """Use case for paging through all groups, newest first."""

    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: PageRequest) -> Page[GroupView]:
        await require_platform_admin(self.user_service, request.requester_id)
        groups, total = await self.group_service.search(
            request.search, request.limit, request.offset
        )
        items = await build_group_views(groups, self.user_service)
        return Page[GroupView].build(items, request.page, request.limit, total)


class AdminCreateGroupUseCase:
    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: AdminCreateGroupRequest) -> GroupView:
        """Create a group on behalf of an existing user, who becomes its admin.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            NotFoundError: If the admin user does not exist
        """
        await require_platform_admin(self.user_service, request.requester_id)
        admin = await self.user_service.get_by_id(UserId(request.admin_id))
        group = await self.group_service.create_group(
            name=request.name, admin_id=admin.id, description=request.description
        )
        views = await build_group_views([group], self.user_service)
        return views[0]


class AdminUpdateGroupUseCase:
    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: AdminUpdateGroupRequest) -> GroupView:
        await require_platform_admin(self.user_service, request.requester_id)
        group = await self.group_service.get_group(GroupId(request.group_id))
        changes = {
            k: v
            for k, v in request.model_dump(
                exclude={"requester_id", "group_id"}, exclude_unset=True
            ).items()
            if v is not None or k == "description"
        }
        updated = await self.group_service.update_group(group, changes)
        views = await build_group_views([updated], self.user_service)
        return views[0]


class AdminDeleteGroupUseCase:
    def __init__(self, group_service: GroupService, user_service: UserService) -> None:
        self.group_service = group_service
        self.user_service = user_service

    async def execute(self, request: AdminGroupRequest) -> None:
        """Delete a group with its events and score records.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            NotFoundError: If the group does not exist
        """
        await require_platform_admin(self.user_service, request.requester_id)
        group = await self.group_service.get_group(GroupId(request.group_id))
        await self.group_service.delete_group(group.id)
