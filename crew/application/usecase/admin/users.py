"""Admin user management."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from crew.application.view import Page, UserView, user_view
from crew.domain.error import ValidationError
from crew.domain.service import (
    AuthService,
    EventService,
    FunScoreService,
    GroupService,
    UserService,
)
from crew.domain.value import UserId

from .common import AdminRequest, PageRequest, require_platform_admin


class AdminUserRequest(AdminRequest):
    user_id: UUID


class AdminCreateUserRequest(AdminRequest):
    name: str
    email: str
    password: str
    bio: str | None = None
    is_admin: bool = False


class AdminUpdateUserRequest(AdminRequest):
    """Only fields that are set are changed."""

    user_id: UUID
    name: str | None = None
    email: str | None = None
    bio: str | None = None
    is_active: bool | None = None
    is_admin: bool | None = None


class AdminBulkDeleteRequest(AdminRequest):
    user_ids: list[UUID] = Field(min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted: int


class UserRemover:
    """Deletes a user and everything that hangs off them.

    Memberships are removed with the normal leave rules, so admin rights move
    on and empty groups are deleted. Organized events, attendee records and
    score records go with the user.
    """

    def __init__(
        self,
        user_service: UserService,
        group_service: GroupService,
        event_service: EventService,
        fun_score_service: FunScoreService,
    ) -> None:
        self.user_service = user_service
        self.group_service = group_service
        self.event_service = event_service
        self.fun_score_service = fun_score_service

    async def remove(self, user_id: UserId) -> None:
        with logfire.span("admin.remove_user", user_id=str(user_id)):
            groups = await self.group_service.list_for_user(user_id, active_only=False)
            for group in groups:
                await self.group_service.leave(group.id, user_id)

            await self.event_service.remove_user(user_id)
            await self.fun_score_service.delete_for_user(user_id)
            await self.user_service.delete(user_id)
            logfire.info("User removed", user_id=str(user_id), groups_left=len(groups))


class AdminListUsersUseCase:
    """Use case for paging through users, newest first."""

    def __init__(self, user_service: UserService, group_service: GroupService) -> None:
        self.user_service = user_service
        self.group_service = group_service

    async def execute(self, request: PageRequest) -> Page[UserView]:
        await require_platform_admin(self.user_service, request.requester_id)
        users, total = await self.user_service.search(
            request.search, request.limit, request.offset
        )
        items = [
            user_view(u, await self.group_service.list_for_user(u.id, active_only=False))
            for u in users
        ]
        return Page[UserView].build(items, request.page, request.limit, total)


class AdminGetUserUseCase:
    def __init__(self, user_service: UserService, group_service: GroupService) -> None:
        self.user_service = user_service
        self.group_service = group_service

    async def execute(self, request: AdminUserRequest) -> UserView:
        await require_platform_admin(self.user_service, request.requester_id)
        user = await self.user_service.get_by_id(UserId(request.user_id))
        groups = await self.group_service.list_for_user(user.id, active_only=False)
        return user_view(user, groups)


class AdminCreateUserUseCase:
    """Use case for an admin creating an account directly."""

    def __init__(self, user_service: UserService, auth_service: AuthService) -> None:
        self.user_service = user_service
        self.auth_service = auth_service

    async def execute(self, request: AdminCreateUserRequest) -> UserView:
        """Create the user with the registration rules.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            ValidationError: If a field is invalid or the email is taken
        """
        await require_platform_admin(self.user_service, request.requester_id)
        user = await self.auth_service.create_user(
            name=request.name,
            email=request.email,
            password=request.password,
            bio=request.bio,
            is_admin=request.is_admin,
        )
        return user_view(user)


class AdminUpdateUserUseCase:
    def __init__(self, user_service: UserService, group_service: GroupService) -> None:
        self.user_service = user_service
        self.group_service = group_service

    async def execute(self, request: AdminUpdateUserRequest) -> UserView:
        """Update profile fields and flags.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            NotFoundError: If the user does not exist
            ValidationError: If the new email belongs to another user
        """
        await require_platform_admin(self.user_service, request.requester_id)
        user = await self.user_service.get_by_id(UserId(request.user_id))

        changes = {
            k: v
            for k, v in request.model_dump(
                exclude={"requester_id", "user_id"}, exclude_unset=True
            ).items()
            if v is not None or k == "bio"
        }
        updated = await self.user_service.update_user(user, changes)
        groups = await self.group_service.list_for_user(updated.id, active_only=False)
        return user_view(updated, groups)


class AdminDeleteUserUseCase:
    def __init__(self, user_service: UserService, user_remover: UserRemover) -> None:
        self.user_service = user_service
        self.user_remover = user_remover

    async def execute(self, request: AdminUserRequest) -> None:
        """Delete a user with the full cascade.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            ValidationError: If admins try to delete themselves
            NotFoundError: If the user does not exist
        """
        admin = await require_platform_admin(self.user_service, request.requester_id)
        if admin.id == request.user_id:
            raise ValidationError("You cannot delete your own account")

        user = await self.user_service.get_by_id(UserId(request.user_id))
        await self.user_remover.remove(user.id)


class AdminBulkDeleteUsersUseCase:
    def __init__(self, user_service: UserService, user_remover: UserRemover) -> None:
        self.user_service = user_service
        self.user_remover = user_remover

    async def execute(self, request: AdminBulkDeleteRequest) -> BulkDeleteResponse:
        """Delete several users; unknown IDs are skipped.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            ValidationError: If the requester's own ID is in the list
        """
        admin = await require_platform_admin(self.user_service, request.requester_id)
        if admin.id in request.user_ids:
            raise ValidationError("You cannot delete your own account")

        with logfire.span("admin.bulk_delete_users", count=len(request.user_ids)):
            users = await self.user_service.get_by_ids(
                [UserId(uid) for uid in dict.fromkeys(request.user_ids)]
            )
            for user_id in users:
                await self.user_remover.remove(user_id)
            return BulkDeleteResponse(deleted=len(users))
