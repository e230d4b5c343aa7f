"""Platform admin routes.

Every route requires a bearer token for a user with is_admin set.
"""

from datetime import datetime
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, Query, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field

from crew.application.usecase.admin import (
    AdminBulkDeleteRequest,
    AdminBulkDeleteUsersUseCase,
    AdminCreateEventRequest,
    AdminCreateEventUseCase,
    AdminCreateGroupRequest,
    AdminCreateGroupUseCase,
    AdminCreateUserRequest,
    AdminCreateUserUseCase,
    AdminDeleteEventUseCase,
    AdminDeleteGroupUseCase,
    AdminDeleteUserUseCase,
    AdminEventRequest,
    AdminGetUserUseCase,
    AdminGroupRequest,
    AdminListEventsUseCase,
    AdminListGroupsUseCase,
    AdminListUsersUseCase,
    AdminRequest,
    AdminStatsResponse,
    AdminStatsUseCase,
    AdminUpdateEventRequest,
    AdminUpdateEventUseCase,
    AdminUpdateGroupRequest,
    AdminUpdateGroupUseCase,
    AdminUpdateUserRequest,
    AdminUpdateUserUseCase,
    AdminUserRequest,
    BulkDeleteResponse,
    GenerateTestDataRequest,
    GenerateTestDataResponse,
    GenerateTestDataUseCase,
    PageRequest,
)
from crew.application.usecase.auth import GetCurrentUserUseCase
from crew.application.usecase.event import EventChanges
from crew.application.view import EventView, GroupView, Page, UserView
from crew.domain.value import EventLocation
from crew.interface.api.envelope import ApiResponse, ok
from crew.interface.api.security import authenticate, bearer_scheme

router = APIRouter(prefix="/admin", tags=["admin"], route_class=DishkaRoute)


class PageQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: str | None = None


def page_query(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None),
) -> PageQuery:
    return PageQuery(page=page, limit=limit, search=search or None)


class CreateUserAPIRequest(BaseModel):
    name: str
    email: str
    password: str
    bio: str | None = None
    is_admin: bool = False


class UpdateUserAPIRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    bio: str | None = None
    is_active: bool | None = None
    is_admin: bool | None = None


class BulkDeleteAPIRequest(BaseModel):
    user_ids: list[UUID] = Field(min_length=1)


class CreateGroupAPIRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    admin_id: UUID


class UpdateGroupAPIRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    is_active: bool | None = None


class CreateEventAPIRequest(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    date_time: datetime
    location: EventLocation
    group_id: UUID
    organizer_id: UUID


class GenerateTestDataAPIRequest(BaseModel):
    user_count: int = Field(default=10, ge=0, le=100)
    group_count: int = Field(default=3, ge=0, le=50)
    event_count: int = Field(default=5, ge=0, le=200)


# ============== DASHBOARD STATS ==============


@router.get("/stats")
async def stats(
    admin_stats_use_case: FromDishka[AdminStatsUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[AdminStatsResponse]:
    """Platform totals and the newest users and groups."""
    admin = await authenticate(credentials, get_current_user_use_case)
    result = await admin_stats_use_case.execute(AdminRequest(requester_id=admin.id))
    return ok(result)


# ============== USER MANAGEMENT ==============


@router.get("/users")
async def list_users(
    admin_list_users_use_case: FromDishka[AdminListUsersUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    query: PageQuery = Depends(page_query),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[Page[UserView]]:
    """Page through users, searching name and email."""
    admin = await authenticate(credentials, get_current_user_use_case)
    result = await admin_list_users_use_case.execute(
        PageRequest(requester_id=admin.id, **query.model_dump())
    )
    return ok(result)


@router.post("/users/bulk-delete")
async def bulk_delete_users(
    request: BulkDeleteAPIRequest,
    admin_bulk_delete_users_use_case: FromDishka[AdminBulkDeleteUsersUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[BulkDeleteResponse]:
    admin = await authenticate(credentials, get_current_user_use_case)
    result = await admin_bulk_delete_users_use_case.execute(
        AdminBulkDeleteRequest(requester_id=admin.id, user_ids=request.user_ids)
    )
    return ok(result, f"{result.deleted} users deleted successfully")


@router.get("/users/{user_id}")
async def get_user(
    user_id: UUID,
    admin_get_user_use_case: FromDishka[AdminGetUserUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[UserView]:
    admin = await authenticate(credentials, get_current_user_use_case)
    user = await admin_get_user_use_case.execute(
        AdminUserRequest(requester_id=admin.id, user_id=user_id)
    )
    return ok(user)


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserAPIRequest,
    admin_create_user_use_case: FromDishka[AdminCreateUserUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[UserView]:
    admin = await authenticate(credentials, get_current_user_use_case)
    user = await admin_create_user_use_case.execute(
        AdminCreateUserRequest(requester_id=admin.id, **request.model_dump())
    )
    return ok(user, "User created successfully")


@router.put("/users/{user_id}")
async def update_user(
    user_id: UUID,
    request: UpdateUserAPIRequest,
    admin_update_user_use_case: FromDishka[AdminUpdateUserUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[UserView]:
    admin = await authenticate(credentials, get_current_user_use_case)
    user = await admin_update_user_use_case.execute(
        AdminUpdateUserRequest(
            requester_id=admin.id,
            user_id=user_id,
            **request.model_dump(exclude_unset=True),
        )
    )
    return ok(user, "User updated successfully")


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: UUID,
    admin_delete_user_use_case: FromDishka[AdminDeleteUserUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[None]:
    """Delete a user, their memberships, events and scores."""
    admin = await authenticate(credentials, get_current_user_use_case)
    await admin_delete_user_use_case.execute(
        AdminUserRequest(requester_id=admin.id, user_id=user_id)
    )
    return ok(message="User deleted successfully")


# ============== GROUP MANAGEMENT ==============


@router.get("/groups")
async def list_groups(
    admin_list_groups_use_case: FromDishka[AdminListGroupsUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    query: PageQuery = Depends(page_query),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[Page[GroupView]]:
    """Page through groups, searching name and description."""
    admin = await authenticate(credentials, get_current_user_use_case)
    result = await admin_list_groups_use_case.execute(
        PageRequest(requester_id=admin.id, **query.model_dump())
    )
    return ok(result)


@router.post("/groups", status_code=status.HTTP_201_CREATED)
async def create_group(
    request: CreateGroupAPIRequest,
    admin_create_group_use_case: FromDishka[AdminCreateGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GroupView]:
    admin = await authenticate(credentials, get_current_user_use_case)
    group = await admin_create_group_use_case.execute(
        AdminCreateGroupRequest(requester_id=admin.id, **request.model_dump())
    )
    return ok(group, "Group created successfully")


@router.put("/groups/{group_id}")
async def update_group(
    group_id: UUID,
    request: UpdateGroupAPIRequest,
    admin_update_group_use_case: FromDishka[AdminUpdateGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GroupView]:
    admin = await authenticate(credentials, get_current_user_use_case)
    group = await admin_update_group_use_case.execute(
        AdminUpdateGroupRequest(
            requester_id=admin.id,
            group_id=group_id,
            **request.model_dump(exclude_unset=True),
        )
    )
    return ok(group, "Group updated successfully")


@router.delete("/groups/{group_id}")
async def delete_group(
    group_id: UUID,
    admin_delete_group_use_case: FromDishka[AdminDeleteGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[None]:
    admin = await authenticate(credentials, get_current_user_use_case)
    await admin_delete_group_use_case.execute(
        AdminGroupRequest(requester_id=admin.id, group_id=group_id)
    )
    return ok(message="Group deleted successfully")


# ============== EVENT MANAGEMENT ==============


@router.get("/events")
async def list_events(
    admin_list_events_use_case: FromDishka[AdminListEventsUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    query: PageQuery = Depends(page_query),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[Page[EventView]]:
    """Page through events, searching title and description."""
    admin = await authenticate(credentials, get_current_user_use_case)
    result = await admin_list_events_use_case.execute(
        PageRequest(requester_id=admin.id, **query.model_dump())
    )
    return ok(result)


@router.post("/events", status_code=status.HTTP_201_CREATED)
async def create_event(
    request: CreateEventAPIRequest,
    admin_create_event_use_case: FromDishka[AdminCreateEventUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[EventView]:
    admin = await authenticate(credentials, get_current_user_use_case)
    event = await admin_create_event_use_case.execute(
        AdminCreateEventRequest(requester_id=admin.id, **request.model_dump())
    )
    return ok(event, "Event created successfully")


@router.put("/events/{event_id}")
async def update_event(
    event_id: UUID,
    request: EventChanges,
    admin_update_event_use_case: FromDishka[AdminUpdateEventUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[EventView]:
    admin = await authenticate(credentials, get_current_user_use_case)
    event = await admin_update_event_use_case.execute(
        AdminUpdateEventRequest(
            requester_id=admin.id,
            event_id=event_id,
            **request.model_dump(exclude_unset=True),
        )
    )
    return ok(event, "Event updated successfully")


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: UUID,
    admin_delete_event_use_case: FromDishka[AdminDeleteEventUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[None]:
    admin = await authenticate(credentials, get_current_user_use_case)
    await admin_delete_event_use_case.execute(
        AdminEventRequest(requester_id=admin.id, event_id=event_id)
    )
    return ok(message="Event deleted successfully")


# ============== BULK OPERATIONS ==============


@router.post("/generate-test-data")
async def generate_test_data(
    generate_test_data_use_case: FromDishka[GenerateTestDataUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    request: GenerateTestDataAPIRequest | None = None,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GenerateTestDataResponse]:
    """Create sample users, groups and future events."""
    admin = await authenticate(credentials, get_current_user_use_case)
    counts = (request or GenerateTestDataAPIRequest()).model_dump()
    result = await generate_test_data_use_case.execute(
        GenerateTestDataRequest(requester_id=admin.id, **counts)
    )
    return ok(result, "Test data generated successfully")
