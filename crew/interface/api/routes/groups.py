"""Group routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, Field

from crew.application.usecase.auth import GetCurrentUserUseCase
from crew.application.usecase.event import (
    ListGroupEventsRequest,
    ListGroupEventsUseCase,
)
from crew.application.usecase.group import (
    CreateGroupRequest,
    CreateGroupUseCase,
    GetGroupRequest,
    GetGroupResponse,
    GetGroupUseCase,
    JoinGroupRequest,
    JoinGroupUseCase,
    LeaveGroupRequest,
    LeaveGroupResponse,
    LeaveGroupUseCase,
    ListGroupsRequest,
    ListGroupsUseCase,
    UpdateGroupRequest,
    UpdateGroupUseCase,
)
from crew.application.view import EventView, GroupView
from crew.interface.api.envelope import ApiResponse, ok
from crew.interface.api.security import authenticate, bearer_scheme

router = APIRouter(prefix="/groups", tags=["groups"], route_class=DishkaRoute)


class CreateGroupAPIRequest(BaseModel):
    """API request for creating a group."""

    name: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    is_private: bool = False
    require_approval: bool = False
    max_members: int | None = Field(default=None, ge=1, le=1000)


class UpdateGroupAPIRequest(BaseModel):
    """API request for updating a group. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    is_private: bool | None = None
    require_approval: bool | None = None
    max_members: int | None = Field(default=None, ge=1, le=1000)


class JoinGroupAPIRequest(BaseModel):
    invite_code: str = Field(min_length=1)


@router.get("")
async def list_groups(
    list_groups_use_case: FromDishka[ListGroupsUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[list[GroupView]]:
    """List the active groups the current user belongs to."""
    user = await authenticate(credentials, get_current_user_use_case)
    groups = await list_groups_use_case.execute(ListGroupsRequest(user_id=user.id))
    return ok(groups)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_group(
    request: CreateGroupAPIRequest,
    create_group_use_case: FromDishka[CreateGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GroupView]:
    """Create a group with the current user as admin.

    Args:
        request: Group details
        create_group_use_case: Create group use case from DI
        get_current_user_use_case: Get current user use case from DI
        credentials: Bearer token

    Returns:
        The new group including its invite code
    """
    user = await authenticate(credentials, get_current_user_use_case)
    group = await create_group_use_case.execute(
        CreateGroupRequest(user_id=user.id, **request.model_dump())
    )
    return ok(group, "Group created successfully")


@router.post("/join")
async def join_group(
    request: JoinGroupAPIRequest,
    join_group_use_case: FromDishka[JoinGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GroupView]:
    """Join a group by invite code (case-insensitive)."""
    user = await authenticate(credentials, get_current_user_use_case)
    group = await join_group_use_case.execute(
        JoinGroupRequest(user_id=user.id, invite_code=request.invite_code)
    )
    return ok(group, "Successfully joined group")


@router.get("/{group_id}")
async def get_group(
    group_id: UUID,
    get_group_use_case: FromDishka[GetGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GetGroupResponse]:
    """Get a group with its recent events. Members only."""
    user = await authenticate(credentials, get_current_user_use_case)
    result = await get_group_use_case.execute(
        GetGroupRequest(group_id=group_id, user_id=user.id)
    )
    return ok(result)


@router.put("/{group_id}")
async def update_group(
    group_id: UUID,
    request: UpdateGroupAPIRequest,
    update_group_use_case: FromDishka[UpdateGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[GroupView]:
    """Update a group. Group admin only."""
    user = await authenticate(credentials, get_current_user_use_case)
    group = await update_group_use_case.execute(
        UpdateGroupRequest(
            group_id=group_id,
            user_id=user.id,
            **request.model_dump(exclude_unset=True),
        )
    )
    return ok(group, "Group updated successfully")


@router.delete("/{group_id}/leave")
async def leave_group(
    group_id: UUID,
    leave_group_use_case: FromDishka[LeaveGroupUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[LeaveGroupResponse]:
    """Leave a group; the group is deleted when its last member leaves."""
    user = await authenticate(credentials, get_current_user_use_case)
    result = await leave_group_use_case.execute(
        LeaveGroupRequest(group_id=group_id, user_id=user.id)
    )
    message = (
        "Group deleted as you were the last member"
        if result.group_deleted
        else "Successfully left group"
    )
    return ok(result, message)


@router.get("/{group_id}/events")
async def list_group_events(
    group_id: UUID,
    list_group_events_use_case: FromDishka[ListGroupEventsUseCase],
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[list[EventView]]:
    """List events of a group, including events it was invited to."""
    user = await authenticate(credentials, get_current_user_use_case)
    events = await list_group_events_use_case.execute(
        ListGroupEventsRequest(group_id=group_id, user_id=user.id)
    )
    return ok(events)
