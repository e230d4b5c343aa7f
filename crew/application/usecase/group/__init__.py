"""Group use cases."""

from .create_group import CreateGroupRequest, CreateGroupUseCase
from .get_group import GetGroupRequest, GetGroupResponse, GetGroupUseCase
from .join_group import JoinGroupRequest, JoinGroupUseCase
from .leave_group import LeaveGroupRequest, LeaveGroupResponse, LeaveGroupUseCase
from .list_groups import ListGroupsRequest, ListGroupsUseCase
from .update_group import UpdateGroupRequest, UpdateGroupUseCase

__all__ = [
    "CreateGroupRequest",
    "CreateGroupUseCase",
    "GetGroupRequest",
    "GetGroupResponse",
    "GetGroupUseCase",
    "JoinGroupRequest",
    "JoinGroupUseCase",
    "LeaveGroupRequest",
    "LeaveGroupResponse",
    "LeaveGroupUseCase",
    "ListGroupsRequest",
    "ListGroupsUseCase",
    "UpdateGroupRequest",
    "UpdateGroupUseCase",
]
