"""Platform admin use cases."""

from .common import AdminRequest, PageRequest, require_platform_admin
from .events import (
    AdminCreateEventRequest,
    AdminCreateEventUseCase,
    AdminDeleteEventUseCase,
    AdminEventRequest,
    AdminListEventsUseCase,
    AdminUpdateEventRequest,
    AdminUpdateEventUseCase,
)
from .groups import (
    AdminCreateGroupRequest,
    AdminCreateGroupUseCase,
    AdminDeleteGroupUseCase,
    AdminGroupRequest,
    AdminListGroupsUseCase,
    AdminUpdateGroupRequest,
    AdminUpdateGroupUseCase,
)
from .stats import AdminStatsResponse, AdminStatsUseCase
from .test_data import (
    GenerateTestDataRequest,
    GenerateTestDataResponse,
    GenerateTestDataUseCase,
)
from .users import (
    AdminBulkDeleteRequest,
    AdminBulkDeleteUsersUseCase,
    AdminCreateUserRequest,
    AdminCreateUserUseCase,
    AdminDeleteUserUseCase,
    AdminGetUserUseCase,
    AdminListUsersUseCase,
    AdminUpdateUserRequest,
    AdminUpdateUserUseCase,
    AdminUserRequest,
    BulkDeleteResponse,
    UserRemover,
)

__all__ = [
    "AdminBulkDeleteRequest",
    "AdminBulkDeleteUsersUseCase",
    "AdminCreateEventRequest",
    "AdminCreateEventUseCase",
    "AdminCreateGroupRequest",
    "AdminCreateGroupUseCase",
    "AdminCreateUserRequest",
    "AdminCreateUserUseCase",
    "AdminDeleteEventUseCase",
    "AdminDeleteGroupUseCase",
    "AdminDeleteUserUseCase",
    "AdminEventRequest",
    "AdminGetUserUseCase",
    "AdminGroupRequest",
    "AdminListEventsUseCase",
    "AdminListGroupsUseCase",
    "AdminListUsersUseCase",
    "AdminRequest",
    "AdminStatsResponse",
    "AdminStatsUseCase",
    "AdminUpdateEventRequest",
    "AdminUpdateEventUseCase",
    "AdminUpdateGroupRequest",
    "AdminUpdateGroupUseCase",
    "AdminUpdateUserRequest",
    "AdminUpdateUserUseCase",
    "AdminUserRequest",
    "BulkDeleteResponse",
    "GenerateTestDataRequest",
    "GenerateTestDataResponse",
    "GenerateTestDataUseCase",
    "PageRequest",
    "require_platform_admin",
]
