"""Admin dashboard statistics."""

from pydantic import BaseModel

from crew.application.view import (
    GroupView,
    UserSummary,
    build_group_views,
    user_summary,
)
from crew.domain.service import EventService, GroupService, UserService

from .common import AdminRequest, require_platform_admin


class AdminStatsResponse(BaseModel):
    total_users: int
    active_users: int
    total_groups: int
    total_events: int
    recent_users: list[UserSummary]
    recent_groups: list[GroupView]


class AdminStatsUseCase:
    """Use case for the admin dashboard counters."""

    def __init__(
        self,
        user_service: UserService,
        group_service: GroupService,
        event_service: EventService,
    ) -> None:
        self.user_service = user_service
        self.group_service = group_service
        self.event_service = event_service

    async def execute(self, request: AdminRequest) -> AdminStatsResponse:
        """Return platform totals and the 5 newest users and groups."""
        await require_platform_admin(self.user_service, request.requester_id)

        recent_users, total_users = await self.user_service.search(limit=5)
        recent_groups, total_groups = await self.group_service.search(limit=5)

        return AdminStatsResponse(
            total_users=total_users,
            active_users=await self.user_service.count_active(),
            total_groups=total_groups,
            total_events=await self.event_service.count(),
            recent_users=[user_summary(u) for u in recent_users],
            recent_groups=await build_group_views(recent_groups, self.user_service),
        )
