"""Application layer DI providers."""

from dishka import Scope, provide

from crew.application.usecase.admin import (
    AdminBulkDeleteUsersUseCase,
    AdminCreateEventUseCase,
    AdminCreateGroupUseCase,
    AdminCreateUserUseCase,
    AdminDeleteEventUseCase,
    AdminDeleteGroupUseCase,
    AdminDeleteUserUseCase,
    AdminGetUserUseCase,
    AdminListEventsUseCase,
    AdminListGroupsUseCase,
    AdminListUsersUseCase,
    AdminStatsUseCase,
    AdminUpdateEventUseCase,
    AdminUpdateGroupUseCase,
    AdminUpdateUserUseCase,
    GenerateTestDataUseCase,
    UserRemover,
)
from crew.application.usecase.auth import (
    GetCurrentUserUseCase,
    LoginUseCase,
    RegisterUseCase,
)
from crew.application.usecase.event import (
    AttendanceStatsUseCase,
    CheckInUseCase,
    CreateEventUseCase,
    DeleteEventUseCase,
    GetEventUseCase,
    ListGroupEventsUseCase,
    ListUserEventsUseCase,
    RsvpUseCase,
    UpdateEventUseCase,
)
from crew.application.usecase.group import (
    CreateGroupUseCase,
    GetGroupUseCase,
    JoinGroupUseCase,
    LeaveGroupUseCase,
    ListGroupsUseCase,
    UpdateGroupUseCase,
)
from crew.application.usecase.score import (
    GetScoreUseCase,
    LeaderboardUseCase,
    RecalculateGroupUseCase,
    ScoreHistoryUseCase,
)
from crew.domain.service import (
    AuthService,
    EventService,
    FunScoreService,
    GroupService,
    UserService,
)
from crew.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    scope = Scope.REQUEST

    # Auth use cases
    @provide
    def get_register_use_case(self, auth_service: AuthService) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(auth_service=auth_service)

    @provide
    def get_login_use_case(
        self, auth_service: AuthService, group_service: GroupService
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(auth_service=auth_service, group_service=group_service)

    @provide
    def get_current_user_use_case(
        self, auth_service: AuthService, group_service: GroupService
    ) -> GetCurrentUserUseCase:
        """Provide get current user use case."""
        return GetCurrentUserUseCase(
            auth_service=auth_service, group_service=group_service
        )

    # Group use cases
    @provide
    def get_list_groups_use_case(
        self, group_service: GroupService, user_service: UserService
    ) -> ListGroupsUseCase:
        """Provide list groups use case."""
        return ListGroupsUseCase(group_service=group_service, user_service=user_service)

    @provide
    def get_create_group_use_case(
        self, group_service: GroupService, user_service: UserService
    ) -> CreateGroupUseCase:
        """Provide create group use case."""
        return CreateGroupUseCase(group_service=group_service, user_service=user_service)

    @provide
    def get_group_use_case(
        self,
        group_service: GroupService,
        event_service: EventService,
        user_service: UserService,
    ) -> GetGroupUseCase:
        """Provide get group use case."""
        return GetGroupUseCase(
            group_service=group_service,
            event_service=event_service,
            user_service=user_service,
        )

    @provide
    def get_update_group_use_case(
        self, group_service: GroupService, user_service: UserService
    ) -> UpdateGroupUseCase:
        """Provide update group use case."""
        return UpdateGroupUseCase(group_service=group_service, user_service=user_service)

    @provide
    def get_join_group_use_case(
        self, group_service: GroupService, user_service: UserService
    ) -> JoinGroupUseCase:
        """Provide join group use case."""
        return JoinGroupUseCase(group_service=group_service, user_service=user_service)

    @provide
    def get_leave_group_use_case(self, group_service: GroupService) -> LeaveGroupUseCase:
        """Provide leave group use case."""
        return LeaveGroupUseCase(group_service=group_service)

    # Event use cases, all built from the same three services
    create_event = provide(CreateEventUseCase)
    get_event = provide(GetEventUseCase)
    update_event = provide(UpdateEventUseCase)
    rsvp = provide(RsvpUseCase)
    check_in = provide(CheckInUseCase)
    list_user_events = provide(ListUserEventsUseCase)
    list_group_events = provide(ListGroupEventsUseCase)

    @provide
    def get_delete_event_use_case(self, event_service: EventService) -> DeleteEventUseCase:
        """Provide delete event use case."""
        return DeleteEventUseCase(event_service=event_service)

    @provide
    def get_attendance_stats_use_case(
        self, fun_score_service: FunScoreService, group_service: GroupService
    ) -> AttendanceStatsUseCase:
        """Provide attendance stats use case."""
        return AttendanceStatsUseCase(
            fun_score_service=fun_score_service, group_service=group_service
        )

    # Score use cases
    get_score = provide(GetScoreUseCase)
    leaderboard = provide(LeaderboardUseCase)
    score_history = provide(ScoreHistoryUseCase)
    recalculate_group = provide(RecalculateGroupUseCase)

    # Admin use cases
    user_remover = provide(UserRemover)
    admin_stats = provide(AdminStatsUseCase)
    admin_list_users = provide(AdminListUsersUseCase)
    admin_get_user = provide(AdminGetUserUseCase)
    admin_create_user = provide(AdminCreateUserUseCase)
    admin_update_user = provide(AdminUpdateUserUseCase)
    admin_delete_user = provide(AdminDeleteUserUseCase)
    admin_bulk_delete_users = provide(AdminBulkDeleteUsersUseCase)
    admin_list_groups = provide(AdminListGroupsUseCase)
    admin_create_group = provide(AdminCreateGroupUseCase)
    admin_update_group = provide(AdminUpdateGroupUseCase)
    admin_delete_group = provide(AdminDeleteGroupUseCase)
    admin_list_events = provide(AdminListEventsUseCase)
    admin_create_event = provide(AdminCreateEventUseCase)
    admin_update_event = provide(AdminUpdateEventUseCase)
    admin_delete_event = provide(AdminDeleteEventUseCase)
    generate_test_data = provide(GenerateTestDataUseCase)
