"""Generate sample users, groups and events."""

import secrets
from datetime import timedelta

import logfire
from pydantic import BaseModel, Field

from crew.application.usecase.base import BaseUseCase
from crew.domain.error import ValidationError
from crew.domain.model.common import utc_now
from crew.domain.service import AuthService, EventService, GroupService, UserService
from crew.domain.value import EventLocation

from .common import AdminRequest, require_platform_admin

TEST_PASSWORD = "password123"


class GenerateTestDataRequest(AdminRequest):
    user_count: int = Field(default=10, ge=0, le=100)
    group_count: int = Field(default=3, ge=0, le=50)
    event_count: int = Field(default=5, ge=0, le=200)


class GenerateTestDataResponse(BaseModel):
    users: int
    groups: int
    events: int


class GenerateTestDataUseCase(
    BaseUseCase[GenerateTestDataRequest, GenerateTestDataResponse]
):
    """Use case for seeding a deployment with sample data.

    Users get the password "password123". Group i is run by user i (mod
    users), and event i takes place i + 1 days from now in group i (mod
    groups), organized by that group's admin.
    """

    def __init__(
        self,
        user_service: UserService,
        auth_service: AuthService,
        group_service: GroupService,
        event_service: EventService,
    ) -> None:
        self.user_service = user_service
        self.auth_service = auth_service
        self.group_service = group_service
        self.event_service = event_service

    async def execute(self, request: GenerateTestDataRequest) -> GenerateTestDataResponse:
        """Create the requested number of users, groups and events.

        Raises:
            ForbiddenError: If the requester is not a platform admin
            ValidationError: If groups are requested without users, or events
                without groups
        """
        await require_platform_admin(self.user_service, request.requester_id)
        if request.group_count and not request.user_count:
            raise ValidationError("Test groups need at least one test user")
        if request.event_count and not request.group_count:
            raise ValidationError("Test events need at least one test group")

        # Suffix keeps emails unique across repeated runs
        batch = secrets.token_hex(3)

        with logfire.span(
            "generate_test_data.execute",
            batch=batch,
            users=request.user_count,
            groups=request.group_count,
            events=request.event_count,
        ):
            users = []
            for i in range(1, request.user_count + 1):
                users.append(
                    await self.auth_service.create_user(
                        name=f"Test User {i}",
                        email=f"testuser{i}.{batch}@example.com",
                        password=TEST_PASSWORD,
                        bio=f"This is test user {i}'s bio.",
                    )
                )

            groups = []
            for i in range(request.group_count):
                groups.append(
                    await self.group_service.create_group(
                        name=f"Test Group {i + 1}",
                        admin_id=users[i % len(users)].id,
                        description=f"This is test group {i + 1} for testing purposes.",
                    )
                )

            now = utc_now()
            for i in range(request.event_count):
                group = groups[i % len(groups)]
                await self.event_service.create_event(
                    title=f"Test Event {i + 1}",
                    description=f"This is test event {i + 1} for testing purposes.",
                    date_time=now + timedelta(days=i + 1),
                    location=EventLocation(name=f"Test Location {i + 1}"),
                    group_id=group.id,
                    organizer_id=group.admin_id,
                )

            logfire.info("Test data generated", batch=batch)
            return GenerateTestDataResponse(
                users=len(users), groups=len(groups), events=request.event_count
            )
