"""Login use case."""

import logfire
from pydantic import BaseModel

from crew.application.usecase.auth.register import AuthResponse
from crew.application.view import user_view
from crew.domain.service import AuthService, GroupService


class LoginRequest(BaseModel):
    """Login request."""

    email: str
    password: str


class LoginUseCase:
    """Use case for logging in with email and password."""

    def __init__(self, auth_service: AuthService, group_service: GroupService) -> None:
        """Initialize login use case.

        Args:
            auth_service: Authentication domain service
            group_service: Group domain service
        """
        self.auth_service = auth_service
        self.group_service = group_service

    async def execute(self, request: LoginRequest) -> AuthResponse:
        """Execute login flow.

        Args:
            request: Credentials

        Returns:
            Bearer token and the user with their groups

        Raises:
            NotAuthenticatedError: On bad credentials or an inactive account
        """
        with logfire.span("login.execute"):
            user, token = await self.auth_service.login(request.email, request.password)
            groups = await self.group_service.list_for_user(user.id)
            return AuthResponse(token=token, user=user_view(user, groups))
