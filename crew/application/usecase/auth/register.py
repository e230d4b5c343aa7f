"""Register use case."""

import logfire
from pydantic import BaseModel

from crew.application.view import UserView, user_view
from crew.domain.service import AuthService


class RegisterRequest(BaseModel):
    """Register request."""

    name: str
    email: str
    password: str
    bio: str | None = None


class AuthResponse(BaseModel):
    """Token and profile returned after registration or login."""

    token: str
    user: UserView


class RegisterUseCase:
    """Use case for creating an account with email and password."""

    def __init__(self, auth_service: AuthService) -> None:
        """Initialize register use case.

        Args:
            auth_service: Authentication domain service
        """
        self.auth_service = auth_service

    async def execute(self, request: RegisterRequest) -> AuthResponse:
        """Execute registration flow.

        Args:
            request: Registration details

        Returns:
            Bearer token and the new user

        Raises:
            ValidationError: If a field is invalid or the email is taken
        """
        with logfire.span("register.execute"):
            user, token = await self.auth_service.register(
                name=request.name,
                email=request.email,
                password=request.password,
                bio=request.bio,
            )
            logfire.info("User registered", user_id=str(user.id))
            return AuthResponse(token=token, user=user_view(user))
