"""Get current user use case."""

from pydantic import BaseModel

from crew.application.view import UserView, user_view
from crew.domain.service import AuthService, GroupService


class GetCurrentUserRequest(BaseModel):
    """Get current user request."""

    token: str  # JWT bearer token
    include_groups: bool = False


class GetCurrentUserUseCase:
    """Use case for resolving the authenticated user from a token.

    Routes call this first to authenticate every protected request.
    """

    def __init__(self, auth_service: AuthService, group_service: GroupService) -> None:
        """Initialize get current user use case.

        Args:
            auth_service: Authentication domain service
            group_service: Group domain service
        """
        self.auth_service = auth_service
        self.group_service = group_service

    async def execute(self, request: GetCurrentUserRequest) -> UserView:
        """Execute get current user flow.

        Args:
            request: Request with JWT token

        Returns:
            The user, with group summaries if requested

        Raises:
            NotAuthenticatedError: If the token is invalid or the user is
                missing or inactive
        """
        user = await self.auth_service.authenticate(request.token)

        groups = []
        if request.include_groups:
            groups = await self.group_service.list_for_user(user.id)

        return user_view(user, groups)
