"""Bearer token authentication for routes."""

from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from crew.application.usecase.auth import GetCurrentUserRequest, GetCurrentUserUseCase
from crew.application.view import UserView
from crew.domain.error import NotAuthenticatedError

# auto_error=False so a missing header reaches our 401 envelope instead of 403
bearer_scheme = HTTPBearer(auto_error=False)


async def authenticate(
    credentials: HTTPAuthorizationCredentials | None,
    get_current_user_use_case: GetCurrentUserUseCase,
    include_groups: bool = False,
) -> UserView:
    """Resolve the user behind an Authorization: Bearer header.

    Raises:
        NotAuthenticatedError: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthenticatedError("Not authorized, no token")

    return await get_current_user_use_case.execute(
        GetCurrentUserRequest(token=credentials.credentials, include_groups=include_groups)
    )
