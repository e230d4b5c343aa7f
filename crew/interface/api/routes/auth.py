"""Authentication routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials

from crew.application.usecase.auth import (
    AuthResponse,
    GetCurrentUserUseCase,
    LoginRequest,
    LoginUseCase,
    RegisterRequest,
    RegisterUseCase,
)
from crew.application.view import UserView
from crew.interface.api.envelope import ApiResponse, ok
from crew.interface.api.security import authenticate, bearer_scheme

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    register_use_case: FromDishka[RegisterUseCase],
) -> ApiResponse[AuthResponse]:
    """Create an account and return a bearer token.

    Args:
        request: Name, email, password and optional bio
        register_use_case: Register use case from DI

    Returns:
        Token and the new user
    """
    result = await register_use_case.execute(request)
    return ok(result, "User registered successfully")


@router.post("/login")
async def login(
    request: LoginRequest,
    login_use_case: FromDishka[LoginUseCase],
) -> ApiResponse[AuthResponse]:
    """Log in with email and password."""
    result = await login_use_case.execute(request)
    return ok(result, "Login successful")


@router.get("/me")
async def me(
    get_current_user_use_case: FromDishka[GetCurrentUserUseCase],
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> ApiResponse[UserView]:
    """Return the authenticated user with their groups."""
    user = await authenticate(credentials, get_current_user_use_case, include_groups=True)
    return ok(user)
