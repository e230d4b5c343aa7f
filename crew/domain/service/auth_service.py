"""Authentication domain service.

Handles credential checks for email/password accounts and bearer token
authentication.
"""

from uuid import UUID, uuid4

import logfire
from pydantic import ValidationError as PydanticValidationError

from crew.config import AuthSettings
from crew.domain.error import NotAuthenticatedError, ValidationError
from crew.domain.model import User
from crew.domain.value import Email, UserId
from crew.util.jwt import JWTError
from crew.util.password import hash_password, verify_password

from .base import Service
from .jwt_service import JWTService
from .user_service import UserService


class AuthService(Service):
    """Domain service for registration, login and token authentication."""

    def __init__(
        self,
        user_service: UserService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize auth service.

        Args:
            user_service: User domain service
            jwt_service: JWT token domain service
            auth_settings: Authentication settings
        """
        self.user_service = user_service
        self.jwt_service = jwt_service
        self.auth_settings = auth_settings

    async def create_user(
        self,
        name: str,
        email: str,
        password: str,
        bio: str | None = None,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> User:
        """Validate credentials and create a user with a hashed password.

        Args:
            name: Display name
            email: Email address (unique, case-insensitive)
            password: Plain-text password
            bio: Optional bio
            is_admin: Grant platform admin rights
            is_active: Whether the account may log in

        Returns:
            Created user

        Raises:
            ValidationError: If any field is invalid or the email is taken
        """
        name = name.strip()
        if len(name) < self.auth_settings.min_name_length:
            raise ValidationError(
                f"Name must be at least {self.auth_settings.min_name_length} characters"
            )
        if len(password) < self.auth_settings.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.auth_settings.min_password_length} characters"
            )
        if bio is not None and len(bio) > 200:
            raise ValidationError("Bio cannot exceed 200 characters")

        try:
            normalized = Email(email)
        except PydanticValidationError:
            raise ValidationError("Please provide a valid email")

        with logfire.span("auth_service.create_user", email_domain=str(normalized).split("@")[-1]):
            if await self.user_service.find_by_email(normalized):
                logfire.warn("Registration rejected, email exists")
                raise ValidationError("User already exists with this email")

            user = User(
                id=UserId(uuid4()),
                name=name,
                email=normalized,
                password_hash=hash_password(password, self.auth_settings.bcrypt_rounds),
                bio=bio,
                is_admin=is_admin,
                is_active=is_active,
            )
            saved = await self.user_service.save(user)
            logfire.info("User created", user_id=str(saved.id), is_admin=is_admin)
            return saved

    async def register(
        self, name: str, email: str, password: str, bio: str | None = None
    ) -> tuple[User, str]:
        """Register a new account and issue a token.

        Returns:
            Tuple of (user, JWT token)
        """
        user = await self.create_user(name, email, password, bio)
        return user, self.issue_token(user)

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and issue a token.

        Args:
            email: Email address
            password: Plain-text password

        Returns:
            Tuple of (user, JWT token)

        Raises:
            NotAuthenticatedError: On unknown email, wrong password or
                deactivated account
        """
        with logfire.span("auth_service.login"):
            try:
                user = await self.user_service.find_by_email(Email(email))
            except PydanticValidationError:
                user = None

            if not user or not verify_password(password, user.password_hash):
                logfire.warn("Login failed, invalid credentials")
                raise NotAuthenticatedError("Invalid credentials")

            if not user.is_active:
                logfire.warn("Login rejected, account inactive", user_id=str(user.id))
                raise NotAuthenticatedError("Account is deactivated")

            logfire.info("User logged in", user_id=str(user.id))
            return user, self.issue_token(user)

    def issue_token(self, user: User) -> str:
        return self.jwt_service.create_token(str(user.id), str(user.email))

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to an active user.

        Raises:
            NotAuthenticatedError: If the token is invalid or expired, or the
                user no longer exists or is inactive
        """
        try:
            payload = self.jwt_service.verify_token(token)
            user_id = UserId(UUID(payload.user_id))
        except (JWTError, ValueError) as e:
            raise NotAuthenticatedError(str(e) or "Invalid token")

        user = await self.user_service.find_by_id(user_id)
        if not user:
            raise NotAuthenticatedError("User not found")
        if not user.is_active:
            raise NotAuthenticatedError("Account is deactivated")
        return user
