"""User aggregate root.

Users register with an email and password. Group memberships are not stored
on the user; they are derived from group member lists.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from crew.domain.model.common import DomainModel, utc_now
from crew.domain.value import Email, UserId


class User(DomainModel):
    """User aggregate root."""

    id: UserId
    name: str = Field(min_length=2, max_length=50)
    email: Email
    password_hash: str
    bio: Optional[str] = Field(default=None, max_length=200)
    is_admin: bool = False
    is_active: bool = True  # Inactive users cannot log in
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
