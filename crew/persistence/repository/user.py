"""PostgreSQL implementation of User repository."""

from typing import List, Optional, Sequence

import logfire
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from crew.domain.model import User
from crew.domain.repository.user import UserRepository
from crew.domain.value import Email, UserId
from crew.persistence.mappers import row_to_user, user_to_dict
from crew.persistence.repository.common import like_pattern
from crew.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _search_filter(self, search: Optional[str]):
        if not search:
            return None
        pattern = like_pattern(search)
        return or_(
            users_table.c.name.ilike(pattern, escape="\\"),
            users_table.c.email.ilike(pattern, escape="\\"),
        )

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        with logfire.span("user_repository.find_by_id", user_id=str(user_id)):
            stmt = select(users_table).where(users_table.c.id == user_id)
            result = await self.session.execute(stmt)
            row = result.fetchone()
            return row_to_user(row._asdict()) if row else None

    async def find_by_ids(self, user_ids: Sequence[UserId]) -> List[User]:
        """Find several users at once."""
        if not user_ids:
            return []
        stmt = select(users_table).where(users_table.c.id.in_(list(user_ids)))
        result = await self.session.execute(stmt)
        return [row_to_user(row._asdict()) for row in result.fetchall()]

    async def find_by_email(self, email: Email) -> Optional[User]:
        """Find a user by normalized email."""
        with logfire.span("user_repository.find_by_email"):
            stmt = select(users_table).where(users_table.c.email == str(email))
            result = await self.session.execute(stmt)
            row = result.fetchone()
            return row_to_user(row._asdict()) if row else None

    async def save(self, user: User) -> User:
        """Save a user (create or update)."""
        with logfire.span("user_repository.save", user_id=str(user.id)):
            user_dict = user_to_dict(user)
            exists = await self.session.execute(
                select(users_table.c.id).where(users_table.c.id == user.id)
            )

            if exists.fetchone():
                stmt = (
                    users_table.update()
                    .where(users_table.c.id == user.id)
                    .values(**user_dict)
                )
            else:
                logfire.info("Inserting new user", user_id=str(user.id))
                stmt = users_table.insert().values(**user_dict)

            await self.session.execute(stmt)
            return user

    async def delete(self, user_id: UserId) -> None:
        """Hard delete a user row."""
        with logfire.span("user_repository.delete", user_id=str(user_id)):
            await self.session.execute(
                delete(users_table).where(users_table.c.id == user_id)
            )

    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[User]:
        """List users newest first with an optional name/email filter."""
        with logfire.span(
            "user_repository.search", search=search, limit=limit, offset=offset
        ):
            stmt = select(users_table)
            condition = self._search_filter(search)
            if condition is not None:
                stmt = stmt.where(condition)
            stmt = (
                stmt.order_by(users_table.c.created_at.desc()).limit(limit).offset(offset)
            )
            result = await self.session.execute(stmt)
            return [row_to_user(row._asdict()) for row in result.fetchall()]

    async def count(self, search: Optional[str] = None) -> int:
        """Count users matching an optional name/email filter."""
        stmt = select(func.count()).select_from(users_table)
        condition = self._search_filter(search)
        if condition is not None:
            stmt = stmt.where(condition)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def count_active(self) -> int:
        """Count active users."""
        stmt = (
            select(func.count())
            .select_from(users_table)
            .where(users_table.c.is_active.is_(True))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0
