"""In-memory user repository for testing."""

from typing import List, Optional, Sequence

from crew.domain.model import User
from crew.domain.repository.user import UserRepository
from crew.domain.value import Email, UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    def _matching(self, search: Optional[str]) -> List[User]:
        users = list(self._users.values())
        if search:
            needle = search.lower()
            users = [
                u
                for u in users
                if needle in u.name.lower() or needle in str(u.email).lower()
            ]
        users.sort(key=lambda u: u.created_at, reverse=True)
        return users

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return self._users.get(user_id)

    async def find_by_ids(self, user_ids: Sequence[UserId]) -> List[User]:
        return [self._users[uid] for uid in user_ids if uid in self._users]

    async def find_by_email(self, email: Email) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def save(self, user: User) -> User:
        self._users[user.id] = user
        return user

    async def delete(self, user_id: UserId) -> None:
        self._users.pop(user_id, None)

    async def search(
        self, search: Optional[str] = None, limit: int = 10, offset: int = 0
    ) -> List[User]:
        return self._matching(search)[offset : offset + limit]

    async def count(self, search: Optional[str] = None) -> int:
        return len(self._matching(search))

    async def count_active(self) -> int:
        return sum(1 for u in self._users.values() if u.is_active)
