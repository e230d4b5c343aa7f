"""Test configuration and fixtures."""

import os

# Must be set before Settings is first instantiated
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__JWT_SECRET", "test-secret")
os.environ.setdefault("AUTH__BCRYPT_ROUNDS", "4")

from datetime import datetime, timedelta  # noqa: E402
from uuid import UUID, uuid4  # noqa: E402

import logfire  # noqa: E402

from crew.domain.model import Event, Group, User  # noqa: E402
from crew.domain.model.common import utc_now  # noqa: E402
from crew.domain.repository import EventRepository  # noqa: E402
from crew.domain.service import EventService, GroupService, UserService  # noqa: E402
from crew.domain.value import Email, EventLocation, UserId  # noqa: E402
from crew.util.password import hash_password  # noqa: E402

logfire.configure(send_to_logfire=False, console=False)

TEST_PASSWORD = "password123"


async def make_user(
    user_service: UserService,
    name: str = "Alice",
    email: str | None = None,
    is_admin: bool = False,
    is_active: bool = True,
) -> User:
    """Helper to save a user with TEST_PASSWORD as password."""
    if email is None:
        email = f"{name.lower().replace(' ', '')}.{uuid4().hex[:6]}@example.com"
    user = User(
        id=UserId(uuid4()),
        name=name,
        email=Email(email),
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
        is_admin=is_admin,
        is_active=is_active,
    )
    return await user_service.save(user)


async def make_group(
    group_service: GroupService, admin: User, *members: User, **kwargs
) -> Group:
    """Helper to create a group run by admin and joined by members."""
    group = await group_service.create_group(
        name=kwargs.pop("name", f"{admin.name}'s crew"), admin_id=admin.id, **kwargs
    )
    for member in members:
        group = await group_service.join(str(group.invite_code), member.id)
    return group


async def make_event(
    event_service: EventService,
    group: Group,
    organizer: User,
    starts_in: timedelta = timedelta(days=2),
    **kwargs,
) -> Event:
    """Helper to create an event starting starts_in from now."""
    return await event_service.create_event(
        title=kwargs.pop("title", "Board games"),
        date_time=utc_now() + starts_in,
        location=kwargs.pop("location", EventLocation(name="Alice's place")),
        group_id=group.id,
        organizer_id=organizer.id,
        **kwargs,
    )


async def move_event(
    event_repository: EventRepository, event: Event, date_time: datetime
) -> Event:
    """Reschedule an event directly in storage, bypassing the future-date rule.

    Lets tests put events in the past.
    """
    stored = await event_repository.find_by_id(event.id)
    assert stored is not None
    return await event_repository.save(stored.model_copy(update={"date_time": date_time}))


def register(
    client, name: str, email: str, password: str = TEST_PASSWORD
) -> tuple[str, dict]:
    """Register through the API and return (token, user data)."""
    response = client.post(
        "/auth/register", json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return data["token"], data["user"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def promote_to_admin(container, user_id) -> None:
    """Grant platform admin rights to a user stored in a test container."""
    async with container() as request_container:
        user_service = await request_container.get(UserService)
        user = await user_service.get_by_id(UserId(UUID(str(user_id))))
        await user_service.update_user(user, {"is_admin": True})
