"""Production container assembly."""

import logfire
from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from crew.util.di import PROVIDERS, get_provider


def create_container(*extra: Provider) -> AsyncContainer:
    """Build the container from the production implementation of every provider.

    FastapiProvider is always included so request-scoped use cases can be
    resolved inside route handlers.

    Args:
        extra: Additional providers appended after the production ones
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    logfire.debug(
        "Building DI container",
        providers=[type(p).__name__ for p in providers],
    )
    return make_async_container(*providers, FastapiProvider(), *extra)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app and close it on shutdown."""
    setup_dishka(container, app)
