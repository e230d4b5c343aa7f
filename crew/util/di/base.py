"""Provider base class."""

from typing import ClassVar, Literal

from dishka import Provider

# Components with a swappable in-memory implementation
Component = Literal["persistence"]


class ProviderBase(Provider):
    """Base for every provider in PROVIDERS.

    A provider with subclasses is a mockable component: its subclasses are
    the production and mock implementations, told apart by __is_mock__.

    Attributes:
        __mock_component__: Component name, None for concrete providers
        __is_mock__: Whether this implementation is the in-memory one
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
