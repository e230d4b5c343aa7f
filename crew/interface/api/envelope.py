"""Response envelope shared by every route."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Body of every API response.

    Errors carry success=False, a message and no data.
    """

    success: bool = True
    message: str | None = None
    data: T | None = None


def ok(data: T | None = None, message: str | None = None) -> ApiResponse[T]:
    return ApiResponse(success=True, message=message, data=data)
