"""Exception handlers mapping errors onto the response envelope."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from crew.domain.error import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotAuthenticatedError,
    NotFoundError,
    ValidationError,
)
from crew.interface.api.envelope import ApiResponse
from crew.persistence.database import RequestTransaction

STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = ApiResponse[None](success=False, message=message)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def _mark_rollback_only(request: Request) -> None:
    """Keep writes made before a handled error from being committed."""
    container = getattr(request.state, "dishka_container", None)
    if container is None:
        return
    transaction = await container.get(RequestTransaction)
    transaction.mark_rollback_only()


def _describe_errors(errors: list[dict]) -> str:
    """Flatten pydantic error dicts into one readable message."""
    parts = []
    for error in errors:
        loc = ".".join(
            str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")
        )
        msg = error.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    await _mark_rollback_only(request)
    status_code = next(
        (code for error_type, code in STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    logfire.info(
        "Request rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=status_code,
        error=str(exc),
    )
    return _error_response(status_code, str(exc))


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = _describe_errors(list(exc.errors()))
    logfire.info("Invalid request", path=request.url.path, error=message)
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def handle_model_validation_error(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """Domain models reject invalid state with pydantic errors."""
    await _mark_rollback_only(request)
    message = _describe_errors(list(exc.errors()))
    logfire.info("Invalid data", path=request.url.path, error=message)
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    await _mark_rollback_only(request)
    return _error_response(exc.status_code, str(exc.detail))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logfire.error(
        "Unhandled error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        _exc_info=exc,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(PydanticValidationError, handle_model_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
