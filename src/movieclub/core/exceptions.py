"""Domain exceptions and exception handlers with request_id in responses."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.movieclub.core.logging import get_logger

logger = get_logger(__name__)


class NotFoundError(LookupError):
    """Requested entity does not exist."""


class ConflictError(ValueError):
    """Entity collides with an existing one (duplicate key)."""


class InvalidOperationError(ValueError):
    """Request is well-formed but not allowed in the current state."""


class ForbiddenError(PermissionError):
    """Caller is authenticated but not allowed to perform the operation."""


class AccountNotActiveError(PermissionError):
    """Credentials are valid but the account cannot sign in yet."""

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.code = code


def _format_validation_errors(exc: RequestValidationError) -> tuple[str, list[dict[str, Any]]]:
    """Flatten pydantic errors into a readable message plus a compact list."""
    errors: list[dict[str, Any]] = []
    for error in exc.errors():
        # Drop the "body"/"query"/"path" prefix from locations
        loc = [str(part) for part in error.get("loc", ())[1:]]
        msg = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        errors.append({"loc": loc, "msg": msg, "type": error.get("type")})

    if not errors:
        return "Invalid request", errors

    first = errors[0]
    detail = f"{'.'.join(first['loc'])}: {first['msg']}" if first["loc"] else first["msg"]
    return detail, errors


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Invalid input is reported as 400 across the API
        detail, errors = _format_validation_errors(exc)
        return JSONResponse(
            status_code=400,
            content={
                "detail": detail,
                "errors": errors,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(AccountNotActiveError)
    async def account_not_active_handler(
        request: Request, exc: AccountNotActiveError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=403,
            content={
                "detail": str(exc),
                "code": exc.code,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
