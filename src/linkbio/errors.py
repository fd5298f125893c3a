"""Application errors and their HTTP rendering.

Services raise AppError subclasses; the handlers registered in
create_app() turn them into {"error": <message>} JSON responses.
Anything else becomes a generic 500 and is logged with its traceback.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class AppError(Exception):
    """Base class for errors with a client-safe message."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    message = "Bad request"


class AuthenticationError(AppError):
    """Missing, malformed, invalid or expired bearer token."""

    status_code = 401
    message = "Invalid or missing token"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class ConflictError(AppError):
    status_code = 409
    message = "Conflict"


class RateLimitedError(AppError):
    status_code = 429
    message = "Rate limit exceeded. Try again later."


def error_response(
    status_code: int, message: str, headers: dict | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": message}, headers=headers
    )


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return error_response(exc.status_code, exc.message, headers)


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Report the first offending field only; pydantic internals stay server side.
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid":
        return error_response(400, "Request body is not valid JSON")
    # loc starts with where the value came from: body, path or query
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    message = f"Invalid value for '{field}'" if field else "Invalid request"
    return error_response(400, message)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request.unhandled_error",
        method=request.method,
        path=request.url.path,
    )
    return error_response(500, AppError.message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
