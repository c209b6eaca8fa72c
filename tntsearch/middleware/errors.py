"""Error handling middleware."""

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import (
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from tntsearch.core.exceptions import QueryExecutionFailure
from tntsearch.core.logging import get_logger

logger = get_logger(__name__)

# Map exception types to status codes (None means use exception's status_code)
ErrorMapping = dict[type[Exception], int | None]

ERROR_MAPPING: ErrorMapping = {
    ValueError: HTTP_422_UNPROCESSABLE_ENTITY,
    RequestValidationError: HTTP_422_UNPROCESSABLE_ENTITY,
    QueryExecutionFailure: None,
    HTTPException: None,
}

# Store details stay in the logs; clients only learn the query failed.
DATABASE_ERROR_MESSAGE = "Database error"


def get_error_detail(exc: Exception) -> tuple[str, int]:
    """Get error detail and status code from exception."""
    if isinstance(exc, HTTPException):
        return str(exc.detail), exc.status_code
    if isinstance(exc, QueryExecutionFailure):
        return DATABASE_ERROR_MESSAGE, exc.status_code
    if isinstance(exc, RequestValidationError):
        return str(exc.errors()), HTTP_422_UNPROCESSABLE_ENTITY

    mapped_status = ERROR_MAPPING.get(type(exc))
    status_code = (
        mapped_status
        if mapped_status is not None
        else getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
    )
    detail = str(exc.args[0] if exc.args else exc)
    return detail, status_code


def create_error_response(
    error_type: str,
    detail: str,
    status_code: int,
    correlation_id: str | None,
) -> JSONResponse:
    """Create JSON error response with optional correlation ID."""
    response = JSONResponse(
        status_code=status_code,
        content={
            "error": error_type,
            "message": detail,
            "status_code": status_code,
            "correlation_id": correlation_id if correlation_id else "unknown",
        },
    )
    if correlation_id:
        response.headers["X-Request-ID"] = correlation_id
    return response


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle any exception and return a JSON response.

    Args:
    ----
        request: The request that caused the exception
        exc: The exception to handle

    Returns:
    -------
        A JSON response with error details
    """
    correlation_id = getattr(request.state, "correlation_id", None)
    error_type = exc.__class__.__name__
    detail, status_code = get_error_detail(exc)

    logger.error(
        "request_error",
        error_type=error_type,
        # Log the store's own message, not the generic one sent to clients.
        error_message=str(exc) if status_code >= 500 else detail,
        status_code=status_code,
        path=request.url.path,
        method=request.method,
        correlation_id=correlation_id,
    )
    return create_error_response(error_type, detail, status_code, correlation_id)


def register_exception_handlers(app: FastAPI) -> None:
    """Route the mapped exception types through ``handle_exception``."""
    for exc_type in ERROR_MAPPING:
        app.add_exception_handler(exc_type, handle_exception)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn exceptions escaping the routes into JSON error responses."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and handle errors.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers or error response
        """
        try:
            return await call_next(request)
        except Exception as exc:
            return await handle_exception(request, exc)
