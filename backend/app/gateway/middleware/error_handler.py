"""
Error Handling

Every failure leaves the API in the same envelope:

    {"success": false, "error": "...", "statusCode": 400, "timestamp": "...", "path": "/upload"}

Business exceptions, HTTP exceptions (including unknown routes), request
validation errors and rate-limit rejections are turned into the envelope by
exception handlers; anything else is caught by ``ErrorHandlingMiddleware``
and reported as a 500.
"""
from datetime import datetime, timezone

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ...api.dto import ErrorResponseDTO
from ...api.exceptions import (
    BadRequestError,
    FileNotFoundInStoreError,
    UpstreamFailureError,
    handle_business_exception,
)
from ...core.logging_config import get_logger

logger = get_logger(__name__)


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Build the error envelope for a request."""
    body = ErrorResponseDTO(
        error=message,
        statusCode=status_code,
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=request.url.path,
    )
    headers = {}
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        headers["X-Request-ID"] = request_id
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


async def business_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exception = handle_business_exception(exc)
    if isinstance(exc, UpstreamFailureError):
        logger.error(f"Upstream failure for {request.method} {request.url.path}: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {http_exception.detail}")
    return error_response(request, http_exception.status_code, http_exception.detail)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.debug(f"HTTP exception for {request.method} {request.url.path}: {exc.status_code} - {exc.detail}")
    return error_response(request, exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for item in exc.errors():
        location = ".".join(str(p) for p in item.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
    message = "; ".join(parts) or "Invalid request"
    logger.warning(f"Validation error for {request.method} {request.url.path}: {message}")
    return error_response(request, status.HTTP_400_BAD_REQUEST, message)


def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.method} {request.url.path}: {exc.detail}")
    return error_response(request, status.HTTP_429_TOO_MANY_REQUESTS, f"Rate limit exceeded: {exc.detail}")


def register_exception_handlers(app: FastAPI):
    """Install the envelope-producing exception handlers on an app."""
    for exc_class in (BadRequestError, FileNotFoundInStoreError, UpstreamFailureError):
        app.add_exception_handler(exc_class, business_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Last line of defence: unexpected exceptions become a 500 envelope.

    Exception details are logged, never returned to the client.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unexpected error for {request.method} {request.url.path}: {e}", exc_info=True)
            return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
