"""
Request Logging Middleware

Logs all incoming requests and responses with timing information.
"""
import time
from typing import Callable, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...core.logging_config import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs all HTTP requests and responses.

    Skips health check endpoints to reduce noise.
    """

    def __init__(self, app, skip_paths: Optional[List[str]] = None):
        """
        Args:
            app: ASGI application
            skip_paths: Path prefixes not to log (e.g., ["/health", "/ready"])
        """
        super().__init__(app)
        self.skip_paths = skip_paths or ["/health", "/ready", "/docs", "/redoc", "/openapi.json"]

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if any(request.url.path.startswith(path) for path in self.skip_paths):
            return await call_next(request)

        request_id = getattr(request.state, "request_id", None)
        request_id_str = f" [{request_id}]" if request_id else ""

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(f"→ {method} {path}{request_id_str}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(f"❌ {method} {path} → Exception after {duration_ms:.2f}ms{request_id_str}: {e}")
            raise

        duration_ms = (time.time() - start_time) * 1000
        status_code = response.status_code
        status_emoji = "✅" if 200 <= status_code < 300 else "⚠️" if 400 <= status_code < 500 else "❌"
        logger.info(f"{status_emoji} {method} {path} → {status_code} ({duration_ms:.2f}ms){request_id_str}")
        return response
