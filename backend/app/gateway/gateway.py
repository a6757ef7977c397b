"""
API Gateway

Main gateway class that orchestrates middleware, error envelopes, rate
limiting and the health endpoints. Acts as the single entry point for all
API requests.
"""
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from ..api.dto import HealthResponseDTO
from ..core.config import Settings
from ..core.logging_config import get_logger
from .middleware import (
    ErrorHandlingMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)

logger = get_logger(__name__)


class APIGateway:
    """
    API Gateway that manages routing, middleware and health checks.

    Responsibilities:
    - Initialize FastAPI application
    - Register middleware (CORS, rate limiting, logging, error handling)
    - Register routers
    - Provide health check endpoints
    """

    def __init__(
        self,
        settings: Settings,
        title: str = "File Metadata Service",
        description: str = "File upload with asynchronous metadata extraction",
        enable_docs: Optional[bool] = None
    ):
        self.settings = settings
        self.title = title
        self.version = settings.app_version
        self.enable_docs = enable_docs if enable_docs is not None else not settings.is_production

        self.app = FastAPI(
            title=title,
            description=description,
            version=self.version,
            docs_url="/docs" if self.enable_docs else None,
            redoc_url="/redoc" if self.enable_docs else None
        )

        # Default limit applies to every route through SlowAPIMiddleware
        self.limiter = Limiter(
            key_func=get_remote_address,
            default_limits=[f"{settings.rate_limit_per_minute}/minute"],
            enabled=settings.rate_limit_enabled
        )
        self.app.state.limiter = self.limiter
        register_exception_handlers(self.app)

        logger.info("API Gateway initialized")

    def setup_middleware(self):
        """Configure all middleware. The last one added runs first."""
        logger.info("Setting up middleware...")

        self.app.add_middleware(ErrorHandlingMiddleware)
        logger.debug("  → Error handling middleware added")

        self.app.add_middleware(SlowAPIMiddleware)
        logger.debug(f"  → Rate limiting middleware added (enabled: {self.settings.rate_limit_enabled})")

        self.app.add_middleware(
            RequestLoggingMiddleware,
            skip_paths=["/health", "/ready", "/docs", "/redoc", "/openapi.json"]
        )
        logger.debug("  → Request logging middleware added")

        self.app.add_middleware(RequestIDMiddleware)
        logger.debug("  → Request ID middleware added")

        cors_origins = list(self.settings.cors_origins)
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials="*" not in cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.debug(f"  → CORS middleware added (origins: {', '.join(cors_origins)})")

        logger.info("✅ All middleware configured")

    def register_router(self, router: APIRouter, prefix: str = "", tags: Optional[List[str]] = None):
        """
        Register a router with the gateway.

        Args:
            router: FastAPI router instance
            prefix: URL prefix for the router
            tags: OpenAPI tags for documentation
        """
        self.app.include_router(router, prefix=prefix, tags=tags or [])
        logger.info(f"Registered router at prefix '{prefix}'")

    def register_health_endpoints(self):
        """Register health check endpoints."""

        @self.app.get("/health", response_model=HealthResponseDTO)
        async def health_check():
            """Liveness check. Touches no backing service."""
            return HealthResponseDTO(
                status="healthy",
                timestamp=datetime.now(timezone.utc).isoformat(),
                version=self.version
            )

        @self.app.get("/ready")
        async def readiness_check():
            """Readiness check. Ready once startup has built the services."""
            from ..routers.dependencies import services
            if services is None:
                logger.warning("Readiness check failed: services not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"ready": False, "reason": "Services not initialized"}
                )
            return {"ready": True}

        logger.info("Health check endpoints registered")

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self.app
