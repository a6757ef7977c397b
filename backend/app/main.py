"""
Application factory.

``create_app`` wires the gateway, middleware and routers around one
``Settings`` value; services are built on startup and closed on shutdown.
"""
import sys
from typing import Optional

from fastapi import FastAPI

from .core.config import Settings
from .core.logging_config import get_logger, setup_logging
from .gateway import APIGateway
from .routers import files, notifications
from .routers.dependencies import initialize_services, shutdown_services

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for the given settings (defaults to the environment)."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, enable_file_logging=settings.log_file_enabled)

    gateway = APIGateway(settings)
    gateway.setup_middleware()
    gateway.register_router(files.router, tags=["Files"])
    gateway.register_router(notifications.router, tags=["Notifications"])
    gateway.register_health_endpoints()

    app = gateway.get_app()

    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup."""
        logger.info("=" * 60)
        logger.info("Starting File Metadata Service...")
        logger.info("=" * 60)
        logger.info(f"  → Python Version: {sys.version.split()[0]}")
        logger.info(f"  → Environment: {settings.environment}")
        logger.info(f"  → Docs URL: {app.docs_url if app.docs_url else 'Disabled (production)'}")
        logger.info(f"  → Max Upload Size: {settings.max_file_size_mb}MB")
        logger.info(f"  → Rate Limiting: {settings.rate_limit_per_minute}/minute "
                    f"({'enabled' if settings.rate_limit_enabled else 'disabled'})")

        await initialize_services(settings)

        logger.info("=" * 60)
        logger.info("✅ File Metadata Service initialized successfully")
        logger.info("=" * 60)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        logger.info("Shutting down File Metadata Service...")
        await shutdown_services()
        logger.info("File Metadata Service shutdown complete")

    return app


app = create_app()
