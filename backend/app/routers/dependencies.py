"""
Shared dependencies for routers.
Provides service initialization and lookup.

Services are built once on startup and shared across all request handlers.
"""
from typing import Optional

from ..core.config import Settings
from ..core.logging_config import get_logger
from ..services.file_service import FileService
from ..services.extraction_service import MetadataExtractionService
from ..services.notifications import StorageEventNotifier
from ..services.registry import ServiceRegistry, create_services
from ..services.storage import FileStorageInterface
from ..services.upload_service import UploadService

logger = get_logger(__name__)

# Global services (will be initialized on startup)
services: Optional[ServiceRegistry] = None
notifier: Optional[StorageEventNotifier] = None


async def initialize_services(settings: Settings):
    """Build storage, record store and business services from settings."""
    global services, notifier

    logger.info("Initializing services...")
    services = await create_services(settings)
    notifier = StorageEventNotifier(settings.notification_mode, services.extraction_service)
    logger.info(f"  → Notification Mode: {settings.notification_mode}")
    logger.info("✅ All services initialized successfully")


async def shutdown_services():
    global services, notifier
    if services is not None:
        await services.close()
    services = None
    notifier = None


def _require_services() -> ServiceRegistry:
    if services is None:
        raise RuntimeError("Services not initialized")
    return services


def get_upload_service() -> UploadService:
    """Get upload service (dependency injection)."""
    return _require_services().upload_service


def get_file_service() -> FileService:
    """Get file service (dependency injection)."""
    return _require_services().file_service


def get_extraction_service() -> MetadataExtractionService:
    """Get metadata extraction service (dependency injection)."""
    return _require_services().extraction_service


def get_storage() -> FileStorageInterface:
    """Get the object storage adapter (dependency injection)."""
    return _require_services().storage


def get_notifier() -> StorageEventNotifier:
    """Get the storage-change notifier (dependency injection)."""
    if notifier is None:
        raise RuntimeError("Notifier not initialized")
    return notifier
