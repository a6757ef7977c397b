"""
Service registry - builds every service from one Settings value.

Used by the HTTP app at startup, by the Lambda entry point and by the
Celery worker, so all three wire the same components the same way.
"""
from dataclasses import dataclass
from typing import Optional

from .database import DatabaseFactory, DatabaseInterface
from .extraction_service import MetadataExtractionService
from .file_service import FileService
from .metadata_extractors import MetadataExtractorFactory
from .storage import FileStorageFactory, FileStorageInterface
from .upload_service import UploadService
from ..core.config import Settings
from ..core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ServiceRegistry:
    settings: Settings
    storage: FileStorageInterface
    db_service: DatabaseInterface
    upload_service: UploadService
    file_service: FileService
    extraction_service: MetadataExtractionService

    async def close(self):
        await self.db_service.close()
        await self.storage.close()


async def create_services(
    settings: Settings,
    storage: Optional[FileStorageInterface] = None,
    db_service: Optional[DatabaseInterface] = None
) -> ServiceRegistry:
    """
    Create and initialize all services.

    Args:
        settings: Application settings
        storage: Pre-built storage adapter (skips the factory; not re-initialized)
        db_service: Pre-built record store adapter (skips the factory; not re-initialized)
    """
    if storage is None:
        logger.info(f"  → Storage Backend: {settings.storage_type.upper()}")
        storage = await FileStorageFactory.create_and_initialize(settings)
    if db_service is None:
        logger.info(f"  → Database Backend: {settings.database_type.upper()}")
        db_service = await DatabaseFactory.create_and_initialize(settings)

    extractors = MetadataExtractorFactory(text_limit=settings.text_excerpt_limit)

    return ServiceRegistry(
        settings=settings,
        storage=storage,
        db_service=db_service,
        upload_service=UploadService(storage, db_service, settings),
        file_service=FileService(storage, db_service, settings),
        extraction_service=MetadataExtractionService(storage, db_service, extractors),
    )
