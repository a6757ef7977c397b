"""
File Storage Factory for creating storage adapters.
Implements Factory Pattern for plug-and-play storage support.
"""
from pathlib import Path

from .base import FileStorageInterface
from .local_storage import LocalFileStorage
from .s3_storage import S3FileStorage
from ...core.config import Settings
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class FileStorageFactory:
    """
    Factory for creating object storage adapters.
    Supports multiple storage backends: S3 and local filesystem.
    """

    @staticmethod
    def create(settings: Settings) -> FileStorageInterface:
        """
        Create a storage adapter instance.

        Args:
            settings: Application settings (``storage_type`` selects the backend)

        Returns:
            FileStorageInterface instance

        Examples:
            storage = FileStorageFactory.create(Settings(storage_type="s3", s3_bucket="my-bucket"))
        """
        storage_type = settings.storage_type.lower()

        if storage_type == "local":
            return FileStorageFactory._create_local(settings)
        elif storage_type == "s3":
            return FileStorageFactory._create_s3(settings)
        else:
            raise ValueError(
                f"Unsupported storage type: {storage_type}. "
                f"Supported types: 'local', 's3'"
            )

    @staticmethod
    def _create_local(settings: Settings) -> LocalFileStorage:
        """Create local filesystem storage adapter."""
        return LocalFileStorage(
            base_dir=Path(settings.local_storage_dir),
            signing_secret=settings.local_url_secret,
            container=settings.s3_bucket
        )

    @staticmethod
    def _create_s3(settings: Settings) -> S3FileStorage:
        """Create S3 storage adapter."""
        if not settings.s3_bucket:
            raise ValueError("S3 bucket name is required")

        return S3FileStorage(
            bucket_name=settings.s3_bucket,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url
        )

    @staticmethod
    async def create_and_initialize(settings: Settings) -> FileStorageInterface:
        """
        Create storage adapter and initialize it.

        Args:
            settings: Application settings

        Returns:
            Initialized FileStorageInterface instance
        """
        storage = FileStorageFactory.create(settings)
        await storage.initialize()
        return storage
