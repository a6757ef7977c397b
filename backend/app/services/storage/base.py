"""
Abstract base class for object storage adapters.
All storage implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class FileStorageInterface(ABC):
    """
    Abstract interface for object storage operations.
    All storage adapters must implement these methods.
    This allows plug-and-play storage support (S3, local) without changing business logic.
    """

    @property
    @abstractmethod
    def container_name(self) -> str:
        """Name of the bucket/container blobs are written to."""
        pass

    @abstractmethod
    async def save_bytes(
        self,
        file_path: str,
        data: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> str:
        """
        Write a blob to storage.

        Args:
            file_path: Storage key
            data: File contents
            content_type: MIME type stored with the blob
            metadata: Small string map attached to the blob

        Returns:
            Storage key where the blob was saved
        """
        pass

    @abstractmethod
    async def get_file(self, file_path: str) -> bytes:
        """
        Retrieve a blob from storage.

        Raises:
            FileNotFoundError: If no blob exists under the key
        """
        pass

    @abstractmethod
    async def delete_file(self, file_path: str) -> bool:
        """
        Delete a blob from storage.

        Returns:
            True if the blob was deleted, False if not found
        """
        pass

    @abstractmethod
    async def file_exists(self, file_path: str) -> bool:
        """Check if a blob exists in storage."""
        pass

    @abstractmethod
    async def get_file_metadata(self, file_path: str) -> Optional[Dict[str, Any]]:
        """
        Head a blob without reading it.

        Returns:
            Dict with size, contentType, lastModified, etag and metadata,
            or None if not found
        """
        pass

    @abstractmethod
    async def get_file_url(self, file_path: str, expires_in: int = 3600) -> str:
        """
        Issue a time-limited signed read URL for a blob.

        Args:
            file_path: Storage key
            expires_in: URL lifetime in seconds
        """
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize storage (verify buckets/directories, connections, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Close storage connection (cleanup, close clients, etc.)."""
        pass
