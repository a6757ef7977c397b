"""
File service - read and delete paths for stored files.
"""
from typing import Optional, Tuple

from .database import DatabaseInterface
from .storage import FileStorageInterface
from ..api.exceptions import FileNotFoundInStoreError
from ..core.config import Settings
from ..core.logging_config import get_logger
from ..domain.entities import FileRecord
from ..utils.validators import validate_file_id

logger = get_logger(__name__)


class FileService:
    """
    Looks up file records, issues signed download URLs and deletes files.
    File IDs are syntax-checked before any store is touched.
    """

    def __init__(self, storage: FileStorageInterface, db_service: DatabaseInterface, settings: Settings):
        self.storage = storage
        self.db_service = db_service
        self.settings = settings

    async def get_record(self, file_id: str) -> FileRecord:
        """
        Get a file record.

        Raises:
            BadRequestError: If the ID is malformed
            FileNotFoundInStoreError: If no record exists
        """
        validate_file_id(file_id)

        item = await self.db_service.get_record(file_id)
        if not item:
            raise FileNotFoundInStoreError("File not found")
        return FileRecord.from_dict(item)

    async def get_download_url(self, file_id: str, expires_in: Optional[int] = None) -> Tuple[str, int]:
        """
        Issue a time-limited signed read URL for a file's blob.

        Issued URLs are not tracked and cannot be revoked.

        Returns:
            (url, lifetime in seconds)
        """
        ttl = expires_in or self.settings.download_url_ttl
        record = await self.get_record(file_id)
        url = await self.storage.get_file_url(record.storage_key, expires_in=ttl)
        logger.debug(f"Issued download URL for {file_id} ({ttl}s)")
        return url, ttl

    async def delete_file(self, file_id: str) -> None:
        """
        Delete a file's blob, then its record.

        The two deletes are not transactional; a failure between them leaves
        a record without a blob.
        """
        record = await self.get_record(file_id)

        if not await self.storage.delete_file(record.storage_key):
            logger.warning(f"Blob {record.storage_key} for {file_id} was already missing")

        await self.db_service.delete_record(file_id)
        logger.info(f"Deleted file {file_id}")
