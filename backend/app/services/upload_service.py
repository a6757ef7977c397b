"""
Upload Service - Handles file ingest.

The upload workflow:
1. Validate presence, MIME type, size and user metadata (first failure wins)
2. Assign a file ID and derive the storage key
3. Write the blob to object storage
4. Write the file record, then mark it ``processing``

The blob is written before the record and the record before the status
change; extraction is triggered separately by a storage-change notification.

Example Usage:
    service = UploadService(storage, db_service, settings)
    record = await service.ingest(data, "report.pdf", "application/pdf", len(data), '{"author": "Ana"}')
"""
import uuid
from typing import Any, Dict, Optional, Union

from .database import DatabaseInterface
from .storage import FileStorageInterface
from ..api.exceptions import BadRequestError
from ..core.config import Settings
from ..core.logging_config import get_logger
from ..domain.entities import FileRecord
from ..domain.value_objects import FileStatus
from ..utils.file_utils import generate_storage_key
from ..utils.validators import (
    parse_user_metadata,
    validate_file_size,
    validate_file_type,
    validate_user_metadata,
)

logger = get_logger(__name__)


class UploadService:
    """
    Service for handling file uploads.

    Attributes:
        storage: Object storage adapter
        db_service: Record store adapter
        settings: Upload limits and key prefix
    """

    def __init__(self, storage: FileStorageInterface, db_service: DatabaseInterface, settings: Settings):
        self.storage = storage
        self.db_service = db_service
        self.settings = settings

    def validate(
        self,
        file_bytes: Optional[bytes],
        mime_type: Optional[str],
        size_bytes: int,
        user_metadata: Union[str, Dict[str, Any], None]
    ) -> Dict[str, Any]:
        """
        Run upload validation in order; the first failure wins.

        Returns:
            Parsed user metadata

        Raises:
            BadRequestError: On the first failed check
        """
        if file_bytes is None:
            raise BadRequestError("No file uploaded")

        if not validate_file_type(mime_type, self.settings.allowed_mime_types):
            raise BadRequestError(
                "Invalid file type. Allowed types: PDF, Images (JPEG, PNG, GIF, WebP), Text, Word documents"
            )

        if not validate_file_size(size_bytes, self.settings.max_file_size):
            raise BadRequestError(f"File too large. Maximum size is {self.settings.max_file_size_mb}MB")

        if isinstance(user_metadata, dict):
            return validate_user_metadata(user_metadata)
        return parse_user_metadata(user_metadata)

    async def ingest(
        self,
        file_bytes: Optional[bytes],
        original_name: str,
        mime_type: Optional[str],
        size_bytes: Optional[int] = None,
        user_metadata: Union[str, Dict[str, Any], None] = None
    ) -> FileRecord:
        """
        Store an uploaded file and create its record.

        Args:
            file_bytes: File contents (None when the request carried no file)
            original_name: Client-side filename
            mime_type: Declared MIME type
            size_bytes: Declared size (defaults to len(file_bytes))
            user_metadata: Raw ``userMetadata`` JSON text or an already-decoded dict

        Returns:
            The stored record, status ``processing``

        Raises:
            BadRequestError: On validation failure (nothing is written)
            UpstreamFailureError: If object storage or the record store fails
        """
        if size_bytes is None:
            size_bytes = len(file_bytes) if file_bytes is not None else 0
        metadata = self.validate(file_bytes, mime_type, size_bytes, user_metadata)

        file_id = str(uuid.uuid4())
        storage_key = generate_storage_key(original_name, file_id, prefix=self.settings.storage_key_prefix)

        await self.storage.save_bytes(
            storage_key,
            file_bytes,
            mime_type,
            metadata={
                "fileId": file_id,
                "originalName": original_name,
                "uploadedBy": str(metadata.get("author") or "anonymous"),
            }
        )
        logger.info(f"Stored blob {storage_key} ({size_bytes} bytes, {mime_type})")

        record = FileRecord.new(
            file_id=file_id,
            original_name=original_name,
            mime_type=mime_type,
            size_bytes=size_bytes,
            storage_key=storage_key,
            storage_container=self.storage.container_name,
            user_metadata=metadata,
        )
        try:
            await self.db_service.put_record(record.to_dict())
        except Exception:
            # No compensating delete: the blob stays orphaned
            logger.error(f"Record write failed for {file_id}; blob {storage_key} has no record", exc_info=True)
            raise

        await self.db_service.update_record(file_id, {"status": FileStatus.PROCESSING.value})
        record.status = FileStatus.PROCESSING

        logger.info(f"Upload {file_id} recorded, awaiting extraction")
        return record

