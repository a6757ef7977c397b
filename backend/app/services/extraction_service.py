"""
Metadata Extraction Service - runs when a new blob lands in object storage.

For each storage-change notification the service recovers the file ID from
the storage key, reads the blob, looks the record up, extracts type-specific
metadata and completes the record with one partial update.

Failure policy:
- Foreign keys, other containers and missing records are skipped with a warning.
- Extractor errors never propagate; they become an ``extractionError``
  field on a record that is still marked ``processed``.
- Blob read and record lookup errors propagate from ``on_blob_created``;
  ``process_event`` logs them and moves on to the next record in the batch.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote_plus

from .database import DatabaseInterface
from .metadata_extractors import MetadataExtractorFactory
from .storage import FileStorageInterface
from ..core.logging_config import get_logger
from ..domain.metadata import Degraded, Extracted, ExtractionResult
from ..domain.value_objects import FileStatus
from ..utils.file_utils import extract_file_id

logger = get_logger(__name__)


@dataclass
class NotificationSummary:
    """Per-batch outcome counts."""
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)


def parse_storage_event(event: Dict[str, Any]) -> List[Tuple[str, str]]:
    """
    Read (container, key) pairs from an S3 event notification.

    Keys arrive URL-encoded with '+' for spaces. Records that are not S3
    records are ignored.
    """
    pairs = []
    for record in event.get("Records") or []:
        s3 = record.get("s3") if isinstance(record, dict) else None
        if not s3:
            continue
        bucket = (s3.get("bucket") or {}).get("name", "")
        key = (s3.get("object") or {}).get("key")
        if key:
            pairs.append((bucket, unquote_plus(key)))
    return pairs


class MetadataExtractionService:
    """
    Dispatcher from storage-change notifications to metadata extractors.
    """

    def __init__(
        self,
        storage: FileStorageInterface,
        db_service: DatabaseInterface,
        extractors: Optional[MetadataExtractorFactory] = None
    ):
        """
        Args:
            storage: Object storage adapter the blobs are read from
            db_service: Record store adapter
            extractors: Extractor registry (defaults to PDF, image and text)
        """
        self.storage = storage
        self.db_service = db_service
        self.extractors = extractors or MetadataExtractorFactory()

    def extract_metadata(self, file_bytes: bytes, mime_type: str) -> ExtractionResult:
        """
        Extract metadata for one file. Never raises.

        Args:
            file_bytes: File contents
            mime_type: Declared MIME type of the record

        Returns:
            ``Extracted`` on success or pass-through, ``Degraded`` on extractor failure
        """
        file_size = len(file_bytes)
        extractor = self.extractors.get_extractor(mime_type)
        if extractor is None:
            return Extracted(file_type=mime_type, file_size=file_size)

        try:
            details = extractor.extract(file_bytes)
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"{extractor.format_name} extraction failed ({mime_type}): {reason}")
            return Degraded(file_type=mime_type, file_size=file_size, reason=reason)

        return Extracted(file_type=mime_type, file_size=file_size, details=details)

    async def on_blob_created(self, container_name: str, storage_key: str) -> Optional[ExtractionResult]:
        """
        Handle one storage-change notification.

        Args:
            container_name: Bucket/container the blob was written to
            storage_key: Key of the new blob

        Returns:
            The result written to the record, or None if the notification was skipped

        Raises:
            FileNotFoundError: If the blob cannot be found
            UpstreamFailureError: If storage or the record store fails
        """
        file_id = extract_file_id(storage_key)
        if not file_id:
            logger.warning(f"Skipping {container_name}/{storage_key}: could not extract file ID from key")
            return None

        if container_name != self.storage.container_name:
            logger.warning(
                f"Skipping {container_name}/{storage_key}: not the configured container "
                f"'{self.storage.container_name}'"
            )
            return None

        logger.info(f"Processing {storage_key} from {container_name}")
        file_bytes = await self.storage.get_file(storage_key)

        record = await self.db_service.get_record(file_id)
        if not record:
            logger.warning(f"Skipping {storage_key}: no record for file ID {file_id}")
            return None

        mime_type = record.get("mimeType") or "application/octet-stream"

        # Parsing is CPU-bound; keep it off the event loop
        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(None, self.extract_metadata, file_bytes, mime_type)

        updated = await self.db_service.update_record(file_id, {
            "extractedMetadata": result.to_dict(),
            "status": FileStatus.PROCESSED.value,
        })
        if updated is None:
            logger.warning(f"Record {file_id} was deleted during extraction; result dropped")
            return result

        if isinstance(result, Degraded):
            logger.warning(f"File {file_id} processed with extraction error: {result.reason}")
        else:
            logger.info(f"Successfully processed file {file_id}")
        return result

    async def process_event(self, event: Dict[str, Any]) -> NotificationSummary:
        """
        Handle a batch of S3 event records independently.

        A failure on one record is logged and does not stop the others.
        """
        summary = NotificationSummary()
        for container_name, storage_key in parse_storage_event(event):
            try:
                result = await self.on_blob_created(container_name, storage_key)
            except Exception as e:
                logger.error(f"Error processing {container_name}/{storage_key}: {e}", exc_info=True)
                summary.failed += 1
                summary.errors.append({"key": storage_key, "error": str(e)})
                continue

            if result is None:
                summary.skipped += 1
            else:
                summary.processed += 1

        logger.info(
            f"Notification batch done: {summary.processed} processed, "
            f"{summary.skipped} skipped, {summary.failed} failed"
        )
        return summary
