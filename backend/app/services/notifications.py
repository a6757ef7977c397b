"""
Storage-change notification fan-out.

S3 emits its own ObjectCreated events; other setups need the API to raise
the notification itself after an upload.

Modes:
- external: do nothing, the object store notifies (S3 → Lambda / HTTP)
- background: run the dispatcher after the response via BackgroundTasks
- celery: enqueue the dispatcher on a Celery worker
"""
from typing import Optional

from fastapi import BackgroundTasks

from .extraction_service import MetadataExtractionService
from ..core.logging_config import get_logger

logger = get_logger(__name__)

NOTIFICATION_MODES = ("external", "background", "celery")


class StorageEventNotifier:
    """Raises a storage-change notification for a freshly written blob."""

    def __init__(self, mode: str, extraction_service: MetadataExtractionService):
        if mode not in NOTIFICATION_MODES:
            raise ValueError(
                f"Unsupported notification mode: {mode}. "
                f"Supported modes: {', '.join(NOTIFICATION_MODES)}"
            )
        self.mode = mode
        self.extraction_service = extraction_service

    def notify(self, container_name: str, storage_key: str, background_tasks: Optional[BackgroundTasks] = None):
        if self.mode == "external":
            return

        if self.mode == "celery":
            from .tasks import extract_metadata_task
            extract_metadata_task.delay(container_name, storage_key)
            logger.debug(f"Queued extraction task for {storage_key}")
            return

        if background_tasks is None:
            raise RuntimeError("Background notification needs a BackgroundTasks instance")
        background_tasks.add_task(self._dispatch, container_name, storage_key)

    async def _dispatch(self, container_name: str, storage_key: str):
        # Nobody awaits a background task; failures end here
        try:
            await self.extraction_service.on_blob_created(container_name, storage_key)
        except Exception as e:
            logger.error(f"Background extraction failed for {storage_key}: {e}", exc_info=True)
