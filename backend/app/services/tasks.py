"""
Celery Tasks - metadata extraction in a worker process.
"""
import asyncio
from typing import Any, Dict

from .message_queue import celery_app
from .registry import create_services
from ..core.config import Settings
from ..core.logging_config import get_logger

logger = get_logger(__name__)


async def _extract(settings: Settings, container_name: str, storage_key: str):
    services = await create_services(settings)
    try:
        return await services.extraction_service.on_blob_created(container_name, storage_key)
    finally:
        await services.close()


@celery_app.task(name="app.services.tasks.extract_metadata")
def extract_metadata_task(container_name: str, storage_key: str) -> Dict[str, Any]:
    """
    Run the extraction dispatcher for one new blob.

    Failures are not retried here; the task just fails and is logged.
    """
    result = asyncio.run(_extract(Settings.from_env(), container_name, storage_key))
    if result is None:
        return {"status": "skipped", "key": storage_key}
    return {"status": "completed", "key": storage_key, "extractedMetadata": result.to_dict()}
