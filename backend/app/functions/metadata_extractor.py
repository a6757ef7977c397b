"""
AWS Lambda entry point for metadata extraction.

Subscribed to the upload bucket's ObjectCreated events. Each record in the
event batch is processed independently.
"""
import asyncio
from typing import Any, Dict, Optional

from ..core.config import Settings
from ..core.logging_config import get_logger, setup_logging
from ..services.registry import ServiceRegistry, create_services

logger = get_logger(__name__)

# Reused across warm invocations
_services: Optional[ServiceRegistry] = None


async def _get_services() -> ServiceRegistry:
    global _services
    if _services is None:
        settings = Settings.from_env()
        setup_logging(settings.log_level, enable_file_logging=False)
        _services = await create_services(settings)
    return _services


async def _handle(event: Dict[str, Any]) -> Dict[str, Any]:
    services = await _get_services()
    summary = await services.extraction_service.process_event(event)
    return {
        "processed": summary.processed,
        "skipped": summary.skipped,
        "failed": summary.failed,
    }


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Lambda handler."""
    logger.info(f"Lambda triggered with {len(event.get('Records') or [])} record(s)")
    return asyncio.run(_handle(event))
