"""
Notifications Router - storage-change notifications over HTTP.

Lets an object store (or a bridge in front of one) deliver S3-style
ObjectCreated events to the API instead of a Lambda.
"""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from .dependencies import get_extraction_service
from ..api.dto import NotificationResponseDTO
from ..services.extraction_service import MetadataExtractionService

router = APIRouter()


@router.post("/notifications/storage", response_model=NotificationResponseDTO)
async def storage_notification(
    event: Dict[str, Any] = Body(...),
    extraction_service: MetadataExtractionService = Depends(get_extraction_service)
):
    """
    Process a batch of storage-change records.

    Records are handled independently; failures are counted, not raised.
    """
    summary = await extraction_service.process_event(event)
    return NotificationResponseDTO(
        processed=summary.processed,
        skipped=summary.skipped,
        failed=summary.failed
    )
