"""
Files Router - upload, metadata lookup, download URLs and deletion.

Routers handle HTTP request/response only; the services hold the logic
and raise business exceptions that the gateway turns into error envelopes.

Example Usage:
    POST   /upload              - Upload a file with optional userMetadata
    GET    /metadata/{file_id}  - Get the stored record
    GET    /download/{file_id}  - Get a time-limited download URL
    DELETE /files/{file_id}     - Delete blob and record
"""
from typing import Optional, Tuple

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response

from .dependencies import get_file_service, get_notifier, get_storage, get_upload_service
from ..api.dto import (
    DeleteResponseDTO,
    DownloadResponseDTO,
    MetadataResponseDTO,
    UploadResponseDTO,
)
from ..core.logging_config import get_logger
from ..services.file_service import FileService
from ..services.notifications import StorageEventNotifier
from ..services.storage import FileStorageInterface, LocalFileStorage
from ..services.upload_service import UploadService

logger = get_logger(__name__)

router = APIRouter()

# Longest lifetime S3 accepts for a presigned URL
MAX_URL_TTL = 7 * 24 * 3600


async def read_upload(file: UploadFile, max_size: int) -> Tuple[bytes, int]:
    """
    Read an uploaded file, stopping one byte past the size ceiling.

    Returns:
        (bytes read, size); an oversized file reports a size above ``max_size``
        and its bytes are truncated
    """
    declared = getattr(file, "size", None)
    if declared is not None and declared > max_size:
        return b"", declared

    data = await file.read(max_size + 1)
    return data, len(data)


@router.post("/upload", status_code=status.HTTP_201_CREATED, response_model=UploadResponseDTO)
async def upload_file(
    background_tasks: BackgroundTasks,
    file: Optional[UploadFile] = File(None),
    userMetadata: Optional[str] = Form(None),
    upload_service: UploadService = Depends(get_upload_service),
    notifier: StorageEventNotifier = Depends(get_notifier)
):
    """
    Upload a single file.

    The upload process:
    1. Validates presence, type, size and userMetadata
    2. Saves the blob to object storage
    3. Creates the file record and marks it processing
    4. Raises a storage-change notification so metadata gets extracted

    Returns:
        201 with the new file ID
    """
    file_bytes = None
    size_bytes = None
    original_name = "file"
    mime_type = None
    if file is not None:
        file_bytes, size_bytes = await read_upload(file, upload_service.settings.max_file_size)
        original_name = file.filename or "file"
        mime_type = file.content_type

    record = await upload_service.ingest(
        file_bytes,
        original_name,
        mime_type,
        size_bytes=size_bytes,
        user_metadata=userMetadata
    )
    notifier.notify(record.storage_container, record.storage_key, background_tasks)

    return UploadResponseDTO(fileId=record.id)


@router.get("/metadata/{file_id}", response_model=MetadataResponseDTO)
async def get_metadata(file_id: str, file_service: FileService = Depends(get_file_service)):
    """Get the stored record, including extracted metadata once processed."""
    record = await file_service.get_record(file_id)
    return MetadataResponseDTO(data=record.to_dict())


@router.get("/download/{file_id}", response_model=DownloadResponseDTO)
async def get_download_url(
    file_id: str,
    expiresIn: Optional[int] = Query(None, ge=1, le=MAX_URL_TTL),
    file_service: FileService = Depends(get_file_service)
):
    """Issue a signed, time-limited download URL."""
    url, ttl = await file_service.get_download_url(file_id, expires_in=expiresIn)
    return DownloadResponseDTO(downloadUrl=url, expiresIn=ttl)


@router.delete("/files/{file_id}", response_model=DeleteResponseDTO)
async def delete_file(file_id: str, file_service: FileService = Depends(get_file_service)):
    """Delete a file's blob, then its record."""
    await file_service.delete_file(file_id)
    return DeleteResponseDTO()


@router.get("/files/{storage_key:path}")
async def serve_local_file(
    storage_key: str,
    expires: int = Query(...),
    signature: str = Query(...),
    storage: FileStorageInterface = Depends(get_storage)
):
    """
    Serve a blob from local storage through a signed URL.

    Only available with the local backend; S3 URLs point at S3 directly.
    """
    if not isinstance(storage, LocalFileStorage):
        raise HTTPException(status_code=404, detail="Not found")

    if not storage.verify_signature(storage_key, expires, signature):
        raise HTTPException(status_code=403, detail="Invalid or expired download link")

    try:
        data = await storage.get_file(storage_key)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="File not found")

    info = await storage.get_file_metadata(storage_key) or {}
    return Response(content=data, media_type=info.get("contentType") or "application/octet-stream")
