"""
Domain entities - Core business objects.
These represent the business concepts, not database models.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .value_objects import FileId, FileStatus, StorageKey


@dataclass
class FileRecord:
    """
    File record entity - one uploaded file and everything known about it.

    ``to_dict``/``from_dict`` define the persisted layout: a flat mapping with
    camelCase keys, ``userMetadata`` and ``extractedMetadata`` kept nested.
    """
    id: FileId
    original_name: str
    mime_type: str
    size_bytes: int
    storage_key: StorageKey
    storage_container: str
    uploaded_at: str
    user_metadata: Dict[str, Any] = field(default_factory=dict)
    extracted_metadata: Optional[Dict[str, Any]] = None
    status: FileStatus = FileStatus.UPLOADING

    @classmethod
    def new(
        cls,
        file_id: str,
        original_name: str,
        mime_type: str,
        size_bytes: int,
        storage_key: str,
        storage_container: str,
        user_metadata: Optional[Dict[str, Any]] = None,
    ) -> "FileRecord":
        """Create a freshly uploaded record."""
        return cls(
            id=FileId(file_id),
            original_name=original_name,
            mime_type=mime_type,
            size_bytes=size_bytes,
            storage_key=StorageKey(storage_key),
            storage_container=storage_container,
            uploaded_at=datetime.now(timezone.utc).isoformat(),
            user_metadata=dict(user_metadata or {}),
            status=FileStatus.UPLOADED,
        )

    def to_dict(self) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "id": self.id,
            "originalName": self.original_name,
            "mimeType": self.mime_type,
            "sizeBytes": self.size_bytes,
            "storageKey": self.storage_key,
            "storageContainer": self.storage_container,
            "uploadedAt": self.uploaded_at,
            "userMetadata": self.user_metadata,
            "status": self.status.value,
        }
        if self.extracted_metadata is not None:
            item["extractedMetadata"] = self.extracted_metadata
        return item

    @classmethod
    def from_dict(cls, item: Dict[str, Any]) -> "FileRecord":
        return cls(
            id=FileId(item["id"]),
            original_name=item["originalName"],
            mime_type=item["mimeType"],
            size_bytes=int(item["sizeBytes"]),
            storage_key=StorageKey(item["storageKey"]),
            storage_container=item["storageContainer"],
            uploaded_at=item["uploadedAt"],
            user_metadata=item.get("userMetadata") or {},
            extracted_metadata=item.get("extractedMetadata"),
            status=FileStatus(item.get("status", FileStatus.UPLOADED.value)),
        )
