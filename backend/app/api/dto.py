"""
Data Transfer Objects (DTOs) for API layer.
Separates API contracts from domain entities.
"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ISO-8601 calendar date prefix; bare Unix timestamps do not match
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}($|[T ])")


class UserMetadataDTO(BaseModel):
    """
    Caller-supplied metadata attached to an upload.

    Known fields are bounded; any other key lands in ``extra`` untouched.
    """
    model_config = ConfigDict(populate_by_name=True)

    author: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    tags: Optional[List[str]] = Field(default=None, max_length=10)
    expiration_date: Optional[datetime] = Field(default=None, alias="expirationDate")
    extra: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_extra_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("userMetadata must be a JSON object")
        known = {"author", "description", "tags", "expirationDate"}
        values = {key: value for key, value in data.items() if key in known}
        values["extra"] = {key: value for key, value in data.items() if key not in known}
        return values

    @field_validator("tags")
    @classmethod
    def check_tag_length(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        if tags is not None:
            for tag in tags:
                if len(tag) > 50:
                    raise ValueError("each tag must be at most 50 characters")
        return tags

    @field_validator("expiration_date", mode="before")
    @classmethod
    def require_iso_string(cls, value: Any) -> Any:
        if value is not None and not (isinstance(value, str) and ISO_DATE_PATTERN.match(value)):
            raise ValueError("expirationDate must be an ISO-8601 timestamp")
        return value

    @field_validator("expiration_date")
    @classmethod
    def check_expiration_in_future(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        # Naive timestamps are taken as UTC
        moment = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        if moment <= datetime.now(timezone.utc):
            raise ValueError("expirationDate must be in the future")
        return value


class UploadResponseDTO(BaseModel):
    """Response for a successful upload."""
    success: bool = True
    fileId: str
    message: str = "File uploaded successfully"


class MetadataResponseDTO(BaseModel):
    """Response wrapping a stored file record."""
    success: bool = True
    data: Dict[str, Any]


class DownloadResponseDTO(BaseModel):
    """Response carrying a signed download URL."""
    success: bool = True
    downloadUrl: str
    expiresIn: int


class DeleteResponseDTO(BaseModel):
    """Response for a successful deletion."""
    success: bool = True
    message: str = "File deleted successfully"


class NotificationResponseDTO(BaseModel):
    """Outcome of a storage-change notification batch."""
    success: bool = True
    processed: int
    skipped: int
    failed: int


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str


class ErrorResponseDTO(BaseModel):
    """Error response envelope."""
    success: bool = False
    error: str
    statusCode: int
    timestamp: str
    path: Optional[str] = None
