"""
Domain layer - Contains business entities and domain logic.
This layer is independent of infrastructure and frameworks.
"""
from .entities import FileRecord
from .metadata import (
    Degraded,
    ExifData,
    Extracted,
    ExtractionResult,
    ImageMetadata,
    PdfMetadata,
    TextMetadata,
)
from .value_objects import FileId, FileStatus, StorageKey

__all__ = [
    "FileRecord",
    "FileId",
    "FileStatus",
    "StorageKey",
    "Extracted",
    "Degraded",
    "ExtractionResult",
    "PdfMetadata",
    "ImageMetadata",
    "ExifData",
    "TextMetadata",
]
