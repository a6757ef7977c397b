"""
Value Objects - Immutable objects that represent domain concepts.
These have no identity and are compared by value.
"""
from enum import Enum
from typing import NewType

FileId = NewType("FileId", str)
StorageKey = NewType("StorageKey", str)


class FileStatus(str, Enum):
    """Lifecycle of a file record."""
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PROCESSED = "processed"
    ERROR = "error"
