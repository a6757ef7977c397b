"""
File utilities - storage key convention.

Storage keys look like ``uploads/{YYYY-MM-DD}/{fileId}/{sanitized-name}``.
The file ID is always the third path segment; the extraction side recovers
it from the key alone.
"""
from datetime import date, datetime, timezone
from typing import Optional

from .validators import sanitize_filename

KEY_SEPARATOR = "/"
FILE_ID_SEGMENT = 2


def generate_storage_key(
    filename: str,
    file_id: str,
    prefix: str = "uploads",
    today: Optional[date] = None
) -> str:
    """
    Build the object storage key for an upload.

    Args:
        filename: Original filename (sanitized here)
        file_id: File ID
        prefix: Fixed key prefix
        today: Date segment (defaults to the current UTC date)
    """
    day = today or datetime.now(timezone.utc).date()
    return KEY_SEPARATOR.join([prefix, day.isoformat(), file_id, sanitize_filename(filename)])


def extract_file_id(storage_key: str) -> Optional[str]:
    """Recover the file ID from a storage key, or None for foreign keys."""
    parts = storage_key.split(KEY_SEPARATOR)
    if len(parts) <= FILE_ID_SEGMENT:
        return None
    return parts[FILE_ID_SEGMENT] or None
