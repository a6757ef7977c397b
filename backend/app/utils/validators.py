"""
Validation utilities - Pure validation functions.
"""
import json
import re
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from ..api.dto import UserMetadataDTO
from ..api.exceptions import BadRequestError

# Canonical UUID text form, versions 1-5
FILE_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def validate_file_type(mime_type: Optional[str], allowed_types: Iterable[str]) -> bool:
    """Check the declared MIME type against the allow-list."""
    return bool(mime_type) and mime_type in tuple(allowed_types)


def validate_file_size(size: int, max_size: int) -> bool:
    """Check the file size against the configured ceiling."""
    return size <= max_size


def is_valid_file_id(file_id: str) -> bool:
    return bool(file_id) and FILE_ID_PATTERN.match(file_id) is not None


def validate_file_id(file_id: str) -> None:
    """
    Validate file ID syntax.

    Raises:
        BadRequestError: If the ID is not a canonical UUID
    """
    if not is_valid_file_id(file_id):
        raise BadRequestError("Invalid file ID format")


def sanitize_filename(filename: str) -> str:
    """
    Make a filename safe for use as a storage key segment.

    Anything outside letters, digits, dot and dash becomes an underscore;
    runs of underscores collapse and edge underscores are dropped.
    """
    # Browsers may send a full client path
    name = re.split(r"[\\/]", filename or "")[-1]
    name = re.sub(r"[^a-zA-Z0-9.-]", "_", name)
    name = re.sub(r"_+", "_", name).strip("_")
    if not name or name in (".", ".."):
        return "file"
    return name


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()) if part != "__root__")
        message = item.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_user_metadata(raw: Optional[str]) -> Dict[str, Any]:
    """
    Parse and validate the ``userMetadata`` form field.

    Returns the metadata exactly as the caller sent it once it has passed
    validation; unknown fields are preserved.

    Raises:
        BadRequestError: On malformed JSON, a non-object payload or a bounded
            field out of range
    """
    if raw is None or not raw.strip():
        return {}

    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise BadRequestError(f"Invalid userMetadata JSON: {e.msg}") from e
    except ValueError as e:
        raise BadRequestError(f"Invalid userMetadata JSON: {e}") from e

    return validate_user_metadata(payload)


def validate_user_metadata(payload: Any) -> Dict[str, Any]:
    """
    Validate decoded user metadata against the field bounds.

    Raises:
        BadRequestError: If the payload is not an object or a field is out of range
    """
    if not isinstance(payload, dict):
        raise BadRequestError("Invalid userMetadata: must be a JSON object")

    try:
        UserMetadataDTO.model_validate(payload)
    except ValidationError as e:
        raise BadRequestError(f"Invalid userMetadata: {_format_validation_error(e)}") from e

    return payload
