"""
Utility functions - Pure functions with no dependencies.
These can be used across all layers.
"""
from .file_utils import extract_file_id, generate_storage_key
from .validators import (
    is_valid_file_id,
    parse_user_metadata,
    sanitize_filename,
    validate_file_id,
    validate_file_size,
    validate_file_type,
    validate_user_metadata,
)

__all__ = [
    "extract_file_id",
    "generate_storage_key",
    "is_valid_file_id",
    "parse_user_metadata",
    "sanitize_filename",
    "validate_file_id",
    "validate_file_size",
    "validate_file_type",
    "validate_user_metadata",
]
