"""
Base Metadata Extractor Interface.

All metadata extractors must inherit from this base class and implement
the extract() method.
"""
from abc import ABC, abstractmethod
from typing import Tuple

from ...domain.metadata import FileDetails


class BaseMetadataExtractor(ABC):
    """
    Abstract base class for metadata extractors.

    Each file category has its own extractor class. Extractors raise on
    unreadable input; turning that into a degraded result is the caller's job.
    """

    def __init__(self, mime_types: Tuple[str, ...], format_name: str):
        """
        Initialize the extractor.

        Args:
            mime_types: MIME types handled; an entry ending in '/' matches a whole family
            format_name: Human-readable format name (e.g., 'PDF', 'Image')
        """
        self.mime_types = tuple(t.lower() for t in mime_types)
        self.format_name = format_name

    def supports(self, mime_type: str) -> bool:
        mime_type = mime_type.lower()
        return any(
            mime_type.startswith(t) if t.endswith("/") else mime_type == t
            for t in self.mime_types
        )

    @abstractmethod
    def extract(self, file_bytes: bytes) -> FileDetails:
        """
        Extract type-specific metadata from file bytes.

        Args:
            file_bytes: Raw file content as bytes

        Returns:
            The metadata variant for this file category
        """
        pass
