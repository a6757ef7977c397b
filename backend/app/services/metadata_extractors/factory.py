"""
Metadata Extractor Factory.

Manages registration and lookup of metadata extractors by MIME type.
Uses the Factory pattern to provide plug-and-play extraction.
"""
from typing import List, Optional

from .base import BaseMetadataExtractor
from .image_extractor import ImageExtractor
from .pdf_extractor import PDFExtractor
from .text_extractor import TextExtractor
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class MetadataExtractorFactory:
    """
    Registry of metadata extractors.

    Later registrations win, so a specific extractor can shadow a family one.
    Types without an extractor are passed through by the caller.
    """

    def __init__(self, text_limit: int = 5000, register_defaults: bool = True):
        self._extractors: List[BaseMetadataExtractor] = []
        if register_defaults:
            self.register(PDFExtractor(text_limit=text_limit))
            self.register(ImageExtractor())
            self.register(TextExtractor(text_limit=text_limit))
            logger.debug(f"MetadataExtractorFactory initialized with {len(self._extractors)} extractors")

    def register(self, extractor: BaseMetadataExtractor) -> None:
        """Register a metadata extractor."""
        self._extractors.insert(0, extractor)
        logger.debug(f"Registered extractor for {', '.join(extractor.mime_types)}: {extractor.format_name}")

    def get_extractor(self, mime_type: str) -> Optional[BaseMetadataExtractor]:
        """
        Get the extractor for a MIME type.

        Returns:
            Extractor instance or None if the type is passed through
        """
        for extractor in self._extractors:
            if extractor.supports(mime_type):
                return extractor
        return None

    def get_supported_formats(self) -> List[str]:
        return sorted(extractor.format_name for extractor in self._extractors)
