"""
Metadata Extractors Module - per-category file inspectors.

To add support for a new file category:
1. Create a new extractor class inheriting from BaseMetadataExtractor
2. Implement the extract() method returning a metadata variant
3. Register it with MetadataExtractorFactory
"""
from .base import BaseMetadataExtractor
from .factory import MetadataExtractorFactory
from .image_extractor import ImageExtractor
from .pdf_extractor import PDFExtractor
from .text_extractor import TextExtractor

__all__ = [
    "BaseMetadataExtractor",
    "MetadataExtractorFactory",
    "ImageExtractor",
    "PDFExtractor",
    "TextExtractor",
]
