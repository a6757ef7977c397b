"""
Plain Text Metadata Extractor.

Decodes UTF-8 text and counts lines, words and characters over the whole
file while keeping only a leading excerpt.
"""
from .base import BaseMetadataExtractor
from ...domain.metadata import TextMetadata


class TextExtractor(BaseMetadataExtractor):
    """Extractor for text/plain files."""

    def __init__(self, text_limit: int = 5000):
        super().__init__(("text/plain",), "Text")
        self.text_limit = text_limit

    def extract(self, file_bytes: bytes) -> TextMetadata:
        # Invalid UTF-8 raises and degrades the extraction
        text_content = file_bytes.decode("utf-8")

        return TextMetadata(
            text_content=text_content[:self.text_limit],
            lines=len(text_content.split("\n")),
            words=len(text_content.split()),
            characters=len(text_content),
        )
