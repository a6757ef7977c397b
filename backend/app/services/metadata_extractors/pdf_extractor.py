"""
PDF Metadata Extractor.

Reads page count, leading text and document dates using the pypdf library.
"""
from io import BytesIO
from typing import Any, Optional

from pypdf import PdfReader

from .base import BaseMetadataExtractor
from ...core.logging_config import get_logger
from ...domain.metadata import PdfMetadata

logger = get_logger(__name__)


class PDFExtractor(BaseMetadataExtractor):
    """Extractor for PDF files."""

    def __init__(self, text_limit: int = 5000):
        super().__init__(("application/pdf",), "PDF")
        self.text_limit = text_limit

    def extract(self, file_bytes: bytes) -> PdfMetadata:
        reader = PdfReader(BytesIO(file_bytes))
        page_count = len(reader.pages)

        # Stop reading pages once the excerpt is full
        text_content = ""
        for page in reader.pages:
            if len(text_content) >= self.text_limit:
                break
            page_text = page.extract_text()
            if page_text:
                text_content += page_text + "\n"

        info = reader.metadata
        created_date = _pdf_date(info, "creation_date", "/CreationDate") if info else None
        modified_date = _pdf_date(info, "modification_date", "/ModDate") if info else None

        logger.debug(f"PDF has {page_count} pages, {len(text_content)} characters of text")
        return PdfMetadata(
            pages=page_count,
            text_content=text_content[:self.text_limit],
            created_date=created_date,
            modified_date=modified_date,
        )


def _pdf_date(info: Any, attribute: str, key: str) -> Optional[str]:
    """ISO form of a PDF date, or the raw string when it does not parse."""
    try:
        value = getattr(info, attribute)
    except ValueError:
        value = None
    if value is not None:
        return value.isoformat()
    raw = info.get(key)
    return str(raw) if raw else None
