"""
Extracted metadata - one variant per file category, plus the two outcomes
of an extraction run.

Variants carry only their own fields; ``to_dict`` joins them into the flat
``extractedMetadata`` mapping stored on the record.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class PdfMetadata:
    pages: int
    text_content: str
    created_date: Optional[str] = None
    modified_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"pages": self.pages, "textContent": self.text_content}
        if self.created_date is not None:
            fields["createdDate"] = self.created_date
        if self.modified_date is not None:
            fields["modifiedDate"] = self.modified_date
        return fields


@dataclass(frozen=True)
class ExifData:
    density: Optional[int]
    has_profile: bool
    has_alpha: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"density": self.density, "hasProfile": self.has_profile, "hasAlpha": self.has_alpha}


@dataclass(frozen=True)
class ImageMetadata:
    width: int
    height: int
    encoding: str
    exif: Optional[ExifData] = None

    def to_dict(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "dimensions": {"width": self.width, "height": self.height},
            "encoding": self.encoding,
        }
        if self.exif is not None:
            fields["exifData"] = self.exif.to_dict()
        return fields


@dataclass(frozen=True)
class TextMetadata:
    text_content: str
    lines: int
    words: int
    characters: int
    encoding: str = "utf8"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "textContent": self.text_content,
            "encoding": self.encoding,
            "textAnalysis": {
                "lines": self.lines,
                "words": self.words,
                "characters": self.characters,
            },
        }


# Files with no type-specific extractor carry no details
FileDetails = Union[PdfMetadata, ImageMetadata, TextMetadata, None]


@dataclass(frozen=True)
class Extracted:
    """Extraction succeeded (or there was nothing type-specific to extract)."""
    file_type: str
    file_size: int
    details: FileDetails = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"fileType": self.file_type, "fileSizeBytes": self.file_size}
        if self.details is not None:
            result.update(self.details.to_dict())
        return result


@dataclass(frozen=True)
class Degraded:
    """Extraction failed; the record still completes with the reason attached."""
    file_type: str
    file_size: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileType": self.file_type,
            "fileSizeBytes": self.file_size,
            "extractionError": self.reason,
        }


ExtractionResult = Union[Extracted, Degraded]
