"""
Image Metadata Extractor.

Reads dimensions, format and embedded-data flags with Pillow. Only the
image header is parsed; pixel data is never decoded.
"""
from io import BytesIO
from typing import Optional

from PIL import Image

from .base import BaseMetadataExtractor
from ...domain.metadata import ExifData, ImageMetadata

ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")


class ImageExtractor(BaseMetadataExtractor):
    """Extractor for image/* files."""

    def __init__(self):
        super().__init__(("image/",), "Image")

    def extract(self, file_bytes: bytes) -> ImageMetadata:
        with Image.open(BytesIO(file_bytes)) as image:
            width, height = image.size
            encoding = (image.format or "unknown").lower()

            exif = None
            if _has_exif(image):
                exif = ExifData(
                    density=_density(image),
                    has_profile=bool(image.info.get("icc_profile")),
                    has_alpha=image.mode in ALPHA_MODES or "transparency" in image.info,
                )

        return ImageMetadata(width=width, height=height, encoding=encoding, exif=exif)


def _has_exif(image: Image.Image) -> bool:
    if image.info.get("exif"):
        return True
    return len(image.getexif()) > 0


def _density(image: Image.Image) -> Optional[int]:
    dpi = image.info.get("dpi")
    if not dpi:
        return None
    return int(round(float(dpi[0])))
