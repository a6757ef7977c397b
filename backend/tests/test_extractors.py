from io import BytesIO

import pytest
from PIL import Image

from app.domain.metadata import ImageMetadata, PdfMetadata, TextMetadata
from app.services.metadata_extractors import (
    ImageExtractor,
    MetadataExtractorFactory,
    PDFExtractor,
    TextExtractor,
)
from conftest import make_pdf, make_png, make_text_pdf


def test_pdf_page_count():
    result = PDFExtractor().extract(make_pdf(pages=3))
    assert isinstance(result, PdfMetadata)
    assert result.pages == 3
    assert result.text_content == ""
    assert "textContent" in result.to_dict()


def test_pdf_text_content_and_dates():
    data = make_text_pdf(
        ["Hello PDF", "Second page"],
        metadata={"/CreationDate": "D:20240101120000Z", "/ModDate": "garbage"},
    )
    result = PDFExtractor().extract(data)

    assert result.pages == 2
    assert "Hello PDF" in result.text_content
    assert "Second page" in result.text_content
    assert result.created_date.startswith("2024-01-01T12:00:00")
    assert result.modified_date == "garbage"
    assert result.to_dict()["createdDate"] == result.created_date


def test_pdf_text_is_cut_at_the_excerpt_limit():
    data = make_text_pdf(["A" * 3000, "B" * 3000, "C" * 3000])
    result = PDFExtractor().extract(data)

    assert result.pages == 3
    assert len(result.text_content) == 5000
    assert result.text_content.startswith("A" * 100)
    assert "B" in result.text_content
    assert "C" not in result.text_content


def test_pdf_without_dates_omits_them():
    result = PDFExtractor().extract(make_text_pdf(["x"]))
    assert result.created_date is None
    assert "createdDate" not in result.to_dict()
    assert "modifiedDate" not in result.to_dict()


def test_pdf_garbage_raises():
    with pytest.raises(Exception):
        PDFExtractor().extract(b"definitely not a pdf")


def test_png_dimensions_without_exif():
    result = ImageExtractor().extract(make_png(800, 600))
    assert isinstance(result, ImageMetadata)
    assert (result.width, result.height) == (800, 600)
    assert result.encoding == "png"
    assert result.exif is None
    assert result.to_dict() == {"dimensions": {"width": 800, "height": 600}, "encoding": "png"}


def test_jpeg_with_exif_reports_exif_data():
    exif = Image.Exif()
    exif[0x010F] = "TestCam"
    buffer = BytesIO()
    Image.new("RGB", (40, 30)).save(buffer, "JPEG", exif=exif.tobytes(), dpi=(72, 72))

    result = ImageExtractor().extract(buffer.getvalue())
    assert result.encoding == "jpeg"
    assert result.exif is not None
    assert result.exif.density == 72
    assert result.exif.has_alpha is False
    assert result.to_dict()["exifData"]["hasProfile"] is False


def test_image_garbage_raises():
    with pytest.raises(Exception):
        ImageExtractor().extract(b"\x00\x01\x02")


def test_text_analysis_counts_full_text():
    text = "\n".join(f"line {i} has five words" for i in range(10))
    result = TextExtractor(text_limit=20).extract(text.encode("utf-8"))
    assert isinstance(result, TextMetadata)
    assert result.lines == 10
    assert result.words == 50
    assert result.characters == len(text)
    assert result.text_content == text[:20]
    assert result.to_dict()["encoding"] == "utf8"


def test_text_trailing_newline_counts_an_extra_line():
    result = TextExtractor().extract(b"a\nb\n")
    assert result.lines == 3
    assert result.words == 2


def test_text_rejects_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        TextExtractor().extract(b"\xff\xfe\xfa")


def test_factory_lookup():
    factory = MetadataExtractorFactory()
    assert isinstance(factory.get_extractor("application/pdf"), PDFExtractor)
    assert isinstance(factory.get_extractor("image/webp"), ImageExtractor)
    assert isinstance(factory.get_extractor("text/plain"), TextExtractor)
    assert factory.get_extractor("application/msword") is None
    assert factory.get_supported_formats() == ["Image", "PDF", "Text"]
