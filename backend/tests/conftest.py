import asyncio
import dataclasses
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

from app.core.config import Settings
from app.main import create_app
from app.services.database import MemoryAdapter
from app.services.extraction_service import MetadataExtractionService
from app.services.file_service import FileService
from app.services.storage import LocalFileStorage
from app.services.upload_service import UploadService


def run(coro):
    return asyncio.run(coro)


def make_pdf(pages=3):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def make_text_pdf(page_texts, metadata=None):
    writer = PdfWriter()
    font = writer._add_object(DictionaryObject({
        NameObject("/Type"): NameObject("/Font"),
        NameObject("/Subtype"): NameObject("/Type1"),
        NameObject("/BaseFont"): NameObject("/Helvetica"),
    }))
    for text in page_texts:
        page = writer.add_blank_page(width=612, height=792)
        page[NameObject("/Resources")] = DictionaryObject({
            NameObject("/Font"): DictionaryObject({NameObject("/F1"): font}),
        })
        content = DecodedStreamObject()
        content.set_data(f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1"))
        page[NameObject("/Contents")] = writer._add_object(content)
    if metadata:
        writer.add_metadata(metadata)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def make_png(width=800, height=600, mode="RGB"):
    buffer = BytesIO()
    Image.new(mode, (width, height)).save(buffer, "PNG")
    return buffer.getvalue()


def s3_event(key, bucket="upload-test-bucket"):
    return {"Records": [{"s3": {"bucket": {"name": bucket}, "object": {"key": key}}}]}


@pytest.fixture
def settings(tmp_path):
    return Settings(
        storage_type="local",
        local_storage_dir=tmp_path / "uploads",
        local_url_secret="test-secret",
        database_type="memory",
        notification_mode="background",
        rate_limit_enabled=False,
        log_file_enabled=False,
        log_level="WARNING",
    )


@pytest.fixture
def storage(settings):
    storage = LocalFileStorage(settings.local_storage_dir, settings.local_url_secret, container=settings.s3_bucket)
    run(storage.initialize())
    return storage


@pytest.fixture
def db():
    return MemoryAdapter()


@pytest.fixture
def upload_service(storage, db, settings):
    return UploadService(storage, db, settings)


@pytest.fixture
def file_service(storage, db, settings):
    return FileService(storage, db, settings)


@pytest.fixture
def extraction_service(storage, db):
    return MetadataExtractionService(storage, db)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def small_limit_client(settings):
    limited = dataclasses.replace(settings, max_file_size=1024 * 1024)
    with TestClient(create_app(limited)) as test_client:
        yield test_client
