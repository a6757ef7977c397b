from io import BytesIO

import boto3
import pytest
from botocore.config import Config
from botocore.response import StreamingBody
from botocore.stub import Stubber

from app.api.exceptions import UpstreamFailureError
from app.services.storage import S3FileStorage
from conftest import run

BUCKET = "upload-test-bucket"
KEY = "uploads/2024-01-01/3f1c2a4e-8b7d-4c1e-9f0a-1b2c3d4e5f60/report.pdf"


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
        config=Config(signature_version="s3v4"),
    )


@pytest.fixture
def storage(s3_client):
    return S3FileStorage(BUCKET, client=s3_client)


def test_save_bytes_puts_object_with_metadata(storage, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_response("put_object", {}, {
            "Bucket": BUCKET,
            "Key": KEY,
            "Body": b"%PDF",
            "ContentType": "application/pdf",
            "Metadata": {"fileId": "abc", "originalName": "r%C3%A9sum%C3%A9 1.pdf"},
        })
        run(storage.save_bytes(KEY, b"%PDF", "application/pdf",
                               metadata={"fileId": "abc", "originalName": "résumé 1.pdf"}))
        stubber.assert_no_pending_responses()


def test_get_file_reads_body(storage, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "get_object",
            {"Body": StreamingBody(BytesIO(b"hello"), 5)},
            {"Bucket": BUCKET, "Key": KEY},
        )
        assert run(storage.get_file(KEY)) == b"hello"


def test_get_file_missing_key(storage, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
        with pytest.raises(FileNotFoundError):
            run(storage.get_file(KEY))


def test_put_failure_is_upstream_failure(storage, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("put_object", service_error_code="InternalError", http_status_code=500)
        with pytest.raises(UpstreamFailureError):
            run(storage.save_bytes(KEY, b"x", "text/plain"))


def test_missing_object_has_no_metadata(storage, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("head_object", service_error_code="404", http_status_code=404)
        assert run(storage.get_file_metadata(KEY)) is None


def test_presigned_url(storage):
    url = run(storage.get_file_url(KEY, expires_in=900))
    assert BUCKET in url
    assert "report.pdf" in url
    assert "X-Amz-Expires=900" in url


def test_initialize_missing_bucket(storage, s3_client):
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
        with pytest.raises(ValueError, match="does not exist"):
            run(storage.initialize())


def test_container_name(storage):
    assert storage.container_name == BUCKET
