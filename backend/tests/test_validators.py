import json
import uuid
from datetime import date

import pytest

from app.api.exceptions import BadRequestError
from app.utils import (
    extract_file_id,
    generate_storage_key,
    is_valid_file_id,
    parse_user_metadata,
    sanitize_filename,
    validate_file_id,
    validate_file_size,
    validate_file_type,
)
from app.core.config import ALLOWED_MIME_TYPES, MIB


def test_sanitize_filename_replaces_unsafe_characters():
    assert sanitize_filename("my report (final).pdf") == "my_report_final_.pdf"
    assert sanitize_filename("photo #1.png") == "photo_1.png"


def test_sanitize_filename_strips_client_paths():
    assert sanitize_filename("C:\\Users\\ana\\notes.txt") == "notes.txt"
    assert sanitize_filename("../../etc/passwd") == "passwd"


def test_sanitize_filename_falls_back_when_nothing_is_left():
    assert sanitize_filename("") == "file"
    assert sanitize_filename("***") == "file"
    assert sanitize_filename("..") == "file"


def test_storage_key_layout():
    file_id = str(uuid.uuid4())
    key = generate_storage_key("report v2.pdf", file_id, today=date(2024, 3, 9))
    assert key == f"uploads/2024-03-09/{file_id}/report_v2.pdf"
    assert extract_file_id(key) == file_id


def test_extract_file_id_rejects_short_keys():
    assert extract_file_id("foo.txt") is None
    assert extract_file_id("uploads/2024-03-09") is None
    assert extract_file_id("uploads/2024-03-09//x.txt") is None


def test_file_id_syntax():
    assert is_valid_file_id(str(uuid.uuid4()))
    assert is_valid_file_id(str(uuid.uuid4()).upper())
    assert not is_valid_file_id("not-a-uuid")
    assert not is_valid_file_id("")
    with pytest.raises(BadRequestError, match="Invalid file ID format"):
        validate_file_id("1234")


def test_file_type_and_size_checks():
    assert validate_file_type("application/pdf", ALLOWED_MIME_TYPES)
    assert validate_file_type("text/plain", ALLOWED_MIME_TYPES)
    assert not validate_file_type("application/zip", ALLOWED_MIME_TYPES)
    assert not validate_file_type(None, ALLOWED_MIME_TYPES)

    assert validate_file_size(50 * MIB, 50 * MIB)
    assert not validate_file_size(50 * MIB + 1, 50 * MIB)


def test_user_metadata_blank_is_empty():
    assert parse_user_metadata(None) == {}
    assert parse_user_metadata("  ") == {}


def test_user_metadata_keeps_unknown_fields():
    raw = json.dumps({"author": "Ana", "tags": ["a", "b"], "project": {"code": 7}})
    assert parse_user_metadata(raw) == {"author": "Ana", "tags": ["a", "b"], "project": {"code": 7}}


def test_user_metadata_accepts_future_expiration():
    raw = json.dumps({"expirationDate": "2999-01-01T00:00:00Z"})
    assert parse_user_metadata(raw)["expirationDate"] == "2999-01-01T00:00:00Z"


@pytest.mark.parametrize("payload", [
    {"author": ""},
    {"author": "x" * 256},
    {"description": "d" * 1001},
    {"tags": [str(i) for i in range(11)]},
    {"tags": ["t" * 51]},
    {"expirationDate": "2000-01-01T00:00:00Z"},
    {"expirationDate": "next tuesday"},
    {"expirationDate": 1700000000},
    {"expirationDate": "4102444800"},
])
def test_user_metadata_bounds(payload):
    with pytest.raises(BadRequestError, match="Invalid userMetadata"):
        parse_user_metadata(json.dumps(payload))


def test_user_metadata_at_bounds_is_accepted():
    payload = {"author": "a" * 255, "description": "d" * 1000, "tags": ["t" * 50] * 10}
    assert parse_user_metadata(json.dumps(payload)) == payload


def test_user_metadata_must_be_an_object():
    with pytest.raises(BadRequestError, match="must be a JSON object"):
        parse_user_metadata("[1, 2]")
    with pytest.raises(BadRequestError, match="Invalid userMetadata JSON"):
        parse_user_metadata("{author: Ana}")


@pytest.mark.parametrize("raw", ['{"score": NaN}', '{"score": Infinity}', '{"score": -Infinity}'])
def test_user_metadata_rejects_non_json_constants(raw):
    with pytest.raises(BadRequestError, match="Invalid userMetadata JSON"):
        parse_user_metadata(raw)
