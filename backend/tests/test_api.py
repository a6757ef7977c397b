import json
import uuid

from conftest import make_pdf, make_png, s3_event


def upload(client, name, data, mime, user_metadata=None):
    form = {"userMetadata": json.dumps(user_metadata)} if user_metadata is not None else {}
    return client.post("/upload", files={"file": (name, data, mime)}, data=form)


def assert_error(response, status_code, message=None):
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert body["statusCode"] == status_code
    assert body["timestamp"]
    assert body["path"]
    if message:
        assert message in body["error"]
    return body


def test_pdf_upload_end_to_end(client):
    response = upload(client, "report.pdf", make_pdf(3), "application/pdf", {"author": "Ana", "tags": ["q1"]})
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    file_id = body["fileId"]

    # Background extraction has run by the time the response is read
    response = client.get(f"/metadata/{file_id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == file_id
    assert data["status"] == "processed"
    assert data["originalName"] == "report.pdf"
    assert data["mimeType"] == "application/pdf"
    assert data["userMetadata"] == {"author": "Ana", "tags": ["q1"]}
    assert data["extractedMetadata"]["pages"] == 3


def test_image_upload_end_to_end(client):
    file_id = upload(client, "photo.png", make_png(800, 600), "image/png").json()["fileId"]
    extracted = client.get(f"/metadata/{file_id}").json()["data"]["extractedMetadata"]
    assert extracted["dimensions"] == {"width": 800, "height": 600}
    assert extracted["encoding"] == "png"
    assert "exifData" not in extracted


def test_text_upload_end_to_end(client):
    text = "\n".join(["word"] * 10)
    file_id = upload(client, "notes.txt", text.encode("utf-8"), "text/plain").json()["fileId"]
    extracted = client.get(f"/metadata/{file_id}").json()["data"]["extractedMetadata"]
    assert extracted["textAnalysis"]["lines"] == 10
    assert extracted["textAnalysis"]["words"] == 10


def test_unknown_user_metadata_fields_are_kept(client):
    metadata = {"author": "Ana", "project": {"code": "X-1"}, "priority": 3}
    file_id = upload(client, "a.txt", b"hi", "text/plain", metadata).json()["fileId"]
    assert client.get(f"/metadata/{file_id}").json()["data"]["userMetadata"] == metadata


def test_upload_without_file(client):
    response = client.post("/upload", data={"userMetadata": "{}"})
    assert_error(response, 400, "No file uploaded")


def test_upload_with_disallowed_type(client):
    response = upload(client, "run.exe", b"MZ", "application/x-msdownload")
    body = assert_error(response, 400, "Invalid file type")
    assert body["path"] == "/upload"


def test_upload_too_large(small_limit_client):
    response = upload(small_limit_client, "big.txt", b"a" * (1024 * 1024 + 1), "text/plain")
    assert_error(response, 400, "File too large. Maximum size is 1MB")


def test_upload_with_bad_metadata(client):
    response = upload(client, "a.txt", b"hi", "text/plain", {"expirationDate": "2001-01-01T00:00:00Z"})
    assert_error(response, 400, "expirationDate")

    response = client.post("/upload", files={"file": ("a.txt", b"hi", "text/plain")},
                           data={"userMetadata": "{not json"})
    assert_error(response, 400, "Invalid userMetadata JSON")


def test_upload_with_non_json_constant_creates_nothing(client, settings):
    response = client.post("/upload", files={"file": ("a.txt", b"hi", "text/plain")},
                           data={"userMetadata": '{"score": NaN}'})
    assert_error(response, 400, "Invalid userMetadata JSON")
    assert list(settings.local_storage_dir.rglob("a.txt")) == []


def test_metadata_errors(client):
    assert_error(client.get("/metadata/not-a-uuid"), 400, "Invalid file ID format")
    assert_error(client.get(f"/metadata/{uuid.uuid4()}"), 404, "File not found")


def test_download_url_round_trip(client):
    file_id = upload(client, "hello.txt", b"hello world", "text/plain").json()["fileId"]

    response = client.get(f"/download/{file_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["expiresIn"] == 3600

    blob = client.get(body["downloadUrl"])
    assert blob.status_code == 200
    assert blob.content == b"hello world"
    assert blob.headers["content-type"].startswith("text/plain")

    tampered = body["downloadUrl"].rsplit("signature=", 1)[0] + "signature=" + "0" * 64
    assert_error(client.get(tampered), 403)


def test_download_custom_expiry(client):
    file_id = upload(client, "hello.txt", b"hello", "text/plain").json()["fileId"]
    assert client.get(f"/download/{file_id}", params={"expiresIn": 60}).json()["expiresIn"] == 60
    assert_error(client.get(f"/download/{file_id}", params={"expiresIn": 0}), 400)


def test_download_errors(client):
    assert_error(client.get("/download/xyz"), 400, "Invalid file ID format")
    assert_error(client.get(f"/download/{uuid.uuid4()}"), 404)


def test_delete_file(client):
    file_id = upload(client, "hello.txt", b"hello", "text/plain").json()["fileId"]

    response = client.delete(f"/files/{file_id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "File deleted successfully"}

    assert_error(client.get(f"/metadata/{file_id}"), 404)
    assert_error(client.delete(f"/files/{file_id}"), 404)
    assert_error(client.delete("/files/nope"), 400)


def test_storage_notification_endpoint(client):
    file_id = upload(client, "a.txt", b"hi", "text/plain").json()["fileId"]
    key = client.get(f"/metadata/{file_id}").json()["data"]["storageKey"]

    event = {"Records": s3_event(key)["Records"] + s3_event("foo.txt")["Records"]}
    response = client.post("/notifications/storage", json=event)

    assert response.status_code == 200
    assert response.json() == {"success": True, "processed": 1, "skipped": 1, "failed": 0}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == "1.0.0"
    assert body["timestamp"]


def test_ready(client):
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"ready": True}


def test_unknown_route_uses_error_envelope(client):
    body = assert_error(client.get("/non-existent-route"), 404)
    assert body["path"] == "/non-existent-route"


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_cors_headers(client):
    response = client.options("/health", headers={
        "Origin": "http://localhost:3000",
        "Access-Control-Request-Method": "GET",
    })
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:3000")
