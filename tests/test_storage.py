import re
from urllib.parse import parse_qs, urlparse

import pytest

from helpermatch.services import storage

KEY_PATTERN = re.compile(r"^documents/7/\d{13}-[0-9a-f-]{36}-my_id_card.pdf$")


def test_validate_file(app):
    storage.validate_file("application/pdf", 1024, "document")
    storage.validate_file("image/webp", 1024, "image")
    storage.validate_file("image/webp", 1024, "document")
    with pytest.raises(storage.FileRejected, match="File type not allowed") as rejected:
        storage.validate_file("application/pdf", 1024, "image")
    assert rejected.value.field == "contentType"
    with pytest.raises(storage.FileRejected, match="File type not allowed"):
        storage.validate_file("text/plain", 1024, "document")
    with pytest.raises(storage.FileRejected, match="less than 5 MB") as rejected:
        storage.validate_file("image/png", 5 * 1024 * 1024 + 1, "image")
    assert rejected.value.field == "fileSize"


def test_generate_key(app):
    key = storage.generate_key("documents", 7, "my id card.pdf")
    assert KEY_PATTERN.match(key), key
    with pytest.raises(ValueError):
        storage.generate_key("secrets", 7, "a.pdf")


def test_format_file_size():
    assert storage.format_file_size(0) == "0 Bytes"
    assert storage.format_file_size(1536) == "1.5 KB"
    assert storage.format_file_size(5 * 1024 * 1024) == "5 MB"


def test_upload_url_is_presigned_offline(app):
    upload = storage.upload_url("profiles", 3, "me.png", "image/png")
    assert upload.key.startswith("profiles/3/")
    assert upload.public_url == f"https://cdn.example.com/{upload.key}"
    parsed = urlparse(upload.signed_url)
    assert parsed.netloc.endswith("storage.example.com")
    query = parse_qs(parsed.query)
    assert query["X-Amz-Algorithm"] == ["AWS4-HMAC-SHA256"]
    assert query["X-Amz-Expires"] == ["3600"]


def test_upload_endpoints(app, make_user):
    client = app.test_client(user=make_user("employee"))
    resp = client.post("/api/upload/document", json={
        "fileName": "nbi.pdf", "fileSize": 2048, "contentType": "application/pdf", "documentType": "NBI_CLEARANCE",
    })
    assert resp.status_code == 200
    body = resp.get_json()
    assert set(body) == {"signedUrl", "publicUrl", "key", "expiresAt"}
    assert body["key"].startswith("documents/")

    resp = client.post("/api/upload/profile-image", json={
        "fileName": "me.pdf", "fileSize": 2048, "contentType": "application/pdf",
    })
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["field"] == "contentType"
    assert body["details"][0]["message"].startswith("File type not allowed")

    resp = client.post("/api/upload/profile-image", json={
        "fileName": "me.png", "fileSize": 6 * 1024 * 1024, "contentType": "image/png",
    })
    assert resp.status_code == 400
    assert resp.get_json()["details"] == [{"field": "fileSize", "message": "File size must be less than 5 MB"}]

    resp = client.post("/api/upload/document", json={
        "fileName": "id.webp", "fileSize": 2048, "contentType": "image/webp", "documentType": "PASSPORT",
    })
    assert resp.status_code == 200

    resp = client.post("/api/upload/document", json={"fileName": "x.pdf", "fileSize": 0, "contentType": "application/pdf",
                                                     "documentType": "PASSPORT"})
    assert resp.status_code == 400


def test_upload_requires_employee(app, make_user):
    client = app.test_client(user=make_user("employer"))
    resp = client.post("/api/upload/profile-image", json={"fileName": "a.png", "fileSize": 1, "contentType": "image/png"})
    assert resp.status_code == 403


def test_download_url_is_presigned_get(app):
    url = storage.download_url("documents/7/nbi.pdf", expires_in=600)
    parsed = urlparse(url)
    assert parsed.netloc.endswith("storage.example.com")
    assert parsed.path.endswith("documents/7/nbi.pdf")
    assert parse_qs(parsed.query)["X-Amz-Expires"] == ["600"]
