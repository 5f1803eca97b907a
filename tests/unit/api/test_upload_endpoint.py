"""
Name: Upload Endpoint Tests

Responsibilities:
  - POST /upload (and legacy /casos/upload) stores a PDF and returns its location
  - GET /uploads/pdfs/{name} serves stored files, 404 otherwise
"""

import pytest

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("path", ["/upload", "/casos/upload"])
def test_upload_pdf(client, pdf_bytes, upload_dir, path):
    res = client.post(
        path, files={"archivo": ("acta.pdf", pdf_bytes, "application/pdf")}
    )

    assert res.status_code == 200
    body = res.json()
    assert body["fileName"].startswith("archivo-")
    assert body["location"] == f"/uploads/pdfs/{body['fileName']}"
    assert (upload_dir / body["fileName"]).read_bytes() == pdf_bytes


def test_upload_without_file_is_400(client):
    res = client.post("/upload")
    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION_ERROR"


def test_upload_non_pdf_is_400(client):
    res = client.post(
        "/upload", files={"archivo": ("notas.txt", b"hola", "text/plain")}
    )
    assert res.status_code == 400
    assert res.json()["code"] == "UNSUPPORTED_MEDIA"


def test_upload_too_large_is_400(client):
    big = b"%PDF-1.4\n" + b"0" * (2 * 1024 * 1024)
    res = client.post(
        "/upload", files={"archivo": ("big.pdf", big, "application/pdf")}
    )
    assert res.status_code == 400
    assert res.json()["code"] == "PAYLOAD_TOO_LARGE"


def test_serve_uploaded_pdf(client, pdf_bytes):
    location = client.post(
        "/upload", files={"archivo": ("acta.pdf", pdf_bytes, "application/pdf")}
    ).json()["location"]

    res = client.get(location)

    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert res.content == pdf_bytes


def test_serve_missing_pdf_is_404(client):
    res = client.get("/uploads/pdfs/archivo-no-existe.pdf")
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"


@pytest.mark.parametrize("path", ["/upload", "/casos/upload"])
def test_upload_over_body_limit_is_400(client, path):
    huge = b"%PDF-1.4\n" + b"0" * (6 * 1024 * 1024)
    res = client.post(path, files={"archivo": ("huge.pdf", huge, "application/pdf")})
    assert res.status_code == 400
    assert res.json()["code"] == "PAYLOAD_TOO_LARGE"
    assert res.headers["X-Request-Id"]


def test_json_body_over_limit_is_still_413(client):
    res = client.post(
        "/users/login",
        content=b"{" + b" " * (6 * 1024 * 1024) + b"}",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 413
    assert res.json()["code"] == "BODY_TOO_LARGE"
