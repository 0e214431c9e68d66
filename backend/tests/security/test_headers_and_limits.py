# backend/tests/security/test_headers_and_limits.py

import io
import pytest
from fastapi.testclient import TestClient
from verticalizador.main import app

client = TestClient(app)


def test_security_headers_present_on_health():
    r = client.get("/health")
    assert r.status_code == 200
    h = r.headers
    assert "Strict-Transport-Security" in h
    assert h.get("X-Frame-Options") == "DENY"
    assert h.get("X-Content-Type-Options") == "nosniff"
    assert h.get("Referrer-Policy") == "strict-origin-when-cross-origin"
    assert "Content-Security-Policy" in h


def test_request_id_is_echoed():
    r = client.get("/health", headers={"x-request-id": "abc-123"})
    assert r.headers.get("X-Request-ID") == "abc-123"


@pytest.mark.parametrize("payload,ctype", [
    (b"not-a-pdf", "application/pdf"),
    (b"%PDF-1.4 sem trailer", "application/pdf"),
])
def test_upload_rejects_invalid_pdf(db_session, mocker, payload, ctype):
    mock_task = mocker.patch("verticalizador.editais.router.process_edital_task")

    files = {"pdf": ("doc.pdf", io.BytesIO(payload), ctype)}
    r = client.post("/api/v1/editais/process", files=files)

    assert r.status_code == 400
    assert r.json()["error"]["code"] == "INVALID_FILE"
    mock_task.delay.assert_not_called()


def test_path_params_are_validated():
    r = client.get("/api/v1/editais/not-a-number")
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_permissions_policy_header():
    r = client.get("/health")
    assert "camera=()" in r.headers["Permissions-Policy"]


@pytest.mark.parametrize("path,expected", [
    ("/api/v1/editais/42", 42),
    ("/api/v1/editais/42/csv", 42),
    ("/api/v1/editais/", None),
    ("/api/v1/editais/process", None),
    ("/health", None),
])
def test_edital_id_is_taken_from_path(path, expected):
    from verticalizador.core.middleware import edital_id_from_path

    assert edital_id_from_path(path) == expected
