# backend/tests/unit/test_editais/test_router.py

import io

import pytest
from fastapi.testclient import TestClient

from verticalizador.main import app
from verticalizador.core.exceptions import PDFExtractionError
from verticalizador.editais import crud
from verticalizador.editais.models import EditalStatus, ProcessingMethod

client = TestClient(app)
# Erros não tratados viram 500 em vez de subir para o teste
lenient_client = TestClient(app, raise_server_exceptions=False)

EXTRACTED_TEXT = "ANEXO I\nLÍNGUA PORTUGUESA\n" + "1. Compreensão e interpretação de textos de gêneros variados\n" * 3


def _pdf(marker: bytes = b"") -> bytes:
    return b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n" + marker + b"\n%%EOF"


def _upload(content: bytes, filename: str = "edital.pdf", content_type: str = "application/pdf"):
    files = {"pdf": (filename, io.BytesIO(content), content_type)}
    return client.post("/api/v1/editais/process", files=files)


@pytest.fixture
def mock_extract(mocker):
    return mocker.patch("verticalizador.editais.router.extract_text_from_pdf", return_value=EXTRACTED_TEXT)


@pytest.fixture
def mock_task(mocker):
    return mocker.patch("verticalizador.editais.router.process_edital_task")


def _create_edital(db, file_hash="hash-1", status=EditalStatus.PENDING):
    edital = crud.create_edital(db=db, file_name="edital.pdf", file_size=10, file_hash=file_hash, raw_text=EXTRACTED_TEXT)
    if status != EditalStatus.PENDING:
        edital.status = status
        db.commit()
        db.refresh(edital)
    return edital


class TestUpload:

    def test_upload_creates_edital_and_queues_task(self, db_session, mock_extract, mock_task):
        r = _upload(_pdf(b"upload-ok"), filename="Edital Nº 1 (2024).pdf")

        assert r.status_code == 201
        body = r.json()
        assert body["status"] == "PENDING"
        assert body["file_name"] == "Edital_N__1__2024_.pdf"
        assert body["file_size"] == len(_pdf(b"upload-ok"))
        mock_task.delay.assert_called_once_with(body["id"])

        stored = crud.get_edital(db_session, body["id"])
        assert stored.raw_text == EXTRACTED_TEXT
        assert len(stored.file_hash) == 64
        assert stored.user_id is None

    def test_duplicate_upload_returns_existing_edital(self, db_session, mock_extract, mock_task):
        first = _upload(_pdf(b"duplicado"))
        second = _upload(_pdf(b"duplicado"))

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        mock_task.delay.assert_called_once()
        mock_extract.assert_called_once()

    def test_broker_outage_leaves_edital_reprocessable(self, db_session, mock_extract, mock_task):
        mock_task.delay.side_effect = ConnectionError("broker down")
        files = {"pdf": ("edital.pdf", io.BytesIO(_pdf(b"sem-broker")), "application/pdf")}

        r = lenient_client.post("/api/v1/editais/process", files=files)

        assert r.status_code == 500
        stored = crud.list_editais(db_session)
        assert len(stored) == 1
        assert stored[0].status == EditalStatus.FAILED
        assert stored[0].error_message == "Falha ao enfileirar processamento: broker down"

        mock_task.delay.side_effect = None
        r = client.post(f"/api/v1/editais/{stored[0].id}/reprocess")

        assert r.status_code == 200
        assert r.json()["status"] == "PENDING"
        assert mock_task.delay.call_count == 2
        mock_task.delay.assert_called_with(stored[0].id)

    def test_rejects_non_pdf_content(self, db_session, mock_extract, mock_task):
        r = _upload(b"not-a-pdf")

        assert r.status_code == 400
        assert r.json()["error"]["code"] == "INVALID_FILE"
        mock_extract.assert_not_called()
        mock_task.delay.assert_not_called()

    def test_rejects_wrong_content_type(self, db_session, mock_extract, mock_task):
        r = _upload(_pdf(b"texto"), filename="edital.txt", content_type="text/plain")

        assert r.status_code == 400
        assert r.json()["error"]["message"] == "Tipo de arquivo inválido, apenas PDF"

    def test_scanned_pdf_is_rejected_without_creating_edital(self, db_session, mock_task, mocker):
        mocker.patch("verticalizador.editais.router.extract_text_from_pdf", return_value="   ")

        r = _upload(_pdf(b"escaneado"))

        assert r.status_code == 400
        assert r.json()["error"]["code"] == "INSUFFICIENT_TEXT"
        assert crud.list_editais(db_session) == []
        mock_task.delay.assert_not_called()

    def test_extraction_failure_returns_400(self, db_session, mock_task, mocker):
        mocker.patch("verticalizador.editais.router.extract_text_from_pdf", side_effect=PDFExtractionError("corrompido"))

        r = _upload(_pdf(b"corrompido"))

        assert r.status_code == 400
        assert r.json()["error"]["code"] == "PDF_EXTRACTION_FAILED"

    def test_missing_file_field_returns_validation_error(self, db_session):
        r = client.post("/api/v1/editais/process")

        assert r.status_code == 422
        assert r.json()["error"]["code"] == "VALIDATION_ERROR"


class TestQueries:

    def test_list_editais(self, db_session):
        _create_edital(db_session, "hash-a")
        _create_edital(db_session, "hash-b")

        r = client.get("/api/v1/editais/")

        assert r.status_code == 200
        assert len(r.json()) == 2

    def test_get_unknown_edital_returns_404(self, db_session):
        r = client.get("/api/v1/editais/999")

        assert r.status_code == 404
        assert r.json()["error"]["code"] == "EDITAL_NOT_FOUND"

    def test_get_pending_edital_has_no_content(self, db_session):
        edital = _create_edital(db_session)

        r = client.get(f"/api/v1/editais/{edital.id}")

        assert r.status_code == 200
        assert r.json()["edital"]["status"] == "PENDING"
        assert r.json()["verticalized_content"] is None

    def test_get_processed_edital_and_csv(self, db_session):
        edital = _create_edital(db_session, status=EditalStatus.COMPLETED)
        crud.save_verticalized_content(
            db=db_session,
            edital_id=edital.id,
            structured_json={"disciplinas": [{"nome": "CONTEUDO_PROGRAMATICO", "topicos": ["1. Crase."]}]},
            csv_export='conteudo,estudado,revisado\n"1. Crase.",,',
            processing_method=ProcessingMethod.TEMPLATE,
        )

        r = client.get(f"/api/v1/editais/{edital.id}")
        content = r.json()["verticalized_content"]
        assert content["processing_method"] == "TEMPLATE"
        assert content["structured_json"]["disciplinas"][0]["topicos"] == ["1. Crase."]
        assert content["accuracy_score"] is None

        r = client.get(f"/api/v1/editais/{edital.id}/csv")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        assert 'filename="edital_verticalizado.csv"' in r.headers["content-disposition"]
        assert r.text == 'conteudo,estudado,revisado\n"1. Crase.",,'

    def test_csv_not_ready_returns_404(self, db_session):
        edital = _create_edital(db_session)

        r = client.get(f"/api/v1/editais/{edital.id}/csv")

        assert r.status_code == 404
        assert r.json()["error"]["code"] == "CSV_NOT_FOUND"


class TestReprocess:

    def test_failed_edital_is_requeued(self, db_session, mock_task):
        edital = _create_edital(db_session, status=EditalStatus.FAILED)

        r = client.post(f"/api/v1/editais/{edital.id}/reprocess")

        assert r.status_code == 200
        assert r.json()["status"] == "PENDING"
        mock_task.delay.assert_called_once_with(edital.id)

    def test_requeue_failure_marks_edital_failed_again(self, db_session, mock_task):
        edital = _create_edital(db_session, status=EditalStatus.FAILED)
        mock_task.delay.side_effect = ConnectionError("broker down")

        r = lenient_client.post(f"/api/v1/editais/{edital.id}/reprocess")

        assert r.status_code == 500
        db_session.expire_all()
        stored = crud.get_edital(db_session, edital.id)
        assert stored.status == EditalStatus.FAILED
        assert "broker down" in stored.error_message

    def test_only_failed_editais_can_be_reprocessed(self, db_session, mock_task):
        edital = _create_edital(db_session, status=EditalStatus.COMPLETED)

        r = client.post(f"/api/v1/editais/{edital.id}/reprocess")

        assert r.status_code == 422
        assert r.json()["error"]["code"] == "EDITAL_NOT_REPROCESSABLE"
        mock_task.delay.assert_not_called()

    def test_reprocess_unknown_edital_returns_404(self, db_session, mock_task):
        r = client.post("/api/v1/editais/999/reprocess")

        assert r.status_code == 404
