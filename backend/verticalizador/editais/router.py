import hashlib
from typing import Annotated, List

from fastapi import APIRouter, Depends, UploadFile, File, Request, Response, status
from sqlalchemy.orm import Session

from verticalizador.core.database import get_db
from verticalizador.core.constants import FileProcessingConstants
from verticalizador.core.exceptions import (
    CSVNotFoundError,
    EditalNotFoundError,
    EditalNotReprocessableError,
    InvalidFileError,
)
from verticalizador.core.logging import get_logger
from verticalizador.core.rate_limit import limiter
from verticalizador.core.security import InputValidator, MAX_FILE_SIZE_MB
from verticalizador.core.settings import settings
from . import crud
from . import schemas as edital_schemas
from .models import EditalStatus
from .pdf_extractor import extract_text_from_pdf, ensure_sufficient_text
from .tasks import process_edital_task

logger = get_logger("editais.router")

router = APIRouter()


def _enforce_pdf_validation(upload: UploadFile) -> bytes:
    contents = upload.file.read()
    ok, err = InputValidator.validate_pdf_file(contents, upload.content_type)
    upload.file.seek(0)
    if not ok:
        raise InvalidFileError("PDF", MAX_FILE_SIZE_MB, reason=err)
    return contents


def _enqueue_processing(db: Session, edital) -> None:
    """Agenda a verticalização; se o broker falhar, o edital vai para FAILED (reprocessável)."""
    try:
        process_edital_task.delay(edital.id)
    except Exception as e:
        logger.error("Failed to enqueue edital processing", edital_id=edital.id, error=str(e), error_type=type(e).__name__)
        edital.status = EditalStatus.FAILED
        edital.error_message = f"Falha ao enfileirar processamento: {e}"
        db.commit()
        raise


@router.post("/process", response_model=edital_schemas.Edital, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.UPLOAD_RATE_LIMIT)
def upload_edital(
    request: Request,
    response: Response,
    pdf: Annotated[UploadFile, File()],
    db: Session = Depends(get_db),
):
    """
    Upload do PDF do edital: valida o arquivo, extrai o texto e agenda a verticalização.
    Uploads repetidos (mesmo hash de conteúdo) devolvem o edital já existente.
    """
    contents = _enforce_pdf_validation(pdf)
    file_hash = hashlib.sha256(contents).hexdigest()

    existing = crud.get_edital_by_hash(db, file_hash=file_hash)
    if existing:
        logger.info("Duplicate upload, returning existing edital", edital_id=existing.id)
        response.status_code = status.HTTP_200_OK
        return existing

    raw_text = ensure_sufficient_text(extract_text_from_pdf(contents))

    db_edital = crud.create_edital(
        db=db,
        file_name=InputValidator.sanitize_filename(pdf.filename or FileProcessingConstants.DEFAULT_FILENAME),
        file_size=len(contents),
        file_hash=file_hash,
        raw_text=raw_text,
    )

    _enqueue_processing(db, db_edital)
    logger.info("Edital queued for processing", edital_id=db_edital.id, text_length=len(raw_text))
    return db_edital


@router.get("/", response_model=List[edital_schemas.Edital], summary="List uploaded editais")
def list_editais(db: Session = Depends(get_db)):
    return crud.list_editais(db)


@router.get("/{edital_id}", response_model=edital_schemas.EditalWithContent)
def get_edital(edital_id: int, db: Session = Depends(get_db)):
    edital = crud.get_edital(db, edital_id)
    if not edital:
        raise EditalNotFoundError(edital_id)

    return {
        "edital": edital,
        "verticalized_content": crud.get_verticalized_content_by_edital_id(db, edital_id),
    }


@router.get("/{edital_id}/csv", summary="Download the verticalized CSV")
def download_csv(edital_id: int, db: Session = Depends(get_db)):
    content = crud.get_verticalized_content_by_edital_id(db, edital_id)
    if not content or not content.csv_export:
        raise CSVNotFoundError(edital_id)

    return Response(
        content=content.csv_export,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{FileProcessingConstants.CSV_DOWNLOAD_FILENAME}"',
        },
    )


@router.post("/{edital_id}/reprocess", response_model=edital_schemas.Edital, summary="Reprocess a failed edital")
def reprocess_edital(edital_id: int, db: Session = Depends(get_db)):
    edital = crud.get_edital(db, edital_id)
    if not edital:
        raise EditalNotFoundError(edital_id)

    if edital.status != EditalStatus.FAILED:
        raise EditalNotReprocessableError(edital_id, edital.status.name)

    edital.status = EditalStatus.PENDING
    edital.error_message = None
    db.commit()
    db.refresh(edital)

    _enqueue_processing(db, edital)
    return edital
