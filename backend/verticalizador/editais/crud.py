from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session
from . import models

def create_edital(db: Session, file_name: str, file_size: int, file_hash: str, raw_text: str) -> models.Edital:
    db_edital = models.Edital(
        file_name=file_name,
        file_size=file_size,
        file_hash=file_hash,
        raw_text=raw_text,
        status=models.EditalStatus.PENDING
    )
    db.add(db_edital)
    db.commit()
    db.refresh(db_edital)
    return db_edital

def get_edital(db: Session, edital_id: int) -> Optional[models.Edital]:
    return db.query(models.Edital).filter(models.Edital.id == edital_id).first()

def get_edital_by_hash(db: Session, file_hash: str) -> Optional[models.Edital]:
    return db.query(models.Edital).filter(models.Edital.file_hash == file_hash).first()

def list_editais(db: Session) -> List[models.Edital]:
    return db.query(models.Edital).order_by(models.Edital.upload_date.desc()).all()

def get_verticalized_content_by_edital_id(db: Session, edital_id: int) -> Optional[models.VerticalizedContent]:
    return db.query(models.VerticalizedContent).filter(models.VerticalizedContent.edital_id == edital_id).first()

def save_verticalized_content(
    db: Session,
    edital_id: int,
    structured_json: dict,
    csv_export: str,
    processing_method: models.ProcessingMethod,
) -> models.VerticalizedContent:
    """
    Salva o resultado da verticalização, substituindo o anterior em caso de reprocessamento.
    """
    content = get_verticalized_content_by_edital_id(db, edital_id)
    if content is None:
        content = models.VerticalizedContent(edital_id=edital_id)
        db.add(content)

    content.structured_json = structured_json
    content.csv_export = csv_export
    content.processing_method = processing_method
    content.processed_at = datetime.utcnow()

    db.commit()
    db.refresh(content)
    return content
