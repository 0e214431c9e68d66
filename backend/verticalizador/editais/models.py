import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Text, ForeignKey, DateTime, JSON, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from verticalizador.core.database import Base

class EditalStatus(enum.Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

class ProcessingMethod(str, enum.Enum):
    AI = "AI"
    TEMPLATE = "TEMPLATE"

class Edital(Base):
    __tablename__ = "editais"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True)  # MVP sem autenticação: sempre NULL
    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    file_hash = Column(String, unique=True, index=True)
    raw_text = Column(Text, nullable=True)
    status = Column(SQLAlchemyEnum(EditalStatus), nullable=False, default=EditalStatus.PENDING)
    error_message = Column(String, nullable=True)
    upload_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # RELACIONAMENTO: um edital tem no máximo um conteúdo verticalizado
    verticalized_content = relationship(
        "VerticalizedContent",
        back_populates="edital",
        uselist=False,
        cascade="all, delete-orphan",
    )

class VerticalizedContent(Base):
    __tablename__ = "verticalized_contents"

    id = Column(Integer, primary_key=True, index=True)
    edital_id = Column(Integer, ForeignKey("editais.id"), unique=True, nullable=False)

    # {"disciplinas": [{"nome": ..., "topicos": [...]}]}
    structured_json = Column(JSON, nullable=False)
    csv_export = Column(Text, nullable=True)
    processing_method = Column(SQLAlchemyEnum(ProcessingMethod), nullable=False)
    processed_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    accuracy_score = Column(Float, nullable=True)

    edital = relationship("Edital", back_populates="verticalized_content")
