from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from .models import EditalStatus, ProcessingMethod

# --- Conteúdo verticalizado, de dentro para fora ---

class Disciplina(BaseModel):
    nome: str
    topicos: List[str] = []

class StructuredContent(BaseModel):
    disciplinas: List[Disciplina] = []

# --- Registros persistidos ---

class Edital(BaseModel):
    id: int
    file_name: str
    file_size: int
    status: EditalStatus
    error_message: Optional[str] = None
    upload_date: datetime
    model_config = ConfigDict(from_attributes=True)

class VerticalizedContent(BaseModel):
    id: int
    edital_id: int
    structured_json: StructuredContent
    csv_export: Optional[str] = None
    processing_method: ProcessingMethod
    processed_at: datetime
    accuracy_score: Optional[float] = None
    model_config = ConfigDict(from_attributes=True)

# Resposta de GET /editais/{id}
class EditalWithContent(BaseModel):
    edital: Edital
    verticalized_content: Optional[VerticalizedContent] = None
