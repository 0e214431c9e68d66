# backend/verticalizador/editais/edital_processor.py

"""
EditalProcessor: Pipeline orientado a passos para verticalizar editais.
A política de retry fica na task; aqui apenas a execução dos passos.
"""

import time
from typing import Any, Dict, Tuple

from sqlalchemy.orm import Session

from verticalizador.core.settings import settings
from verticalizador.core.constants import AIConstants
from verticalizador.core.logging import LogContext, elapsed_ms
from verticalizador.core.exceptions import EditalNotFoundError
from verticalizador.core.ai_service import LangChainService
from verticalizador.editais import crud
from verticalizador.editais.models import Edital, EditalStatus, ProcessingMethod
from verticalizador.editais.ai_verticalizer import verticalize_with_ai
from verticalizador.editais.template_processor import process_edital_with_template
from verticalizador.editais.csv_export import generate_csv


class EditalProcessor:
    def __init__(self, db: Session, edital_id: int):
        self.db = db
        self.edital_id = edital_id
        self.edital: Edital | None = None
        self.ai_service: LangChainService | None = None

    def process(self) -> str:
        with LogContext("editais.edital_processor", edital_id=self.edital_id) as log:
            try:
                self._setup(log)
                raw_text = self._get_raw_text(log)
                structured, method = self._verticalize(raw_text, log)
                csv_export = self._render_csv(structured, log)
                self._persist_data(structured, csv_export, method, log)
                self._mark_completed(log)
                return f"Processamento do edital {self.edital_id} concluído"
            except Exception as exc:
                self._handle_error(exc, log)
                raise

    def _setup(self, log):
        self.edital = self.db.query(Edital).filter(Edital.id == self.edital_id).first()
        if not self.edital:
            raise EditalNotFoundError(self.edital_id)
        self.edital.status = EditalStatus.PROCESSING
        self.edital.error_message = None
        self.db.commit()

        if settings.GEMINI_API_KEY:
            try:
                self.ai_service = LangChainService(
                    provider=AIConstants.PROVIDER,
                    api_key=settings.GEMINI_API_KEY,
                    model_name=settings.GEMINI_MODEL,
                    temperature=AIConstants.TEMPERATURE_PRECISE,
                    max_output_tokens=AIConstants.MAX_OUTPUT_TOKENS,
                )
            except Exception as e:
                # Cliente de IA mal configurado não impede o caminho por template
                log.warning("AI service unavailable, using template", error=str(e), error_type=type(e).__name__)
                self.ai_service = None
        else:
            log.warning("GEMINI_API_KEY not configured, AI step disabled")
        log.info("Setup completed", status=self.edital.status.value, ai_enabled=self.ai_service is not None)

    def _get_raw_text(self, log) -> str:
        raw_text = self.edital.raw_text or ""
        log.info("Raw text loaded from DB", text_length=len(raw_text))
        return raw_text

    def _verticalize(self, raw_text: str, log) -> Tuple[Dict[str, Any], ProcessingMethod]:
        start_time = time.time()
        if self.ai_service is not None:
            try:
                data = verticalize_with_ai(raw_text, self.ai_service)
                log.info("AI verticalization used", duration_ms=elapsed_ms(start_time))
                return data, ProcessingMethod.AI
            except Exception as exc:
                log.warning("AI verticalization failed, falling back to template", error=str(exc), error_type=type(exc).__name__)

        data = process_edital_with_template(raw_text)
        log.info("Template verticalization used", duration_ms=elapsed_ms(start_time))
        return data, ProcessingMethod.TEMPLATE

    def _render_csv(self, structured: Dict[str, Any], log) -> str:
        csv_export = generate_csv(structured)
        log.info("CSV rendered", rows=csv_export.count("\n"))
        return csv_export

    def _persist_data(self, structured: Dict[str, Any], csv_export: str, method: ProcessingMethod, log):
        start_time = time.time()
        crud.save_verticalized_content(
            db=self.db,
            edital_id=self.edital_id,
            structured_json=structured,
            csv_export=csv_export,
            processing_method=method,
        )
        log.info("Persistence completed", duration_ms=elapsed_ms(start_time), method=method.value)

    def _mark_completed(self, log):
        self.edital.status = EditalStatus.COMPLETED
        self.db.commit()
        log.info("Edital marked completed", status=self.edital.status.value)

    def _handle_error(self, exc: Exception, log):
        log.error("Processor failed", error=str(exc), error_type=type(exc).__name__)
        if self.edital is not None:
            self.db.rollback()
            self.edital.status = EditalStatus.FAILED
            self.edital.error_message = str(exc)
            self.db.commit()
