# backend/verticalizador/core/exceptions.py

"""
Hierarquia de exceções de domínio.

A classe intermediária define o status HTTP (ver exception_handlers); cada
folha define seu error_code, catalogado em error_codes.ERROR_CODES.
"""

from typing import List, Optional


class VerticalizadorException(Exception):
    """Base de todas as exceções do projeto"""
    error_code = "GENERIC_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).error_code
        self.details = details or {}


# === Upload e extração (400) ===
class ValidationError(VerticalizadorException):
    """Entrada do usuário rejeitada"""


class InvalidFileError(ValidationError):
    error_code = "INVALID_FILE"

    def __init__(self, file_type: str, max_size_mb: int, reason: Optional[str] = None):
        super().__init__(
            reason or f"Arquivo inválido. Apenas {file_type} de até {max_size_mb}MB são permitidos",
            details={"allowed_type": file_type, "max_size_mb": max_size_mb},
        )


class PDFExtractionError(ValidationError):
    error_code = "PDF_EXTRACTION_FAILED"

    def __init__(self, extraction_error: str):
        super().__init__("Falha ao extrair texto do PDF", details={"extraction_error": extraction_error})


class InsufficientTextError(ValidationError):
    """PDF sem camada de texto (escaneado) ou praticamente vazio"""
    error_code = "INSUFFICIENT_TEXT"

    def __init__(self, extracted_chars: int, min_chars: int):
        super().__init__(
            "Não foi possível extrair texto suficiente do PDF",
            details={"extracted_chars": extracted_chars, "min_chars": min_chars},
        )


# === Recursos (404) ===
class ResourceNotFoundError(VerticalizadorException):
    pass


class EditalNotFoundError(ResourceNotFoundError):
    error_code = "EDITAL_NOT_FOUND"

    def __init__(self, edital_id: int):
        super().__init__("Edital não encontrado", details={"edital_id": edital_id})


class CSVNotFoundError(ResourceNotFoundError):
    """Edital ainda não processado, ou processado sem CSV"""
    error_code = "CSV_NOT_FOUND"

    def __init__(self, edital_id: int):
        super().__init__("CSV não encontrado para este edital", details={"edital_id": edital_id})


# === IA (503) ===
class AIProcessingError(VerticalizadorException):
    pass


class GeminiAPIError(AIProcessingError):
    error_code = "GEMINI_API_ERROR"

    def __init__(self, api_error: str, retry_count: int = 0):
        super().__init__(
            "Falha ao consultar o provedor de IA",
            details={"api_error": api_error, "retry_count": retry_count},
        )


class AIValidationError(AIProcessingError):
    error_code = "AI_VALIDATION_ERROR"

    def __init__(self, validation_errors: List[str]):
        super().__init__("A IA gerou uma resposta inválida.", details={"validation_errors": validation_errors})


# === Regras de negócio (422) ===
class BusinessLogicError(VerticalizadorException):
    pass


class EditalNotReprocessableError(BusinessLogicError):
    error_code = "EDITAL_NOT_REPROCESSABLE"

    def __init__(self, edital_id: int, current_status: str):
        super().__init__(
            f"Apenas editais com falha podem ser reprocessados. Status atual: {current_status}",
            details={"edital_id": edital_id, "current_status": current_status},
        )
