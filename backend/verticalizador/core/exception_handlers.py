# backend/verticalizador/core/exception_handlers.py

from datetime import datetime

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from .exceptions import (
    VerticalizadorException,
    ValidationError as DomainValidationError,
    ResourceNotFoundError,
    BusinessLogicError,
    AIProcessingError,
)
from .logging import get_logger

logger = get_logger("exception_handlers")

# Primeira classe que casar define o status; o resto vira 500
STATUS_BY_EXCEPTION = (
    (DomainValidationError, 400),
    (ResourceNotFoundError, 404),
    (BusinessLogicError, 422),
    (AIProcessingError, 503),
)

VALIDATION_MESSAGES = {
    "missing": "Campo obrigatório ausente",
    "value_error.missing": "Campo obrigatório ausente",
    "string_too_short": "Tamanho de texto inválido",
    "string_too_long": "Tamanho de texto inválido",
    "int_parsing": "Número inteiro inválido",
    "int_type": "Número inteiro inválido",
    "float_parsing": "Número decimal inválido",
    "float_type": "Número decimal inválido",
    "bool_parsing": "Valor booleano inválido",
    "bool_type": "Valor booleano inválido",
    "enum": "Valor fora das opções permitidas",
}

_PRIMITIVES = (str, int, float, bool, type(None))


def get_status_code_for_exception(exc: VerticalizadorException) -> int:
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def _error_response(request: Request, status_code: int, code: str, message: str, details: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details,
                "timestamp": datetime.utcnow().isoformat(),
                "path": str(request.url.path),
            }
        },
    )


async def verticalizador_exception_handler(request: Request, exc: VerticalizadorException):
    """Converte exceções de domínio no envelope {"error": {...}}."""
    status_code = get_status_code_for_exception(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Domain exception",
        status_code=status_code,
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
        method=request.method,
        user_agent=request.headers.get("user-agent"),
    )
    return _error_response(request, status_code, exc.error_code, exc.message, exc.details)


def get_user_friendly_validation_message(error: dict) -> str:
    """Traduz o tipo de erro do Pydantic para uma mensagem em português."""
    return VALIDATION_MESSAGES.get(error.get("type", ""), error.get("msg", "Valor inválido"))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning("Request validation failed", errors_count=len(errors), path=request.url.path, method=request.method)

    field_errors = [
        {
            "field": " > ".join(str(loc) for loc in error["loc"]),
            "message": get_user_friendly_validation_message(error),
            # Uploads e objetos não são ecoados de volta
            "invalid_value": error.get("input") if isinstance(error.get("input"), _PRIMITIVES) else None,
        }
        for error in errors
    ]
    return _error_response(request, 422, "VALIDATION_ERROR", "Dados enviados contêm erros", {"field_errors": field_errors})


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded", path=request.url.path, limit=str(exc.detail))
    return _error_response(
        request,
        429,
        "RATE_LIMIT_EXCEEDED",
        "Muitas requisições. Tente novamente em instantes",
        {"limit": str(exc.detail)},
    )
