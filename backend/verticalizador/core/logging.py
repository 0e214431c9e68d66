"""
Logging estruturado com structlog.

Cada linha de log carrega, quando disponíveis, o ``request_id`` da requisição
HTTP e o ``edital_id`` em processamento (API ou worker Celery). Em produção a
saída é JSON com campo ``severity`` no formato do Google Cloud Logging; em
desenvolvimento, console colorido.
"""

import functools
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Optional

import structlog

from .constants import LoggingConstants

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
edital_id_var: ContextVar[Optional[int]] = ContextVar("edital_id", default=None)

SEVERITY_BY_METHOD = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARNING",
    "warn": "WARNING",
    "error": "ERROR",
    "exception": "ERROR",
    "critical": "CRITICAL",
}

SENSITIVE_KEYS = ("api_key", "secret", "password", "token", "authorization")

# Bibliotecas barulhentas demais no nível INFO
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "sqlalchemy.engine", "httpx", "pdfminer", "pdfplumber")


def set_request_context(request_id: str, edital_id: Optional[int] = None) -> None:
    request_id_var.set(request_id)
    edital_id_var.set(edital_id)


def set_edital_context(edital_id: Optional[int]) -> None:
    """Marca o edital em processamento (usado pelo worker, fora de requisições)."""
    edital_id_var.set(edital_id)


def clear_request_context() -> None:
    request_id_var.set(None)
    edital_id_var.set(None)


def generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:8]}"


def elapsed_ms(start_time: float) -> float:
    """Milissegundos desde ``start_time`` (valor de time.time())."""
    return round((time.time() - start_time) * 1000, 2)


def add_request_context(logger, method_name, event_dict):
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    edital_id = edital_id_var.get()
    if edital_id is not None:
        event_dict.setdefault("edital_id", edital_id)
    return event_dict


def add_severity_level(logger, method_name, event_dict):
    level = (event_dict.get("level") or method_name or "").lower()
    if level:
        event_dict["severity"] = SEVERITY_BY_METHOD.get(level, level.upper())
    return event_dict


def _redact(value):
    if isinstance(value, dict):
        return {
            key: "[REDACTED]" if any(s in str(key).lower() for s in SENSITIVE_KEYS) else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_redact(item) for item in value]
    return value


def filter_sensitive_data(logger, method_name, event_dict):
    """Mascara chaves de API e afins, inclusive em estruturas aninhadas."""
    return _redact(event_dict)


def truncate_long_values(logger, method_name, event_dict):
    """Textos de edital podem ter centenas de KB; corta qualquer string longa demais."""
    limit = LoggingConstants.MAX_FIELD_CHARS
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > limit:
            event_dict[key] = f"{value[:limit]}... [{len(value) - limit} chars truncated]"
    return event_dict


def setup_logging(log_level: str = "INFO", is_development: bool = True) -> None:
    """Configura structlog sobre o logging da stdlib.

    Args:
        log_level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        is_development: console legível em vez de JSON
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors = [
        add_request_context,
        add_severity_level,
        filter_sensitive_data,
        truncate_long_values,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if is_development:
        renderers = [structlog.processors.StackInfoRenderer(), structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors + renderers,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LogContext:
    """
    Logger com contexto fixo para um bloco (um passo do pipeline, uma task).

        with LogContext(processor="edital", edital_id=1) as log:
            log.info("...")
    """

    def __init__(self, logger_name: str = None, **context):
        self.context = context
        self.logger = get_logger(logger_name)

    def __enter__(self):
        return self.logger.bind(**self.context)

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False


def log_function_call(func):
    """Loga início, fim (com duração) e erro de uma chamada; a exceção segue adiante."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        # bind só na chamada: no import o structlog ainda pode não estar configurado
        log = get_logger(func.__module__).bind(function=func.__name__)
        start_time = time.time()
        log.debug("Function call started", args_count=len(args), kwargs_count=len(kwargs))
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            log.error("Function call failed", error=str(exc), error_type=type(exc).__name__, duration_ms=elapsed_ms(start_time))
            raise
        log.info("Function call completed", duration_ms=elapsed_ms(start_time))
        return result

    return wrapper
