# backend/verticalizador/core/middleware.py

import re
import time
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .constants import LoggingConstants
from .logging import clear_request_context, elapsed_ms, generate_request_id, get_logger, set_request_context

SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    # /docs carrega swagger-ui do jsdelivr
    "Content-Security-Policy": (
        "default-src 'self'; "
        "img-src 'self' data: https://fastapi.tiangolo.com; "
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net"
    ),
}

EDITAL_PATH_RE = re.compile(r"/editais/([0-9]+)(?:/|$)")

UNLOGGED_PATHS = frozenset({"/health", "/favicon.ico"})


def edital_id_from_path(path: str) -> Optional[int]:
    match = EDITAL_PATH_RE.search(path)
    return int(match.group(1)) if match else None


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Loga início e fim de cada requisição e propaga o X-Request-ID.

    O request_id (recebido ou gerado) e o edital_id da URL entram no contexto
    de log, então aparecem também nos logs emitidos pelos handlers.
    """

    logger = get_logger("middleware.request")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        request_id = request.headers.get("x-request-id") or generate_request_id()
        set_request_context(request_id, edital_id=edital_id_from_path(path))

        quiet = path in UNLOGGED_PATHS
        start_time = time.time()
        if not quiet:
            self.logger.info(
                "Request started",
                method=request.method,
                path=path,
                client_ip=self._client_ip(request),
                content_length=request.headers.get("content-length"),
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            self.logger.error(
                "Request failed with exception",
                method=request.method,
                path=path,
                duration_ms=elapsed_ms(start_time),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise
        finally:
            clear_request_context()

        response.headers["X-Request-ID"] = request_id
        if not quiet:
            self._log_response(request, response, elapsed_ms(start_time), request_id)
        return response

    def _log_response(self, request: Request, response: Response, duration_ms: float, request_id: str) -> None:
        fields = dict(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            request_id=request_id,
        )
        if response.status_code >= 500:
            self.logger.error("Request completed with server error", **fields)
        elif response.status_code >= 400:
            self.logger.warning("Request completed with client error", **fields)
        elif duration_ms > LoggingConstants.SLOW_REQUEST_THRESHOLD_MS:
            # Upload síncrono de PDF grande passa por extração de texto
            self.logger.warning("Slow request", **fields)
        else:
            self.logger.info("Request completed", **fields)

    @staticmethod
    def _client_ip(request: Request) -> Optional[str]:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.headers.get("x-real-ip") or (request.client.host if request.client else None)
