from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from verticalizador import models
from verticalizador.core.database import engine
from verticalizador.core.exception_handlers import (
    rate_limit_exceeded_handler,
    validation_exception_handler,
    verticalizador_exception_handler,
)
from verticalizador.core.exceptions import VerticalizadorException
from verticalizador.core.logging import get_logger, setup_logging
from verticalizador.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from verticalizador.core.rate_limit import limiter
from verticalizador.core.settings import settings
from verticalizador.editais.router import router as editais_router

setup_logging(log_level=settings.LOG_LEVEL, is_development=not settings.is_production)
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Sem migrações: as tabelas são criadas se ainda não existirem
    models.Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready", environment=settings.ENVIRONMENT, ai_enabled=bool(settings.GEMINI_API_KEY))
    yield


app = FastAPI(
    title="Verticalizador de Editais API",
    description="Extrai e verticaliza o conteúdo programático de editais de concursos.",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter

# Starlette executa o último middleware adicionado primeiro
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

app.add_exception_handler(VerticalizadorException, verticalizador_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.include_router(editais_router, prefix="/api/v1/editais", tags=["Editais"])


@app.get("/health")
def health_check():
    return {"status": "ok"}


logger.info("Application configured", cors_origins=settings.CORS_ORIGINS, upload_rate_limit=settings.UPLOAD_RATE_LIMIT)
