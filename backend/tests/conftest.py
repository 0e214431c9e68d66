import os

# Precisa valer antes de qualquer import de verticalizador.core.settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = ""
os.environ.setdefault("ENVIRONMENT", "development")

import pytest

from verticalizador.core.database import SessionLocal, engine
from verticalizador import models


@pytest.fixture
def db_session():
    """Sessão em SQLite em memória com tabelas recriadas a cada teste."""
    models.Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        models.Base.metadata.drop_all(bind=engine)
