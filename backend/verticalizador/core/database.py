from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from verticalizador.core.settings import settings

# SQLite (testes e desenvolvimento local) precisa compartilhar a conexão entre threads
if settings.DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

# Cada instância de SessionLocal será uma sessão de banco de dados.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para nossos modelos ORM.
Base = declarative_base()

# Dependência dos endpoints
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
