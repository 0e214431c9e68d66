# Registro único dos modelos ORM: importar este módulo garante que todas as
# tabelas estejam em Base.metadata (create_all no app e no worker Celery).

from verticalizador.core.database import Base  # noqa: F401

from verticalizador.editais.models import Edital, VerticalizedContent  # noqa: F401
