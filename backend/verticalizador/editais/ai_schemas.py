from pydantic import BaseModel, Field
from typing import List


class AIDisciplina(BaseModel):
    nome: str = Field(description="Nome do agrupamento. Use 'CONTEUDO_PROGRAMATICO' para agrupar todas as disciplinas do edital.")
    topicos: List[str] = Field(description="Linhas do conteúdo programático em ordem, ex: 'LÍNGUA PORTUGUESA:', '1. Compreensão de textos.', '   1.1. Tipologia textual.'.")

class AIVerticalizedContentResponse(BaseModel):
    disciplinas: List[AIDisciplina] = Field(description="Lista de disciplinas com seus tópicos hierárquicos, mantendo numeração e texto exatos do edital.")
