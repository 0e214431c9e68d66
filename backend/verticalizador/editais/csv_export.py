from typing import Any, Dict, Iterable, List

from verticalizador.core.constants import CSVConstants


def escape_csv_field(value: str) -> str:
    """Coloca o valor entre aspas, dobrando as aspas internas (RFC 4180)."""
    return '"' + value.replace('"', '""') + '"'


def iter_topics(content: Dict[str, Any]) -> Iterable[str]:
    for disciplina in content.get("disciplinas") or []:
        for topico in disciplina.get("topicos") or []:
            yield topico


def generate_csv(content: Dict[str, Any]) -> str:
    """
    Gera o CSV de acompanhamento de estudos a partir do conteúdo verticalizado.

    Uma linha por tópico, na ordem de inserção e achatando todas as
    disciplinas; as colunas "estudado" e "revisado" vão vazias para o
    candidato preencher. Sem quebra de linha no final.
    """
    lines: List[str] = [CSVConstants.HEADER]
    for topico in iter_topics(content):
        lines.append(f"{escape_csv_field(topico)},,")
    return CSVConstants.LINE_SEPARATOR.join(lines)
