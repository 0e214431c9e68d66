# backend/verticalizador/editais/template_processor.py

"""
Processador de editais por template: fallback determinístico da IA.

Pipeline:
    texto bruto -> localização do conteúdo programático -> segmentação linha a
    linha (regras ordenadas, a primeira que casa vence) -> varredura agressiva
    se poucos tópicos foram encontrados.

A profundidade de cada tópico fica codificada no prefixo de espaços da
própria string: 0 (disciplina ou tópico principal), 3 (subtópico, item com
letra ou romano, continuação) ou 6 (sub-subtópico).
"""

import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Pattern, Sequence

from verticalizador.core.constants import LoggingConstants, TemplateProcessingConstants as TPC
from verticalizador.core.logging import LogContext, elapsed_ms

# Conjuntos de marcadores testados em ordem; o primeiro que casar define o início
CONTENT_MARKER_PATTERNS: Sequence[Pattern] = (
    re.compile(r"ANEXO I|CONTEÚDO PROGRAMÁTICO|CONHECIMENTOS", re.IGNORECASE),
    re.compile(r"LÍNGUA PORTUGUESA|[0-9]+\s+Interpretação de texto", re.IGNORECASE),
    re.compile(r"Especialização|BÁSICOS|ESPECÍFICOS", re.IGNORECASE),
)

TOP_LEVEL_RE = re.compile(r"^[0-9]+\.?\s+.+")
SECOND_LEVEL_RE = re.compile(r"^[0-9]+\.[0-9]+\.?\s+.+")
THIRD_LEVEL_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.?\s+.+")
LETTERED_RE = re.compile(r"^[a-z]\.\s+.+", re.IGNORECASE)
ROMAN_RE = re.compile(r"^[ivx]+\.\s+.+", re.IGNORECASE)

BOILERPLATE_RE = re.compile(r"^(?:" + "|".join(TPC.BOILERPLATE_PREFIXES) + r")", re.IGNORECASE)
DATE_RE = re.compile(r"^[0-9]{1,2}/[0-9]{1,2}/[0-9]{4}")
ARTICLE_RE = re.compile(r"^Art\.")

FALLBACK_NUMBERED_RE = re.compile(r"^[0-9]+[.)\s]+.+")
FALLBACK_DECIMAL_RE = re.compile(r"^[0-9]+\.[0-9]+[.)\s]+.+")

# Espaços e BOM (U+FEFF) nas bordas da linha
LINE_BORDER_RE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


def indent(depth: int) -> str:
    """Prefixo de espaços para a profundidade (0, 1 ou 2)."""
    return " " * (TPC.INDENT_WIDTH * depth)


def ensure_suffix(text: str, suffix: str) -> str:
    return text if text.endswith(suffix) else text + suffix


def split_lines(text: str) -> List[str]:
    """Quebra em linhas, remove espaços (e BOM) nas bordas e descarta linhas vazias."""
    cleaned = (LINE_BORDER_RE.sub("", line) for line in text.split("\n"))
    return [line for line in cleaned if line]


def locate_content_start(raw_text: str, patterns: Sequence[Pattern] = CONTENT_MARKER_PATTERNS) -> int:
    """
    Retorna o offset onde começa o conteúdo programático.

    Cada conjunto de marcadores é tentado em ordem e apenas a primeira
    ocorrência do primeiro conjunto que casar é usada. Sem nenhum marcador,
    retorna 0 (texto inteiro).
    """
    for pattern in patterns:
        match = pattern.search(raw_text)
        if match:
            return match.start()
    return 0


@dataclass
class ParseState:
    """Estado mutável de uma única execução da segmentação."""
    current_discipline: str = ""
    topics: List[str] = field(default_factory=list)

    def add(self, text: str, depth: int = 0, suffix: str = ".") -> None:
        self.topics.append(indent(depth) + ensure_suffix(text, suffix))


class TopicRule(NamedTuple):
    name: str
    matches: Callable[[str, ParseState], bool]
    apply: Callable[[str, ParseState], None]


def _is_descriptive_continuation(line: str, state: ParseState) -> bool:
    return (
        len(line) > TPC.MIN_DESCRIPTIVE_LINE_LENGTH
        and not BOILERPLATE_RE.match(line)
        and not DATE_RE.match(line)
        and not ARTICLE_RE.match(line)
        and bool(state.current_discipline)
        and len(state.topics) > 0
        and ":" not in line
        and len(line) > TPC.MIN_CONTINUATION_LENGTH
    )


def _start_discipline(line: str, state: ParseState) -> None:
    state.current_discipline = ensure_suffix(line, ":")
    state.topics.append(state.current_discipline)


def build_topic_rules(disciplines: Sequence[str] = TPC.KNOWN_DISCIPLINES) -> List[TopicRule]:
    """
    Monta a lista ordenada de regras de classificação.

    TOP_LEVEL_RE exige espaço logo após o ponto opcional, então nunca casa
    com "1.1 ..." ou "1.1.1 ..."; os padrões decimais são mutuamente exclusivos.
    """
    disciplines = tuple(disciplines)
    return [
        TopicRule(
            "discipline",
            lambda line, state: any(name in line for name in disciplines),
            _start_discipline,
        ),
        TopicRule(
            "top_level",
            lambda line, state: bool(
                TOP_LEVEL_RE.match(line)
                and len(line) > TPC.MIN_NUMBERED_TOPIC_LENGTH
                and state.current_discipline
            ),
            lambda line, state: state.add(line, depth=0),
        ),
        TopicRule(
            "second_level",
            lambda line, state: bool(SECOND_LEVEL_RE.match(line)),
            lambda line, state: state.add(line, depth=1),
        ),
        TopicRule(
            "third_level",
            lambda line, state: bool(THIRD_LEVEL_RE.match(line)),
            lambda line, state: state.add(line, depth=2),
        ),
        TopicRule(
            "lettered",
            lambda line, state: bool(LETTERED_RE.match(line) and state.current_discipline),
            lambda line, state: state.add(line, depth=1),
        ),
        TopicRule(
            "roman",
            lambda line, state: bool(ROMAN_RE.match(line) and state.current_discipline),
            lambda line, state: state.add(line, depth=1),
        ),
        TopicRule(
            "continuation",
            _is_descriptive_continuation,
            lambda line, state: state.add(line, depth=1),
        ),
    ]


class EditalTemplateProcessor:
    """
    Segmenta o texto extraído de um edital em tópicos hierárquicos.

    Uma instância é reutilizável: todo estado de parsing vive em ParseState,
    criado a cada chamada de process().
    """

    def __init__(self, disciplines: Optional[Sequence[str]] = None):
        self.disciplines = tuple(disciplines) if disciplines is not None else TPC.KNOWN_DISCIPLINES
        self.rules = build_topic_rules(self.disciplines)

    def classify_line(self, line: str, state: ParseState) -> Optional[TopicRule]:
        """Retorna a primeira regra que casa com a linha, ou None se a linha deve ser descartada."""
        for rule in self.rules:
            if rule.matches(line, state):
                return rule
        return None

    def segment(self, text: str, state: Optional[ParseState] = None) -> ParseState:
        state = state or ParseState()
        for line in split_lines(text):
            rule = self.classify_line(line, state)
            if rule is not None:
                rule.apply(line, state)
        return state

    def aggressive_fallback(self, lines: Sequence[str], topics: List[str]) -> int:
        """
        Varredura permissiva sobre todas as linhas; só acrescenta, nunca remove.

        A deduplicação é por igualdade exata da string já formatada.
        Retorna quantos tópicos foram acrescentados.
        """
        added = 0
        for line in lines:
            candidate = None
            if FALLBACK_DECIMAL_RE.match(line) and len(line) > TPC.MIN_FALLBACK_DECIMAL_LENGTH:
                candidate = indent(1) + ensure_suffix(line, ".")
            elif FALLBACK_NUMBERED_RE.match(line) and len(line) > TPC.MIN_FALLBACK_NUMBERED_LENGTH:
                candidate = ensure_suffix(line, ".")
            elif any(keyword in line for keyword in TPC.FALLBACK_KEYWORDS) and len(line) > TPC.MIN_FALLBACK_KEYWORD_LENGTH:
                candidate = ensure_suffix(line, ".")

            if candidate is not None and candidate not in topics:
                topics.append(candidate)
                added += 1
        return added

    def process(self, raw_text: str) -> Dict[str, Any]:
        start_time = time.time()
        raw_text = raw_text or ""

        with LogContext("editais.template_processor", text_length=len(raw_text)) as log:
            content_start = locate_content_start(raw_text)
            relevant_text = raw_text[content_start:]
            log.debug(
                "Content region located",
                content_start=content_start,
                relevant_length=len(relevant_text),
                preview=relevant_text[:LoggingConstants.PREVIEW_CHARS],
            )

            state = self.segment(relevant_text)
            log.info("Primary segmentation completed", topics_count=len(state.topics))

            if len(state.topics) < TPC.MIN_TOPICS_BEFORE_FALLBACK:
                added = self.aggressive_fallback(split_lines(raw_text), state.topics)
                log.warning(
                    "Too few topics found, aggressive extraction applied",
                    recovered_topics=added,
                    topics_count=len(state.topics),
                )

            log.info(
                "Template processing completed",
                topics_count=len(state.topics),
                duration_ms=elapsed_ms(start_time),
            )

        return {
            "disciplinas": [
                {"nome": TPC.DISCIPLINE_CONTAINER_NAME, "topicos": state.topics},
            ]
        }


def process_edital_with_template(raw_text: str) -> Dict[str, Any]:
    """Atalho com a lista padrão de disciplinas."""
    return EditalTemplateProcessor().process(raw_text)
