import time
from typing import Any, Dict

from verticalizador.core.ai_service import LangChainService
from verticalizador.core.constants import AIConstants
from verticalizador.core.exceptions import AIValidationError
from verticalizador.core.logging import elapsed_ms, get_logger
from verticalizador.core.validators import ContentValidators
from .ai_schemas import AIVerticalizedContentResponse
from .prompts import verticalization_prompt
from .template_processor import CONTENT_MARKER_PATTERNS, locate_content_start

logger = get_logger("editais.ai_verticalizer")


def select_relevant_text(raw_text: str) -> str:
    """Foca no conteúdo programático (só o primeiro conjunto de marcadores) e limita o tamanho do prompt."""
    content_start = locate_content_start(raw_text, CONTENT_MARKER_PATTERNS[:1])
    return raw_text[content_start:][:AIConstants.MAX_INPUT_TEXT_CHARS]


def verticalize_with_ai(raw_text: str, ai_service: LangChainService) -> Dict[str, Any]:
    """
    Pede à IA a estrutura {disciplinas: [{nome, topicos}]} do edital.

    Levanta AIValidationError se a resposta vier sem disciplinas ou tópicos;
    erros do provedor são propagados para o chamador decidir o fallback.
    """
    start_time = time.time()
    relevant_text = select_relevant_text(raw_text)
    logger.info("Sending edital to AI", text_length=len(raw_text), prompt_text_length=len(relevant_text))

    response = ai_service.generate_structured_output(
        prompt_template=verticalization_prompt,
        prompt_input={"texto_edital": relevant_text},
        response_schema=AIVerticalizedContentResponse,
    )
    data = response.model_dump()

    errors = ContentValidators.validate_structured_content(data)
    if errors:
        logger.warning("AI response rejected", validation_errors=errors)
        raise AIValidationError(errors)

    logger.info(
        "AI verticalization completed",
        duration_ms=elapsed_ms(start_time),
        disciplines_count=len(data["disciplinas"]),
    )
    return data
