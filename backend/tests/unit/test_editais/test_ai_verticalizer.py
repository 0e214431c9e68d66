# backend/tests/unit/test_editais/test_ai_verticalizer.py

import pytest
from unittest.mock import MagicMock
from langchain_core.prompts import ChatPromptTemplate

from verticalizador.core.exceptions import AIValidationError
from verticalizador.editais.ai_schemas import AIDisciplina, AIVerticalizedContentResponse
from verticalizador.editais.ai_verticalizer import select_relevant_text, verticalize_with_ai
from verticalizador.editais.prompts import verticalization_prompt


def _ai_service(response):
    service = MagicMock()
    service.generate_structured_output.return_value = response
    return service


def test_prompt_has_only_edital_text_variable():
    prompt = ChatPromptTemplate.from_template(verticalization_prompt)
    assert prompt.input_variables == ["texto_edital"]


def test_select_relevant_text_uses_first_marker_set_only():
    # LÍNGUA PORTUGUESA pertence ao segundo conjunto de marcadores e não desloca o início
    text = "Capa\nLÍNGUA PORTUGUESA\n1. Crase"
    assert select_relevant_text(text) == text

    text = "Capa do edital\nANEXO I\nLÍNGUA PORTUGUESA"
    assert select_relevant_text(text) == "ANEXO I\nLÍNGUA PORTUGUESA"


def test_select_relevant_text_is_capped():
    text = "ANEXO I " + "x" * 40000
    assert len(select_relevant_text(text)) == 30000


def test_verticalize_with_ai_returns_plain_dict():
    response = AIVerticalizedContentResponse(
        disciplinas=[AIDisciplina(nome="CONTEUDO_PROGRAMATICO", topicos=["LÍNGUA PORTUGUESA:", "1. Crase."])]
    )
    service = _ai_service(response)

    data = verticalize_with_ai("ANEXO I\nLÍNGUA PORTUGUESA\n1. Crase", service)

    assert data == {"disciplinas": [{"nome": "CONTEUDO_PROGRAMATICO", "topicos": ["LÍNGUA PORTUGUESA:", "1. Crase."]}]}
    kwargs = service.generate_structured_output.call_args.kwargs
    assert kwargs["prompt_template"] == verticalization_prompt
    assert kwargs["prompt_input"] == {"texto_edital": "ANEXO I\nLÍNGUA PORTUGUESA\n1. Crase"}
    assert kwargs["response_schema"] is AIVerticalizedContentResponse


@pytest.mark.parametrize("disciplinas", [
    [],
    [AIDisciplina(nome="CONTEUDO_PROGRAMATICO", topicos=[])],
    [AIDisciplina(nome="  ", topicos=["1. Crase."])],
])
def test_verticalize_with_ai_rejects_empty_structure(disciplinas):
    service = _ai_service(AIVerticalizedContentResponse(disciplinas=disciplinas))

    with pytest.raises(AIValidationError):
        verticalize_with_ai("texto qualquer", service)


def test_verticalize_with_ai_propagates_provider_errors():
    service = MagicMock()
    service.generate_structured_output.side_effect = RuntimeError("quota exceeded")

    with pytest.raises(RuntimeError):
        verticalize_with_ai("texto qualquer", service)
