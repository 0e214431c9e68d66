# backend/tests/unit/test_core/test_constants.py

import importlib


def test_constants_have_expected_values():
    constants = importlib.import_module("verticalizador.core.constants")

    assert constants.CeleryConstants.MAX_RETRIES == 3
    assert constants.CeleryConstants.RETRY_BACKOFF_SECONDS == 5
    assert constants.CeleryConstants.SOFT_TIME_LIMIT_SECONDS == 300
    assert constants.CeleryConstants.HARD_TIME_LIMIT_SECONDS == 600

    assert constants.AIConstants.TEMPERATURE_PRECISE == 0.1
    assert constants.AIConstants.MAX_INPUT_TEXT_CHARS == 30000
    assert constants.FileProcessingConstants.MAX_PDF_SIZE_MB == 20
    assert constants.FileProcessingConstants.MIN_EXTRACTED_TEXT_CHARS == 100


def test_template_constants():
    tpc = importlib.import_module("verticalizador.core.constants").TemplateProcessingConstants

    assert tpc.DISCIPLINE_CONTAINER_NAME == "CONTEUDO_PROGRAMATICO"
    assert tpc.INDENT_WIDTH == 3
    assert tpc.MIN_TOPICS_BEFORE_FALLBACK == 5
    assert len(tpc.KNOWN_DISCIPLINES) == 12
    assert len(set(tpc.KNOWN_DISCIPLINES)) == len(tpc.KNOWN_DISCIPLINES)
    assert "RACIOCÍNIO LÓGICO" in tpc.KNOWN_DISCIPLINES
