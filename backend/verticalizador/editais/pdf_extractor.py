import io

import pdfplumber

from verticalizador.core.constants import FileProcessingConstants
from verticalizador.core.exceptions import InsufficientTextError, PDFExtractionError
from verticalizador.core.logging import log_function_call


@log_function_call
def extract_text_from_pdf(file_content: bytes) -> str:
    """Extrai o texto de todas as páginas, separadas por quebra de linha."""
    try:
        with pdfplumber.open(io.BytesIO(file_content)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        raise PDFExtractionError(str(exc)) from exc
    return "\n".join(pages)


def ensure_sufficient_text(raw_text: str) -> str:
    """Rejeita PDFs sem camada de texto (escaneados) antes de qualquer processamento."""
    extracted_chars = len((raw_text or "").strip())
    if extracted_chars < FileProcessingConstants.MIN_EXTRACTED_TEXT_CHARS:
        raise InsufficientTextError(extracted_chars, FileProcessingConstants.MIN_EXTRACTED_TEXT_CHARS)
    return raw_text
