# backend/verticalizador/core/security.py

from __future__ import annotations

import re
from typing import Optional, Tuple

from verticalizador.core.constants import FileProcessingConstants

MAX_FILE_SIZE_MB = FileProcessingConstants.MAX_PDF_SIZE_MB
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024

PDF_MAGIC = b"%PDF"
PDF_EOF_MARKER = b"%%EOF"
# Alguns geradores escrevem lixo depois do %%EOF; procura só no fim do arquivo
PDF_EOF_WINDOW_BYTES = 2048

MAX_FILENAME_CHARS = 150
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")
PATH_SEPARATORS = re.compile(r"[\\/]")


class InputValidator:
    @staticmethod
    def sanitize_filename(filename: Optional[str]) -> str:
        """Mantém só o nome do arquivo (sem diretórios, inclusive de Windows) com caracteres seguros."""
        base = PATH_SEPARATORS.split(filename or "")[-1]
        safe = UNSAFE_FILENAME_CHARS.sub("_", base)[:MAX_FILENAME_CHARS]
        return safe or FileProcessingConstants.DEFAULT_FILENAME

    @staticmethod
    def validate_pdf_file(file_content: bytes, content_type: Optional[str] = None) -> Tuple[bool, Optional[str]]:
        """
        Validação barata do upload antes de abrir o PDF.

        Returns:
            (True, None) se válido, senão (False, mensagem para o usuário)
        """
        if not file_content:
            return False, "Nenhum arquivo PDF enviado"
        if len(file_content) > MAX_FILE_SIZE_BYTES:
            return False, f"Arquivo maior que {MAX_FILE_SIZE_MB}MB"
        if content_type and content_type not in FileProcessingConstants.SUPPORTED_FILE_TYPES:
            return False, "Tipo de arquivo inválido, apenas PDF"
        if not file_content.startswith(PDF_MAGIC):
            return False, "Tipo de arquivo inválido, apenas PDF"
        if PDF_EOF_MARKER not in file_content[-PDF_EOF_WINDOW_BYTES:]:
            return False, "Arquivo PDF inválido (EOF ausente)"
        return True, None
