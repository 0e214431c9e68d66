# backend/verticalizador/core/constants.py

"""
Constantes centralizadas para eliminar magic numbers no projeto.

Organizadas por etapa do processamento de editais: upload, extração,
verticalização por IA e processamento por template.
"""


class CeleryConstants:
    """Constantes para configuração do Celery"""
    RETRY_BACKOFF_SECONDS = 5  # Tempo de espera entre tentativas
    SOFT_TIME_LIMIT_SECONDS = 300  # 5 minutos - limite soft
    HARD_TIME_LIMIT_SECONDS = 600  # 10 minutos - limite hard
    MAX_RETRIES = 3  # Número máximo de tentativas


class AIConstants:
    """Constantes para configuração da IA"""
    PROVIDER = "google"
    TEMPERATURE_PRECISE = 0.1  # Verticalização deve preservar o texto do edital
    MAX_OUTPUT_TOKENS = 8192
    MAX_INPUT_TEXT_CHARS = 30000  # Evita estouro de tokens no prompt
    MAX_API_ATTEMPTS = 2  # Tentativas por chamada antes de cair no template


class FileProcessingConstants:
    """Constantes para processamento de arquivos"""
    SUPPORTED_FILE_TYPES = ["application/pdf"]
    MAX_PDF_SIZE_MB = 20
    MIN_EXTRACTED_TEXT_CHARS = 100  # Abaixo disso o PDF provavelmente é escaneado
    DEFAULT_FILENAME = "edital.pdf"
    CSV_DOWNLOAD_FILENAME = "edital_verticalizado.csv"


class TemplateProcessingConstants:
    """Constantes do processador de editais por template (fallback da IA)"""
    DISCIPLINE_CONTAINER_NAME = "CONTEUDO_PROGRAMATICO"

    # Disciplinas reconhecidas como cabeçalho; ordem importa apenas para leitura
    KNOWN_DISCIPLINES = (
        "LÍNGUA PORTUGUESA",
        "LÍNGUA INGLESA",
        "MATEMÁTICA FINANCEIRA",
        "CONTROLE EXTERNO",
        "ADMINISTRAÇÃO PÚBLICA",
        "DIREITO CONSTITUCIONAL",
        "DIREITO ADMINISTRATIVO",
        "DIREITO CIVIL",
        "DIREITO PROCESSUAL CIVIL",
        "SISTEMA NORMATIVO ANTICORRUPÇÃO",
        "ESTATÍSTICA",
        "RACIOCÍNIO LÓGICO",
    )

    # Prefixos de cabeçalho/rodapé que nunca são tópicos
    BOILERPLATE_PREFIXES = ("TRIBUNAL", "EDITAL", "ANEXO", "PÁGINA", "MINISTÉRIO")

    # Palavras que denunciam conteúdo de Língua Portuguesa na varredura agressiva
    FALLBACK_KEYWORDS = ("Interpretação", "Compreensão", "linguagem", "texto")

    INDENT_WIDTH = 3
    MIN_TOPICS_BEFORE_FALLBACK = 5

    # Comprimentos mínimos (estritamente maiores que)
    MIN_NUMBERED_TOPIC_LENGTH = 8
    MIN_DESCRIPTIVE_LINE_LENGTH = 20
    MIN_CONTINUATION_LENGTH = 30
    MIN_FALLBACK_NUMBERED_LENGTH = 15
    MIN_FALLBACK_DECIMAL_LENGTH = 10
    MIN_FALLBACK_KEYWORD_LENGTH = 20


class CSVConstants:
    """Constantes do CSV de estudo exportado"""
    HEADER = "conteudo,estudado,revisado"
    LINE_SEPARATOR = "\n"


class LoggingConstants:
    """Constantes para configuração de logs"""
    PREVIEW_CHARS = 500  # Trecho do texto bruto registrado em debug
    SLOW_REQUEST_THRESHOLD_MS = 5000
    MAX_FIELD_CHARS = 2000  # Corte de strings longas (texto bruto) nos logs
