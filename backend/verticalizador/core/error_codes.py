# backend/verticalizador/core/error_codes.py

# Todos os valores possíveis de error.code nas respostas de erro da API,
# com a descrição curta usada pelo frontend.
ERROR_CODES = {
    "GENERIC_ERROR": "Erro genérico",

    # Upload (400) e validação de requisição (422)
    "INVALID_FILE": "Arquivo inválido",
    "PDF_EXTRACTION_FAILED": "Falha na extração de texto do PDF",
    "INSUFFICIENT_TEXT": "Texto extraído insuficiente",
    "VALIDATION_ERROR": "Erros de validação de dados",
    "RATE_LIMIT_EXCEEDED": "Limite de requisições excedido",

    # 404
    "EDITAL_NOT_FOUND": "Edital não encontrado",
    "CSV_NOT_FOUND": "CSV não encontrado",

    # 503
    "GEMINI_API_ERROR": "Falha no provedor de IA",
    "AI_VALIDATION_ERROR": "Resposta inválida da IA",

    # 422
    "EDITAL_NOT_REPROCESSABLE": "Edital não pode ser reprocessado",
}
