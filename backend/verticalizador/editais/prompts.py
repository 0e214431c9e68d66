verticalization_prompt = """
Analise este edital de concurso público e extraia o conteúdo programático. Retorne APENAS o JSON sem texto adicional.

REGRAS RÍGIDAS:
1. Mantenha numeração exata (1., 1.1., a., i.)
2. Preserve texto completo dos tópicos
3. Use ":" após disciplinas
4. Indente sub-tópicos com espaços: "   1.1."

FORMATO JSON OBRIGATÓRIO:
{{
  "disciplinas": [
    {{
      "nome": "CONTEUDO_PROGRAMATICO",
      "topicos": [
        "DISCIPLINA:",
        "1. Tópico exato...",
        "   1.1. Sub-tópico...",
        "PRÓXIMA DISCIPLINA:",
        "1. Tópico..."
      ]
    }}
  ]
}}

TEXTO: {texto_edital}
"""
