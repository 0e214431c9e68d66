# backend/verticalizador/core/validators.py

"""
Validadores centralizados para o conteúdo verticalizado.

Validações determinísticas aplicadas à resposta da IA antes de aceitá-la;
qualquer erro aqui faz o pipeline cair no processador por template.
"""

from typing import Any, Dict, List


class ContentValidators:
    """Validadores do JSON verticalizado ({disciplinas: [{nome, topicos}]})"""

    @staticmethod
    def validate_disciplines_present(content: Dict[str, Any]) -> List[str]:
        """
        Valida se a resposta contém ao menos uma disciplina com nome.

        Returns:
            Lista de erros encontrados (vazia se validação passou)
        """
        errors = []
        disciplinas = content.get("disciplinas") or []
        if not disciplinas:
            errors.append("Nenhuma disciplina retornada.")
            return errors

        for index, disciplina in enumerate(disciplinas):
            if not (disciplina.get("nome") or "").strip():
                errors.append(f"Disciplina na posição {index} sem nome.")
        return errors

    @staticmethod
    def validate_topics_present(content: Dict[str, Any]) -> List[str]:
        """
        Valida se ao menos um tópico não vazio foi extraído no total.

        Returns:
            Lista de erros encontrados (vazia se validação passou)
        """
        topics = [
            topic
            for disciplina in content.get("disciplinas") or []
            for topic in disciplina.get("topicos") or []
        ]
        if not any(isinstance(topic, str) and topic.strip() for topic in topics):
            return ["Nenhum tópico extraído do conteúdo programático."]
        return []

    @staticmethod
    def validate_structured_content(content: Dict[str, Any]) -> List[str]:
        """Executa todas as validações do conteúdo verticalizado."""
        errors = ContentValidators.validate_disciplines_present(content)
        errors.extend(ContentValidators.validate_topics_present(content))
        return errors
