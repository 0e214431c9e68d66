import time
from typing import Any, Dict, Optional, Type

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import BaseModel

from .constants import AIConstants
from .exceptions import AIValidationError, GeminiAPIError
from .logging import elapsed_ms, get_logger

logger = get_logger("ai_service")


class LangChainService:
    """
    Cliente fino sobre LangChain para respostas estruturadas (Pydantic).

    Falhas do provedor (rede, cota, timeout) viram GeminiAPIError depois de
    esgotadas as tentativas; resposta vazia ou fora do schema vira
    AIValidationError.
    """

    SUPPORTED_PROVIDERS = ("google",)

    def __init__(
        self,
        provider: str,
        api_key: str,
        model_name: str,
        temperature: float = 0.2,
        max_output_tokens: Optional[int] = None,
        max_attempts: int = AIConstants.MAX_API_ATTEMPTS,
    ):
        if provider not in self.SUPPORTED_PROVIDERS:
            logger.error("Unsupported AI provider", provider=provider)
            raise ValueError(f"Provedor '{provider}' não suportado.")

        self.provider = provider
        self.model_name = model_name
        self.max_attempts = max_attempts
        self.llm = ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=api_key,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        logger.info(
            "AI service initialized",
            provider=provider,
            model=model_name,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    def build_chain(self, prompt_template: str, response_schema: Type[BaseModel]) -> Runnable:
        prompt = ChatPromptTemplate.from_template(prompt_template)
        chain = prompt | self.llm.with_structured_output(response_schema)
        return chain.with_retry(stop_after_attempt=self.max_attempts)

    def generate_structured_output(
        self,
        prompt_template: str,
        prompt_input: Dict[str, Any],
        response_schema: Type[BaseModel],
    ) -> BaseModel:
        """Executa o prompt e devolve uma instância preenchida de ``response_schema``."""
        schema_name = response_schema.__name__
        log = logger.bind(schema=schema_name, model=self.model_name)
        start_time = time.time()
        log.info("Structured output requested", prompt_keys=sorted(prompt_input))

        chain = self.build_chain(prompt_template, response_schema)
        try:
            response = chain.invoke(prompt_input)
        except Exception as exc:
            log.error(
                "AI provider call failed",
                error=str(exc),
                error_type=type(exc).__name__,
                attempts=self.max_attempts,
                duration_ms=elapsed_ms(start_time),
            )
            raise GeminiAPIError(str(exc), retry_count=self.max_attempts - 1) from exc

        # with_structured_output devolve None quando o JSON não casa com o schema
        if response is None:
            log.warning("AI response did not match schema", duration_ms=elapsed_ms(start_time))
            raise AIValidationError([f"Resposta vazia ou fora do schema {schema_name}"])

        log.info("Structured output completed", duration_ms=elapsed_ms(start_time))
        return response
