"""
Legal AI Client.

PydanticAI agents for the legal questions the app answers:

    consult()              full consultation for the Mini App, persisted by
                           ConsultationService
    quick_answer()         a few sentences for the Telegram bot, not persisted
    analyze_tax_dispute()  structured TaxAnalysis of a tax requirement

The consultation agent asks the model to finish its reply with
"Источники / Уверенность / Предложения / Вопросы" lines, which
parse_ai_response() splits off the answer body.

Every provider failure surfaces as AIServiceError (HTTP 503).

Usage:
    from modules.backend.services.ai_client import get_ai_client
    result = await get_ai_client().consult("Как вернуть залог?", LegalCategory.HOUSING)
"""

import re
from dataclasses import dataclass, field

import aiobreaker
import openai
from openai import AsyncOpenAI
from pydantic_ai import Agent, RunContext
from pydantic_ai.exceptions import AgentRunError, ModelHTTPError
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from modules.backend.core.config import get_app_config, get_settings
from modules.backend.core.exceptions import AIServiceError
from modules.backend.core.logging import get_logger, log_with_source
from modules.backend.core.resilience import create_circuit_breaker, log_retry
from modules.backend.models.consultation import CATEGORY_NAMES, LegalCategory
from modules.backend.schemas.tax import TaxAnalysis
from modules.backend.services.tax_analysis import TAX_ANALYSIS_PROMPT

logger = get_logger(__name__)

SYSTEM_PROMPT = """Вы опытный юрист, специализирующийся на российском праве.
Область права: {category_name}.

Дайте понятный и практичный ответ на вопрос пользователя:
- ссылайтесь на конкретные статьи законов РФ;
- опишите пошаговый порядок действий;
- предупредите о сроках и рисках;
- если вопрос требует личной консультации адвоката, скажите об этом.

Завершите ответ четырьмя строками строго в таком формате:
Источники: <законы и статьи через запятую>
Уверенность: <число от 0 до 100>
Предложения: <практические шаги через точку с запятой>
Вопросы: <уточняющие вопросы через точку с запятой>"""

QUICK_PROMPT = """Вы юридический помощник. Ответьте кратко (до 5 предложений) на вопрос
по российскому праву и посоветуйте обратиться за полной консультацией в приложении."""

_CONFIDENCE_RE = re.compile(r"Уверенность:\s*(\d+)", re.IGNORECASE)
_TRAILER_RE = re.compile(
    r"^\s*(Источники|Уверенность|Предложения|Вопросы)\s*:\s*(.*)$",
    re.IGNORECASE | re.MULTILINE,
)

_RETRYABLE_STATUS = {408, 429, 500, 502, 503, 504}


def _is_retryable(exc: BaseException) -> bool:
    """Transient provider failures: throttling, 5xx and dropped connections."""
    if isinstance(exc, ModelHTTPError):
        return exc.status_code in _RETRYABLE_STATUS
    return isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError))


@dataclass
class ConsultationDeps:
    """Dependencies injected into the consultation agent at runtime."""

    category: LegalCategory


@dataclass
class AIConsultationResult:
    answer: str
    confidence: int
    sources: list[str]
    suggestions: list[str] = field(default_factory=list)
    follow_up_questions: list[str] = field(default_factory=list)
    model: str | None = None
    tokens_used: int | None = None


def _split_list(value: str) -> list[str]:
    """Items are split on semicolons when the line has any, otherwise on commas."""
    parts = value.split(";") if ";" in value else value.split(",")
    return [part.strip(" .") for part in parts if part.strip(" .")]


def parse_ai_response(
    text: str,
    default_confidence: int = 85,
    default_sources: list[str] | None = None,
) -> AIConsultationResult:
    """
    Split a model reply into the answer body and its structured trailer.

    Confidence is clamped to 0..100. Missing trailer lines fall back to
    the defaults.
    """
    trailer: dict[str, str] = {}
    for match in _TRAILER_RE.finditer(text):
        trailer[match.group(1).lower()] = match.group(2).strip()

    confidence = default_confidence
    confidence_match = _CONFIDENCE_RE.search(text)
    if confidence_match:
        confidence = max(0, min(100, int(confidence_match.group(1))))

    sources = _split_list(trailer.get("источники", ""))
    if not sources:
        sources = list(default_sources or ["Российское законодательство"])

    answer = _TRAILER_RE.sub("", text).strip()
    answer = re.sub(r"\n{3,}", "\n\n", answer)

    return AIConsultationResult(
        answer=answer,
        confidence=confidence,
        sources=sources,
        suggestions=_split_list(trailer.get("предложения", "")),
        follow_up_questions=_split_list(trailer.get("вопросы", "")),
    )


def _build_model(api_key: str | None, timeout: int, model_name: str) -> OpenAIChatModel:
    """OpenAI chat model with SDK retries off; tenacity owns retrying."""
    client = AsyncOpenAI(
        api_key=api_key or get_settings().openai_api_key,
        timeout=timeout,
        max_retries=0,
    )
    return OpenAIChatModel(model_name, provider=OpenAIProvider(openai_client=client))


class LegalAIClient:
    """
    Legal consultant backed by three PydanticAI agents.

    Calls go through a circuit breaker and a tenacity retry on transient
    errors. Tests pass ``model`` (a pydantic_ai TestModel or FunctionModel)
    instead of talking to OpenAI.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: Model | None = None,
        breaker: aiobreaker.CircuitBreaker | None = None,
    ) -> None:
        self._config = get_app_config().ai
        self._model = model or _build_model(
            api_key, self._config.timeout_seconds, self._config.model
        )
        self._breaker = breaker or create_circuit_breaker(
            "openai",
            fail_max=self._config.circuit_breaker.fail_max,
            timeout_duration=self._config.circuit_breaker.timeout_duration,
        )

        self._consult_agent: Agent[ConsultationDeps, str] = Agent(
            self._model,
            deps_type=ConsultationDeps,
            output_type=str,
        )

        @self._consult_agent.instructions
        def category_instructions(ctx: RunContext[ConsultationDeps]) -> str:
            return SYSTEM_PROMPT.format(category_name=CATEGORY_NAMES[ctx.deps.category])

        self._quick_agent: Agent[None, str] = Agent(
            self._model,
            output_type=str,
            instructions=QUICK_PROMPT,
        )

        self._tax_agent: Agent[None, TaxAnalysis] = Agent(
            self._model,
            output_type=TaxAnalysis,
            instructions=TAX_ANALYSIS_PROMPT,
        )

        self._run_with_retry = retry(
            stop=stop_after_attempt(self._config.retry.max_attempts),
            wait=wait_exponential(
                multiplier=self._config.retry.backoff_multiplier,
                min=1,
                max=self._config.retry.backoff_max,
            ),
            retry=retry_if_exception(_is_retryable),
            before_sleep=log_retry,
            reraise=True,
        )(self._run)

    @property
    def model_name(self) -> str:
        return self._config.model

    async def _run(
        self,
        agent: Agent,
        prompt: str,
        deps: object,
        max_tokens: int,
        temperature: float,
    ):
        return await agent.run(
            prompt,
            deps=deps,
            model_settings=ModelSettings(
                temperature=temperature,
                max_tokens=max_tokens,
            ),
        )

    async def _ask(
        self,
        agent: Agent,
        prompt: str,
        deps: object,
        max_tokens: int,
        temperature: float | None = None,
    ):
        if temperature is None:
            temperature = self._config.temperature
        try:
            result = await self._breaker.call_async(
                self._run_with_retry, agent, prompt, deps, max_tokens, temperature
            )
        except aiobreaker.CircuitBreakerError as e:
            log_with_source(logger, "ai", "error", "AI circuit open", error=str(e))
            raise AIServiceError() from e
        except (AgentRunError, openai.OpenAIError) as e:
            log_with_source(
                logger, "ai", "error", "AI provider call failed",
                error_type=type(e).__name__, error=str(e),
            )
            raise AIServiceError() from e

        if isinstance(result.output, str) and not result.output.strip():
            log_with_source(logger, "ai", "error", "AI provider returned an empty reply")
            raise AIServiceError("AI service returned an empty response")
        return result

    async def consult(
        self,
        query: str,
        category: LegalCategory,
        context: str | None = None,
    ) -> AIConsultationResult:
        """Full consultation: structured answer with confidence and sources."""
        prompt = query if not context else f"{query}\n\nКонтекст: {context}"
        result = await self._ask(
            self._consult_agent,
            prompt,
            ConsultationDeps(category=category),
            self._config.max_tokens,
        )

        parsed = parse_ai_response(
            result.output,
            default_confidence=self._config.default_confidence,
            default_sources=self._config.default_sources,
        )
        usage = result.usage()
        parsed.model = self.model_name
        parsed.tokens_used = usage.input_tokens + usage.output_tokens

        log_with_source(
            logger, "ai", "info", "AI consultation completed",
            category=category.value,
            confidence=parsed.confidence,
            requests=usage.requests,
            tokens=parsed.tokens_used,
        )
        return parsed

    async def quick_answer(self, query: str) -> str:
        """Short answer for the Telegram bot."""
        result = await self._ask(
            self._quick_agent, query, None, self._config.quick_max_tokens
        )
        return result.output.strip()

    async def analyze_tax_dispute(self, prompt: str) -> TaxAnalysis:
        """Structured assessment of a tax requirement described by ``prompt``."""
        result = await self._ask(
            self._tax_agent,
            prompt,
            None,
            self._config.analysis_max_tokens,
            temperature=self._config.analysis_temperature,
        )
        usage = result.usage()
        log_with_source(
            logger, "ai", "info", "AI tax analysis completed",
            success_probability=result.output.success_probability,
            requests=usage.requests,
            tokens=usage.input_tokens + usage.output_tokens,
        )
        return result.output


_ai_client: LegalAIClient | None = None


def get_ai_client() -> LegalAIClient:
    """Process-wide client so the circuit breaker state is shared."""
    global _ai_client
    if _ai_client is None:
        _ai_client = LegalAIClient()
    return _ai_client
