"""Agno-backed LLM calls for profile extraction and reply generation.

The first segment of a model string picks the Agno model class:

    openai/gpt-4o-mini                  -> OpenAIChat(id="gpt-4o-mini")
    anthropic/claude-3-haiku            -> Claude(id="claude-3-haiku")
    groq/llama-3.1-70b                  -> Groq(id="llama-3.1-70b")
    openrouter/anthropic/claude-3-haiku -> OpenRouter(id="anthropic/claude-3-haiku")
    mock/<name>                         -> canned "{}" reply, no network

A string without a provider segment is treated as mock.
"""

import importlib
import time
from dataclasses import dataclass
from typing import Any

from intake.config.models.conversation import ReplyGenerationConfig
from intake.config.models.extraction import ExtractionConfig
from intake.observability.logging import get_logger
from intake.observability.metrics import LLM_CALLS, LLM_LATENCY
from intake.providers.llm.base import (
    AuthenticationError,
    ContentFilterError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModelError,
    ProviderError,
    RateLimitError,
    TokenUsage,
)

logger = get_logger(__name__)

MOCK_PROVIDER = "mock"

# provider segment -> (module, class) of the Agno model
AGNO_MODEL_CLASSES: dict[str, tuple[str, str]] = {
    "openai": ("agno.models.openai", "OpenAIChat"),
    "anthropic": ("agno.models.anthropic", "Claude"),
    "groq": ("agno.models.groq", "Groq"),
    "openrouter": ("agno.models.openrouter", "OpenRouter"),
}

# First rule whose fragments all occur in the lower-cased message wins
ERROR_RULES: tuple[tuple[tuple[str, ...], type[ProviderError]], ...] = (
    (("rate", "limit"), RateLimitError),
    (("api key",), AuthenticationError),
    (("authentication",), AuthenticationError),
    (("content", "filter"), ContentFilterError),
    (("model", "not found"), ModelError),
    (("model", "does not exist"), ModelError),
)


@dataclass(frozen=True)
class ModelRoute:
    """A model string split into provider segment and provider-side id."""

    provider: str
    model_id: str

    @classmethod
    def parse(cls, model: str) -> "ModelRoute":
        provider, separator, model_id = model.partition("/")
        if not separator:
            return cls(MOCK_PROVIDER, model)
        return cls(provider, model_id)


def classify_error(error: Exception) -> ProviderError:
    """Map an exception raised inside Agno or a vendor SDK to a ProviderError."""
    if isinstance(error, ProviderError):
        return error
    message = str(error).lower()
    for fragments, error_type in ERROR_RULES:
        if all(fragment in message for fragment in fragments):
            return error_type(str(error))
    return ProviderError(f"Agno execution failed: {error}")


def split_messages(messages: list[LLMMessage]) -> tuple[list[str] | None, str]:
    """Return (instructions, input) for an Agno agent.

    System messages become the agent's instructions. A single remaining
    message is sent as-is; several are rendered as a labelled transcript.
    """
    instructions = [m.content for m in messages if m.role == "system"]
    turns = [m for m in messages if m.role != "system"]
    if len(turns) == 1:
        prompt = turns[0].content
    else:
        prompt = "\n\n".join(f"{m.role.capitalize()}: {m.content}" for m in turns)
    return instructions or None, prompt


class LLMExecutor(LLMProvider):
    """Runs one consumer's LLM calls, trying each configured model in turn.

    Example:
        executor = LLMExecutor(
            model="openai/gpt-4o-mini",
            fallback_models=["anthropic/claude-3-haiku-20240307"],
            step_name="profile_extraction",
        )
        response = await executor.generate([LLMMessage(role="user", content="Hi")])
    """

    def __init__(
        self,
        model: str,
        fallback_models: list[str] | None = None,
        step_name: str | None = None,
    ) -> None:
        self.model = model
        self.fallback_models = list(fallback_models or [])
        self.step_name = step_name
        # Agno model objects keyed by (model, temperature, max_tokens)
        self._agno_models: dict[tuple[str, float, int], Any] = {}

    @property
    def provider_name(self) -> str:
        return "agno"

    @property
    def models(self) -> list[str]:
        """Primary model followed by the fallbacks."""
        return [self.model, *self.fallback_models]

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,  # noqa: ARG002
    ) -> LLMResponse:
        """Generate with the first model that succeeds.

        Raises:
            ProviderError: Every model failed; the message lists each failure
        """
        failures: list[str] = []
        for model in self.models:
            try:
                return await self._generate_with_model(
                    model, messages, max_tokens=max_tokens, temperature=temperature
                )
            except ProviderError as e:
                failures.append(f"{model} ({type(e).__name__}: {e})")
                logger.warning(
                    "llm_model_failed",
                    model=model,
                    step=self.step_name,
                    error_type=type(e).__name__,
                    error=str(e),
                )

        raise ProviderError(
            f"All models failed for {self.step_name or 'llm'}: {'; '.join(failures)}"
        )

    def _get_or_create_model(self, model: str, temperature: float, max_tokens: int) -> Any:
        key = (model, temperature, max_tokens)
        if key not in self._agno_models:
            self._agno_models[key] = self._create_agno_model(model, temperature, max_tokens)
        return self._agno_models[key]

    def _create_agno_model(self, model: str, temperature: float, max_tokens: int) -> Any:
        route = ModelRoute.parse(model)
        if route.provider not in AGNO_MODEL_CLASSES:
            raise ProviderError(f"Unsupported model provider {route.provider!r} in {model!r}")

        module_name, class_name = AGNO_MODEL_CLASSES[route.provider]
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ProviderError(
                f"{class_name} needs an extra SDK: pip install 'intake[{route.provider}]'"
            ) from e

        model_cls = getattr(module, class_name)
        return model_cls(id=route.model_id, temperature=temperature, max_tokens=max_tokens)

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        *,
        max_tokens: int,
        temperature: float,
    ) -> LLMResponse:
        route = ModelRoute.parse(model)
        step = self.step_name or "llm"
        if route.provider == MOCK_PROVIDER:
            LLM_CALLS.labels(step=step, provider=MOCK_PROVIDER, outcome="success").inc()
            return self._mock_response(model)

        from agno.agent import Agent

        instructions, prompt = split_messages(messages)
        agent = Agent(
            model=self._get_or_create_model(model, temperature, max_tokens),
            instructions=instructions,
            markdown=False,
        )

        started = time.perf_counter()
        try:
            run_response = await agent.arun(prompt)
        except Exception as e:  # noqa: BLE001
            LLM_CALLS.labels(step=step, provider=route.provider, outcome="error").inc()
            raise classify_error(e) from e
        elapsed = time.perf_counter() - started

        LLM_CALLS.labels(step=step, provider=route.provider, outcome="success").inc()
        LLM_LATENCY.labels(step=step, provider=route.provider).observe(elapsed)

        content = str(run_response.content or "")
        logger.debug(
            "llm_call_complete",
            model=model,
            step=self.step_name,
            latency_ms=round(elapsed * 1000, 2),
            content_length=len(content),
        )
        return LLMResponse(
            content=content,
            model=model,
            finish_reason="stop",
            metadata={
                "latency_ms": elapsed * 1000,
                "provider": route.provider,
                "step": self.step_name,
            },
        )

    def _mock_response(self, model: str) -> LLMResponse:
        return LLMResponse(
            content="{}",
            model=model,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=10, completion_tokens=1, total_tokens=11),
            metadata={"provider": MOCK_PROVIDER, "step": self.step_name},
        )


def create_extraction_executor(config: ExtractionConfig) -> LLMExecutor:
    """Executor for profile extraction, with the configured fallback chain."""
    return LLMExecutor(
        model=config.model,
        fallback_models=config.fallback_models,
        step_name="profile_extraction",
    )


def create_reply_executor(config: ReplyGenerationConfig) -> LLMExecutor:
    """Executor for conversational replies."""
    return LLMExecutor(model=config.model, step_name="reply_generation")
