"""Shared LLM types: messages, responses, the provider interface and errors."""

from abc import ABC, abstractmethod
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class LLMMessage(BaseModel):
    """One prompt message sent to a provider."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="system, user or assistant")
    content: str = Field(..., description="Message text")


class TokenUsage(BaseModel):
    """Token counts reported for one call."""

    prompt_tokens: int = Field(..., ge=0)
    completion_tokens: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)


class LLMResponse(BaseModel):
    """Text returned by a provider plus call details."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model string that produced the text")
    finish_reason: str | None = Field(default=None, description="Why generation stopped")
    usage: TokenUsage | None = Field(default=None, description="Token counts, when known")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Provider, consumer step and latency"
    )


class LLMProvider(ABC):
    """Text generation backend used by extraction and reply generation."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short identifier for logs."""

    @abstractmethod
    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        """Return a completion for messages.

        Raises:
            ProviderError: The backend could not produce a completion
        """


class ProviderError(Exception):
    """An LLM call failed; extraction treats it as a capability failure."""


class AuthenticationError(ProviderError):
    """The API key was missing or rejected."""


class RateLimitError(ProviderError):
    """The provider throttled the request."""


class ModelError(ProviderError):
    """The requested model doesn't exist or isn't available."""


class ContentFilterError(ProviderError):
    """The provider's safety filter blocked the prompt or the reply."""
