"""LLM access for intake.

Extraction and reply generation each talk to an LLMProvider. In production
that is an LLMExecutor routing a model string such as "openai/gpt-4o-mini"
to an Agno model class, with optional fallback models; tests use
MockLLMProvider with a scripted response queue.
"""

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
from intake.providers.llm.executor import (
    LLMExecutor,
    ModelRoute,
    classify_error,
    create_extraction_executor,
    create_reply_executor,
)
from intake.providers.llm.mock import MockLLMProvider

__all__ = [
    # Data models
    "LLMMessage",
    "LLMResponse",
    "TokenUsage",
    "LLMProvider",
    # Errors
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ModelError",
    "ContentFilterError",
    "classify_error",
    # Executor
    "LLMExecutor",
    "ModelRoute",
    "create_extraction_executor",
    "create_reply_executor",
    # Testing
    "MockLLMProvider",
]
