"""Scripted LLM provider for tests."""

from collections import deque
from typing import Any

from intake.providers.llm.base import LLMMessage, LLMProvider, LLMResponse, TokenUsage


def _approx_tokens(text: str) -> int:
    return len(text) // 4


class MockLLMProvider(LLMProvider):
    """Returns queued responses without network access.

    Each call consumes one queued item; once the queue is empty the
    default response is returned. A queued exception is raised instead of
    returned, so a test can script a failing attempt followed by a good one.
    Every call is recorded in call_history.
    """

    def __init__(
        self,
        default_response: str = "Mock response",
        default_model: str = "mock-model",
        responses: list[str | Exception] | None = None,
    ):
        self.default_response = default_response
        self.default_model = default_model
        self._queue: deque[str | Exception] = deque(responses or [])
        self.call_history: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    def queue_response(self, response: str | Exception) -> None:
        """Append a response (or exception) to the queue."""
        self._queue.append(response)

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        self.call_history.append({
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "kwargs": kwargs,
        })

        item = self._queue.popleft() if self._queue else self.default_response
        if isinstance(item, Exception):
            raise item

        prompt_tokens = sum(_approx_tokens(m.content) for m in messages)
        completion_tokens = _approx_tokens(item)
        return LLMResponse(
            content=item,
            model=self.default_model,
            finish_reason="stop",
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )
