"""LLM-generated conversational replies."""

from collections.abc import Sequence

from intake.conversation.models import Message
from intake.conversation.prompts import build_reply_prompt
from intake.observability.logging import get_logger
from intake.profile.enums import ProfileField
from intake.profile.models import PartialProfile
from intake.providers.llm.base import LLMMessage, LLMProvider, ProviderError

logger = get_logger(__name__)


class ReplyGenerator:
    """Generate a friendly reply that steers toward the next missing field."""

    def __init__(
        self,
        llm: LLMProvider,
        history_window: int = 6,
        temperature: float = 0.7,
        max_tokens: int = 150,
    ) -> None:
        self._llm = llm
        self._history_window = history_window
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def generate(
        self,
        user_text: str,
        profile: PartialProfile,
        missing_fields: Sequence[ProfileField],
        history: Sequence[Message] = (),
    ) -> str:
        """Generate a reply.

        Raises:
            ProviderError: The provider failed or returned no text
        """
        recent = list(history)[-self._history_window:] if self._history_window else []
        system_prompt, user_prompt = build_reply_prompt(
            user_text, profile, missing_fields, recent
        )

        response = await self._llm.generate(
            [
                LLMMessage(role="system", content=system_prompt),
                LLMMessage(role="user", content=user_prompt),
            ],
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )

        reply = response.content.strip()
        if not reply:
            raise ProviderError("Reply generation returned empty text")

        logger.debug("reply_generated", model=response.model, reply_length=len(reply))
        return reply
