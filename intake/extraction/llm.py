"""LLM-backed profile extraction."""

import json
from collections.abc import Sequence

from intake.conversation.models import Message
from intake.errors import ExtractionCapabilityFailure
from intake.extraction.base import ExtractionSource, Extractor
from intake.extraction.parsing import parse_profile_output
from intake.observability.logging import get_logger
from intake.profile.models import PartialProfile
from intake.providers.llm.base import LLMMessage, LLMProvider, ProviderError

logger = get_logger(__name__)


EXTRACTION_SYSTEM_PROMPT = """You are a profile data extraction system. Analyze the user's message and extract any profile information.

CURRENT PROFILE: {current_profile}

{conversation_history}Your task is to identify if the user is providing any of these pieces of information:
- name: Their full name or first name
- age: Their age in years, as a number
- gender: Biological gender - "male" or "female"
- location: Where they live (city, state, country)

Only include fields that are clearly stated or strongly implied. Omit anything uncertain.
If information conflicts with the current profile, prefer the newer information.

EXAMPLES:
User: "My name is Danny" -> {{"name": "Danny"}}
User: "I'm 25" -> {{"age": 25}}
User: "I'm from New York" -> {{"location": "New York"}}
User: "I'm male" -> {{"gender": "male"}}
User: "Danny, 25, male, NYC" -> {{"name": "Danny", "age": 25, "gender": "male", "location": "NYC"}}

If the message doesn't contain clear profile information, return an empty object {{}}.
Respond with JSON only, no other text."""

EXTRACTION_USER_PROMPT = 'Analyze this message and extract any profile information: "{message}"'


def format_history(history: Sequence[Message]) -> str:
    """Render transcript messages as "sender: text" lines."""
    return "\n".join(f"{message.sender.value}: {message.text}" for message in history)


class LLMProfileExtractor(Extractor):
    """Extract profile fields by prompting an LLM for a JSON object."""

    source = ExtractionSource.LLM

    def __init__(
        self,
        llm: LLMProvider,
        temperature: float = 0.1,
        max_tokens: int = 200,
    ) -> None:
        """Initialize the extractor.

        Args:
            llm: Provider used for generation
            temperature: Sampling temperature
            max_tokens: Max tokens for the JSON response
        """
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    def build_messages(
        self,
        text: str,
        current_profile: PartialProfile,
        history: Sequence[Message] = (),
    ) -> list[LLMMessage]:
        """Build the system and user messages for one extraction call."""
        history_block = ""
        if history:
            history_block = f"CONVERSATION HISTORY:\n{format_history(history)}\n\n"

        system_prompt = EXTRACTION_SYSTEM_PROMPT.format(
            current_profile=json.dumps(current_profile.to_dict()),
            conversation_history=history_block,
        )
        return [
            LLMMessage(role="system", content=system_prompt),
            LLMMessage(role="user", content=EXTRACTION_USER_PROMPT.format(message=text)),
        ]

    async def extract(
        self,
        text: str,
        current_profile: PartialProfile,
        history: Sequence[Message] = (),
    ) -> PartialProfile:
        """Extract candidate values from one user message.

        Raises:
            ExtractionCapabilityFailure: The provider call failed
            MalformedExtractionOutput: The response isn't a usable JSON object
        """
        messages = self.build_messages(text, current_profile, history)

        try:
            response = await self._llm.generate(
                messages,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except ProviderError as e:
            raise ExtractionCapabilityFailure(f"Extraction provider failed: {e}") from e

        extracted = parse_profile_output(response.content)

        logger.debug(
            "llm_extraction_complete",
            model=response.model,
            fields=[f.value for f in extracted.provided_fields()],
        )
        return extracted
