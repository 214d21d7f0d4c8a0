"""Tests for LLMProfileExtractor."""

import pytest

from intake.conversation.models import Message
from intake.errors import ExtractionCapabilityFailure, MalformedExtractionOutput
from intake.extraction.base import ExtractionSource
from intake.extraction.llm import LLMProfileExtractor, format_history
from intake.profile.models import PartialProfile
from intake.providers.llm import MockLLMProvider, ProviderError, RateLimitError


@pytest.fixture
def history() -> list[Message]:
    return [
        Message.from_system("Hi! I'll help you set up your profile. What's your name?"),
        Message.from_user("Danny"),
    ]


class TestBuildMessages:
    """Tests for prompt construction."""

    def test_includes_current_profile_and_message(self):
        """The prompt shows the current profile and the new message."""
        extractor = LLMProfileExtractor(llm=MockLLMProvider())

        system, user = extractor.build_messages("I'm 25", PartialProfile(name="Danny"))

        assert system.role == "system"
        assert 'CURRENT PROFILE: {"name": "Danny"}' in system.content
        assert "CONVERSATION HISTORY" not in system.content
        assert user.role == "user"
        assert '"I\'m 25"' in user.content

    def test_includes_history(self, history):
        """Recent transcript messages are part of the prompt."""
        extractor = LLMProfileExtractor(llm=MockLLMProvider())

        system, _ = extractor.build_messages("I'm 25", PartialProfile(), history)

        assert "CONVERSATION HISTORY:\nsystem: Hi!" in system.content
        assert "user: Danny" in system.content

    def test_format_history(self, history):
        """History is rendered one message per line."""
        assert format_history(history).splitlines()[1] == "user: Danny"


class TestExtract:
    """Tests for LLMProfileExtractor.extract."""

    def test_source(self):
        """The LLM extractor reports the llm source."""
        assert LLMProfileExtractor(llm=MockLLMProvider()).source == ExtractionSource.LLM

    @pytest.mark.asyncio
    async def test_parses_json_response(self):
        """The model's JSON becomes a PartialProfile."""
        llm = MockLLMProvider(responses=['{"name": "Danny", "age": 25, "gender": "male"}'])
        extractor = LLMProfileExtractor(llm=llm)

        extracted = await extractor.extract("Danny, 25, male", PartialProfile())

        assert extracted.to_dict() == {"name": "Danny", "age": 25, "gender": "male"}

    @pytest.mark.asyncio
    async def test_passes_sampling_parameters(self):
        """Temperature and max_tokens reach the provider."""
        llm = MockLLMProvider(responses=["{}"])
        extractor = LLMProfileExtractor(llm=llm, temperature=0.0, max_tokens=50)

        await extractor.extract("hello", PartialProfile())

        call = llm.call_history[0]
        assert call["temperature"] == 0.0
        assert call["max_tokens"] == 50
        assert len(call["messages"]) == 2

    @pytest.mark.asyncio
    async def test_malformed_response_raises(self):
        """Unparseable output raises MalformedExtractionOutput."""
        llm = MockLLMProvider(responses=["I'm not sure what you mean."])
        extractor = LLMProfileExtractor(llm=llm)

        with pytest.raises(MalformedExtractionOutput):
            await extractor.extract("hmm", PartialProfile())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [ProviderError("down"), RateLimitError("slow down")])
    async def test_provider_errors_are_wrapped(self, error):
        """Provider errors become capability failures."""
        llm = MockLLMProvider(responses=[error])
        extractor = LLMProfileExtractor(llm=llm)

        with pytest.raises(ExtractionCapabilityFailure) as exc_info:
            await extractor.extract("Danny", PartialProfile())

        assert exc_info.value.__cause__ is error
