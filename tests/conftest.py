"""Shared test fixtures for the intake test suite."""

from collections.abc import Callable, Generator, Sequence
from pathlib import Path
from typing import Any

import pytest

from intake.conversation.models import Message
from intake.conversation.orchestrator import ConversationOrchestrator
from intake.extraction.adapter import ExtractionOracleAdapter
from intake.extraction.base import ExtractionSource, Extractor
from intake.profile.models import PartialProfile

ScriptedOutput = PartialProfile | dict[str, Any] | Exception


class ScriptedExtractor(Extractor):
    """Extractor returning (or raising) queued outputs, one per call."""

    def __init__(
        self,
        outputs: Sequence[ScriptedOutput] = (),
        source: ExtractionSource = ExtractionSource.LLM,
    ) -> None:
        self.source = source
        self._outputs = list(outputs)
        self.calls: list[dict[str, Any]] = []

    async def extract(
        self,
        text: str,
        current_profile: PartialProfile,
        history: Sequence[Message] = (),
    ) -> PartialProfile:
        self.calls.append({"text": text, "profile": current_profile, "history": list(history)})
        output: ScriptedOutput = self._outputs.pop(0) if self._outputs else PartialProfile()
        if isinstance(output, Exception):
            raise output
        if isinstance(output, dict):
            return PartialProfile(**output)
        return output


@pytest.fixture
def scripted_extractor() -> Callable[..., ScriptedExtractor]:
    """Factory fixture for ScriptedExtractor.

    Usage:
        def test_something(scripted_extractor):
            extractor = scripted_extractor([{"name": "Danny"}, RuntimeError("boom")])
    """

    def _create(
        outputs: Sequence[ScriptedOutput] = (),
        source: ExtractionSource = ExtractionSource.LLM,
    ) -> ScriptedExtractor:
        return ScriptedExtractor(outputs, source)

    return _create


@pytest.fixture
def make_orchestrator() -> Callable[..., ConversationOrchestrator]:
    """Factory fixture wrapping an extractor in an adapter and orchestrator."""

    def _create(extractor: Extractor, **kwargs: Any) -> ConversationOrchestrator:
        adapter = ExtractionOracleAdapter(extractor, max_retries=2, timeout=1.0)
        return ConversationOrchestrator(adapter=adapter, **kwargs)

    return _create


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from intake.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
