"""Extractor interface and per-turn extraction result."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from intake.conversation.models import Message
from intake.profile.models import ExtractionResult, PartialProfile


class ExtractionSource(str, Enum):
    """Which extractor produced a turn's candidate values."""

    LLM = "llm"
    TEXT = "text"
    NONE = "none"  # Extraction failed


class Extractor(ABC):
    """Maps free text plus context to candidate profile values.

    Implementations return only the fields they found and may raise on
    failure; ExtractionOracleAdapter owns retries and error recovery.
    """

    source: ExtractionSource

    @abstractmethod
    async def extract(
        self,
        text: str,
        current_profile: PartialProfile,
        history: Sequence[Message] = (),
    ) -> PartialProfile:
        """Extract candidate values from one user message."""


class TurnExtraction(BaseModel):
    """Adapter output for one user turn."""

    model_config = ConfigDict(frozen=True)

    extracted: PartialProfile = Field(
        default_factory=PartialProfile, description="Raw candidate values"
    )
    confidence: float = Field(..., ge=0.0, le=1.0, description="Extraction confidence")
    is_complete: bool = Field(
        ..., description="All four fields present after merging (presence only)"
    )
    source: ExtractionSource = Field(..., description="Extractor used")
    failed: bool = Field(default=False, description="Extraction capability failed")
    error: str | None = Field(default=None, description="Last failure message")
    merged: PartialProfile = Field(
        default_factory=PartialProfile,
        description="Current profile overlaid with raw candidates",
    )
    result: ExtractionResult = Field(
        default_factory=ExtractionResult,
        description="Field-validated merge over the current profile",
    )
