"""Extraction configuration models."""

from pydantic import BaseModel, Field


class ExtractionConfig(BaseModel):
    """Configuration for the profile extraction step.

    When disabled, or when no model is configured, the deterministic
    text pattern extractor is used instead of the LLM.
    """

    enabled: bool = Field(
        default=True,
        description="Use the LLM extractor (text patterns otherwise)",
    )
    model: str = Field(
        default="openai/gpt-4o-mini",
        description="Model string, e.g. 'openai/gpt-4o-mini'",
    )
    fallback_models: list[str] = Field(
        default_factory=list,
        description="Models to try if the primary model fails",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Retries after the first failed extraction attempt",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-attempt timeout in seconds",
    )
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for extraction",
    )
    max_tokens: int = Field(
        default=200,
        gt=0,
        description="Max tokens for the extraction response",
    )
    fallback_on_failure: bool = Field(
        default=False,
        description="Re-run a failed turn through the text pattern extractor",
    )
