"""Conversation configuration models."""

from pydantic import BaseModel, Field


class ReplyGenerationConfig(BaseModel):
    """Configuration for LLM-generated conversational replies."""

    enabled: bool = Field(
        default=False,
        description="Generate replies with the LLM instead of canned questions",
    )
    model: str = Field(
        default="openai/gpt-4o-mini",
        description="Model string for reply generation",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for replies",
    )
    max_tokens: int = Field(
        default=150,
        gt=0,
        description="Max tokens per reply",
    )


class ConversationConfig(BaseModel):
    """Configuration for the conversation orchestrator."""

    history_window: int = Field(
        default=6,
        ge=0,
        description="Number of recent messages passed as context",
    )
    reply_generation: ReplyGenerationConfig = Field(
        default_factory=ReplyGenerationConfig,
        description="Conversational reply generation",
    )
