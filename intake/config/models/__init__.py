"""Configuration models for intake."""

from intake.config.models.conversation import ConversationConfig, ReplyGenerationConfig
from intake.config.models.extraction import ExtractionConfig
from intake.config.models.observability import LoggingConfig, ObservabilityConfig

__all__ = [
    "ConversationConfig",
    "ExtractionConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "ReplyGenerationConfig",
]
