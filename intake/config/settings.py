"""Root Settings model.

Precedence, highest first: constructor arguments, INTAKE_* environment
variables (nested with ``__``), values loaded from config/*.toml, model
defaults.
"""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from intake.config.models.conversation import ConversationConfig
from intake.config.models.extraction import ExtractionConfig
from intake.config.models.observability import ObservabilityConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Merged TOML values fed to the next Settings() as its lowest-priority source
_file_values: dict[str, Any] = {}


def set_toml_config(values: dict[str, Any]) -> None:
    """Install the file values read by subsequent Settings() calls."""
    global _file_values
    _file_values = dict(values)


class Settings(BaseSettings):
    """Top-level intake configuration."""

    model_config = SettingsConfigDict(
        env_prefix="INTAKE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="intake", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: LogLevel = Field(default="INFO", description="Logging level")

    extraction: ExtractionConfig = Field(
        default_factory=ExtractionConfig,
        description="Profile extraction",
    )
    conversation: ConversationConfig = Field(
        default_factory=ConversationConfig,
        description="Turn handling and optional reply generation",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        file_settings = InitSettingsSource(settings_cls, init_kwargs=_file_values)
        return init_settings, env_settings, file_settings
