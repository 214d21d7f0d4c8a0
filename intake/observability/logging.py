"""Structured logging for intake, built on structlog.

Conversations carry personal data by nature: every user turn may contain a
name, an age or a home town. Log events therefore pass through PIIRedactor
before rendering, and turn-level context (conversation id, turn number) is
bound through structlog's contextvars by the orchestrator.
"""

import logging
import re
import sys
from collections.abc import Iterable, Mapping
from typing import Any, TextIO, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED = "[REDACTED]"

SENSITIVE_KEYS: frozenset[str] = frozenset({
    # Credentials
    "access_token",
    "api_key",
    "apikey",
    "authorization",
    "credential",
    "credentials",
    "password",
    "secret",
    "token",
    # Contact details
    "email",
    "phone",
    # Raw user input and collected profile values
    "user_text",
    "profile",
    "profile_name",
    "profile_location",
})

# (pattern, placeholder) pairs applied to every other string value
VALUE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
    (re.compile(r"\+?[\d\s\-\(\)]{10,}"), "[PHONE]"),
)


def redact_text(value: str) -> str:
    """Mask emails and phone numbers inside free text."""
    for pattern, placeholder in VALUE_PATTERNS:
        value = pattern.sub(placeholder, value)
    return value


class PIIRedactor:
    """structlog processor that masks secrets and personal data.

    Values under a sensitive key are replaced outright, at any depth.
    Remaining strings are scanned with VALUE_PATTERNS.
    """

    def __init__(self, extra_keys: Iterable[str] = ()) -> None:
        self.keys = SENSITIVE_KEYS | {key.lower() for key in extra_keys}

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._scrub_mapping(event_dict))

    def _scrub_mapping(self, data: Mapping[Any, Any]) -> dict[Any, Any]:
        return {
            key: REDACTED if str(key).lower() in self.keys else self._scrub(value)
            for key, value in data.items()
        }

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, str):
            return redact_text(value)
        if isinstance(value, Mapping):
            return self._scrub_mapping(value)
        if isinstance(value, list | tuple):
            return [self._scrub(item) for item in value]
        return value


def build_processors(
    format: str = "json",
    redact_pii: bool = True,
    redact_keys: Iterable[str] = (),
) -> list[Processor]:
    """Return the processor chain used by setup_logging."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if redact_pii:
        processors.append(PIIRedactor(redact_keys))

    # After redaction: ISO dates would match the phone pattern
    processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
    redact_keys: Iterable[str] = (),
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum log level name; unknown names fall back to INFO
        format: "json" for machine-readable lines, "console" for humans
        redact_pii: Run PIIRedactor before rendering
        redact_keys: Extra event keys to mask in addition to SENSITIVE_KEYS
        stream: Output stream (stderr by default, keeping stdout for replies)
    """
    level_num = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    structlog.configure(
        processors=build_processors(format, redact_pii, redact_keys),
        wrapper_class=structlog.make_filtering_bound_logger(level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
