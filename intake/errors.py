"""Exception hierarchy for intake.

Turn-level errors are recoverable: the orchestrator turns them into a
user-visible reply and keeps the previously accepted profile.
ConfigurationError is raised at startup only.
"""


class IntakeError(Exception):
    """Base exception for all intake errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FieldValidationError(IntakeError):
    """Raised when a single field's candidate value fails its rule."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class ExtractionCapabilityFailure(IntakeError):
    """Raised when the extraction capability errors or times out."""


class MalformedExtractionOutput(ExtractionCapabilityFailure):
    """Raised when extractor output can't be interpreted as profile fields."""

    def __init__(self, message: str, raw_output: str | None = None) -> None:
        super().__init__(message)
        self.raw_output = raw_output


class WholeProfileValidationFailure(IntakeError):
    """Raised when a field-complete profile fails joint validation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "Profile validation failed")
        self.errors = errors


class ConfigurationError(IntakeError):
    """Raised when config files can't be read or don't fit the Settings layout."""
