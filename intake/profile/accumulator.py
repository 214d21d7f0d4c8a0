"""Merge candidate profile data into the accumulated profile.

Two tiers of validation:
- merge_and_validate: per-field, incremental. A candidate value replaces
  the baseline value only if it passes its rule.
- validate_complete: all four fields together, the authoritative gate
  before a conversation is declared finished.
"""

from typing import Literal

from pydantic import ValidationError

from intake.observability.logging import get_logger
from intake.observability.metrics import FIELD_VALIDATION_REJECTIONS
from intake.profile.enums import FIELD_ORDER, ProfileField
from intake.profile.models import (
    CompleteValidation,
    ExtractionResult,
    PartialProfile,
    UserProfile,
    format_validation_errors,
)
from intake.profile.validation import validate_field

logger = get_logger(__name__)

TOTAL_FIELDS = len(FIELD_ORDER)

ConfidenceLevel = Literal["low", "medium", "high"]


def merge_and_validate(
    candidate: PartialProfile,
    baseline: PartialProfile | None = None,
) -> ExtractionResult:
    """Validate candidate values field by field over a baseline profile.

    Args:
        candidate: Newly extracted values (may be partial or invalid)
        baseline: Previously accumulated profile

    Returns:
        ExtractionResult with accepted values, rejection messages,
        completion status and missing fields
    """
    baseline = baseline or PartialProfile()
    valid_data: dict[str, object] = {}
    errors: list[str] = []
    completion_status: dict[ProfileField, bool] = {}

    for field in FIELD_ORDER:
        completion_status[field] = False

        if candidate.has(field):
            check = validate_field(field, candidate.get(field))
            if check.accepted:
                valid_data[field.value] = check.value
                completion_status[field] = True
                continue

            errors.append(check.reason or f"Invalid {field.value}")
            FIELD_VALIDATION_REJECTIONS.labels(field_name=field.value).inc()
            logger.warning(
                "field_validation_failed",
                field_name=field.value,
                reason=check.reason,
                kept_baseline=baseline.has(field),
            )

        # Candidate omitted or rejected this field: keep baseline if still valid
        if baseline.has(field):
            baseline_check = validate_field(field, baseline.get(field))
            if baseline_check.accepted:
                valid_data[field.value] = baseline_check.value
                completion_status[field] = True

    missing_required = [f for f in FIELD_ORDER if not completion_status[f]]

    return ExtractionResult(
        valid_data=PartialProfile(**valid_data),
        errors=errors,
        missing_required=missing_required,
        completion_status=completion_status,
    )


def validate_complete(profile: PartialProfile) -> CompleteValidation:
    """Validate all four fields together.

    Returns:
        CompleteValidation with the strict UserProfile when valid, or the
        aggregated "<field>: <message>" errors otherwise
    """
    try:
        validated = UserProfile(**profile.to_dict())
    except ValidationError as e:
        errors = format_validation_errors(e)
        logger.info("profile_validation_failed", error_count=len(errors))
        return CompleteValidation(is_valid=False, errors=errors)

    return CompleteValidation(is_valid=True, profile=validated)


def is_profile_complete(profile: PartialProfile) -> bool:
    """Return True if all four fields are present (presence only)."""
    return all(profile.has(field) for field in FIELD_ORDER)


def is_extraction_complete(result: ExtractionResult) -> bool:
    """Return True if every completion_status entry is True."""
    return all(result.completion_status.get(field, False) for field in FIELD_ORDER)


def get_missing_fields(profile: PartialProfile) -> list[ProfileField]:
    """Fields without a present value, canonical order."""
    return [field for field in FIELD_ORDER if not profile.has(field)]


def next_required_field(result: ExtractionResult) -> ProfileField | None:
    """First missing field in canonical order, or None when complete."""
    for field in FIELD_ORDER:
        if field in result.missing_required:
            return field
    return None


def calculate_confidence(result: ExtractionResult) -> float:
    """Weighted confidence for text-pattern extraction.

    Starts at 0.5, rewards accepted and completed fields, and penalizes
    each rejection by 0.1. Always within [0, 1].
    """
    confidence = 0.5

    valid_count = len(result.valid_data.provided_fields())
    confidence += (valid_count / TOTAL_FIELDS) * 0.3

    confidence -= len(result.errors) * 0.1

    completed = sum(1 for done in result.completion_status.values() if done)
    confidence += (completed / TOTAL_FIELDS) * 0.2

    return max(0.0, min(1.0, confidence))


def confidence_level(confidence: float) -> ConfidenceLevel:
    """Bucket a confidence score."""
    if confidence < 0.4:
        return "low"
    if confidence < 0.7:
        return "medium"
    return "high"


def progress_summary(result: ExtractionResult) -> str:
    """Human-readable progress line for the accumulated profile."""
    completed = [f.value for f in FIELD_ORDER if result.completion_status.get(f)]

    if not completed:
        return "Let's start building your profile!"

    if not result.missing_required:
        return "Great! Your profile is complete."

    remaining = ", ".join(f.value for f in result.missing_required)
    return f"Progress: Got your {', '.join(completed)}. Still need: {remaining}."
