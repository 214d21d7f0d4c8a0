"""Profile domain: fields, validation rules and accumulation.

A profile is collected field by field. Each candidate value must pass its
own rule before it is accepted, and a complete profile must additionally
pass whole-profile validation.
"""

from intake.profile.accumulator import (
    calculate_confidence,
    confidence_level,
    get_missing_fields,
    is_extraction_complete,
    is_profile_complete,
    merge_and_validate,
    next_required_field,
    progress_summary,
    validate_complete,
)
from intake.profile.enums import FIELD_ORDER, CheckStatus, Gender, ProfileField
from intake.profile.models import (
    CompleteValidation,
    ExtractionResult,
    PartialProfile,
    UserProfile,
)
from intake.profile.validation import (
    FieldCheck,
    validate_age,
    validate_field,
    validate_gender,
    validate_location,
    validate_name,
)

__all__ = [
    # Enums
    "CheckStatus",
    "FIELD_ORDER",
    "Gender",
    "ProfileField",
    # Models
    "CompleteValidation",
    "ExtractionResult",
    "PartialProfile",
    "UserProfile",
    # Field rules
    "FieldCheck",
    "validate_age",
    "validate_field",
    "validate_gender",
    "validate_location",
    "validate_name",
    # Accumulation
    "calculate_confidence",
    "confidence_level",
    "get_missing_fields",
    "is_extraction_complete",
    "is_profile_complete",
    "merge_and_validate",
    "next_required_field",
    "progress_summary",
    "validate_complete",
]
