"""Per-field validation rules for profile values.

Each rule takes a raw candidate value (possibly absent) and returns a
FieldCheck: the accepted normalized value, a rejection reason, or "absent"
when nothing was provided. Rules are pure: no logging, no I/O.
"""

import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from intake.errors import FieldValidationError
from intake.profile.enums import CheckStatus, Gender, ProfileField

NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]+$")
LOCATION_PATTERN = re.compile(r"^[a-zA-Z\s,.-]+$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
LOCATION_MIN_LENGTH = 2
LOCATION_MAX_LENGTH = 100
MIN_AGE = 13
MAX_AGE = 120


@dataclass(frozen=True)
class FieldCheck:
    """Result of validating one candidate value."""

    field: ProfileField
    status: CheckStatus
    value: Any = None
    reason: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status == CheckStatus.ACCEPTED

    @property
    def rejected(self) -> bool:
        return self.status == CheckStatus.REJECTED

    def raise_for_rejection(self) -> None:
        """Raise FieldValidationError if this check rejected the value."""
        if self.rejected:
            raise FieldValidationError(self.field.value, self.reason or "Invalid value")


def _accept(field: ProfileField, value: Any) -> FieldCheck:
    return FieldCheck(field=field, status=CheckStatus.ACCEPTED, value=value)


def _reject(field: ProfileField, reason: str) -> FieldCheck:
    return FieldCheck(field=field, status=CheckStatus.REJECTED, reason=reason)


def _absent(field: ProfileField) -> FieldCheck:
    return FieldCheck(field=field, status=CheckStatus.ABSENT)


def is_absent(value: Any) -> bool:
    """Return True for values that mean "not provided"."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_name(value: Any) -> FieldCheck:
    """Validate a name: 2-50 chars, letters, spaces, hyphens, apostrophes."""
    field = ProfileField.NAME
    if is_absent(value):
        return _absent(field)
    if not isinstance(value, str):
        return _reject(field, "Name must be text")

    trimmed = value.strip()
    if len(trimmed) < NAME_MIN_LENGTH:
        return _reject(field, "Name must be at least 2 characters")
    if len(trimmed) > NAME_MAX_LENGTH:
        return _reject(field, "Name must be less than 50 characters")
    if not NAME_PATTERN.match(trimmed):
        return _reject(
            field, "Name should only contain letters, spaces, hyphens, and apostrophes"
        )

    return _accept(field, trimmed)


def _coerce_whole_number(value: Any) -> int | None:
    """Return value as int if it is a whole number, else None."""
    # bool is a subclass of int, but not an age
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
    return None


def validate_age(value: Any) -> FieldCheck:
    """Validate an age: whole number, 13-120 inclusive."""
    field = ProfileField.AGE
    if is_absent(value):
        return _absent(field)

    age = _coerce_whole_number(value)
    if age is None:
        return _reject(field, "Age must be a whole number")
    if age < MIN_AGE:
        return _reject(field, "Must be at least 13 years old")
    if age > MAX_AGE:
        return _reject(field, "Age must be less than 120")

    return _accept(field, age)


def validate_gender(value: Any) -> FieldCheck:
    """Validate gender against the closed {male, female} set."""
    field = ProfileField.GENDER
    if is_absent(value):
        return _absent(field)

    normalized = str(value.value if isinstance(value, Gender) else value).strip().lower()
    if normalized not in {g.value for g in Gender}:
        return _reject(field, "Biological gender must be either male or female")

    return _accept(field, normalized)


def validate_location(value: Any) -> FieldCheck:
    """Validate a location: 2-100 chars, letters, spaces, commas, periods, hyphens."""
    field = ProfileField.LOCATION
    if is_absent(value):
        return _absent(field)
    if not isinstance(value, str):
        return _reject(field, "Location must be text")

    trimmed = value.strip()
    if len(trimmed) < LOCATION_MIN_LENGTH:
        return _reject(field, "Location must be at least 2 characters")
    if len(trimmed) > LOCATION_MAX_LENGTH:
        return _reject(field, "Location must be less than 100 characters")
    if not LOCATION_PATTERN.match(trimmed):
        return _reject(
            field,
            "Location should only contain letters, spaces, commas, periods, and hyphens",
        )

    return _accept(field, trimmed)


FIELD_VALIDATORS: dict[ProfileField, Callable[[Any], FieldCheck]] = {
    ProfileField.NAME: validate_name,
    ProfileField.AGE: validate_age,
    ProfileField.GENDER: validate_gender,
    ProfileField.LOCATION: validate_location,
}


def validate_field(field: ProfileField | str, value: Any) -> FieldCheck:
    """Validate a value with the rule registered for the given field."""
    return FIELD_VALIDATORS[ProfileField(field)](value)
