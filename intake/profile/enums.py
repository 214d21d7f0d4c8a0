"""Enums for profile domain."""

from enum import Enum


class ProfileField(str, Enum):
    """Required profile fields, in canonical collection order."""

    NAME = "name"
    AGE = "age"
    GENDER = "gender"
    LOCATION = "location"


class Gender(str, Enum):
    """Biological gender, a closed two-value set."""

    MALE = "male"
    FEMALE = "female"


class CheckStatus(str, Enum):
    """Outcome of validating one candidate field value."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ABSENT = "absent"  # Not provided this turn, not an error


# Iteration order used everywhere a "next" field is chosen
FIELD_ORDER: tuple[ProfileField, ...] = (
    ProfileField.NAME,
    ProfileField.AGE,
    ProfileField.GENDER,
    ProfileField.LOCATION,
)
