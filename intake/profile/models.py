"""Profile models.

PartialProfile carries candidate or accumulated values, all optional.
UserProfile is the complete profile that passed whole-profile validation.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from intake.errors import WholeProfileValidationFailure
from intake.profile.enums import FIELD_ORDER, Gender, ProfileField
from intake.profile.validation import is_absent, validate_field


class PartialProfile(BaseModel):
    """A profile with any subset of fields set.

    Values are loosely typed so that extractor output (e.g. an age of "25"
    or 25.5) can be represented and then judged by the field rules.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = Field(default=None, description="Full or first name")
    # Strict so a JSON true reaches the age rule as a bool, not as 1
    age: StrictBool | StrictInt | StrictFloat | str | None = Field(
        default=None, description="Age in years"
    )
    gender: str | None = Field(default=None, description="Biological gender")
    location: str | None = Field(default=None, description="City, state or country")

    def get(self, field: ProfileField | str) -> Any:
        """Return the value for a field."""
        return getattr(self, ProfileField(field).value)

    def has(self, field: ProfileField | str) -> bool:
        """Return True if the field holds a non-empty value."""
        return not is_absent(self.get(field))

    def provided_fields(self) -> list[ProfileField]:
        """Fields with a present value, in canonical order."""
        return [f for f in FIELD_ORDER if self.has(f)]

    @property
    def is_empty(self) -> bool:
        return not self.provided_fields()

    def merged_with(self, other: "PartialProfile") -> "PartialProfile":
        """Return a new profile where other's present fields win."""
        values = self.to_dict()
        values.update(other.to_dict())
        return PartialProfile(**values)

    def to_dict(self) -> dict[str, Any]:
        """Present fields only, keyed by field name."""
        return {f.value: self.get(f) for f in self.provided_fields()}


class UserProfile(BaseModel):
    """A complete profile where every field passed its rule."""

    model_config = ConfigDict(frozen=True)

    name: str
    age: int
    gender: Gender
    location: str

    @field_validator("name", "age", "gender", "location", mode="before")
    @classmethod
    def apply_field_rule(cls, value: Any, info: ValidationInfo) -> Any:
        """Run the per-field rule and return its normalized value."""
        check = validate_field(info.field_name, value)
        if not check.accepted:
            raise ValueError(check.reason or "Field required")
        return check.value


class ExtractionResult(BaseModel):
    """Outcome of merging candidate data over a baseline profile."""

    model_config = ConfigDict(frozen=True)

    valid_data: PartialProfile = Field(
        default_factory=PartialProfile,
        description="Accepted values (new candidates plus still-valid baseline)",
    )
    errors: list[str] = Field(
        default_factory=list, description="Rejection messages for candidate values"
    )
    missing_required: list[ProfileField] = Field(
        default_factory=list, description="Incomplete fields, canonical order"
    )
    completion_status: dict[ProfileField, bool] = Field(
        default_factory=lambda: {f: False for f in FIELD_ORDER},
        description="field -> has an accepted value",
    )


class CompleteValidation(BaseModel):
    """Outcome of whole-profile validation."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    profile: UserProfile | None = None
    errors: list[str] = Field(default_factory=list)

    def raise_for_failure(self) -> UserProfile:
        """Return the validated profile or raise WholeProfileValidationFailure."""
        if not self.is_valid or self.profile is None:
            raise WholeProfileValidationFailure(self.errors)
        return self.profile


def format_validation_errors(exc: ValidationError) -> list[str]:
    """Format pydantic errors as "<field>: <message>" strings."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"]
        if error["type"] == "value_error" and "error" in error.get("ctx", {}):
            message = str(error["ctx"]["error"])
        messages.append(f"{location}: {message}")
    return messages
