"""Tests for profile accumulation, whole-profile validation and scoring."""

import pytest

from intake.errors import WholeProfileValidationFailure
from intake.extraction.parsing import parse_profile_output
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
from intake.profile.enums import FIELD_ORDER, Gender, ProfileField
from intake.profile.models import ExtractionResult, PartialProfile


@pytest.fixture
def full_profile() -> PartialProfile:
    return PartialProfile(name="Danny", age=25, gender="male", location="NYC")


class TestMergeAndValidate:
    """Tests for merge_and_validate."""

    def test_accepts_valid_candidate_values(self):
        """Valid candidate values land in valid_data."""
        result = merge_and_validate(PartialProfile(name="Danny", age="25"))

        assert result.valid_data.name == "Danny"
        assert result.valid_data.age == 25
        assert result.errors == []
        assert result.completion_status[ProfileField.NAME] is True
        assert result.completion_status[ProfileField.AGE] is True
        assert result.missing_required == [ProfileField.GENDER, ProfileField.LOCATION]

    def test_rejected_candidate_keeps_baseline(self):
        """A rejected value never overwrites an accepted one."""
        baseline = PartialProfile(name="Danny", age=25)

        result = merge_and_validate(PartialProfile(age=5), baseline)

        assert result.valid_data.age == 25
        assert result.errors == ["Must be at least 13 years old"]
        assert result.completion_status[ProfileField.AGE] is True

    def test_rejected_candidate_without_baseline_is_missing(self):
        """A rejected value with no baseline leaves the field incomplete."""
        result = merge_and_validate(PartialProfile(age=5))

        assert result.valid_data.age is None
        assert result.completion_status[ProfileField.AGE] is False
        assert ProfileField.AGE in result.missing_required

    def test_boolean_age_is_not_a_whole_number(self):
        """Parsed booleans reach the age rule unchanged."""
        result = merge_and_validate(parse_profile_output('{"age": true}'))

        assert result.valid_data.age is None
        assert result.errors == ["Age must be a whole number"]

    def test_valid_candidate_replaces_baseline(self):
        """Newer valid values win."""
        baseline = PartialProfile(location="Boston")

        result = merge_and_validate(PartialProfile(location="Austin, Texas"), baseline)

        assert result.valid_data.location == "Austin, Texas"

    def test_omitted_fields_keep_baseline_without_errors(self):
        """Fields absent from the candidate come from the baseline silently."""
        baseline = PartialProfile(name="Danny", gender="male")

        result = merge_and_validate(PartialProfile(), baseline)

        assert result.valid_data.name == "Danny"
        assert result.valid_data.gender == "male"
        assert result.errors == []

    def test_invalid_baseline_value_is_dropped_silently(self):
        """A baseline value that fails its rule doesn't count as complete."""
        baseline = PartialProfile(gender="other")

        result = merge_and_validate(PartialProfile(), baseline)

        assert result.valid_data.gender is None
        assert result.errors == []
        assert result.completion_status[ProfileField.GENDER] is False

    def test_errors_follow_canonical_order(self):
        """Rejection messages are reported in field order."""
        candidate = PartialProfile(location="1 Main St", name="X", gender="other")

        result = merge_and_validate(candidate)

        assert result.errors == [
            "Name must be at least 2 characters",
            "Biological gender must be either male or female",
            "Location should only contain letters, spaces, commas, periods, and hyphens",
        ]

    def test_does_not_mutate_inputs(self):
        """Inputs are left untouched."""
        baseline = PartialProfile(name="Danny")
        candidate = PartialProfile(name="Sam", age=30)

        merge_and_validate(candidate, baseline)

        assert baseline.to_dict() == {"name": "Danny"}
        assert candidate.to_dict() == {"name": "Sam", "age": 30}

    def test_completion_status_covers_every_field(self, full_profile):
        """completion_status has an entry per field."""
        result = merge_and_validate(full_profile)

        assert set(result.completion_status) == set(FIELD_ORDER)
        assert is_extraction_complete(result)
        assert result.missing_required == []


class TestValidateComplete:
    """Tests for whole-profile validation."""

    def test_valid_profile(self, full_profile):
        """A fully valid profile yields a strict UserProfile."""
        validation = validate_complete(full_profile)

        assert validation.is_valid
        assert validation.errors == []
        assert validation.profile.name == "Danny"
        assert validation.profile.age == 25
        assert validation.profile.gender == Gender.MALE
        assert validation.profile.location == "NYC"

    def test_normalizes_values(self):
        """Values are normalized the same way as per-field checks."""
        profile = PartialProfile(name=" Danny ", age="30", gender="FEMALE", location="Paris ")

        validation = validate_complete(profile)

        assert validation.is_valid
        assert validation.profile.name == "Danny"
        assert validation.profile.age == 30
        assert validation.profile.gender == Gender.FEMALE

    def test_invalid_field_is_prefixed(self, full_profile):
        """Errors are formatted "<field>: <message>"."""
        profile = full_profile.model_copy(update={"age": 5})

        validation = validate_complete(profile)

        assert not validation.is_valid
        assert validation.profile is None
        assert validation.errors == ["age: Must be at least 13 years old"]

    def test_gender_outside_enum_is_rejected(self, full_profile):
        """Only male and female are accepted."""
        profile = full_profile.model_copy(update={"gender": "other"})

        validation = validate_complete(profile)

        assert validation.errors == ["gender: Biological gender must be either male or female"]

    def test_missing_fields_are_reported(self):
        """Missing fields are errors too."""
        validation = validate_complete(PartialProfile(name="Danny"))

        assert not validation.is_valid
        assert len(validation.errors) == 3
        assert all(
            error.startswith(("age:", "gender:", "location:")) for error in validation.errors
        )

    def test_raise_for_failure(self, full_profile):
        """raise_for_failure returns the profile or raises with all errors."""
        assert validate_complete(full_profile).raise_for_failure().name == "Danny"

        with pytest.raises(WholeProfileValidationFailure) as exc_info:
            validate_complete(PartialProfile(name="Danny")).raise_for_failure()

        assert len(exc_info.value.errors) == 3


class TestCompletionHelpers:
    """Tests for presence checks and next-field selection."""

    def test_is_profile_complete_checks_presence_only(self):
        """An invalid but present value still counts as present."""
        profile = PartialProfile(name="Danny", age=5, gender="male", location="NYC")

        assert is_profile_complete(profile)
        assert not is_profile_complete(PartialProfile(name="Danny", age=25))

    def test_blank_strings_are_not_present(self):
        """Whitespace-only values count as absent."""
        profile = PartialProfile(name="  ", age=25, gender="male", location="NYC")

        assert not is_profile_complete(profile)
        assert get_missing_fields(profile) == [ProfileField.NAME]

    def test_missing_fields_in_canonical_order(self):
        """Missing fields follow name, age, gender, location."""
        profile = PartialProfile(gender="male")

        assert get_missing_fields(profile) == [
            ProfileField.NAME,
            ProfileField.AGE,
            ProfileField.LOCATION,
        ]

    def test_next_required_field(self, full_profile):
        """The first missing field is next; None once complete."""
        assert next_required_field(merge_and_validate(PartialProfile())) == ProfileField.NAME
        assert (
            next_required_field(merge_and_validate(PartialProfile(name="Danny", age=25)))
            == ProfileField.GENDER
        )
        assert next_required_field(merge_and_validate(full_profile)) is None


class TestConfidence:
    """Tests for the weighted text-extraction confidence."""

    def test_empty_result(self):
        """Nothing found scores the base value."""
        assert calculate_confidence(merge_and_validate(PartialProfile())) == pytest.approx(0.5)

    def test_full_result(self, full_profile):
        """Four valid fields score 1.0."""
        assert calculate_confidence(merge_and_validate(full_profile)) == pytest.approx(1.0)

    def test_errors_are_penalized(self):
        """Each rejection subtracts 0.1."""
        result = merge_and_validate(PartialProfile(name="Danny", age=5))

        # 0.5 + 0.3 * 1/4 - 0.1 + 0.2 * 1/4
        assert calculate_confidence(result) == pytest.approx(0.525)

    def test_clamped_to_unit_interval(self):
        """Confidence never drops below 0."""
        result = ExtractionResult(errors=["bad"] * 10)

        assert calculate_confidence(result) == 0.0

    @pytest.mark.parametrize(
        "value,level",
        [(0.0, "low"), (0.39, "low"), (0.4, "medium"), (0.69, "medium"), (0.7, "high"), (1.0, "high")],
    )
    def test_confidence_level(self, value, level):
        """Buckets split at 0.4 and 0.7."""
        assert confidence_level(value) == level


class TestProgressSummary:
    """Tests for progress_summary."""

    def test_nothing_collected(self):
        """An empty profile reports nothing collected."""
        assert progress_summary(merge_and_validate(PartialProfile())) == (
            "Let's start building your profile!"
        )

    def test_partial(self):
        """Collected and missing fields are both listed."""
        result = merge_and_validate(PartialProfile(name="Danny", age=25))

        assert progress_summary(result) == (
            "Progress: Got your name, age. Still need: gender, location."
        )

    def test_complete(self, full_profile):
        """A full profile reports completion."""
        assert progress_summary(merge_and_validate(full_profile)) == (
            "Great! Your profile is complete."
        )
