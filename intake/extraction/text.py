"""Pattern-based profile extraction from raw text.

Low-precision fallback for when the LLM extractor is unavailable. Each
field has an ordered list of patterns: phrase patterns first, then looser
heuristics. The first pattern that yields a usable value wins.
"""

import re
from collections.abc import Collection, Sequence

from intake.conversation.models import Message
from intake.extraction.base import ExtractionSource, Extractor
from intake.observability.logging import get_logger
from intake.profile.enums import ProfileField
from intake.profile.models import PartialProfile
from intake.profile.validation import MAX_AGE, MIN_AGE

logger = get_logger(__name__)

# Words that never start or continue a name captured after "I'm ..."
_STOP_WORDS = (
    r"(?:from|in|at|on|and|or|but|a|an|the|based|located|living|live|male|female"
    r"|years?|yrs|old|aged?|here|not|so|very|just|also|too)"
)
# Any Unicode letter, so a capture never stops inside a word like "José"
_LETTER = r"[^\W\d_]"
_NAME_WORD = rf"(?!{_STOP_WORDS}\b){_LETTER}(?:{_LETTER}|['-])*"

# Single-word replies that are not names
_FILLER_WORDS = frozenset({
    "ok", "okay", "yes", "yeah", "yep", "no", "nope", "hi", "hello", "hey",
    "thanks", "sure", "fine", "cool", "male", "female", "what", "why",
})

NAME_PHRASE_PATTERNS = [
    re.compile(
        rf"\b(?:my name is|my name's|name is|call me|i'm|i am|this is)\s+"
        rf"({_NAME_WORD}(?:[ \t]+{_NAME_WORD})?)",
        re.IGNORECASE,
    ),
]
NAME_HEURISTIC_PATTERNS = [
    # "Danny Smith" at the start of the message
    re.compile(r"^\s*([A-Z][a-z]+\s+[A-Z][a-z]+)\b"),
    # A single bare word
    re.compile(r"^\s*([A-Za-z]{2,})\s*[.!]?\s*$"),
]

AGE_PHRASE_PATTERNS = [
    re.compile(r"\b(?:age is|age:|aged|i'm|i am)\s*(\d{1,3})\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,3})\s*(?:years old|years|yrs old|yrs|y\.o\.?)", re.IGNORECASE),
]
AGE_HEURISTIC_PATTERNS = [
    re.compile(r"^\s*(\d{1,3})\s*[.!]?\s*$"),
]

LOCATION_PHRASE_PATTERNS = [
    re.compile(
        r"\b(?:from|live in|living in|location is|located in|based in)\s+"
        rf"({_LETTER}(?:{_LETTER}|[ ,.'-])*)",
        re.IGNORECASE,
    ),
]
LOCATION_HEURISTIC_PATTERNS = [
    # Capitalized place after "in"/"at"
    re.compile(rf"\b(?:in|at)\s+([A-Z][a-z]+(?:,?\s+[A-Z][a-z]+)*)(?!{_LETTER})"),
]

# Clauses that end a captured location
_LOCATION_TAIL = re.compile(r"\s+(?:and|but|i'm|i am|my|where)\b.*$", re.IGNORECASE)


def _extract_name(text: str, phrase_only: bool) -> str | None:
    patterns = NAME_PHRASE_PATTERNS + ([] if phrase_only else NAME_HEURISTIC_PATTERNS)
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        name = match.group(1).strip()
        if name.lower() in _FILLER_WORDS:
            continue
        return name
    return None


def _extract_age(text: str, phrase_only: bool) -> int | None:
    patterns = AGE_PHRASE_PATTERNS + ([] if phrase_only else AGE_HEURISTIC_PATTERNS)
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        age = int(match.group(1))
        # Out-of-range matches fall through to the next pattern
        if MIN_AGE <= age <= MAX_AGE:
            return age
    return None


def _extract_location(text: str, phrase_only: bool) -> str | None:
    patterns = LOCATION_PHRASE_PATTERNS + (
        [] if phrase_only else LOCATION_HEURISTIC_PATTERNS
    )
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        location = _LOCATION_TAIL.sub("", match.group(1)).strip(" ,.")
        if location:
            return location
    return None


def _extract_gender(text: str) -> str | None:
    lower_text = text.lower()
    # "female" contains "male", so it is checked first
    if "female" in lower_text:
        return "female"
    if "male" in lower_text:
        return "male"
    return None


def extract_from_text(
    raw: str,
    phrase_only_fields: Collection[ProfileField] = (),
) -> PartialProfile:
    """Extract candidate profile values from raw text.

    Args:
        raw: User message
        phrase_only_fields: Fields for which only explicit phrase patterns
            ("my name is", "I'm 25 years old", "I live in") are tried

    Returns:
        PartialProfile with the fields that matched
    """
    values: dict[str, object] = {}

    name = _extract_name(raw, ProfileField.NAME in phrase_only_fields)
    if name:
        values[ProfileField.NAME.value] = name

    age = _extract_age(raw, ProfileField.AGE in phrase_only_fields)
    if age is not None:
        values[ProfileField.AGE.value] = age

    location = _extract_location(raw, ProfileField.LOCATION in phrase_only_fields)
    if location:
        values[ProfileField.LOCATION.value] = location

    gender = _extract_gender(raw)
    if gender:
        values[ProfileField.GENDER.value] = gender

    return PartialProfile(**values)


class TextPatternExtractor(Extractor):
    """Extractor backed by extract_from_text.

    Loose heuristics (a bare word as a name, a bare number as an age) are
    only applied to fields the profile doesn't have yet, so a short answer
    to one question can't overwrite an earlier answer.
    """

    source = ExtractionSource.TEXT

    async def extract(
        self,
        text: str,
        current_profile: PartialProfile,
        history: Sequence[Message] = (),  # noqa: ARG002
    ) -> PartialProfile:
        extracted = extract_from_text(
            text, phrase_only_fields=current_profile.provided_fields()
        )
        logger.debug(
            "text_extraction_complete",
            fields=[f.value for f in extracted.provided_fields()],
        )
        return extracted
