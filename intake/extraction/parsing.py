"""Interpret model output as candidate profile values."""

import json
import re
from typing import Any

from pydantic import ValidationError

from intake.errors import MalformedExtractionOutput
from intake.profile.enums import FIELD_ORDER
from intake.profile.models import PartialProfile

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(content: str) -> str:
    """Return the body of a ```json fenced block, or the content unchanged."""
    content = content.strip()
    if "```json" in content:
        start = content.find("```json") + 7
        end = content.find("```", start)
        if end > start:
            return content[start:end].strip()
    elif "```" in content:
        start = content.find("```") + 3
        end = content.find("```", start)
        if end > start:
            return content[start:end].strip()
    return content


def parse_profile_output(raw: str) -> PartialProfile:
    """Parse the first JSON object in raw model output into a PartialProfile.

    Null and missing fields are treated as "not found". Unknown keys (such
    as per-field confidence) are ignored. Gender is passed through as-is so
    that values outside the two-value set reach the field rules and are
    reported.

    Raises:
        MalformedExtractionOutput: No JSON object, invalid JSON, or field
            values of the wrong type
    """
    content = strip_code_fences(raw)
    match = JSON_OBJECT_PATTERN.search(content)
    if not match:
        raise MalformedExtractionOutput("No JSON object in extraction output", raw)

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedExtractionOutput(f"Invalid JSON: {e}", raw) from e

    if not isinstance(data, dict):
        raise MalformedExtractionOutput("Extraction output is not an object", raw)

    values: dict[str, Any] = {
        field.value: data[field.value]
        for field in FIELD_ORDER
        if data.get(field.value) is not None
    }

    try:
        return PartialProfile.model_validate(values)
    except ValidationError as e:
        raise MalformedExtractionOutput(
            f"Extraction output has invalid field types: {e.error_count()} error(s)",
            raw,
        ) from e
