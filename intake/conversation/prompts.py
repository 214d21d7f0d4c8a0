"""User-facing messages and the conversational reply prompt."""

import json
from collections.abc import Sequence

from intake.conversation.models import Message
from intake.profile.enums import ProfileField
from intake.profile.models import PartialProfile, UserProfile

FIELD_QUESTIONS: dict[ProfileField, str] = {
    ProfileField.NAME: "What's your name?",
    ProfileField.AGE: "How old are you?",
    ProfileField.GENDER: "What's your biological gender? (male or female)",
    ProfileField.LOCATION: "Where are you from?",
}

GENERIC_QUESTION = "Could you tell me more about yourself?"

GREETING = "Hi! I'll help you set up your profile."

EXTRACTION_RETRY_MESSAGE = "Sorry, I had trouble understanding that. Could you try again?"

UNEXPECTED_ERROR_MESSAGE = "Sorry, something went wrong on my side. Could you say that again?"


def question_for_field(field: ProfileField | str | None) -> str:
    """Question asking for one field, or a generic prompt."""
    if field is None:
        return GENERIC_QUESTION
    try:
        return FIELD_QUESTIONS.get(ProfileField(field), GENERIC_QUESTION)
    except ValueError:
        return GENERIC_QUESTION


def greeting_message(first_field: ProfileField | None) -> str:
    return f"{GREETING} {question_for_field(first_field)}"


def field_errors_message(errors: Sequence[str]) -> str:
    """Sentence reporting rejected values from this turn."""
    return "That doesn't look quite right: " + " ".join(
        error if error.endswith(".") else f"{error}." for error in errors
    )


def retry_validation_message(
    errors: Sequence[str], kept: Sequence[ProfileField] = ()
) -> str:
    """Message listing whole-profile validation errors.

    kept names fields whose earlier accepted value is still stored even
    though this turn offered a rejected replacement.
    """
    lines = "\n".join(f"- {error}" for error in errors)
    message = f"Almost there, but a few details need another look:\n{lines}\n"
    if kept:
        names = " and ".join(field.value for field in kept)
        message += f"I kept your earlier {names}. "
    return message + "Could you correct them?"


def completion_summary(profile: UserProfile) -> str:
    """Summary enumerating all four collected fields."""
    return (
        "Perfect! I have all the information I need. Here's your profile:\n"
        f"- Name: {profile.name}\n"
        f"- Age: {profile.age}\n"
        f"- Gender: {profile.gender.value}\n"
        f"- Location: {profile.location}"
    )


# =============================================================================
# Conversational reply prompt
# =============================================================================


REPLY_SYSTEM_PROMPT = """You are a friendly profile builder assistant. Your job is to collect user profile information through natural conversation.

PROFILE SCHEMA:
- name (string, 2-50 chars) - Full name
- age (number, 13-120) - Age in years
- gender ("male", "female") - Biological gender
- location (string, 2-100 chars) - City, state/country

CURRENT PROFILE: {current_profile}
MISSING FIELDS: {missing_fields}

RULES:
- Ask for ONE missing field at a time, starting with {next_field}
- Be conversational and friendly, not robotic
- If user provides multiple pieces of info, acknowledge all but focus on what's still missing
- Keep responses under 50 words
- Don't repeat information you already have

Respond with natural conversation that guides toward collecting the next missing field."""


def build_reply_prompt(
    user_text: str,
    profile: PartialProfile,
    missing_fields: Sequence[ProfileField],
    history: Sequence[Message] = (),
) -> tuple[str, str]:
    """Build (system_prompt, user_prompt) for a conversational reply."""
    system_prompt = REPLY_SYSTEM_PROMPT.format(
        current_profile=json.dumps(profile.to_dict()),
        missing_fields=", ".join(f.value for f in missing_fields) or "none",
        next_field=missing_fields[0].value if missing_fields else "nothing",
    )

    parts = []
    if history:
        lines = "\n".join(f"{m.sender.value}: {m.text}" for m in history)
        parts.append(f"CONVERSATION HISTORY:\n{lines}")
    parts.append(f"User: {user_text}")
    parts.append(
        "Respond naturally and help collect the missing profile information. "
        "Be conversational and friendly."
    )
    return system_prompt, "\n\n".join(parts)
