"""Conversation orchestrator - per-turn state machine.

States:
    COLLECTING -> COMPLETE (terminal, after whole-profile validation passes)

A turn where every field is present but whole-profile validation fails is
reported as RETRYING and the conversation stays in COLLECTING.

The orchestrator holds no conversation state of its own. Each call takes
the current ConversationState and returns a new one inside the TurnResult.
"""

from collections.abc import Sequence

import structlog

from intake.conversation.models import (
    ConversationState,
    ConversationStatus,
    Message,
    TurnOutcome,
    TurnResult,
)
from intake.conversation.prompts import (
    EXTRACTION_RETRY_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    completion_summary,
    field_errors_message,
    greeting_message,
    question_for_field,
    retry_validation_message,
)
from intake.conversation.replies import ReplyGenerator
from intake.extraction.adapter import ExtractionOracleAdapter
from intake.extraction.base import TurnExtraction
from intake.observability.logging import get_logger
from intake.observability.metrics import TURNS_PROCESSED
from intake.profile.accumulator import next_required_field, validate_complete
from intake.profile.enums import FIELD_ORDER
from intake.profile.models import PartialProfile

logger = get_logger(__name__)


class ConversationOrchestrator:
    """Drive profile collection one user turn at a time.

    Per turn:
    1. Append the user's message to the transcript
    2. Extract candidate values (primary extractor, optional fallback)
    3. Merge accepted values into the accumulated profile
    4. If every field is present, run whole-profile validation and either
       complete the conversation or report the errors
    5. Otherwise ask for the next missing field

    Any unexpected fault produces a generic retry reply and leaves the
    accumulated profile untouched.
    """

    def __init__(
        self,
        adapter: ExtractionOracleAdapter,
        fallback_adapter: ExtractionOracleAdapter | None = None,
        reply_generator: ReplyGenerator | None = None,
        history_window: int = 6,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            adapter: Primary extraction adapter
            fallback_adapter: Adapter used when the primary extraction fails
            reply_generator: Generates conversational replies (canned questions if None)
            history_window: Number of recent messages passed as context
        """
        self._adapter = adapter
        self._fallback_adapter = fallback_adapter
        self._reply_generator = reply_generator
        self._history_window = history_window

    def start_conversation(self) -> ConversationState:
        """Create a fresh state with a greeting asking for the first field."""
        return ConversationState(
            messages=[Message.from_system(greeting_message(FIELD_ORDER[0]))],
        )

    async def process_turn(self, state: ConversationState, text: str) -> TurnResult:
        """Process one user turn.

        Args:
            state: Accumulated state before this turn
            text: Raw user message

        Returns:
            TurnResult with the reply and the new state
        """
        user_message = Message.from_user(text)

        with structlog.contextvars.bound_contextvars(
            conversation_id=str(state.conversation_id),
            turn_number=len(state.messages),
        ):
            if state.is_complete:
                return self._already_complete(state, user_message)

            try:
                return await self._collect(state, user_message)
            except Exception as e:
                logger.exception("turn_failed", error=str(e), error_type=type(e).__name__)
                TURNS_PROCESSED.labels(outcome=TurnOutcome.FAILED.value).inc()
                return self._build_result(
                    state,
                    user_message,
                    reply=UNEXPECTED_ERROR_MESSAGE,
                    outcome=TurnOutcome.FAILED,
                )

    async def _collect(self, state: ConversationState, user_message: Message) -> TurnResult:
        history = state.recent_messages(self._history_window)
        extraction = await self._extract(user_message.text, state.profile, history)
        result = extraction.result

        # Accepted values replace old ones; rejected candidates never do
        profile = state.profile.merged_with(result.valid_data)
        update = {
            "profile": profile,
            "completion_status": result.completion_status,
        }

        if extraction.is_complete:
            validation = validate_complete(extraction.merged)

            if validation.is_valid and validation.profile is not None:
                logger.info("profile_complete", confidence=extraction.confidence)
                TURNS_PROCESSED.labels(outcome=TurnOutcome.COMPLETE.value).inc()
                return self._build_result(
                    state,
                    user_message,
                    reply=completion_summary(validation.profile),
                    outcome=TurnOutcome.COMPLETE,
                    confidence=extraction.confidence,
                    update={**update, "status": ConversationStatus.COMPLETE},
                )

            kept = [
                field
                for field in FIELD_ORDER
                if profile.has(field)
                and any(error.startswith(f"{field.value}:") for error in validation.errors)
            ]
            logger.info(
                "profile_validation_retry",
                error_count=len(validation.errors),
                kept_fields=[field.value for field in kept],
            )
            TURNS_PROCESSED.labels(outcome=TurnOutcome.RETRYING.value).inc()
            return self._build_result(
                state,
                user_message,
                reply=retry_validation_message(validation.errors, kept),
                outcome=TurnOutcome.RETRYING,
                confidence=extraction.confidence,
                errors=validation.errors,
                update=update,
            )

        reply = await self._collecting_reply(user_message.text, extraction, profile, history)
        TURNS_PROCESSED.labels(outcome=TurnOutcome.COLLECTING.value).inc()
        return self._build_result(
            state,
            user_message,
            reply=reply,
            outcome=TurnOutcome.COLLECTING,
            confidence=extraction.confidence,
            errors=result.errors,
            update=update,
        )

    async def _extract(
        self,
        text: str,
        profile: PartialProfile,
        history: Sequence[Message],
    ) -> TurnExtraction:
        extraction = await self._adapter.process_turn(text, profile, history)
        if not extraction.failed or self._fallback_adapter is None:
            return extraction

        fallback = await self._fallback_adapter.process_turn(text, profile, history)
        logger.info(
            "extraction_fallback_used",
            primary_error=extraction.error,
            fallback_failed=fallback.failed,
        )
        return extraction if fallback.failed else fallback

    async def _collecting_reply(
        self,
        text: str,
        extraction: TurnExtraction,
        profile: PartialProfile,
        history: Sequence[Message],
    ) -> str:
        result = extraction.result
        parts = []

        if extraction.failed:
            parts.append(EXTRACTION_RETRY_MESSAGE)
        if result.errors:
            parts.append(field_errors_message(result.errors))

        question = question_for_field(next_required_field(result))
        if self._reply_generator is not None and not extraction.failed:
            try:
                question = await self._reply_generator.generate(
                    text, profile, result.missing_required, history
                )
            except Exception as e:
                logger.warning("reply_generation_failed", error=str(e))

        parts.append(question)
        return " ".join(parts)

    def _already_complete(self, state: ConversationState, user_message: Message) -> TurnResult:
        validation = validate_complete(state.profile)
        reply = "Your profile is already complete."
        if validation.profile is not None:
            reply = f"{reply}\n\n{completion_summary(validation.profile)}"
        return self._build_result(
            state, user_message, reply=reply, outcome=TurnOutcome.COMPLETE, confidence=1.0
        )

    def _build_result(
        self,
        state: ConversationState,
        user_message: Message,
        reply: str,
        outcome: TurnOutcome,
        confidence: float = 0.0,
        errors: list[str] | None = None,
        update: dict | None = None,
    ) -> TurnResult:
        new_state = state.model_copy(
            update={
                **(update or {}),
                "errors": list(errors or []),
                "messages": [*state.messages, user_message, Message.from_system(reply)],
            }
        )
        return TurnResult(
            reply_text=reply,
            updated_profile=new_state.profile,
            is_complete=new_state.is_complete,
            outcome=outcome,
            confidence=confidence,
            errors=list(errors or []),
            state=new_state,
        )
