"""Extraction oracle adapter.

Wraps an Extractor with a bounded number of attempts, a per-attempt
timeout and failure recovery, then merges the candidate values over the
current profile and scores the turn.
"""

import asyncio
import time
from collections.abc import Sequence

from intake.conversation.models import Message
from intake.extraction.base import ExtractionSource, Extractor, TurnExtraction
from intake.observability.logging import get_logger
from intake.observability.metrics import EXTRACTION_ATTEMPTS, EXTRACTION_LATENCY
from intake.profile.accumulator import (
    calculate_confidence,
    is_profile_complete,
    merge_and_validate,
)
from intake.profile.models import PartialProfile

logger = get_logger(__name__)

# Oracle path confidence is categorical
HIGH_CONFIDENCE = 0.9
LOW_CONFIDENCE = 0.1


class ExtractionOracleAdapter:
    """Run one extractor for a user turn without ever raising.

    Failures (timeouts, provider errors, malformed output) are retried up
    to max_retries times; after that the turn gets an empty extraction with
    confidence 0.1. Cancellation is not caught.
    """

    def __init__(
        self,
        extractor: Extractor,
        max_retries: int = 2,
        timeout: float = 30.0,
        history_window: int = 6,
    ) -> None:
        """Initialize the adapter.

        Args:
            extractor: Extractor to wrap
            max_retries: Retries after the first failed attempt
            timeout: Per-attempt timeout in seconds
            history_window: Number of recent messages passed as context
        """
        self._extractor = extractor
        self._max_retries = max_retries
        self._timeout = timeout
        self._history_window = history_window

    @property
    def source(self) -> ExtractionSource:
        return self._extractor.source

    async def process_turn(
        self,
        user_text: str,
        current_profile: PartialProfile,
        history: Sequence[Message] = (),
    ) -> TurnExtraction:
        """Extract, merge and score one user turn.

        Args:
            user_text: Raw user message
            current_profile: Accumulated profile before this turn
            history: Transcript before this message

        Returns:
            TurnExtraction; failed=True if every attempt failed
        """
        recent = list(history)[-self._history_window:] if self._history_window else []
        source = self._extractor.source.value
        attempts = self._max_retries + 1
        last_error: str | None = None
        extracted: PartialProfile | None = None

        start_time = time.perf_counter()
        for attempt in range(1, attempts + 1):
            try:
                extracted = await asyncio.wait_for(
                    self._extractor.extract(user_text, current_profile, recent),
                    timeout=self._timeout,
                )
                EXTRACTION_ATTEMPTS.labels(source=source, outcome="success").inc()
                break

            except TimeoutError:
                last_error = f"Extraction timed out after {self._timeout}s"
                EXTRACTION_ATTEMPTS.labels(source=source, outcome="timeout").inc()

            except Exception as e:
                last_error = f"{type(e).__name__}: {e}"
                EXTRACTION_ATTEMPTS.labels(source=source, outcome="error").inc()

            logger.warning(
                "extraction_attempt_failed",
                source=source,
                attempt=attempt,
                max_attempts=attempts,
                error=last_error,
            )

        EXTRACTION_LATENCY.labels(source=source).observe(time.perf_counter() - start_time)

        if extracted is None:
            logger.error(
                "extraction_failed",
                source=source,
                attempts=attempts,
                error=last_error,
            )
            return TurnExtraction(
                extracted=PartialProfile(),
                confidence=LOW_CONFIDENCE,
                is_complete=False,
                source=ExtractionSource.NONE,
                failed=True,
                error=last_error,
                merged=current_profile,
                result=merge_and_validate(PartialProfile(), current_profile),
            )

        result = merge_and_validate(extracted, current_profile)
        merged = current_profile.merged_with(extracted)

        if self._extractor.source == ExtractionSource.LLM:
            confidence = HIGH_CONFIDENCE if not extracted.is_empty else LOW_CONFIDENCE
        else:
            confidence = calculate_confidence(result)

        logger.info(
            "extraction_complete",
            source=source,
            fields=[f.value for f in extracted.provided_fields()],
            rejected=len(result.errors),
            confidence=round(confidence, 3),
        )

        return TurnExtraction(
            extracted=extracted,
            confidence=confidence,
            is_complete=is_profile_complete(merged),
            source=self._extractor.source,
            merged=merged,
            result=result,
        )
