"""Tests for Prometheus metrics."""

import pytest
from prometheus_client import REGISTRY

from intake.extraction.adapter import ExtractionOracleAdapter
from intake.observability.metrics import EXTRACTION_LATENCY, TURNS_PROCESSED
from intake.profile.accumulator import merge_and_validate
from intake.profile.models import PartialProfile


def sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsDefined:
    """Tests that metrics exist and accept their labels."""

    def test_turns_processed(self) -> None:
        """The turn counter accepts an outcome label."""
        TURNS_PROCESSED.labels(outcome="collecting").inc()

    def test_extraction_latency(self) -> None:
        """The extraction histogram records observations."""
        EXTRACTION_LATENCY.labels(source="text").observe(0.01)
        assert sample("intake_extraction_latency_seconds_count", source="text") >= 1


class TestMetricsRecorded:
    """Tests that components record metrics."""

    def test_field_rejections_counted(self) -> None:
        """Each rejected candidate increments the counter."""
        before = sample("intake_field_validation_rejections_total", field_name="age")

        merge_and_validate(PartialProfile(age=5))

        after = sample("intake_field_validation_rejections_total", field_name="age")
        assert after == before + 1

    def test_baseline_revalidation_not_counted(self) -> None:
        """Re-checking stored values is not counted as a rejection."""
        before = sample("intake_field_validation_rejections_total", field_name="gender")

        merge_and_validate(PartialProfile(), PartialProfile(gender="other"))

        assert sample("intake_field_validation_rejections_total", field_name="gender") == before

    @pytest.mark.asyncio
    async def test_extraction_attempts_counted(self, scripted_extractor) -> None:
        """Failed and successful attempts are counted separately."""
        before_errors = sample(
            "intake_extraction_attempts_total", source="llm", outcome="error"
        )
        before_success = sample(
            "intake_extraction_attempts_total", source="llm", outcome="success"
        )
        adapter = ExtractionOracleAdapter(
            scripted_extractor([RuntimeError("boom"), {"name": "Danny"}]), max_retries=1
        )

        await adapter.process_turn("Danny", PartialProfile())

        assert sample(
            "intake_extraction_attempts_total", source="llm", outcome="error"
        ) == before_errors + 1
        assert sample(
            "intake_extraction_attempts_total", source="llm", outcome="success"
        ) == before_success + 1

    @pytest.mark.asyncio
    async def test_turn_outcomes_counted(self, scripted_extractor, make_orchestrator) -> None:
        """Completed turns are counted by outcome."""
        before = sample("intake_turns_processed_total", outcome="complete")
        orchestrator = make_orchestrator(
            scripted_extractor([{"name": "Danny", "age": 25, "gender": "male", "location": "NYC"}])
        )

        await orchestrator.process_turn(orchestrator.start_conversation(), "everything")

        assert sample("intake_turns_processed_total", outcome="complete") == before + 1
