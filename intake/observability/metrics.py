"""Prometheus metrics for intake.

Tracks turn outcomes, extraction attempts and latency, field validation
rejections, and the LLM calls made through LLMExecutor.
"""

from prometheus_client import Counter, Histogram

# Turn metrics
TURNS_PROCESSED = Counter(
    "intake_turns_processed_total",
    "Total number of conversation turns processed",
    labelnames=["outcome"],
)

# Extraction metrics
EXTRACTION_ATTEMPTS = Counter(
    "intake_extraction_attempts_total",
    "Total number of extraction attempts",
    labelnames=["source", "outcome"],
)

EXTRACTION_LATENCY = Histogram(
    "intake_extraction_latency_seconds",
    "Extraction latency in seconds (all attempts of one turn)",
    labelnames=["source"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Validation metrics
FIELD_VALIDATION_REJECTIONS = Counter(
    "intake_field_validation_rejections_total",
    "Total number of rejected candidate field values",
    labelnames=["field_name"],
)

# LLM metrics, one sample per model tried
LLM_CALLS = Counter(
    "intake_llm_calls_total",
    "Total number of LLM calls by consumer step and outcome",
    labelnames=["step", "provider", "outcome"],
)

LLM_LATENCY = Histogram(
    "intake_llm_latency_seconds",
    "Latency of successful LLM calls in seconds",
    labelnames=["step", "provider"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
