"""Observability: structured logging and metrics.

Logging goes through structlog with PII redaction; metrics are Prometheus
collectors registered in intake.observability.metrics.
"""

from intake.observability.logging import PIIRedactor, get_logger, redact_text, setup_logging

__all__ = ["PIIRedactor", "get_logger", "redact_text", "setup_logging"]
