"""Structured logging for generation calls."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class StructuredGenerationLogger:
    """Structured logger for generation backend calls."""

    def log_generation(
        self,
        kind: str,
        outcome: str,
        latency_ms: float,
        model: str,
        output_chars: int = 0,
        error_reason: str | None = None,
    ) -> None:
        """Log one generation call with structured data."""
        log_data: dict[str, Any] = {
            "kind": kind,
            "model": model,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "output_chars": output_chars,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Generation: {kind} - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
