"""Structured logging for provider calls."""

import logging
from typing import Any

from sidequest.tools.executor import CallContext

logger = logging.getLogger(__name__)


class StructuredProviderLogger:
    """Structured logger for provider calls."""

    def log_call(
        self,
        ctx: CallContext,
        outcome: str,
        latency_ms: float,
        candidates: int = 0,
        error_reason: str | None = None,
    ) -> None:
        """Log provider call with structured data."""
        log_data: dict[str, Any] = {
            "trace_id": ctx.trace_id,
            "provider": ctx.provider_type,
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "candidates": candidates,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Provider call: {ctx.provider_type} - {outcome}"

        if outcome in ("success", "empty"):
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
