"""Async provider call executor with a hard per-call timeout.

Every provider lookup made by the registry goes through here:
- Hard timeout per call (asyncio.wait_for); the clock is per call, never shared
- Timeouts and raised errors are classified into executor exceptions
- Metrics and structured logging hooks (no-op by default)
"""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

T = TypeVar("T")


# Exception types
class ProviderTimeoutError(Exception):
    """Provider call exceeded its timeout."""

    pass


class ProviderCallError(Exception):
    """Provider call raised an unexpected error."""

    pass


# Context and config types
@dataclass(frozen=True)
class CallContext:
    """Context for one provider call with tracing."""

    provider_type: str
    trace_id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])


@dataclass(frozen=True)
class CallConfig:
    """Configuration for provider call execution."""

    timeout_seconds: float = 10.0


# Metrics interface (to be implemented by actual metrics system)
class ProviderMetrics:
    """Interface for provider call metrics."""

    def record_latency(self, provider: str, outcome: str, latency_ms: float) -> None:
        """Record provider call latency."""
        pass

    def inc_error(self, provider: str, reason: str) -> None:
        """Increment error counter."""
        pass


# Logging interface
class ProviderLogger:
    """Interface for structured logging."""

    def log_call(
        self,
        ctx: CallContext,
        outcome: str,
        latency_ms: float,
        candidates: int = 0,
        error_reason: str | None = None,
    ) -> None:
        """Log provider call."""
        pass


class ProviderCallExecutor:
    """Runs provider coroutines under a hard timeout."""

    def __init__(
        self,
        metrics: ProviderMetrics | None = None,
        logger: ProviderLogger | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
        """
        self._metrics = metrics or ProviderMetrics()
        self._logger = logger or ProviderLogger()

    async def execute(
        self,
        ctx: CallContext,
        config: CallConfig,
        fn: Callable[[], Awaitable[T]],
        count: Callable[[T], int] | None = None,
    ) -> T:
        """Execute one provider call.

        Args:
            ctx: Call context with provider type and trace id
            config: Execution configuration
            fn: Zero-argument coroutine factory performing the call
            count: Optional function returning how many candidates the result holds

        Returns:
            Result of the call

        Raises:
            ProviderTimeoutError: Call exceeded config.timeout_seconds
            ProviderCallError: Call raised any other exception
        """
        start_time = time.monotonic()

        try:
            result = await asyncio.wait_for(fn(), timeout=config.timeout_seconds)
        except TimeoutError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_latency(ctx.provider_type, "timeout", elapsed_ms)
            self._metrics.inc_error(ctx.provider_type, "timeout")
            self._logger.log_call(ctx, "timeout", elapsed_ms, error_reason="timeout")
            raise ProviderTimeoutError(
                f"Provider {ctx.provider_type} timed out after {config.timeout_seconds}s"
            ) from e
        except Exception as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            self._metrics.record_latency(ctx.provider_type, "error", elapsed_ms)
            self._metrics.inc_error(ctx.provider_type, "execution_error")
            self._logger.log_call(ctx, "error", elapsed_ms, error_reason=type(e).__name__)
            raise ProviderCallError(f"Provider {ctx.provider_type} failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        candidates = count(result) if count is not None else 0
        outcome = "success" if candidates else "empty"
        self._metrics.record_latency(ctx.provider_type, outcome, elapsed_ms)
        self._logger.log_call(ctx, outcome, elapsed_ms, candidates=candidates)
        return result
