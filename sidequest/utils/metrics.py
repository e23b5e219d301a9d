"""Prometheus metrics for provider calls and quest generation."""

from prometheus_client import Counter, Histogram

# Provider call metrics
provider_call_latency_ms = Histogram(
    "provider_call_latency_ms",
    "Provider call latency in milliseconds",
    ["provider", "outcome"],
    buckets=[50, 100, 250, 500, 1000, 2500, 5000, 10000],
)

provider_call_errors_total = Counter(
    "provider_call_errors_total",
    "Total provider call errors",
    ["provider", "reason"],
)

# Generation metrics
quest_generations_total = Counter(
    "quest_generations_total",
    "Total quest generation requests",
    ["mode", "outcome"],
)


class PrometheusProviderMetrics:
    """Prometheus-based provider metrics implementation."""

    def record_latency(self, provider: str, outcome: str, latency_ms: float) -> None:
        """Record provider call latency."""
        provider_call_latency_ms.labels(provider=provider, outcome=outcome).observe(latency_ms)

    def inc_error(self, provider: str, reason: str) -> None:
        """Increment error counter."""
        provider_call_errors_total.labels(provider=provider, reason=reason).inc()


def record_generation(mode: str, outcome: str) -> None:
    """Count one generation request by mode and outcome."""
    quest_generations_total.labels(mode=mode, outcome=outcome).inc()
