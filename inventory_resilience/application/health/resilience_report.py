"""Resilience section of the /health payload.

Rates are rendered as percentage strings ("87.50%") - the format the
dashboard already consumes.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from inventory_resilience.domain.resilience import (
    CacheStats,
    CircuitMetrics,
    CircuitState,
)
from inventory_resilience.infrastructure.cache import TTLCache
from inventory_resilience.infrastructure.circuit_breakers import CircuitBreaker


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


def _percent(ratio: float) -> str:
    return f"{ratio * 100:.2f}%"


def _overall_status(states: list[CircuitState]) -> HealthStatus:
    if CircuitState.OPEN in states:
        return HealthStatus.UNHEALTHY
    if CircuitState.HALF_OPEN in states:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


def _breaker_section(metrics: CircuitMetrics) -> dict[str, Any]:
    return {
        "state": metrics.state.value,
        "failure_count": metrics.failure_count,
        "total_requests": metrics.total_requests,
        "successful_requests": metrics.successful_requests,
        "failed_requests": metrics.failed_requests,
        "rejected_requests": metrics.rejected_requests,
        "circuit_breaker_trips": metrics.circuit_breaker_trips,
        "success_rate": _percent(metrics.success_rate),
    }


def _cache_section(stats: CacheStats) -> dict[str, Any]:
    return {
        "hit_count": stats.hit_count,
        "miss_count": stats.miss_count,
        "hit_rate": _percent(stats.hit_rate),
        "cache_size": stats.size,
        "max_size": stats.max_entries,
    }


def build_resilience_report(
    breakers: Mapping[str, CircuitBreaker],
    cache: TTLCache | None = None,
) -> dict[str, Any]:
    """Build a JSON-ready snapshot of breaker and cache health.

    Args:
        breakers: Breakers keyed by the name shown in the report.
        cache: Optional query cache.

    Returns:
        Dict з status, timestamp, circuit_breakers та cache sections.
        status: unhealthy якщо будь-який breaker OPEN, degraded якщо
        HALF_OPEN, інакше healthy.
    """
    metrics = {name: breaker.get_metrics() for name, breaker in breakers.items()}

    report: dict[str, Any] = {
        "status": _overall_status([m.state for m in metrics.values()]).value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "circuit_breakers": {
            name: _breaker_section(m) for name, m in metrics.items()
        },
    }
    if cache is not None:
        report["cache"] = _cache_section(cache.get_stats())

    return report
