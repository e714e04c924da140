"""Resilience value objects (state enum + metrics snapshots)."""

from .value_objects import CacheStats, CircuitMetrics, CircuitState

__all__ = [
    "CircuitState",
    "CircuitMetrics",
    "CacheStats",
]
