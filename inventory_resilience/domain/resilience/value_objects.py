"""Circuit breaker state + read-only snapshots.

State Machine:
CLOSED (normal) → OPEN (failing) → HALF_OPEN (testing) → CLOSED/OPEN
"""

from dataclasses import dataclass
from enum import Enum

from inventory_resilience.domain.shared import ValueObject


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "CLOSED"  # Нормальний стан - пропускаємо requests
    OPEN = "OPEN"  # Failure стан - reject requests (fast fail)
    HALF_OPEN = "HALF_OPEN"  # Probation - trial requests


@dataclass(frozen=True)
class CircuitMetrics(ValueObject):
    """Snapshot of circuit breaker counters.

    Example:
        >>> metrics = breaker.get_metrics()
        >>> metrics.state  # CircuitState.CLOSED
        >>> metrics.success_rate  # 0.75
    """

    name: str
    state: CircuitState
    failure_count: int
    total_requests: int
    successful_requests: int
    failed_requests: int
    rejected_requests: int
    circuit_breaker_trips: int

    @property
    def success_rate(self) -> float:
        """Successful / total requests (0.0 без traffic)."""
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["state"] = self.state.value
        data["success_rate"] = self.success_rate
        return data


@dataclass(frozen=True)
class CacheStats(ValueObject):
    """Snapshot of TTL cache effectiveness."""

    hit_count: int
    miss_count: int
    size: int
    max_entries: int

    @property
    def hit_rate(self) -> float:
        """hits / (hits + misses), 0.0 коли get() ще не викликався."""
        total = self.hit_count + self.miss_count
        if total == 0:
            return 0.0
        return self.hit_count / total

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["hit_rate"] = self.hit_rate
        return data
