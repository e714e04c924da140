"""Circuit breaker pattern для захисту від cascade failures."""

from inventory_resilience.domain.resilience import CircuitMetrics, CircuitState
from inventory_resilience.domain.shared import CircuitOpenError

from .circuit_breaker import (
    RECOVERY_SUCCESS_THRESHOLD,
    CircuitBreaker,
    circuit_breaker_protected,
)

__all__ = [
    "CircuitBreaker",
    "CircuitMetrics",
    "CircuitOpenError",
    "CircuitState",
    "RECOVERY_SUCCESS_THRESHOLD",
    "circuit_breaker_protected",
]
