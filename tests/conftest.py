"""Pytest configuration and fixtures."""

import pytest

from inventory_resilience.config import Settings


class FakeClock:
    """Controllable monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


@pytest.fixture
def clock():
    """Fake clock для детермінованих TTL / reset timeout tests."""
    return FakeClock()


@pytest.fixture
def settings():
    """Settings без читання .env файлу."""
    return Settings(
        _env_file=None,
        circuit_breaker_failure_threshold=3,
        circuit_breaker_reset_timeout_ms=1000,
        circuit_breaker_monitoring_interval=0.01,
        cache_max_entries=10,
        cache_sweep_interval=0.01,
        log_format="console",
    )
