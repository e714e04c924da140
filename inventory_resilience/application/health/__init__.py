"""Health reporting for breakers and cache."""

from .resilience_report import HealthStatus, build_resilience_report

__all__ = ["HealthStatus", "build_resilience_report"]
