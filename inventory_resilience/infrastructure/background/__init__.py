"""Cancellable background loops."""

from .periodic_task import PeriodicTask

__all__ = ["PeriodicTask"]
