"""Retry logic with exponential backoff."""

from .exponential_backoff import RetryableError, compute_backoff_delay, retry_with_backoff

__all__ = ["retry_with_backoff", "compute_backoff_delay", "RetryableError"]
