"""Infrastructure layer - circuit breaker, cache, retry, bootstrap."""
