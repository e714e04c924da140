"""Base exceptions.

CircuitOpenError означає "not attempted" - operation взагалі не викликалась.
Callers мають обробляти його окремо від failures самої operation.
"""

from typing import Any


class DomainException(Exception):
    """Base exception for all errors raised by this package.

    Example:
        >>> raise DomainException("Breaker rejected call", breaker="mongodb")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize exception.

        Args:
            message: Human-readable error message.
            **context: Additional context (breaker name, attempts, etc).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ResilienceError(DomainException):
    """Base exception для circuit breaker / bootstrap errors."""

    pass


class CircuitOpenError(ResilienceError):
    """Raised коли circuit breaker OPEN і fallback не передано (fast fail).

    Example:
        >>> raise CircuitOpenError("mongodb", time_remaining=12.5)
    """

    def __init__(self, breaker_name: str, time_remaining: float = 0.0) -> None:
        super().__init__(
            f"Circuit breaker OPEN for {breaker_name}, retry later",
            time_remaining=round(time_remaining, 3),
        )
        self.breaker_name = breaker_name
        self.time_remaining = time_remaining


class DatabaseUnavailableError(ResilienceError):
    """Raised коли всі спроби підключення до database вичерпано."""

    def __init__(self, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__(
            "Database connection failed after max retries",
            attempts=attempts,
            last_error=repr(last_error) if last_error else None,
        )
        self.attempts = attempts
        self.last_error = last_error
