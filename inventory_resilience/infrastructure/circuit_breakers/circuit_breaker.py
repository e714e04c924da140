"""Circuit Breaker pattern для захисту від cascade failures.

Коли database down:
- Без circuit breaker: Кожен request спробує → timeout → fail (повільно!)
- З circuit breaker: Після N consecutive failures → OPEN → fast fail (швидко!)

State Machine:
CLOSED →(failures ≥ threshold)→ OPEN →(reset timeout elapsed)→ HALF_OPEN
HALF_OPEN →(3 successes)→ CLOSED
HALF_OPEN →(any failure)→ OPEN

Breaker - це gate, не retrier. Retry/backoff робить caller
(див. infrastructure.database.bootstrap).

Single event loop only: state transitions happen synchronously around the
single await on `operation`. A multi-threaded host needs an external mutex.
"""

import logging
import time
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from inventory_resilience.domain.resilience import CircuitMetrics, CircuitState
from inventory_resilience.domain.shared import CircuitOpenError
from inventory_resilience.infrastructure.background import PeriodicTask

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]

# Consecutive HALF_OPEN successes required to close the circuit
RECOVERY_SUCCESS_THRESHOLD = 3


class CircuitBreaker:
    """Circuit Breaker implementation.

    Args:
        failure_threshold: Consecutive failures для відкриття circuit (default: 5).
        reset_timeout_ms: Скільки ms circuit залишається OPEN (default: 30000).
        name: Name used in logs and health reports.
        clock: Monotonic clock in seconds (inject a fake one in tests).

    Example:
        >>> breaker = CircuitBreaker(failure_threshold=3, reset_timeout_ms=1000)
        >>>
        >>> # CLOSED → 3 failures → OPEN
        >>> for _ in range(3):
        ...     await breaker.execute(failing_call)
        >>>
        >>> await breaker.execute(any_call)  # Raises CircuitOpenError
        >>> await breaker.execute(any_call, fallback=read_from_cache)  # fallback result
        >>>
        >>> # After 1s → HALF_OPEN, 3 successes → CLOSED
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        reset_timeout_ms: int = 30_000,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if reset_timeout_ms < 0:
            raise ValueError("reset_timeout_ms must be >= 0")

        self.failure_threshold = failure_threshold
        self.reset_timeout_ms = reset_timeout_ms
        self.name = name
        self._clock = clock

        # State
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time: float | None = None

        # Metrics
        self._total_requests = 0
        self._successful_requests = 0
        self._failed_requests = 0
        self._rejected_requests = 0
        self._trips = 0

        self._monitor: PeriodicTask | None = None

        logger.info(
            "circuit_breaker.initialized",
            extra={
                "breaker": self.name,
                "failure_threshold": failure_threshold,
                "reset_timeout_ms": reset_timeout_ms,
            },
        )

    @property
    def state(self) -> CircuitState:
        """Get current circuit state."""
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def success_count(self) -> int:
        """Consecutive successes in HALF_OPEN."""
        return self._success_count

    async def execute(
        self,
        operation: Operation[T],
        fallback: Operation[T] | None = None,
    ) -> T:
        """Execute operation через circuit breaker.

        Args:
            operation: Zero-argument async callable.
            fallback: Optional zero-argument async callable, used when the
                circuit is OPEN or this failure has just opened it.

        Returns:
            Result від operation (або від fallback).

        Raises:
            CircuitOpenError: Якщо circuit OPEN і fallback не передано.
            Exception: Будь-яка exception від operation.
        """
        self._total_requests += 1

        if self._state == CircuitState.OPEN:
            if self._should_attempt_reset():
                logger.info(
                    "circuit_breaker.half_open",
                    extra={
                        "breaker": self.name,
                        "previous_failures": self._failure_count,
                    },
                )
                self._state = CircuitState.HALF_OPEN
                self._success_count = 0
            else:
                # Circuit still OPEN - fast fail, operation не викликається
                self._rejected_requests += 1
                logger.warning(
                    "circuit_breaker.rejected",
                    extra={
                        "breaker": self.name,
                        "failure_count": self._failure_count,
                        "fallback": fallback is not None,
                    },
                )
                if fallback is not None:
                    return await fallback()
                raise CircuitOpenError(self.name, self.time_remaining())

        try:
            result = await operation()
        except Exception:
            self._on_failure()

            if fallback is not None and self._state == CircuitState.OPEN:
                logger.info("circuit_breaker.fallback", extra={"breaker": self.name})
                return await fallback()

            raise

        self._on_success()
        return result

    def _on_success(self) -> None:
        """Handle successful call."""
        self._successful_requests += 1

        if self._state == CircuitState.HALF_OPEN:
            self._success_count += 1

            if self._success_count >= RECOVERY_SUCCESS_THRESHOLD:
                logger.info(
                    "circuit_breaker.closed",
                    extra={
                        "breaker": self.name,
                        "success_count": self._success_count,
                        "previous_failures": self._failure_count,
                    },
                )
                self._state = CircuitState.CLOSED
                self._failure_count = 0
                self._success_count = 0

        elif self._state == CircuitState.CLOSED:
            # Failures мають бути consecutive
            self._failure_count = 0

    def _on_failure(self) -> None:
        """Handle failed call."""
        self._failed_requests += 1
        self._failure_count += 1
        self._last_failure_time = self._clock()

        if self._state == CircuitState.HALF_OPEN:
            logger.warning(
                "circuit_breaker.reopened",
                extra={"breaker": self.name, "failure_count": self._failure_count},
            )
            self._state = CircuitState.OPEN

        elif self._state == CircuitState.CLOSED:
            if self._failure_count >= self.failure_threshold:
                logger.error(
                    "circuit_breaker.opened",
                    extra={
                        "breaker": self.name,
                        "failure_count": self._failure_count,
                        "threshold": self.failure_threshold,
                    },
                )
                self._state = CircuitState.OPEN
                self._trips += 1

    def _elapsed_ms(self) -> float | None:
        if self._last_failure_time is None:
            return None
        return (self._clock() - self._last_failure_time) * 1000

    def _should_attempt_reset(self) -> bool:
        """Check if circuit should transition OPEN → HALF_OPEN."""
        elapsed_ms = self._elapsed_ms()
        if elapsed_ms is None:
            return True
        return elapsed_ms > self.reset_timeout_ms

    def time_remaining(self) -> float:
        """Seconds until an OPEN circuit allows a trial call (0 otherwise)."""
        if self._state != CircuitState.OPEN:
            return 0.0
        elapsed_ms = self._elapsed_ms()
        if elapsed_ms is None:
            return 0.0
        return max(0.0, (self.reset_timeout_ms - elapsed_ms) / 1000)

    def get_metrics(self) -> CircuitMetrics:
        """Read-only snapshot of counters and state."""
        return CircuitMetrics(
            name=self.name,
            state=self._state,
            failure_count=self._failure_count,
            total_requests=self._total_requests,
            successful_requests=self._successful_requests,
            failed_requests=self._failed_requests,
            rejected_requests=self._rejected_requests,
            circuit_breaker_trips=self._trips,
        )

    def reset(self) -> None:
        """Manually reset circuit breaker (for testing/admin)."""
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time = None
        self._total_requests = 0
        self._successful_requests = 0
        self._failed_requests = 0
        self._rejected_requests = 0
        self._trips = 0
        logger.info("circuit_breaker.manual_reset", extra={"breaker": self.name})

    # ------------------------------------------------------------------
    # Monitoring
    # ------------------------------------------------------------------

    def start_monitoring(self, interval_seconds: float = 10.0) -> None:
        """Start periodic metrics logging (never changes state)."""
        if self._monitor is None:
            self._monitor = PeriodicTask(
                f"circuit_breaker.{self.name}.monitor",
                self.log_metrics,
                interval_seconds,
            )
        self._monitor.start()

    async def stop_monitoring(self) -> None:
        if self._monitor is not None:
            await self._monitor.stop()

    def log_metrics(self) -> None:
        metrics = self.get_metrics().to_dict()
        metrics["breaker"] = metrics.pop("name")
        logger.info("circuit_breaker.metrics", extra=metrics)

        if self._state == CircuitState.OPEN and self._should_attempt_reset():
            logger.info(
                "circuit_breaker.reset_eligible",
                extra={"breaker": self.name, "failure_count": self._failure_count},
            )


def circuit_breaker_protected(
    breaker: CircuitBreaker,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator для захисту async function з circuit breaker.

    Breaker передається явно, щоб кілька functions могли ділити
    один gate (наприклад всі database calls).

    Example:
        >>> db_breaker = CircuitBreaker(name="mongodb")
        >>> @circuit_breaker_protected(db_breaker)
        ... async def load_categories():
        ...     return await db.categories.find().to_list(None)
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await breaker.execute(lambda: func(*args, **kwargs))

        return wrapper

    return decorator
