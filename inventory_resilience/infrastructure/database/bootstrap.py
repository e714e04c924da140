"""Database connection bootstrap: retry з backoff + circuit breaker.

Кожна спроба connect проходить через breaker. Після max_attempts
failures raise DatabaseUnavailableError - caller вирішує, чи зупиняти
процес.

Default schedule (base 2s, max 30s): 2s → 4s → 8s → 16s між 5 спробами.
"""

from typing import Awaitable, Callable, Generic, TypeVar

from inventory_resilience.config import get_logger
from inventory_resilience.domain.shared import DatabaseUnavailableError
from inventory_resilience.infrastructure.circuit_breakers import CircuitBreaker
from inventory_resilience.infrastructure.retry import retry_with_backoff
from inventory_resilience.infrastructure.retry.exponential_backoff import Sleep

logger = get_logger(__name__)

ConnectionT = TypeVar("ConnectionT")


class DatabaseBootstrap(Generic[ConnectionT]):
    """Connects to the database at startup.

    Args:
        connect: Zero-argument async callable returning a connection/client.
        breaker: Circuit breaker guarding connection attempts.
        max_attempts: Total connection attempts (default: 5).
        base_delay: Delay after the first failure, seconds (default: 2.0).
        max_delay: Cap for a single delay, seconds (default: 30.0).
        sleep: Async sleep function (default: asyncio.sleep).

    Example:
        >>> bootstrap = DatabaseBootstrap(connect_mongo, container.db_breaker)
        >>> client = await bootstrap.initialize()
    """

    def __init__(
        self,
        connect: Callable[[], Awaitable[ConnectionT]],
        breaker: CircuitBreaker,
        max_attempts: int = 5,
        base_delay: float = 2.0,
        max_delay: float = 30.0,
        sleep: Sleep | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        self._connect = connect
        self.breaker = breaker
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._sleep = sleep
        self.attempts = 0

    async def _attempt(self) -> ConnectionT:
        self.attempts += 1
        logger.info(
            "database.connect.attempt",
            attempt=self.attempts,
            max_attempts=self.max_attempts,
            breaker_state=self.breaker.state.value,
        )
        return await self.breaker.execute(self._connect)

    async def initialize(self) -> ConnectionT:
        """Connect with retries.

        Returns:
            Whatever `connect` returned on the successful attempt.

        Raises:
            DatabaseUnavailableError: All attempts failed (включно з
                CircuitOpenError rejections).
        """
        self.attempts = 0
        attempt_with_retry = retry_with_backoff(
            max_retries=self.max_attempts - 1,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            retryable_exceptions=(Exception,),
            sleep=self._sleep,
        )(self._attempt)

        try:
            connection = await attempt_with_retry()
        except Exception as e:
            logger.error(
                "database.connect.failed",
                attempts=self.attempts,
                error=str(e),
            )
            raise DatabaseUnavailableError(self.attempts, e) from e

        logger.info("database.connect.succeeded", attempts=self.attempts)
        return connection
