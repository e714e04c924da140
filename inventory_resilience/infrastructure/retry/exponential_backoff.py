"""Exponential backoff retry logic.

Circuit breaker сам не retry-ить. Retry policy живе тут і комбінується
з breaker на рівні caller:
- Transient errors (network blips, server selection timeouts) → retry
- Exponential backoff prevents hammering a recovering database
"""

import asyncio
import inspect
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]


class RetryableError(Exception):
    """Base exception для errors які можна retry.

    Example:
        >>> raise RetryableError("Server selection timed out, retry in 2s")
    """

    pass


def compute_backoff_delay(
    attempt: int,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
) -> float:
    """Delay (seconds) after a failed 0-based `attempt`.

    Example:
        >>> [compute_backoff_delay(n, base_delay=2.0, max_delay=30.0) for n in range(5)]
        [2.0, 4.0, 8.0, 16.0, 30.0]
    """
    return min(base_delay * (exponential_base**attempt), max_delay)


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    retryable_exceptions: tuple[Type[BaseException], ...] = (RetryableError,),
    sleep: Sleep | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator для retry з exponential backoff.

    Args:
        max_retries: Кількість retries після першої спроби (default: 3).
        base_delay: Базова затримка в секундах (default: 1.0).
        max_delay: Максимальна затримка в секундах (default: 60.0).
        exponential_base: База для exponential backoff (default: 2.0).
        retryable_exceptions: Tuple exceptions які можна retry.
        sleep: Async sleep function (default: asyncio.sleep).

    Returns:
        Decorated function з retry logic.

    Raises:
        TypeError: Якщо decorated function не async.

    Example:
        >>> @retry_with_backoff(max_retries=3, base_delay=1.0)
        ... async def ping_database():
        ...     return await client.admin.command("ping")

        >>> # Перша спроба fails → wait 1s
        >>> # Друга спроба fails → wait 2s
        >>> # Третя спроба fails → wait 4s
        >>> # Четверта спроба fails → raise exception
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(
                f"retry_with_backoff supports async functions only, got {func!r}"
            )

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            do_sleep = sleep or asyncio.sleep

            for attempt in range(max_retries + 1):
                try:
                    result = await func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt >= max_retries:
                        logger.error(
                            "retry.exhausted",
                            extra={
                                "function": func.__name__,
                                "total_attempts": max_retries + 1,
                                "error": str(e),
                            },
                        )
                        raise

                    delay = compute_backoff_delay(
                        attempt, base_delay, max_delay, exponential_base
                    )
                    logger.warning(
                        "retry.attempt",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "max_retries": max_retries,
                            "delay_seconds": delay,
                            "error": str(e),
                        },
                    )
                    await do_sleep(delay)
                    continue

                if attempt > 0:
                    logger.info(
                        "retry.success",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "total_attempts": max_retries + 1,
                        },
                    )
                return result

            # Unreachable, but makes type checker happy
            raise RuntimeError("Retry logic error: no attempt executed")

        return wrapper

    return decorator
