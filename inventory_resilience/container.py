"""Explicit wiring of the resilience components.

Замість module-level singletons кожен process (або test) будує свій
container і передає instances явно.

Usage:
    async with build_container(get_settings()) as container:
        bootstrap = container.database_bootstrap(connect_mongo)
        await bootstrap.initialize()
        ...
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from inventory_resilience.application.health import build_resilience_report
from inventory_resilience.config import Settings, get_logger
from inventory_resilience.infrastructure.cache import TTLCache
from inventory_resilience.infrastructure.circuit_breakers import CircuitBreaker
from inventory_resilience.infrastructure.database import DatabaseBootstrap
from inventory_resilience.infrastructure.retry.exponential_backoff import Sleep

logger = get_logger(__name__)

ConnectionT = TypeVar("ConnectionT")


@dataclass
class ResilienceContainer:
    """Holds the per-process breaker and cache instances."""

    settings: Settings
    db_breaker: CircuitBreaker
    query_cache: TTLCache

    async def start(self) -> None:
        """Start background tasks (cache sweep + breaker monitoring)."""
        self.query_cache.start()
        self.db_breaker.start_monitoring(
            self.settings.circuit_breaker_monitoring_interval
        )
        logger.info("resilience.started")

    async def aclose(self) -> None:
        """Stop background tasks and drop cached entries."""
        await self.db_breaker.stop_monitoring()
        await self.query_cache.close()
        logger.info("resilience.stopped")

    async def cached_query(
        self,
        key: str,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Read-through list query, guarded by the database breaker.

        Example:
            >>> key = items_key(query={"category": "books"}, page=1, limit=20)
            >>> items = await container.cached_query(key, load_items_page)
        """
        return await self.query_cache.get_or_load(
            key,
            lambda: self.db_breaker.execute(loader),
            self.settings.cache_query_ttl_ms,
        )

    def database_bootstrap(
        self,
        connect: Callable[[], Awaitable[ConnectionT]],
        sleep: Sleep | None = None,
    ) -> DatabaseBootstrap[ConnectionT]:
        """Startup connector guarded by db_breaker, retry policy з settings."""
        return DatabaseBootstrap(
            connect,
            self.db_breaker,
            max_attempts=self.settings.db_connect_max_attempts,
            base_delay=self.settings.db_connect_base_delay,
            max_delay=self.settings.db_connect_max_delay,
            sleep=sleep,
        )

    def health(self) -> dict[str, Any]:
        return build_resilience_report(
            {self.db_breaker.name: self.db_breaker},
            self.query_cache,
        )

    async def __aenter__(self) -> "ResilienceContainer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def build_container(settings: Settings) -> ResilienceContainer:
    """Construct fresh instances from settings (no shared state)."""
    return ResilienceContainer(
        settings=settings,
        db_breaker=CircuitBreaker(
            failure_threshold=settings.circuit_breaker_failure_threshold,
            reset_timeout_ms=settings.circuit_breaker_reset_timeout_ms,
            name="database",
        ),
        query_cache=TTLCache(
            max_entries=settings.cache_max_entries,
            default_ttl_ms=settings.cache_default_ttl_ms,
            sweep_interval_seconds=settings.cache_sweep_interval,
        ),
    )
