"""Tests for ResilienceContainer wiring."""

from unittest.mock import AsyncMock

import pytest

from inventory_resilience.container import build_container
from inventory_resilience.domain.shared import CircuitOpenError, DatabaseUnavailableError
from inventory_resilience.infrastructure.cache import categories_key
from inventory_resilience.infrastructure.circuit_breakers import CircuitState


class TestBuildContainer:
    def test_components_configured_from_settings(self, settings):
        container = build_container(settings)

        assert container.db_breaker.failure_threshold == 3
        assert container.db_breaker.reset_timeout_ms == 1000
        assert container.query_cache.max_entries == 10
        assert container.query_cache.default_ttl_ms == settings.cache_default_ttl_ms

    def test_each_container_is_isolated(self, settings):
        first = build_container(settings)
        second = build_container(settings)

        first.query_cache.set("k", "v")

        assert first.db_breaker is not second.db_breaker
        assert second.query_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_context_manager_starts_and_stops_background_tasks(self, settings):
        async with build_container(settings) as container:
            assert container.query_cache.is_sweeping
            container.query_cache.set("k", "v")

        assert not container.query_cache.is_sweeping
        assert len(container.query_cache) == 0

    @pytest.mark.asyncio
    async def test_cached_query_loads_once(self, settings):
        container = build_container(settings)
        loader = AsyncMock(return_value=["books"])

        assert await container.cached_query(categories_key(), loader) == ["books"]
        assert await container.cached_query(categories_key(), loader) == ["books"]

        loader.assert_awaited_once()
        assert container.db_breaker.get_metrics().successful_requests == 1

    @pytest.mark.asyncio
    async def test_cached_query_guarded_by_breaker(self, settings):
        container = build_container(settings)
        loader = AsyncMock(side_effect=ConnectionError("db down"))

        for _ in range(3):
            with pytest.raises(ConnectionError):
                await container.cached_query("items:{}", loader)

        assert container.db_breaker.state == CircuitState.OPEN
        with pytest.raises(CircuitOpenError):
            await container.cached_query("items:{}", loader)
        assert loader.await_count == 3

    @pytest.mark.asyncio
    async def test_health_report(self, settings):
        container = build_container(settings)

        report = container.health()

        assert report["status"] == "healthy"
        assert set(report["circuit_breakers"]) == {"database"}
        assert report["cache"]["max_size"] == 10


class TestDatabaseBootstrapFactory:
    @pytest.mark.asyncio
    async def test_bootstrap_uses_retry_settings(self, settings):
        container = build_container(
            settings.model_copy(
                update={
                    "db_connect_max_attempts": 2,
                    "db_connect_base_delay": 0.5,
                    "db_connect_max_delay": 5.0,
                }
            )
        )
        connect = AsyncMock(side_effect=ConnectionError("no primary"))
        sleep = AsyncMock()
        bootstrap = container.database_bootstrap(connect, sleep=sleep)

        with pytest.raises(DatabaseUnavailableError) as exc_info:
            await bootstrap.initialize()

        assert exc_info.value.attempts == 2
        assert connect.await_count == 2
        assert [c.args[0] for c in sleep.await_args_list] == [0.5]
        assert bootstrap.breaker is container.db_breaker
        assert container.db_breaker.get_metrics().failed_requests == 2
