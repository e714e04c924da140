"""Application Settings using Pydantic.

Environment-based configuration with validation.

Environment Variables:
    ENVIRONMENT: development | staging | production
    CIRCUIT_BREAKER_FAILURE_THRESHOLD: Consecutive failures before OPEN
    CIRCUIT_BREAKER_RESET_TIMEOUT_MS: How long OPEN lasts before a trial call
    CACHE_MAX_ENTRIES: Hard cap for the in-memory query cache

Example .env file:
    ENVIRONMENT=production
    CIRCUIT_BREAKER_FAILURE_THRESHOLD=5
    CIRCUIT_BREAKER_RESET_TIMEOUT_MS=30000
    CACHE_MAX_ENTRIES=1000
    LOG_FORMAT=json
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Core ====================
    app_name: str = "inventory-backend"
    environment: Literal["development", "staging", "production"] = "development"

    # ==================== Circuit breaker ====================
    circuit_breaker_failure_threshold: int = Field(default=5, ge=1)
    circuit_breaker_reset_timeout_ms: int = Field(
        default=30_000,
        ge=0,
        description="Milliseconds OPEN before a trial call is allowed",
    )
    circuit_breaker_monitoring_interval: float = Field(
        default=10.0,
        gt=0,
        description="Seconds between breaker metrics log lines",
    )

    # ==================== Cache ====================
    cache_max_entries: int = Field(default=1000, ge=1)
    cache_default_ttl_ms: int = Field(default=300_000, ge=0, description="5 minutes")
    cache_query_ttl_ms: int = Field(
        default=120_000,
        ge=0,
        description="TTL for cached list queries (items, categories)",
    )
    cache_sweep_interval: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between expired entry sweeps",
    )

    # ==================== Database bootstrap ====================
    db_connect_max_attempts: int = Field(default=5, ge=1, le=20)
    db_connect_base_delay: float = Field(default=2.0, ge=0, description="Seconds")
    db_connect_max_delay: float = Field(default=30.0, ge=0, description="Seconds")

    # ==================== Logging ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # ==================== Validators ====================

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase log levels (e.g. LOG_LEVEL=debug)."""
        return v.upper() if isinstance(v, str) else v

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings instance.
    """
    return Settings()
