"""In-memory TTL cache для list queries (items, categories)."""

from inventory_resilience.domain.resilience import CacheStats

from .keys import (
    CATEGORIES_KEY,
    ITEMS_PREFIX,
    build_query_key,
    categories_key,
    items_key,
)
from .ttl_cache import TTLCache

__all__ = [
    "TTLCache",
    "CacheStats",
    "CATEGORIES_KEY",
    "ITEMS_PREFIX",
    "build_query_key",
    "categories_key",
    "items_key",
]
