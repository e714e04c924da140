"""Deterministic cache keys.

Key = "<namespace>:<canonical JSON of params>". Однакові queries з різним
порядком параметрів дають той самий key, а namespace prefix дозволяє
invalidate всю collection одним викликом (TTLCache.invalidate_prefix).
"""

import json
from typing import Any

ITEMS_NAMESPACE = "items"
ITEMS_PREFIX = f"{ITEMS_NAMESPACE}:"
CATEGORIES_KEY = "categories:all"


def _stringify_keys(value: Any) -> Any:
    """Dict keys як str (json робить це все одно), щоб sort_keys не падав на mixed keys."""
    if isinstance(value, dict):
        return {str(k): _stringify_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_stringify_keys(v) for v in value]
    return value


def build_query_key(namespace: str, **params: Any) -> str:
    """Build a stable key from a structured query description.

    Example:
        >>> build_query_key("items", page=1, limit=20)
        'items:{"limit":20,"page":1}'
        >>> build_query_key("items", limit=20, page=1)
        'items:{"limit":20,"page":1}'
    """
    payload = json.dumps(
        _stringify_keys(params),
        sort_keys=True,
        separators=(",", ":"),
        default=str,
        ensure_ascii=False,
    )
    return f"{namespace}:{payload}"


def items_key(
    query: dict[str, Any] | None = None,
    page: int = 1,
    limit: int = 20,
    sort: dict[str, Any] | None = None,
) -> str:
    """Key for a paginated items listing (filter + pagination + sort).

    Sort order is significant, so sort fields stay an ordered list of pairs.
    """
    return build_query_key(
        ITEMS_NAMESPACE,
        query=query or {},
        page=page,
        limit=limit,
        sort=list((sort or {}).items()),
    )


def categories_key() -> str:
    return CATEGORIES_KEY
