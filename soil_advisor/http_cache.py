"""
HTTP caching for soil provider lookups using requests-cache.

Coordinates are rounded before keying so nearby repeats of the same query
share a cache entry.
"""

import os
from typing import Any

from requests_cache import CachedSession

from soil_advisor.logging_config import get_logger

logger = get_logger(__name__)

# Module-level singleton (tests can override/reset)
_SESSION: CachedSession | None = None

COORDINATE_KEYS = {"lat", "latitude", "lon", "lng", "longitude"}
DEFAULT_EXPIRE_SECONDS = 3600


def canonicalize_coords(params: Any) -> Any:
    """Round coordinate parameters to 4 decimal places for consistent caching.

    Accepts either a mapping or a sequence of ``(key, value)`` pairs, which is
    how repeated query parameters are passed to requests.
    """
    if not params:
        return params

    items = params.items() if isinstance(params, dict) else params
    canonical = []
    for key, value in items:
        if str(key).lower() in COORDINATE_KEYS:
            try:
                value = round(float(value), 4)
            except (ValueError, TypeError):
                pass
        canonical.append((key, value))

    return dict(canonical) if isinstance(params, dict) else canonical


def _cache_ok(response) -> bool:
    if response.status_code != 200:
        return False
    content_type = response.headers.get("Content-Type", "")
    return "json" in content_type


def _sqlite_session(cache_name: str, expire_after: int) -> CachedSession:
    """Create SQLite-backed cached session."""
    logger.info(f"Using SQLite cache backend: {cache_name}")
    return CachedSession(
        cache_name=cache_name,
        backend="sqlite",
        cache_control=True,
        allowable_codes=(200,),
        expire_after=expire_after,
        filter_fn=_cache_ok,
    )


def _memory_session(expire_after: int) -> CachedSession:
    """Create an in-process cached session (nothing written to disk)."""
    logger.info("Using in-memory cache backend")
    return CachedSession(
        backend="memory",
        cache_control=True,
        allowable_codes=(200,),
        expire_after=expire_after,
        filter_fn=_cache_ok,
    )


def _make_session() -> CachedSession:
    """Create a new cached session with current settings."""
    backend = os.getenv("CACHE_BACKEND", "sqlite").lower()
    cache_name = os.getenv("CACHE_NAME", "cache/http")
    expire_after = int(os.getenv("CACHE_EXPIRE_SECONDS", str(DEFAULT_EXPIRE_SECONDS)))

    if backend == "memory":
        return _memory_session(expire_after)

    if backend != "sqlite":
        logger.warning(f"Unknown cache backend {backend!r}, falling back to SQLite")

    return _sqlite_session(cache_name, expire_after)


def get_session() -> CachedSession:
    """
    Get the shared cached session.

    Environment variables:
    - CACHE_BACKEND: 'sqlite' (default) or 'memory'
    - CACHE_NAME: SQLite cache file name (default: 'cache/http')
    - CACHE_EXPIRE_SECONDS: entry lifetime (default: 3600)
    """
    global _SESSION
    if _SESSION is None:
        _SESSION = _make_session()
    return _SESSION


def reset_session() -> None:
    """Close and clear the module session (for tests)."""
    global _SESSION
    if _SESSION is not None:
        _SESSION.close()
    _SESSION = None


def set_session_for_tests(session: CachedSession) -> None:
    """Force get_session() to return a provided session (for tests)."""
    global _SESSION
    _SESSION = session
