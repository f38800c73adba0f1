"""
Parameter layout caching.

Each `cacheable` function gets its own cachetools TTLCache, registered by
name so tests and long-running callers can drop every parsed layout.
"""
import functools
import logging
import threading

import cachetools

logger = logging.getLogger(__name__)

__all__ = ['cacheable', 'clear_caches']

_caches: dict[str, cachetools.TTLCache] = {}
_lock = threading.RLock()
_MISSING = object()


def clear_caches() -> None:
    """Drop every cached entry."""
    with _lock:
        for cache in _caches.values():
            cache.clear()


def cacheable(cache_name: str, ttl: int = 3600, maxsize: int = 256):
    """Decorator caching a single-argument function by its argument.

    Args:
        cache_name: Name the cache is registered under
        ttl: Time-to-live in seconds
        maxsize: Maximum cache size
    """
    def decorator(func):
        with _lock:
            cache = _caches.setdefault(
                cache_name, cachetools.TTLCache(maxsize=maxsize, ttl=ttl))

        @functools.wraps(func)
        def wrapper(key):
            with _lock:
                result = cache.get(key, _MISSING)
            if result is not _MISSING:
                logger.debug(f'Cache hit for {func.__name__}')
                return result

            logger.debug(f'Cache miss for {func.__name__}')
            result = func(key)
            with _lock:
                cache[key] = result
            return result

        wrapper.cache = cache
        return wrapper
    return decorator
