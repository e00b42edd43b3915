"""
Cache utilities for the standings service
Caches JSON payloads of read-only API routes for a short time
"""

import functools

from flask import current_app, request

from app import cache


def make_cache_key(*args, **kwargs):
    """Generate a cache key from request path, query string and arguments"""
    path = request.path
    query = "&".join(f"{k}={v}" for k, v in sorted(request.args.items(multi=True)))
    args_str = "_".join(str(arg) for arg in args)
    kwargs_str = "_".join(f"{k}_{v}" for k, v in sorted(kwargs.items()))
    return f"{path}_{query}_{args_str}_{kwargs_str}".replace("/", "_")


def cached_route(timeout=None, key_prefix="view"):
    """
    Decorator for caching route payloads

    Only successful results are cached: errors propagate as exceptions to
    the error handlers and never reach the cache.

    Args:
        timeout: Cache timeout in seconds (default STANDINGS_CACHE_TIMEOUT)
        key_prefix: Prefix for cache key
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            cache_key = f"{key_prefix}_{make_cache_key(*args, **kwargs)}"

            result = cache.get(cache_key)
            if result is not None:
                current_app.logger.debug(f"Cache hit for key: {cache_key}")
                return result

            result = f(*args, **kwargs)
            if not isinstance(result, dict):
                return result

            ttl = timeout
            if ttl is None:
                ttl = current_app.config.get("STANDINGS_CACHE_TIMEOUT", 60)
            cache.set(cache_key, result, timeout=ttl)
            current_app.logger.debug(f"Cache set for key: {cache_key}")

            return result

        return wrapped

    return decorator


def get_cache_stats():
    """Get cache settings"""
    return {
        "type": current_app.config.get("CACHE_TYPE", "Unknown"),
        "timeout": current_app.config.get("CACHE_DEFAULT_TIMEOUT", 300),
        "standings_timeout": current_app.config.get("STANDINGS_CACHE_TIMEOUT", 60),
    }
