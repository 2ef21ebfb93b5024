# core/cache.py
"""
Query cache for collections the client re-fetches after every mutation.

Entries are keyed by a logical query identity, e.g. ("project-phases", <id>),
and dropped explicitly by the code that mutates the underlying rows. A read
between invalidation and re-fetch may still see the old list; callers accept
that lag.
"""
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger("collabdoor.cache")

KEY_PREFIX = "collabdoor:query"


def query_key(*parts) -> str:
    """Build a cache key from the parts of a logical query identity."""
    return ":".join([KEY_PREFIX, *(str(p) for p in parts)])


def cached_query(parts, fetch, timeout=None):
    """
    Return the cached value for `parts`, computing it with `fetch()` on a miss.
    """
    key = query_key(*parts)
    value = cache.get(key)
    if value is not None:
        return value

    value = fetch()
    if timeout is None:
        timeout = getattr(settings, "QUERY_CACHE_TIMEOUT", 300)
    cache.set(key, value, timeout)
    return value


def invalidate(*parts_list):
    """Drop one or more cached queries, each given as a tuple of key parts."""
    keys = [query_key(*parts) for parts in parts_list]
    cache.delete_many(keys)
    logger.debug(f"Invalidated query cache keys: {keys}")
