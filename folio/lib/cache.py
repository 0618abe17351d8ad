"""
Resettable caching helpers.

Storage backends and vocabulary lookups are built once per process from
settings. Tests swap those settings around, so every cache made here is
registered and can be dropped in one call.
"""
import functools

_registered_caches = []


def lru_cache(*args, **kwargs):
    """
    Same as functools.lru_cache, but remembered so clear_lru_caches() sees it.
    """
    def decorator(fn):
        cached = functools.lru_cache(*args, **kwargs)(fn)
        _registered_caches.append(cached)
        return cached
    return decorator


def clear_lru_caches():
    """
    Empty every cache created through our lru_cache decorator.
    """
    for cached in _registered_caches:
        cached.cache_clear()
