"""Response caching."""

from .response_cache import CacheEntry, ResponseCache, normalize_cache_key

__all__ = ["CacheEntry", "ResponseCache", "normalize_cache_key"]
