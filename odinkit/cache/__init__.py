"""
Content caching for OdinKit.

Cache keys for compiler trees and dependency caches, and the content cache
that stores them.
"""

from odinkit.cache.keys import (
    CACHE_KEY_VERSION,
    main_cache_key,
    darwin_cache_key,
    darwin_cache_paths,
)
from odinkit.cache.store import ContentCache, LocalContentCache

__all__ = [
    "CACHE_KEY_VERSION",
    "main_cache_key",
    "darwin_cache_key",
    "darwin_cache_paths",
    "ContentCache",
    "LocalContentCache",
]
