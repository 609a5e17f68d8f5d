"""Cache layer for newsdesk.

Provides the cache-aside building blocks:
- Cache: abstract key/value capability injected into the repository
- RedisCache: Redis-backed implementation storing serialized snapshots
- CacheKeys: prefix + id key derivation
"""

from newsdesk.cache.base import Cache
from newsdesk.cache.keys import CacheKeys
from newsdesk.cache.redis import RedisCache, create_redis

__all__ = [
    "Cache",
    "CacheKeys",
    "RedisCache",
    "create_redis",
]
