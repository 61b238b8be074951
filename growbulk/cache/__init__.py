"""
Redis progress cache for growbulk.

Provides:
- Redis client with connection pooling
- JSON get/set/delete helpers used to publish job progress
"""

from .redis_client import get_redis, close_redis, cache, CacheClient

__all__ = [
    "get_redis",
    "close_redis",
    "cache",
    "CacheClient",
]
