"""
Redis Store
===========
Redis-backed store for consoles that share state across processes.
"""

from typing import Optional

import redis
import structlog

logger = structlog.get_logger(__name__)


class RedisStore:
    """
    Redis-backed key/value store.

    Takes a synchronous ``redis.Redis`` client. Keys are namespaced so
    several consoles can share one database.
    """

    def __init__(self, redis_client: redis.Redis, namespace: str = "console-auth"):
        """
        Args:
            redis_client: Sync Redis client
            namespace: Prefix applied to every key
        """
        self.redis = redis_client
        self.namespace = namespace

    @classmethod
    def from_url(cls, url: str, namespace: str = "console-auth") -> "RedisStore":
        """Build a store from a ``redis://`` URL; connects lazily on first use."""
        client = redis.Redis.from_url(url, decode_responses=True)
        logger.debug("Redis store configured", namespace=namespace)
        return cls(client, namespace=namespace)

    def get_key(self, key: str) -> str:
        """Generate the namespaced Redis key."""
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        value = self.redis.get(self.get_key(key))
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def set(self, key: str, value: str) -> None:
        self.redis.set(self.get_key(key), value)

    def remove(self, key: str) -> None:
        self.redis.delete(self.get_key(key))
