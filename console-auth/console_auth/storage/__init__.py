"""
Persisted Storage
=================
Key/value backends for cooldown timestamps and session data.
"""

from .base import TimerStore
from .in_memory import InMemoryStore
from .json_file import JsonFileStore
from .redis_store import RedisStore

__all__ = [
    "TimerStore",
    "InMemoryStore",
    "JsonFileStore",
    "RedisStore",
]
