"""
In-Memory Store
===============
Dictionary-backed store for tests and single-process use.
"""

from typing import Dict, Optional


class InMemoryStore:
    """
    Simple in-memory store.

    For development and testing only.
    Use JsonFileStore or RedisStore when state must survive a restart.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
