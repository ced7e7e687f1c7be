"""
Timer Store Interface
=====================
Persisted string key/value store shared by cooldowns and session data.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class TimerStore(Protocol):
    """
    Minimal persisted key/value store.

    Values are strings, mirroring browser local storage. Implementations
    must make a value written by ``set`` visible to any later ``get`` for
    the same key, including from a new process when the backend persists.
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...
