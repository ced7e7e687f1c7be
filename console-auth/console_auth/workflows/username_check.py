"""
Username Availability
=====================
Debounced availability lookup; only the latest value may update state.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

import structlog

from ..constants import USERNAME_DEBOUNCE_SECONDS

logger = structlog.get_logger(__name__)

Lookup = Callable[[str], Awaitable[bool]]


class UsernameStatus(str, Enum):
    """Availability of the username being typed."""
    CHECKING = "checking"
    AVAILABLE = "available"
    TAKEN = "taken"
    ERROR = "error"


class UsernameAvailabilityChecker:
    """
    Cancel-on-supersede availability check.

    Each ``update`` cancels the pending check and schedules a new one
    after the debounce delay. A result is applied only if its value is
    still the latest one entered.
    """

    def __init__(
        self,
        lookup: Lookup,
        current_username: Optional[str],
        debounce_seconds: float = USERNAME_DEBOUNCE_SECONDS,
    ):
        self._lookup = lookup
        self.current_username = current_username or ""
        self.debounce_seconds = debounce_seconds
        self.value = self.current_username
        self.status: Optional[UsernameStatus] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_unchanged(self) -> bool:
        return self.value == self.current_username

    @property
    def is_acceptable(self) -> bool:
        """True if saving is allowed as far as the username is concerned."""
        return self.is_unchanged or self.status == UsernameStatus.AVAILABLE

    def update(self, value: str) -> None:
        """Record a keystroke and (re)schedule the lookup."""
        self.value = value
        self._cancel_pending()
        if not value or self.is_unchanged:
            self.status = None
            return
        # A previous value's result never applies to this one
        self.status = UsernameStatus.CHECKING
        self._task = asyncio.get_running_loop().create_task(self._check(value))

    async def _check(self, value: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if value != self.value:
            return
        self.status = UsernameStatus.CHECKING
        try:
            available = await self._lookup(value)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if value == self.value:
                self.status = UsernameStatus.ERROR
            logger.warning("Username availability check failed", error=str(e))
            return

        if value != self.value:
            return
        self.status = UsernameStatus.AVAILABLE if available else UsernameStatus.TAKEN

    def _cancel_pending(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the pending check, if any, to finish."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def rebase(self, current_username: Optional[str]) -> None:
        """Adopt a saved username as the unchanged baseline."""
        self._cancel_pending()
        self.current_username = current_username or ""
        self.value = self.current_username
        self.status = None

    def close(self) -> None:
        self._cancel_pending()
