"""
Cooldown Timer
==============
Wall-clock anchored resend cooldown, persisted per key.
"""

import math
import time
from typing import Callable, Optional

import structlog

from ..constants import COOLDOWN_SECONDS
from ..storage import TimerStore

logger = structlog.get_logger(__name__)


def epoch_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def format_time(seconds: int) -> str:
    """Render a countdown as MM:SS."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class CooldownTimer:
    """
    Resend cooldown backed by an absolute end timestamp.

    Only the end timestamp is stored, so the countdown resumes correctly
    after a restart or when a flow is left and re-entered. Each key is an
    independent timer.

    Example:
        timer = CooldownTimer(store)
        timer.start("resetPasswordOtpResendTimer")
        timer.remaining("resetPasswordOtpResendTimer")  # 60
    """

    def __init__(
        self,
        store: TimerStore,
        duration_seconds: int = COOLDOWN_SECONDS,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.store = store
        self.duration_seconds = duration_seconds
        self._clock = clock or epoch_ms

    def now_ms(self) -> int:
        return int(self._clock())

    def start(self, key: str) -> int:
        """
        Start (or restart) the full cooldown for a key.

        Returns:
            The persisted end timestamp in epoch milliseconds
        """
        end_ms = self.now_ms() + self.duration_seconds * 1000
        self.store.set(key, str(end_ms))
        logger.debug("Cooldown started", key=key, end_ms=end_ms)
        return end_ms

    def end_timestamp(self, key: str) -> Optional[int]:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed cooldown value", key=key, value=raw)
            return None

    def remaining(self, key: str) -> int:
        """Seconds left before a resend is allowed; 0 if absent or expired."""
        end_ms = self.end_timestamp(key)
        if end_ms is None:
            return 0
        return max(0, math.ceil((end_ms - self.now_ms()) / 1000))

    def is_active(self, key: str) -> bool:
        return self.remaining(key) > 0

    def reset(self, key: str) -> None:
        """Clear the cooldown immediately."""
        self.store.remove(key)
        logger.debug("Cooldown reset", key=key)

    def tick(self, key: str) -> int:
        """
        Recompute remaining time and drop the key once it has run out.

        Returns:
            Seconds remaining
        """
        remaining = self.remaining(key)
        if remaining == 0 and self.store.get(key) is not None:
            self.store.remove(key)
            logger.debug("Cooldown expired", key=key)
        return remaining
