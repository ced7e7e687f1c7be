"""
Resend Cooldowns
================
Persisted per-key countdowns that gate OTP resends.
"""

from .timer import CooldownTimer, epoch_ms, format_time
from .ticker import CooldownTicker

__all__ = [
    "CooldownTimer",
    "CooldownTicker",
    "epoch_ms",
    "format_time",
]
