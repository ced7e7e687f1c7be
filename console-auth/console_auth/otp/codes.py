"""
OTP Code Input
==============
Normalization and format checks for user-typed codes.
"""

import re

from ..constants import OTP_LENGTH

_NON_DIGITS = re.compile(r"[^0-9]")


def strip_non_digits(value: str) -> str:
    """Remove everything but ASCII digits."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def sanitize_otp(value: str) -> str:
    """
    Normalize an OTP field as the user types.

    Args:
        value: Raw input as typed or pasted

    Returns:
        Digits only, capped at the OTP length
    """
    return strip_non_digits(value)[:OTP_LENGTH]


def is_valid_otp(code: str) -> bool:
    """True if the code is exactly six ASCII digits."""
    return len(code) == OTP_LENGTH and _NON_DIGITS.search(code) is None
