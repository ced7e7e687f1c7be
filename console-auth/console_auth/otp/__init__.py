"""
OTP Challenges
==============
Client-side send/verify cycle for one-time codes.
"""

from .models import ChallengeStatus
from .codes import is_valid_otp, sanitize_otp, strip_non_digits
from .challenge import OtpChallenge

__all__ = [
    "ChallengeStatus",
    "is_valid_otp",
    "sanitize_otp",
    "strip_non_digits",
    "OtpChallenge",
]
