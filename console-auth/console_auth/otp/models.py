"""
OTP Models
==========
Challenge status values.
"""

from enum import Enum


class ChallengeStatus(str, Enum):
    """Lifecycle of one send/verify cycle for a single target."""
    NOT_SENT = "not_sent"
    SENDING = "sending"
    SENT = "sent"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    INVALID = "invalid"


# Statuses from which a code may be (re)sent, subject to the cooldown
SENDABLE_STATUSES = frozenset({
    ChallengeStatus.NOT_SENT,
    ChallengeStatus.SENT,
    ChallengeStatus.INVALID,
})

# Statuses from which a code may be submitted
VERIFIABLE_STATUSES = frozenset({
    ChallengeStatus.SENT,
    ChallengeStatus.INVALID,
})

BUSY_STATUSES = frozenset({
    ChallengeStatus.SENDING,
    ChallengeStatus.VERIFYING,
})
