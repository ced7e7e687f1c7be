"""
Verification Workflows
======================
Email change, profile update and password reset flows.
"""

from .username_check import UsernameAvailabilityChecker, UsernameStatus
from .email_change import EmailChangePhase, EmailChangeWorkflow
from .profile_update import ProfileUpdateSession
from .password_reset import (
    PasswordResetLinkFlow,
    PasswordResetOtpWorkflow,
    PasswordResetPhase,
)

__all__ = [
    "UsernameAvailabilityChecker",
    "UsernameStatus",
    "EmailChangePhase",
    "EmailChangeWorkflow",
    "ProfileUpdateSession",
    "PasswordResetLinkFlow",
    "PasswordResetOtpWorkflow",
    "PasswordResetPhase",
]
