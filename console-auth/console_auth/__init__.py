"""
Console Auth Library
====================
Credential and identity verification flows for the inventory console.
"""

__version__ = "0.1.0"

# Configuration
from console_auth.config import ConsoleAuthConfig

# Storage
from console_auth.storage import (
    TimerStore,
    InMemoryStore,
    JsonFileStore,
    RedisStore,
)

# Cooldowns
from console_auth.cooldown import (
    CooldownTimer,
    CooldownTicker,
    format_time,
)

# OTP
from console_auth.otp import (
    ChallengeStatus,
    OtpChallenge,
    sanitize_otp,
    is_valid_otp,
)

# Errors
from console_auth.exceptions import (
    ConsoleAuthError,
    ValidationError,
    InvalidOtpFormatError,
    InvalidEmailError,
    PasswordPolicyError,
    CooldownActiveError,
    ChallengeStateError,
    WorkflowStateError,
)

# HTTP
from console_auth.http import (
    AuthApi,
    ApiError,
    AuthenticationError,
    ProfileUpdate,
    UserRecord,
)

# Session
from console_auth.session import (
    AuthManager,
    EntryPoint,
    SessionGuard,
)

# Notices
from console_auth.notices import (
    AuthNotices,
    Notice,
    NoticeVariant,
)

# Workflows
from console_auth.workflows import (
    EmailChangePhase,
    EmailChangeWorkflow,
    PasswordResetLinkFlow,
    PasswordResetOtpWorkflow,
    PasswordResetPhase,
    ProfileUpdateSession,
    UsernameAvailabilityChecker,
    UsernameStatus,
)

# Factory
from console_auth.factory import ConsoleAuth

__all__ = [
    # Configuration
    "ConsoleAuthConfig",
    # Storage
    "TimerStore",
    "InMemoryStore",
    "JsonFileStore",
    "RedisStore",
    # Cooldowns
    "CooldownTimer",
    "CooldownTicker",
    "format_time",
    # OTP
    "ChallengeStatus",
    "OtpChallenge",
    "sanitize_otp",
    "is_valid_otp",
    # Errors
    "ConsoleAuthError",
    "ValidationError",
    "InvalidOtpFormatError",
    "InvalidEmailError",
    "PasswordPolicyError",
    "CooldownActiveError",
    "ChallengeStateError",
    "WorkflowStateError",
    # HTTP
    "AuthApi",
    "ApiError",
    "AuthenticationError",
    "ProfileUpdate",
    "UserRecord",
    # Session
    "AuthManager",
    "EntryPoint",
    "SessionGuard",
    # Notices
    "AuthNotices",
    "Notice",
    "NoticeVariant",
    # Workflows
    "EmailChangePhase",
    "EmailChangeWorkflow",
    "PasswordResetLinkFlow",
    "PasswordResetOtpWorkflow",
    "PasswordResetPhase",
    "ProfileUpdateSession",
    "UsernameAvailabilityChecker",
    "UsernameStatus",
    # Factory
    "ConsoleAuth",
]
