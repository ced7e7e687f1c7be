"""
Client-Side Errors
==================
Raised before any network call when user input or flow state rules out the action.
"""

from typing import Optional


class ConsoleAuthError(Exception):
    """Base exception for console auth flows."""
    pass


class ValidationError(ConsoleAuthError):
    """Input failed a client-side check; surfaced inline next to the field."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidOtpFormatError(ValidationError):
    """OTP is not exactly six digits after stripping non-digits."""

    def __init__(self, message: str = "Please enter a valid 6-digit OTP."):
        super().__init__(message, field="otp")


class InvalidEmailError(ValidationError):
    """Email address is malformed or not acceptable for this flow."""

    def __init__(self, message: str, field: str = "email"):
        super().__init__(message, field=field)


class PasswordPolicyError(ValidationError):
    """New password does not match its confirmation or is too weak."""

    def __init__(self, message: str, field: str = "newPassword"):
        super().__init__(message, field=field)


class CooldownActiveError(ValidationError):
    """A new OTP was requested before the resend cooldown elapsed."""

    def __init__(self, key: str, remaining: int):
        self.key = key
        self.remaining = remaining
        super().__init__(f"Please wait {remaining}s before requesting a new OTP.")


class ChallengeStateError(ConsoleAuthError):
    """Operation is not allowed in the challenge's current status."""

    def __init__(self, operation: str, status: str):
        self.operation = operation
        self.status = status
        super().__init__(f"Cannot {operation} while challenge is {status}")


class WorkflowStateError(ConsoleAuthError):
    """Operation is not allowed in the workflow's current phase."""

    def __init__(self, operation: str, phase: str):
        self.operation = operation
        self.phase = phase
        super().__init__(f"Cannot {operation} in phase {phase}")
