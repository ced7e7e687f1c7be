"""
User-Facing Notices
===================
Standard toast-style messages emitted by the verification flows.

Technical details go to the logs; notices only carry text that is safe
to show the person at the keyboard.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class NoticeVariant(str, Enum):
    """Display style of a notice."""
    DEFAULT = "default"
    SUCCESS = "success"
    INFO = "info"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notice:
    """A short message for the UI layer to display."""
    title: str
    description: str = ""
    variant: NoticeVariant = NoticeVariant.DEFAULT


Notifier = Callable[[Notice], None]


class AuthNotices:
    """Standard notice factory methods."""

    @staticmethod
    def otp_sent(description: str = "Check your email for the OTP.") -> Notice:
        return Notice("OTP Sent", description, NoticeVariant.SUCCESS)

    @staticmethod
    def otp_send_failed(description: Optional[str] = None) -> Notice:
        return Notice(
            "Failed to send OTP",
            description or "Failed to send OTP. Please try again.",
            NoticeVariant.DESTRUCTIVE,
        )

    @staticmethod
    def otp_verified(description: str = "OTP verified successfully.") -> Notice:
        return Notice("OTP Verified", description, NoticeVariant.SUCCESS)

    @staticmethod
    def otp_invalid() -> Notice:
        return Notice(
            "Invalid OTP",
            "Invalid or expired OTP. Please try again.",
            NoticeVariant.DESTRUCTIVE,
        )

    @staticmethod
    def otp_verify_failed(description: Optional[str] = None) -> Notice:
        return Notice(
            "Verification failed",
            description or "Failed to verify OTP. Please try again.",
            NoticeVariant.DESTRUCTIVE,
        )

    @staticmethod
    def profile_updated() -> Notice:
        return Notice(
            "Profile updated",
            "Your profile has been updated successfully",
            NoticeVariant.SUCCESS,
        )

    @staticmethod
    def profile_update_failed(description: Optional[str] = None) -> Notice:
        return Notice(
            "Update failed",
            description or "Failed to update profile",
            NoticeVariant.DESTRUCTIVE,
        )

    @staticmethod
    def no_changes() -> Notice:
        return Notice("No Changes", "No updates to save.", NoticeVariant.INFO)

    @staticmethod
    def password_reset_link_sent() -> Notice:
        return Notice(
            "Reset link sent",
            "Check your email for a link to reset your password.",
            NoticeVariant.SUCCESS,
        )

    @staticmethod
    def password_reset_success() -> Notice:
        return Notice(
            "Password Reset Successful",
            "Your password has been updated successfully.",
            NoticeVariant.SUCCESS,
        )

    @staticmethod
    def password_reset_failed(description: Optional[str] = None) -> Notice:
        return Notice(
            "Password reset failed",
            description or "Password reset failed. Please try again.",
            NoticeVariant.DESTRUCTIVE,
        )

    @staticmethod
    def login_failed(description: Optional[str] = None) -> Notice:
        return Notice(
            "Login failed",
            description or "Invalid credentials",
            NoticeVariant.DESTRUCTIVE,
        )

    @staticmethod
    def logged_out() -> Notice:
        return Notice("Logged out", "You have been successfully logged out.")


def error_description(error: Exception) -> Optional[str]:
    """Extract a displayable message from an API or validation error."""
    return getattr(error, "message", None) or None
