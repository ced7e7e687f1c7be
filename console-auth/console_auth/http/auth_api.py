"""
Auth API Client
===============
Authentication, verification and profile endpoints of the console backend.
"""

from typing import Any, Dict, Optional

from .client import BaseApiClient
from .models import LoginResponse, ProfileUpdate, UserRecord, VerifyResult


def _as_flag(data: Any, field: str) -> bool:
    """Read a boolean answer that may come bare or wrapped in an object."""
    if isinstance(data, dict):
        return bool(data.get(field))
    return bool(data)


class AuthApi(BaseApiClient):
    """
    Client for the console's auth and account endpoints.

    Features:
    - Login, registration and logout
    - OTP and link based password reset
    - Two-step email change verification
    - Profile update and username availability
    - Account activation
    """

    # Session Operations

    async def login(self, username_or_email: str, password: str) -> LoginResponse:
        """Authenticate and return the user record with its bearer token."""
        return await self.post(
            "/auth/login",
            json={"usernameOrEmail": username_or_email, "password": password},
            response_model=LoginResponse,
        )

    async def register(self, first_name: str, last_name: str, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Register a new account; the username is derived from the email."""
        return await self.post(
            "/auth/register",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "username": email.split("@")[0].lower(),
                "email": email,
                "password": password,
            },
        )

    async def logout(self) -> None:
        await self.post("/auth/logout")

    # Password Reset Operations

    async def forgot_password(self, email: str) -> None:
        """Request a password-reset link by email."""
        await self.post("/auth/forgot-password", json={"email": email})

    async def forgot_password_otp(self, email: str) -> None:
        """Request a password-reset OTP by email."""
        await self.post("/auth/forgot-password-otp", json={"email": email})

    async def verify_password_reset_otp(self, email: str, otp: str) -> bool:
        result = await self.post(
            "/auth/verify-password-reset-otp",
            json={"email": email, "otp": otp},
            response_model=VerifyResult,
        )
        return bool(result and result.verified)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Commit a password reset using an emailed link token."""
        await self.post(
            "/auth/reset-password",
            json={"token": token, "newPassword": new_password},
        )

    async def reset_password_otp(self, email: str, otp: str, new_password: str) -> None:
        """Commit a password reset using a verified OTP."""
        await self.post(
            "/auth/reset-password-otp",
            json={"email": email, "otp": otp, "newPassword": new_password},
        )

    # Account Activation

    async def validate_activation_token(self, token: str) -> Any:
        return await self.get("/users/verify-activation-token", params={"token": token})

    async def activate_account(self, token: str, password: str) -> Any:
        return await self.post(
            "/users/activate-account",
            json={"token": token, "password": password},
        )

    # Email Change Operations

    async def send_current_email_otp(self) -> None:
        """Send an OTP to the signed-in account's current email."""
        await self.post("/users/send-current-email-otp")

    async def verify_current_email_otp(self, email: str, otp: str) -> bool:
        result = await self.post(
            "/users/verify-current-email-otp",
            json={"email": email, "otp": otp},
        )
        return _as_flag(result, "verified")

    async def send_otp(self, new_email: str) -> None:
        """Send an OTP to a candidate new email."""
        await self.post("/users/send-otp", json={"newEmail": new_email})

    async def verify_otp(self, new_email: str, otp: str) -> bool:
        result = await self.post(
            "/users/verify-otp",
            json={"newEmail": new_email, "otp": otp},
        )
        return _as_flag(result, "verified")

    # Profile Operations

    async def check_username(self, username: str) -> bool:
        """True if the username is free to take."""
        result = await self.get("/users/check-username", params={"username": username})
        return _as_flag(result, "available")

    async def update_profile(self, update: ProfileUpdate) -> UserRecord:
        return await self.put(
            "/users/me",
            json=update.to_payload(),
            response_model=UserRecord,
        )

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self.post(
            "/users/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )
