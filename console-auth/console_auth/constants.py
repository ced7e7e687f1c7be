"""
Console Auth Constants
======================
Storage keys, OTP rules and endpoint allow-lists shared by every flow.
"""

from typing import Tuple

# Session keys
TOKEN_KEY = "token"
USER_KEY = "user"
LOGIN_METHOD_KEY = "loginMethod"

SESSION_KEYS: Tuple[str, ...] = (TOKEN_KEY, USER_KEY, LOGIN_METHOD_KEY)

# Cooldown keys (values are epoch milliseconds)
OLD_EMAIL_COOLDOWN_KEY = "oldEmailOtpCooldownEnd"
NEW_EMAIL_COOLDOWN_KEY = "newEmailOtpCooldownEnd"
RESET_PASSWORD_COOLDOWN_KEY = "resetPasswordOtpResendTimer"

COOLDOWN_KEYS: Tuple[str, ...] = (
    OLD_EMAIL_COOLDOWN_KEY,
    NEW_EMAIL_COOLDOWN_KEY,
    RESET_PASSWORD_COOLDOWN_KEY,
)

COOLDOWN_SECONDS = 60
TICK_INTERVAL_SECONDS = 1.0

OTP_LENGTH = 6

USERNAME_DEBOUNCE_SECONDS = 0.5

DEFAULT_LOGIN_METHOD = "password"
LOGIN_PATH = "/login"

# Requests to these paths may fail with 401 without ending the session
PUBLIC_ENDPOINTS: Tuple[str, ...] = (
    "/auth/login",
    "/auth/register",
    "/auth/forgot-password",
    "/auth/forgot-password-otp",
    "/auth/verify-password-reset-otp",
    "/auth/reset-password",
    "/auth/reset-password-otp",
    "/users/check-username",
    "/users/verify-activation-token",
    "/users/activate-account",
)

# Password rules
PASSWORD_MIN_LENGTH = 6
PASSWORD_SYMBOLS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

# Name rules
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
