"""
Session Guard
=============
Keeps authentication and verification state from leaking between users
who share the same machine.

Every entry point that starts an authentication-adjacent flow wipes the
bearer token, the cached user record, the login-method marker and every
OTP cooldown before doing anything else.
"""

import json
from enum import Enum
from typing import Iterable, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from ..constants import (
    COOLDOWN_KEYS,
    DEFAULT_LOGIN_METHOD,
    LOGIN_METHOD_KEY,
    SESSION_KEYS,
    TOKEN_KEY,
    USER_KEY,
)
from ..http.models import UserRecord
from ..storage import TimerStore

logger = structlog.get_logger(__name__)


class EntryPoint(str, Enum):
    """Places where a clean auth state is required."""
    LOGIN_PAGE = "login_page"
    REGISTER_PAGE = "register_page"
    FORGOT_PASSWORD_PAGE = "forgot_password_page"
    RESET_PASSWORD_PAGE = "reset_password_page"
    RESET_PASSWORD_OTP_PAGE = "reset_password_otp_page"
    ACTIVATE_ACCOUNT_PAGE = "activate_account_page"
    LOGIN_ATTEMPT = "login_attempt"
    UNAUTHORIZED = "unauthorized"


class SessionGuard:
    """
    Owns the persisted session keys and enforces session hygiene.

    Example:
        guard = SessionGuard(store)
        guard.ensure_clean_auth_state(EntryPoint.LOGIN_PAGE)
    """

    def __init__(
        self,
        store: TimerStore,
        extra_keys: Iterable[str] = (),
    ):
        self.store = store
        self.managed_keys = tuple(SESSION_KEYS) + tuple(COOLDOWN_KEYS) + tuple(extra_keys)

    # Hygiene

    def clear_all_session_data(self) -> None:
        """Remove every auth and OTP artifact from the store."""
        for key in self.managed_keys:
            self.store.remove(key)

    def ensure_clean_auth_state(self, entry_point: Optional[EntryPoint] = None) -> None:
        """Idempotent wipe run before any auth-adjacent flow starts."""
        self.clear_all_session_data()
        logger.debug(
            "Cleared session data for auth entry point",
            entry_point=entry_point.value if entry_point else None,
        )

    # Session data

    @property
    def token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    @property
    def login_method(self) -> Optional[str]:
        return self.store.get(LOGIN_METHOD_KEY)

    def load_user(self) -> Optional[UserRecord]:
        raw = self.store.get(USER_KEY)
        if not raw:
            return None
        try:
            return UserRecord.model_validate(json.loads(raw))
        except (ValueError, TypeError, PydanticValidationError):
            return None

    def record_login(self, token: str, user: UserRecord, login_method: str = DEFAULT_LOGIN_METHOD) -> None:
        """Persist a freshly authenticated session."""
        self.store.set(TOKEN_KEY, token)
        self.store.set(USER_KEY, user.model_dump_json(by_alias=True, exclude_none=True, exclude={"token"}))
        self.store.set(LOGIN_METHOD_KEY, login_method)

    def update_user(self, user: UserRecord) -> None:
        """Replace the cached user record after a profile update."""
        self.store.set(USER_KEY, user.to_json())

    def validate_session_data(self) -> bool:
        """True if a token and a user record with id, username and email are stored."""
        if not self.token:
            return False
        user = self.load_user()
        if user is None:
            return False
        return bool(user.id and user.username and user.email)

    def current_user_id(self) -> Optional[str]:
        user = self.load_user()
        if user is None or user.id is None:
            return None
        return str(user.id)

    def has_session_conflict(self, expected_user_id) -> bool:
        """True if a different user's session is currently stored."""
        current = self.current_user_id()
        return current is not None and current != str(expected_user_id)

    def restore_session(self) -> Optional[UserRecord]:
        """
        Validate the stored session on start-up.

        Returns:
            The cached user, or None after wiping an incomplete session
        """
        if not self.validate_session_data():
            self.clear_all_session_data()
            return None
        return self.load_user()
