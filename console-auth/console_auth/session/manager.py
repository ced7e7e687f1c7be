"""
Auth Manager
============
Login, logout, registration and activation around the session guard.
"""

from typing import Any, Callable, Optional

import structlog

from ..constants import DEFAULT_LOGIN_METHOD, LOGIN_PATH
from ..exceptions import InvalidEmailError, PasswordPolicyError
from ..http import AuthApi, LoginResponse, UserRecord
from ..logging import log_audit
from ..notices import AuthNotices, Notifier, error_description
from ..validation import validate_email, validate_new_password
from .guard import EntryPoint, SessionGuard

logger = structlog.get_logger(__name__)

Navigator = Callable[[str], None]


class AuthManager:
    """
    Session lifecycle for the console.

    Features:
    - Page-mount hygiene for every auth entry point
    - Login with a guaranteed clean slate before and after failures
    - Logout that always clears local state
    - Global 401 handling for the API client
    """

    def __init__(
        self,
        api: AuthApi,
        guard: SessionGuard,
        navigate: Optional[Navigator] = None,
        notify: Optional[Notifier] = None,
        login_path: str = LOGIN_PATH,
    ):
        self.api = api
        self.guard = guard
        self.navigate = navigate
        self.notify = notify
        self.login_path = login_path
        self.user: Optional[UserRecord] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _notify(self, notice) -> None:
        if self.notify:
            self.notify(notice)

    def _go_to_login(self) -> None:
        if self.navigate:
            self.navigate(self.login_path)

    def restore(self) -> Optional[UserRecord]:
        """Load a valid stored session at start-up, wiping incomplete ones."""
        self.user = self.guard.restore_session()
        return self.user

    def enter(self, entry_point: EntryPoint) -> None:
        """Run on mount of any authentication page."""
        self.guard.ensure_clean_auth_state(entry_point)
        self.user = None

    def handle_unauthorized(self, path: str) -> None:
        """Global 401 handler: drop the session and send the user to login."""
        self.guard.ensure_clean_auth_state(EntryPoint.UNAUTHORIZED)
        self.user = None
        logger.info("Session expired, redirecting to login", path=path)
        self._go_to_login()

    async def login(
        self,
        username_or_email: str,
        password: str,
        login_method: str = DEFAULT_LOGIN_METHOD,
    ) -> LoginResponse:
        """
        Authenticate a user.

        Any previous session is wiped before the attempt, and again if
        the attempt fails, so a failed login never leaves stale state.
        """
        self.guard.ensure_clean_auth_state(EntryPoint.LOGIN_ATTEMPT)
        self.user = None
        try:
            response = await self.api.login(username_or_email, password)
        except Exception as e:
            self.guard.clear_all_session_data()
            self._notify(AuthNotices.login_failed(error_description(e)))
            log_audit("auth.login", outcome="failure")
            raise

        self.guard.record_login(response.token, response, login_method)
        self.user = response
        log_audit("auth.login", actor_id=str(response.id), outcome="success")
        return response

    async def logout(self) -> None:
        """Log out; local state is cleared even if the backend call fails."""
        actor_id = str(self.user.id) if self.user else None
        try:
            await self.api.logout()
        finally:
            self.guard.clear_all_session_data()
            self.user = None
            log_audit("auth.logout", actor_id=actor_id)
            self._go_to_login()
        self._notify(AuthNotices.logged_out())

    async def register(self, first_name: str, last_name: str, email: str, password: str) -> Any:
        result = validate_email(email)
        if not result.is_valid:
            raise InvalidEmailError(result.error)
        response = await self.api.register(first_name, last_name, result.normalized, password)
        self._go_to_login()
        return response

    async def validate_activation_token(self, token: str) -> Any:
        return await self.api.validate_activation_token(token)

    async def activate_account(self, token: str, password: str, confirm_password: str) -> Any:
        result = validate_new_password(password, confirm_password)
        if not result.is_valid:
            raise PasswordPolicyError(result.error, field="password")
        response = await self.api.activate_account(token, password)
        self._go_to_login()
        return response

    async def change_password(self, current_password: str, new_password: str, confirm_password: str) -> None:
        result = validate_new_password(new_password, confirm_password)
        if not result.is_valid:
            raise PasswordPolicyError(result.error)
        await self.api.change_password(current_password, new_password)
        log_audit("auth.change_password", actor_id=str(self.user.id) if self.user else None)
