"""
Unit Tests for Session Hygiene
==============================
Clean-state guard, stored-session validation and the login lifecycle.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from console_auth.constants import (
    COOLDOWN_KEYS,
    LOGIN_METHOD_KEY,
    SESSION_KEYS,
    TOKEN_KEY,
    USER_KEY,
)
from console_auth.exceptions import InvalidEmailError, PasswordPolicyError
from console_auth.http import AuthenticationError
from console_auth.notices import NoticeVariant
from console_auth.session import AuthManager, EntryPoint, SessionGuard


def fill_store(store, timer):
    store.set(TOKEN_KEY, "tok-old")
    store.set(USER_KEY, json.dumps({"id": 1, "username": "prev", "email": "prev@example.com"}))
    store.set(LOGIN_METHOD_KEY, "password")
    for key in COOLDOWN_KEYS:
        timer.start(key)


class TestSessionGuard:
    """Tests for the clean-state guard."""

    @pytest.mark.parametrize("entry_point", list(EntryPoint))
    def test_every_entry_point_clears_everything(self, guard, store, timer, entry_point):
        """No token, user, login method or cooldown survives an entry point."""
        fill_store(store, timer)
        store.set("theme", "dark")

        guard.ensure_clean_auth_state(entry_point)

        for key in SESSION_KEYS + COOLDOWN_KEYS:
            assert store.get(key) is None
        assert store.get("theme") == "dark"

    def test_clear_is_idempotent(self, guard, store):
        guard.ensure_clean_auth_state()
        guard.ensure_clean_auth_state()

        assert len(store) == 0

    def test_extra_keys_are_cleared(self, store):
        guard = SessionGuard(store, extra_keys=("refreshToken",))
        store.set("refreshToken", "r")

        guard.clear_all_session_data()

        assert store.get("refreshToken") is None

    def test_record_login_round_trip(self, guard, user):
        guard.record_login("tok-123", user, "otp")

        assert guard.token == "tok-123"
        assert guard.login_method == "otp"
        assert guard.load_user() == user

    def test_validate_session_data(self, guard, store, user):
        """Requires a token and a user with id, username and email."""
        assert guard.validate_session_data() is False

        guard.record_login("tok-123", user)
        assert guard.validate_session_data() is True

        store.set(USER_KEY, json.dumps({"id": 7, "username": "jdoe"}))
        assert guard.validate_session_data() is False

        store.set(USER_KEY, "{broken")
        assert guard.validate_session_data() is False

    def test_restore_wipes_incomplete_session(self, guard, store, timer):
        store.set(USER_KEY, json.dumps({"id": 7, "username": "jdoe", "email": "j@example.com"}))
        timer.start(COOLDOWN_KEYS[0])

        assert guard.restore_session() is None
        assert store.get(USER_KEY) is None
        assert store.get(COOLDOWN_KEYS[0]) is None

    def test_restore_valid_session(self, guard, user):
        guard.record_login("tok-123", user)

        assert guard.restore_session() == user

    def test_session_conflict(self, guard, user):
        assert guard.has_session_conflict(7) is False

        guard.record_login("tok-123", user)

        assert guard.has_session_conflict(7) is False
        assert guard.has_session_conflict("8") is True


class TestAuthManager:
    """Tests for the login lifecycle."""

    @pytest.mark.asyncio
    async def test_login_starts_from_clean_state(self, api, guard, store, timer):
        """Previous user's data is gone before the new session is stored."""
        fill_store(store, timer)
        manager = AuthManager(api, guard)

        response = await manager.login("jdoe", "secret")

        assert response.token == "tok-123"
        assert guard.token == "tok-123"
        assert guard.load_user().username == "jdoe"
        assert guard.login_method == "password"
        for key in COOLDOWN_KEYS:
            assert store.get(key) is None
        assert manager.is_authenticated

    @pytest.mark.asyncio
    async def test_failed_login_leaves_nothing(self, api, guard, store, timer, notices):
        fill_store(store, timer)
        api.login.side_effect = AuthenticationError("Invalid credentials", status_code=401)
        manager = AuthManager(api, guard, notify=notices.append)

        with pytest.raises(AuthenticationError):
            await manager.login("jdoe", "wrong")

        for key in SESSION_KEYS + COOLDOWN_KEYS:
            assert store.get(key) is None
        assert notices[-1].title == "Login failed"
        assert notices[-1].description == "Invalid credentials"
        assert notices[-1].variant == NoticeVariant.DESTRUCTIVE
        assert not manager.is_authenticated

    @pytest.mark.asyncio
    async def test_logout_clears_even_on_failure(self, api, guard, user):
        """Local state is cleared and the user sent to login regardless."""
        navigate = MagicMock()
        guard.record_login("tok-123", user)
        api.logout.side_effect = AuthenticationError("expired", status_code=401)
        manager = AuthManager(api, guard, navigate=navigate)

        with pytest.raises(AuthenticationError):
            await manager.logout()

        assert guard.token is None
        assert guard.load_user() is None
        navigate.assert_called_once_with("/login")

    @pytest.mark.asyncio
    async def test_logout_success_notifies(self, api, guard, user, notices):
        guard.record_login("tok-123", user)
        manager = AuthManager(api, guard, notify=notices.append)

        await manager.logout()

        assert guard.token is None
        assert notices[-1].title == "Logged out"

    def test_unauthorized_redirects(self, api, guard, user, store, timer):
        navigate = MagicMock()
        guard.record_login("tok-123", user)
        timer.start(COOLDOWN_KEYS[1])
        manager = AuthManager(api, guard, navigate=navigate)
        manager.user = user

        manager.handle_unauthorized("/users/me")

        assert guard.token is None
        assert store.get(COOLDOWN_KEYS[1]) is None
        assert manager.user is None
        navigate.assert_called_once_with("/login")

    def test_restore(self, api, guard, user):
        guard.record_login("tok-123", user)
        manager = AuthManager(api, guard)

        assert manager.restore() == user
        assert manager.is_authenticated

    @pytest.mark.asyncio
    async def test_register_validates_email(self, api, guard):
        manager = AuthManager(api, guard)

        with pytest.raises(InvalidEmailError):
            await manager.register("Jane", "Doe", "jane@", "secret1")
        api.register.assert_not_awaited()

        navigate = MagicMock()
        manager.navigate = navigate
        await manager.register("Jane", "Doe", " Jane@Example.com ", "secret1")

        api.register.assert_awaited_once_with("Jane", "Doe", "jane@example.com", "secret1")
        navigate.assert_called_once_with("/login")

    @pytest.mark.asyncio
    async def test_activate_account_checks_confirmation(self, api, guard):
        manager = AuthManager(api, guard)

        with pytest.raises(PasswordPolicyError) as exc_info:
            await manager.activate_account("tok", "secret1", "secret2")

        assert exc_info.value.field == "password"
        api.activate_account.assert_not_awaited()

        await manager.activate_account("tok", "secret1", "secret1")
        api.activate_account.assert_awaited_once_with("tok", "secret1")

    @pytest.mark.asyncio
    async def test_change_password_policy(self, api, guard):
        manager = AuthManager(api, guard)

        with pytest.raises(PasswordPolicyError):
            await manager.change_password("old", "short", "short")

        await manager.change_password("old", "longer1", "longer1")
        api.change_password.assert_awaited_once_with("old", "longer1")
