"""
Unit Tests for the Console Auth Factory
=======================================
End-to-end wiring: session store, API client and the global 401 handler.
"""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from console_auth import (
    ConsoleAuth,
    ConsoleAuthConfig,
    EntryPoint,
    InMemoryStore,
    PasswordResetPhase,
)
from console_auth.constants import RESET_PASSWORD_COOLDOWN_KEY, TOKEN_KEY
from console_auth.http import AuthenticationError


USER_BODY = {
    "id": 7,
    "username": "jdoe",
    "email": "jane@example.com",
    "firstName": "Jane",
    "lastName": "Doe",
    "role": "ROLE_USER",
}


def backend(request):
    path = request.url.path
    if path == "/api/auth/login":
        return httpx.Response(200, json={**USER_BODY, "token": "tok-123"})
    if path == "/api/users/me":
        if request.headers.get("Authorization") != "Bearer tok-123":
            return httpx.Response(401, json={"message": "Unauthorized"})
        return httpx.Response(200, json={**USER_BODY, **json.loads(request.content)})
    if path == "/api/auth/forgot-password-otp":
        return httpx.Response(200)
    return httpx.Response(404)


@pytest.fixture
def navigate():
    return MagicMock()


@pytest.fixture
def auth(navigate):
    return ConsoleAuth(
        config=ConsoleAuthConfig(api_base_url="http://console.test/api"),
        store=InMemoryStore(),
        navigate=navigate,
        transport=httpx.MockTransport(backend),
    )


class TestConsoleAuth:
    """Tests for the wired-up facade."""

    @pytest.mark.asyncio
    async def test_login_then_profile_update(self, auth):
        async with auth:
            auth.manager.enter(EntryPoint.LOGIN_PAGE)
            await auth.manager.login("jdoe", "secret")

            profile = auth.profile_update()
            profile.set_last_name("Smith")
            updated = await profile.commit()

        assert updated.last_name == "Smith"
        assert auth.guard.load_user().last_name == "Smith"

    @pytest.mark.asyncio
    async def test_expired_token_redirects_to_login(self, auth, navigate, user):
        """A 401 on a private endpoint clears the session and navigates."""
        auth.guard.record_login("tok-stale", user)

        async with auth:
            profile = auth.profile_update()
            profile.set_first_name("Janet")
            with pytest.raises(AuthenticationError):
                await profile.commit()

        assert auth.store.get(TOKEN_KEY) is None
        assert auth.guard.load_user() is None
        navigate.assert_called_once_with("/login")

    @pytest.mark.asyncio
    async def test_password_reset_mounts_guard(self, auth, user):
        auth.guard.record_login("tok-123", user)

        async with auth:
            flow = auth.password_reset()
            assert auth.store.get(TOKEN_KEY) is None

            await flow.request_otp("jane@example.com")

        assert flow.phase == PasswordResetPhase.AWAITING_OTP
        assert auth.cooldown.remaining(RESET_PASSWORD_COOLDOWN_KEY) > 0
        assert auth.ticker(RESET_PASSWORD_COOLDOWN_KEY).remaining > 0

    def test_profile_update_requires_user(self, auth):
        with pytest.raises(RuntimeError):
            auth.profile_update()
