"""Pytest configuration and common fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from console_auth.cooldown import CooldownTimer
from console_auth.http import AuthApi, LoginResponse, UserRecord
from console_auth.session import SessionGuard
from console_auth.storage import InMemoryStore


class FakeClock:
    """Controllable wall clock in epoch milliseconds."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def timer(store, clock):
    return CooldownTimer(store, duration_seconds=60, clock=clock)


@pytest.fixture
def guard(store):
    return SessionGuard(store)


@pytest.fixture
def user():
    return UserRecord(
        id=7,
        username="jdoe",
        email="jane@example.com",
        firstName="Jane",
        lastName="Doe",
        role="ADMIN",
    )


@pytest.fixture
def api(user):
    """AuthApi double; every backend call succeeds by default."""
    mock = MagicMock(spec=AuthApi)
    mock.login = AsyncMock(
        return_value=LoginResponse(token="tok-123", **user.model_dump(by_alias=True))
    )
    mock.logout = AsyncMock(return_value=None)
    mock.register = AsyncMock(return_value={"id": 8})
    mock.forgot_password = AsyncMock(return_value=None)
    mock.forgot_password_otp = AsyncMock(return_value=None)
    mock.verify_password_reset_otp = AsyncMock(return_value=True)
    mock.reset_password = AsyncMock(return_value=None)
    mock.reset_password_otp = AsyncMock(return_value=None)
    mock.validate_activation_token = AsyncMock(return_value={"valid": True})
    mock.activate_account = AsyncMock(return_value=None)
    mock.send_current_email_otp = AsyncMock(return_value=None)
    mock.verify_current_email_otp = AsyncMock(return_value=True)
    mock.send_otp = AsyncMock(return_value=None)
    mock.verify_otp = AsyncMock(return_value=True)
    mock.check_username = AsyncMock(return_value=True)
    mock.update_profile = AsyncMock(side_effect=lambda update: user.model_copy(
        update=update.model_dump(exclude_none=True)
    ))
    mock.change_password = AsyncMock(return_value=None)
    mock.aclose = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def notices():
    """Collects every notice a flow emits."""
    return []


@pytest.fixture
def notify(notices):
    return notices.append
