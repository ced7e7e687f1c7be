"""
Console Auth Factory
====================
Wires storage, cooldowns, the session guard and the API client together.
"""

from typing import Callable, Optional

import httpx

from .config import ConsoleAuthConfig
from .cooldown import CooldownTicker, CooldownTimer
from .http import AuthApi, UserRecord
from .notices import Notifier
from .session import AuthManager, SessionGuard
from .session.manager import Navigator
from .storage import JsonFileStore, TimerStore
from .workflows import PasswordResetLinkFlow, PasswordResetOtpWorkflow, ProfileUpdateSession


class ConsoleAuth:
    """
    Entry point for a console front end.

    Example:
        async with ConsoleAuth(navigate=router.go, notify=toasts.show) as auth:
            auth.manager.enter(EntryPoint.LOGIN_PAGE)
            await auth.manager.login("jane", "secret")
            profile = auth.profile_update()
    """

    def __init__(
        self,
        config: Optional[ConsoleAuthConfig] = None,
        store: Optional[TimerStore] = None,
        navigate: Optional[Navigator] = None,
        notify: Optional[Notifier] = None,
        api: Optional[AuthApi] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or ConsoleAuthConfig()
        self.store = store if store is not None else JsonFileStore(self.config.storage_path)
        self.navigate = navigate
        self.notify = notify
        self.cooldown = CooldownTimer(self.store, duration_seconds=self.config.cooldown_seconds)
        self.guard = SessionGuard(self.store)
        self.api = api or AuthApi(
            self.config.api_base_url,
            token_provider=lambda: self.guard.token,
            on_unauthorized=self._on_unauthorized,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
            transport=transport,
        )
        self.manager = AuthManager(
            self.api,
            self.guard,
            navigate=navigate,
            notify=notify,
            login_path=self.config.login_path,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self) -> None:
        await self.api.aclose()

    def _on_unauthorized(self, path: str) -> None:
        self.manager.handle_unauthorized(path)

    def profile_update(self, user: Optional[UserRecord] = None) -> ProfileUpdateSession:
        """Open the profile dialog for the signed-in user."""
        user = user or self.manager.user or self.guard.load_user()
        if user is None:
            raise RuntimeError("No signed-in user")
        return ProfileUpdateSession(
            self.api,
            self.cooldown,
            user,
            guard=self.guard,
            notify=self.notify,
            debounce_seconds=self.config.username_debounce_seconds,
        )

    def password_reset(self) -> PasswordResetOtpWorkflow:
        """Open the OTP forgot-password flow; runs the session guard."""
        flow = PasswordResetOtpWorkflow(
            self.api,
            self.cooldown,
            self.guard,
            navigate=self.navigate,
            notify=self.notify,
            login_path=self.config.login_path,
        )
        flow.mount()
        return flow

    def password_reset_link(self) -> PasswordResetLinkFlow:
        flow = PasswordResetLinkFlow(
            self.api,
            self.guard,
            navigate=self.navigate,
            notify=self.notify,
            login_path=self.config.login_path,
        )
        flow.mount()
        return flow

    def ticker(self, key: str, on_tick: Optional[Callable[[int], None]] = None) -> CooldownTicker:
        """Countdown display for one of the persisted cooldown keys."""
        return CooldownTicker(self.cooldown, key, on_tick=on_tick)
