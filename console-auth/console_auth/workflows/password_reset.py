"""
Password Reset
==============
OTP-gated password reset, plus the emailed-link alternative.

    EnterEmail -> AwaitingOtp -> PasswordEntry -> Done
"""

from enum import Enum
from typing import Callable, Optional

import structlog

from ..constants import LOGIN_PATH, RESET_PASSWORD_COOLDOWN_KEY
from ..cooldown import CooldownTimer
from ..exceptions import ConsoleAuthError, InvalidEmailError, PasswordPolicyError, WorkflowStateError
from ..http import AuthApi
from ..logging import log_audit
from ..notices import AuthNotices, Notice, Notifier, error_description
from ..otp import OtpChallenge
from ..session import EntryPoint, SessionGuard
from ..validation import mask_email, validate_email, validate_new_password

logger = structlog.get_logger(__name__)

Navigator = Callable[[str], None]


class PasswordResetPhase(str, Enum):
    """Progress of an OTP password reset."""
    ENTER_EMAIL = "enter_email"
    AWAITING_OTP = "awaiting_otp"
    PASSWORD_ENTRY = "password_entry"
    DONE = "done"


class _ResetFlowBase:
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

    def _notify(self, notice: Notice) -> None:
        if self.notify:
            self.notify(notice)

    def _finish(self, method: str, email: Optional[str] = None) -> None:
        self._notify(AuthNotices.password_reset_success())
        log_audit(
            "auth.password_reset",
            resource_type="user",
            resource_id=mask_email(email) if email else None,
            metadata={"method": method},
        )
        self.guard.ensure_clean_auth_state(EntryPoint.LOGIN_PAGE)
        if self.navigate:
            self.navigate(self.login_path)


class PasswordResetOtpWorkflow(_ResetFlowBase):
    """
    Forgot-password flow driven by a single OTP challenge.

    The session guard runs when the flow is mounted, before the OTP is
    requested, so the resend cooldown it starts survives the rest of the
    flow.

    Example:
        flow = PasswordResetOtpWorkflow(api, timer, guard, navigate=router.go)
        flow.mount()
        await flow.request_otp("user@example.com")
        await flow.verify_otp("123456")
        await flow.reset_password("N3w-secret", "N3w-secret")
    """

    def __init__(
        self,
        api: AuthApi,
        cooldown: CooldownTimer,
        guard: SessionGuard,
        navigate: Optional[Navigator] = None,
        notify: Optional[Notifier] = None,
        login_path: str = LOGIN_PATH,
    ):
        super().__init__(api, guard, navigate=navigate, notify=notify, login_path=login_path)
        self.cooldown = cooldown
        self.email = ""
        self.challenge: Optional[OtpChallenge] = None
        self._phase = PasswordResetPhase.ENTER_EMAIL
        self._submitting = False

    @property
    def phase(self) -> PasswordResetPhase:
        return self._phase

    @property
    def cooldown_remaining(self) -> int:
        return self.cooldown.remaining(RESET_PASSWORD_COOLDOWN_KEY)

    @property
    def can_request(self) -> bool:
        return self._phase == PasswordResetPhase.ENTER_EMAIL and self.cooldown_remaining == 0

    @property
    def can_resend(self) -> bool:
        return (
            self._phase == PasswordResetPhase.AWAITING_OTP
            and self.challenge is not None
            and self.challenge.can_send
        )

    def _require(self, operation: str, phase: PasswordResetPhase) -> None:
        if self._phase != phase:
            raise WorkflowStateError(operation, self._phase.value)

    def mount(self) -> None:
        """Run when the forgot-password page opens."""
        self.guard.ensure_clean_auth_state(EntryPoint.FORGOT_PASSWORD_PAGE)

    async def request_otp(self, email: str) -> None:
        """Send the first reset code and move on to code entry."""
        self._require("request reset OTP", PasswordResetPhase.ENTER_EMAIL)
        result = validate_email(email)
        if not result.is_valid:
            raise InvalidEmailError(result.error)

        if self.challenge is None or self.challenge.target != result.normalized:
            self.email = result.normalized
            self.challenge = OtpChallenge(
                target=self.email,
                cooldown=self.cooldown,
                cooldown_key=RESET_PASSWORD_COOLDOWN_KEY,
                sender=self.api.forgot_password_otp,
                verifier=self.api.verify_password_reset_otp,
            )

        await self._send("Check your email for the OTP.")
        self._phase = PasswordResetPhase.AWAITING_OTP

    async def resend_otp(self) -> None:
        """Request another code; blocked while the cooldown runs."""
        self._require("resend reset OTP", PasswordResetPhase.AWAITING_OTP)
        await self._send("A new OTP has been sent to your email.")

    async def _send(self, sent_message: str) -> None:
        try:
            await self.challenge.send()
        except ConsoleAuthError:
            raise
        except Exception as e:
            self._notify(AuthNotices.otp_send_failed(error_description(e)))
            raise
        self._notify(AuthNotices.otp_sent(sent_message))

    async def verify_otp(self, code: str) -> bool:
        self._require("verify reset OTP", PasswordResetPhase.AWAITING_OTP)
        try:
            verified = await self.challenge.verify(code)
        except ConsoleAuthError:
            raise
        except Exception as e:
            self._notify(AuthNotices.otp_verify_failed(error_description(e)))
            raise

        if not verified:
            self._notify(AuthNotices.otp_invalid())
            return False

        self._phase = PasswordResetPhase.PASSWORD_ENTRY
        self._notify(AuthNotices.otp_verified("Please enter your new password."))
        return True

    async def reset_password(self, new_password: str, confirm_password: str) -> None:
        """Commit the new password, then send the user to login."""
        self._require("reset password", PasswordResetPhase.PASSWORD_ENTRY)
        if self._submitting:
            raise WorkflowStateError("reset password", "submitting")

        result = validate_new_password(new_password, confirm_password)
        if not result.is_valid:
            raise PasswordPolicyError(result.error)

        self._submitting = True
        try:
            await self.api.reset_password_otp(
                self.email, self.challenge.verified_code, new_password
            )
        except Exception as e:
            self._notify(AuthNotices.password_reset_failed(error_description(e)))
            logger.warning("Password reset failed", email=mask_email(self.email), error=str(e))
            raise
        finally:
            self._submitting = False

        self._phase = PasswordResetPhase.DONE
        self._finish("otp", self.email)


class PasswordResetLinkFlow(_ResetFlowBase):
    """Reset via an emailed link; the token is validated once by the backend."""

    def mount(self, entry_point: EntryPoint = EntryPoint.FORGOT_PASSWORD_PAGE) -> None:
        self.guard.ensure_clean_auth_state(entry_point)

    async def request_link(self, email: str) -> None:
        result = validate_email(email)
        if not result.is_valid:
            raise InvalidEmailError(result.error)
        try:
            await self.api.forgot_password(result.normalized)
        except Exception as e:
            self._notify(AuthNotices.password_reset_failed(error_description(e)))
            raise
        self._notify(AuthNotices.password_reset_link_sent())

    async def reset_with_token(self, token: str, new_password: str, confirm_password: str) -> None:
        result = validate_new_password(new_password, confirm_password)
        if not result.is_valid:
            raise PasswordPolicyError(result.error)
        try:
            await self.api.reset_password(token, new_password)
        except Exception as e:
            self._notify(AuthNotices.password_reset_failed(error_description(e)))
            raise
        self._finish("link")
