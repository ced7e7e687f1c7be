"""
Email Change Workflow
=====================
Two chained OTP challenges, current address first, then the new one.

The whole flow's progress is a single phase value, so combinations such
as "new email verified but current email not" cannot be represented.

    Idle -> OldPending -> OldVerified -> NewPending -> NewVerified

Editing the new address never touches the persisted new-email cooldown:
alternating between two addresses cannot be used to skip the wait.
"""

from enum import Enum
from typing import Optional

import structlog

from ..constants import NEW_EMAIL_COOLDOWN_KEY, OLD_EMAIL_COOLDOWN_KEY
from ..cooldown import CooldownTimer
from ..exceptions import ChallengeStateError, ConsoleAuthError, InvalidEmailError, WorkflowStateError
from ..http import AuthApi
from ..notices import AuthNotices, Notice, Notifier, error_description
from ..otp import ChallengeStatus, OtpChallenge
from ..validation import mask_email, normalize_email, validate_new_email

logger = structlog.get_logger(__name__)


class EmailChangePhase(str, Enum):
    """Progress of an email change."""
    IDLE = "idle"
    OLD_PENDING = "old_pending"
    OLD_VERIFIED = "old_verified"
    NEW_PENDING = "new_pending"
    NEW_VERIFIED = "new_verified"


class EmailChangeWorkflow:
    """
    Email change state machine embedded in the profile update form.

    Example:
        flow = EmailChangeWorkflow(api, timer, current_email=user.email)
        flow.begin()
        await flow.send_old_otp()
        await flow.verify_old_otp("123456")
        flow.set_new_email("new@example.com")
        await flow.send_new_otp()
        await flow.verify_new_otp("654321")
        flow.verified_new_email  # "new@example.com"
    """

    def __init__(
        self,
        api: AuthApi,
        cooldown: CooldownTimer,
        current_email: str,
        notify: Optional[Notifier] = None,
    ):
        self.api = api
        self.cooldown = cooldown
        self.current_email = current_email
        self.notify = notify
        self._phase = EmailChangePhase.IDLE
        self.new_email = ""
        self.new_email_error = ""
        self.old_challenge = self._old_challenge()
        self.new_challenge = self._new_challenge("")

    # Challenge construction

    async def _send_current_email_otp(self, _target: str) -> None:
        await self.api.send_current_email_otp()

    def _old_challenge(self) -> OtpChallenge:
        return OtpChallenge(
            target=self.current_email,
            cooldown=self.cooldown,
            cooldown_key=OLD_EMAIL_COOLDOWN_KEY,
            sender=self._send_current_email_otp,
            verifier=self.api.verify_current_email_otp,
        )

    def _new_challenge(self, new_email: str) -> OtpChallenge:
        return OtpChallenge(
            target=new_email,
            cooldown=self.cooldown,
            cooldown_key=NEW_EMAIL_COOLDOWN_KEY,
            sender=self.api.send_otp,
            verifier=self.api.verify_otp,
        )

    # State

    @property
    def phase(self) -> EmailChangePhase:
        return self._phase

    @property
    def is_active(self) -> bool:
        return self._phase != EmailChangePhase.IDLE

    @property
    def new_email_input_enabled(self) -> bool:
        return self._phase in (EmailChangePhase.OLD_VERIFIED, EmailChangePhase.NEW_PENDING)

    @property
    def old_cooldown_remaining(self) -> int:
        return self.cooldown.remaining(OLD_EMAIL_COOLDOWN_KEY)

    @property
    def new_cooldown_remaining(self) -> int:
        return self.cooldown.remaining(NEW_EMAIL_COOLDOWN_KEY)

    @property
    def can_send_old_otp(self) -> bool:
        return self._phase == EmailChangePhase.OLD_PENDING and self.old_challenge.can_send

    @property
    def can_send_new_otp(self) -> bool:
        return (
            self._phase == EmailChangePhase.NEW_PENDING
            and not self.new_email_error
            and self.new_challenge.can_send
        )

    @property
    def verified_new_email(self) -> Optional[str]:
        """The new address, once it has been proven; otherwise None."""
        if self._phase == EmailChangePhase.NEW_VERIFIED:
            return self.new_email
        return None

    def _require(self, operation: str, *phases: EmailChangePhase) -> None:
        if self._phase not in phases:
            raise WorkflowStateError(operation, self._phase.value)

    def _notify(self, notice: Notice) -> None:
        if self.notify:
            self.notify(notice)

    # Transitions

    def begin(self) -> None:
        """User chose to change their email."""
        self._require("begin email change", EmailChangePhase.IDLE)
        self._phase = EmailChangePhase.OLD_PENDING
        logger.info("Email change started", current=mask_email(self.current_email))

    def cancel(self) -> None:
        """Abandon the change. Persisted cooldowns keep running."""
        if self.old_challenge.is_busy or self.new_challenge.is_busy:
            raise WorkflowStateError("cancel email change", "busy")
        self._phase = EmailChangePhase.IDLE
        self.new_email = ""
        self.new_email_error = ""
        self.old_challenge = self._old_challenge()
        self.new_challenge = self._new_challenge("")

    async def send_old_otp(self) -> None:
        self._require("send current email OTP", EmailChangePhase.OLD_PENDING)
        await self._send(self.old_challenge, "Check your current email for the OTP.")

    async def verify_old_otp(self, code: str) -> bool:
        self._require("verify current email OTP", EmailChangePhase.OLD_PENDING)
        verified = await self._verify(
            self.old_challenge,
            code,
            "Current email verified successfully. You can now enter your new email.",
        )
        if verified:
            self._phase = EmailChangePhase.OLD_VERIFIED
        return verified

    def set_new_email(self, value: str) -> None:
        """
        Record a keystroke in the new email field.

        A different value, or any edit after a code was requested, starts
        a fresh challenge for the typed address.
        """
        self._require("edit new email", EmailChangePhase.OLD_VERIFIED, EmailChangePhase.NEW_PENDING)
        if self.new_challenge.is_busy:
            raise ChallengeStateError("edit new email", self.new_challenge.status.value)

        normalized = normalize_email(value)
        self.new_email = normalized

        if normalized:
            result = validate_new_email(normalized, self.current_email)
            self.new_email_error = "" if result.is_valid else result.error
        else:
            self.new_email_error = ""

        if (
            self.new_challenge.status != ChallengeStatus.NOT_SENT
            or self.new_challenge.target != normalized
        ):
            self.new_challenge = self._new_challenge(normalized)

        self._phase = EmailChangePhase.NEW_PENDING if normalized else EmailChangePhase.OLD_VERIFIED

    async def send_new_otp(self) -> None:
        self._require("send new email OTP", EmailChangePhase.NEW_PENDING)
        if self.new_email_error:
            raise InvalidEmailError(self.new_email_error, field="newEmail")
        await self._send(self.new_challenge, "Check your new email for the OTP.")

    async def verify_new_otp(self, code: str) -> bool:
        self._require("verify new email OTP", EmailChangePhase.NEW_PENDING)
        verified = await self._verify(
            self.new_challenge, code, "New email verified successfully."
        )
        if verified:
            self._phase = EmailChangePhase.NEW_VERIFIED
        return verified

    # Helpers

    async def _send(self, challenge: OtpChallenge, sent_message: str) -> None:
        try:
            await challenge.send()
        except ConsoleAuthError:
            raise
        except Exception as e:
            self._notify(AuthNotices.otp_send_failed(error_description(e)))
            raise
        self._notify(AuthNotices.otp_sent(sent_message))

    async def _verify(self, challenge: OtpChallenge, code: str, verified_message: str) -> bool:
        try:
            verified = await challenge.verify(code)
        except ConsoleAuthError:
            raise
        except Exception:
            self._notify(AuthNotices.otp_verify_failed())
            raise
        if verified:
            self._notify(AuthNotices.otp_verified(verified_message))
        else:
            self._notify(AuthNotices.otp_invalid())
        return verified
