"""
OTP Challenge
=============
Send/verify state machine for a code delivered to one target address.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import structlog

from ..cooldown import CooldownTimer
from ..exceptions import ChallengeStateError, CooldownActiveError, InvalidOtpFormatError
from ..logging import log_event
from ..validation import mask_email
from .codes import is_valid_otp, strip_non_digits
from .models import (
    BUSY_STATUSES,
    SENDABLE_STATUSES,
    VERIFIABLE_STATUSES,
    ChallengeStatus,
)

logger = structlog.get_logger(__name__)

Sender = Callable[[str], Awaitable[Any]]
Verifier = Callable[[str, str], Awaitable[bool]]


class OtpChallenge:
    """
    One "code sent to an address" interaction.

    The backend calls are injected: ``sender(target)`` requests a code and
    ``verifier(target, code)`` returns whether the code is correct. The
    cooldown key is read from the persisted store at the moment of each
    send, never from cached state.

    Example:
        challenge = OtpChallenge(
            target="user@example.com",
            cooldown=timer,
            cooldown_key="resetPasswordOtpResendTimer",
            sender=api.forgot_password_otp,
            verifier=verify_reset_code,
        )
        await challenge.send()
        verified = await challenge.verify("123456")
    """

    def __init__(
        self,
        target: str,
        cooldown: CooldownTimer,
        cooldown_key: str,
        sender: Sender,
        verifier: Verifier,
    ):
        self.target = target
        self.cooldown = cooldown
        self.cooldown_key = cooldown_key
        self._sender = sender
        self._verifier = verifier
        self._status = ChallengeStatus.NOT_SENT
        self._verified_code: Optional[str] = None

    @property
    def status(self) -> ChallengeStatus:
        return self._status

    @property
    def is_busy(self) -> bool:
        return self._status in BUSY_STATUSES

    @property
    def is_verified(self) -> bool:
        return self._status == ChallengeStatus.VERIFIED

    @property
    def verified_code(self) -> Optional[str]:
        """The code that passed verification, kept for the commit call."""
        return self._verified_code

    @property
    def cooldown_remaining(self) -> int:
        return self.cooldown.remaining(self.cooldown_key)

    @property
    def can_send(self) -> bool:
        return self._status in SENDABLE_STATUSES and self.cooldown_remaining == 0

    async def send(self) -> None:
        """
        Request a code for the target.

        Raises:
            ChallengeStateError: Busy or already verified
            CooldownActiveError: Resend cooldown still running
            Exception: Whatever the backend raised; status is restored
                and the cooldown is not started
        """
        if self._status not in SENDABLE_STATUSES:
            raise ChallengeStateError("send", self._status.value)

        remaining = self.cooldown.remaining(self.cooldown_key)
        if remaining > 0:
            log_event(
                "otp.resend_blocked",
                level="WARNING",
                target=mask_email(self.target),
                cooldown_key=self.cooldown_key,
                remaining=remaining,
            )
            raise CooldownActiveError(self.cooldown_key, remaining)

        previous = self._status
        self._status = ChallengeStatus.SENDING
        try:
            await self._sender(self.target)
        except BaseException as e:
            self._status = previous
            if not isinstance(e, asyncio.CancelledError):
                logger.warning(
                    "OTP send failed",
                    target=mask_email(self.target),
                    error=str(e),
                )
            raise

        self._status = ChallengeStatus.SENT
        self.cooldown.start(self.cooldown_key)
        logger.info("OTP sent", target=mask_email(self.target), cooldown_key=self.cooldown_key)

    async def verify(self, code: str) -> bool:
        """
        Submit a code typed by the user.

        Non-digits are stripped first. A code that is not exactly six
        digits is rejected without contacting the backend.

        Returns:
            True if verified, False if the backend rejected the code

        Raises:
            InvalidOtpFormatError: Code is not six digits
            ChallengeStateError: No code has been sent, or a call is in flight
            Exception: Transport/backend errors, after marking the challenge invalid
        """
        digits = strip_non_digits(code)
        if not is_valid_otp(digits):
            raise InvalidOtpFormatError()

        if self._status not in VERIFIABLE_STATUSES:
            raise ChallengeStateError("verify", self._status.value)

        previous = self._status
        self._status = ChallengeStatus.VERIFYING
        try:
            verified = await self._verifier(self.target, digits)
        except asyncio.CancelledError:
            self._status = previous
            raise
        except Exception as e:
            self._status = ChallengeStatus.INVALID
            logger.warning(
                "OTP verification failed",
                target=mask_email(self.target),
                error=str(e),
            )
            raise

        if not verified:
            self._status = ChallengeStatus.INVALID
            logger.warning("Invalid OTP attempt", target=mask_email(self.target))
            return False

        self._status = ChallengeStatus.VERIFIED
        self._verified_code = digits
        self.cooldown.reset(self.cooldown_key)
        logger.info("OTP verified", target=mask_email(self.target))
        return True
