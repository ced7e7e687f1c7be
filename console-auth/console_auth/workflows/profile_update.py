"""
Profile Update
==============
Host form for name, username and email edits.

Name and username changes commit independently of the email change:
only the ``email`` field of the payload waits for both email challenges.
"""

from typing import Dict, Optional

import structlog

from ..constants import USERNAME_DEBOUNCE_SECONDS
from ..cooldown import CooldownTimer
from ..exceptions import ValidationError, WorkflowStateError
from ..http import AuthApi, ProfileUpdate, UserRecord
from ..logging import log_audit
from ..notices import AuthNotices, Notice, Notifier, error_description
from ..session import SessionGuard
from ..validation import filter_name_input, validate_name
from .email_change import EmailChangeWorkflow
from .username_check import UsernameAvailabilityChecker, UsernameStatus

logger = structlog.get_logger(__name__)


class ProfileUpdateSession:
    """
    State behind the "Update Profile" dialog for the signed-in user.

    Must be created inside a running event loop when username edits are
    expected, since availability checks are scheduled as tasks.
    """

    def __init__(
        self,
        api: AuthApi,
        cooldown: CooldownTimer,
        user: UserRecord,
        guard: Optional[SessionGuard] = None,
        notify: Optional[Notifier] = None,
        debounce_seconds: float = USERNAME_DEBOUNCE_SECONDS,
    ):
        self.api = api
        self.guard = guard
        self.notify = notify
        self.user = user
        self.first_name = user.first_name or ""
        self.last_name = user.last_name or ""
        self.username_check = UsernameAvailabilityChecker(
            api.check_username, user.username, debounce_seconds
        )
        self.email_change = EmailChangeWorkflow(
            api, cooldown, user.email or "", notify=notify
        )
        self._saving = False

    # Field edits

    @property
    def username(self) -> str:
        return self.username_check.value

    @property
    def username_status(self) -> Optional[UsernameStatus]:
        return self.username_check.status

    def set_first_name(self, value: str) -> None:
        self.first_name = filter_name_input(value)

    def set_last_name(self, value: str) -> None:
        self.last_name = filter_name_input(value)

    def set_username(self, value: str) -> None:
        self.username_check.update(value)

    # Validation

    @property
    def name_errors(self) -> Dict[str, str]:
        errors = {}
        for field, value in (("firstName", self.first_name), ("lastName", self.last_name)):
            result = validate_name(value)
            if not result.is_valid:
                errors[field] = result.error
        return errors

    @property
    def is_saving(self) -> bool:
        return self._saving

    @property
    def can_save(self) -> bool:
        return (
            not self._saving
            and not self.name_errors
            and self.username_check.is_acceptable
        )

    def build_update(self) -> ProfileUpdate:
        """Collect only the fields that differ from the stored record."""
        update = ProfileUpdate()
        if self.first_name != (self.user.first_name or ""):
            update.first_name = self.first_name
        if self.last_name != (self.user.last_name or ""):
            update.last_name = self.last_name
        if not self.username_check.is_unchanged:
            update.username = self.username
        if self.email_change.verified_new_email:
            update.email = self.email_change.verified_new_email
        return update

    def _notify(self, notice: Notice) -> None:
        if self.notify:
            self.notify(notice)

    # Commit

    async def commit(self) -> Optional[UserRecord]:
        """
        Save the profile.

        Returns:
            The updated user record, or None when there was nothing to save
        """
        if self._saving:
            raise WorkflowStateError("save profile", "saving")

        errors = self.name_errors
        if errors:
            field, message = next(iter(errors.items()))
            raise ValidationError(message, field=field)
        if not self.username_check.is_acceptable:
            raise ValidationError("Username is not available", field="username")

        update = self.build_update()
        if update.is_empty:
            self._notify(AuthNotices.no_changes())
            return None

        fields = sorted(update.to_payload())
        self._saving = True
        try:
            updated = await self.api.update_profile(update)
        except Exception as e:
            self._notify(AuthNotices.profile_update_failed(error_description(e)))
            log_audit(
                "profile.update",
                actor_id=str(self.user.id),
                resource_type="user",
                resource_id=str(self.user.id),
                outcome="failure",
                metadata={"fields": fields},
            )
            raise
        finally:
            self._saving = False

        if self.guard is not None:
            self.guard.update_user(updated)
        self._rebase(updated)
        self._notify(AuthNotices.profile_updated())
        log_audit(
            "profile.update",
            actor_id=str(updated.id),
            resource_type="user",
            resource_id=str(updated.id),
            metadata={"fields": fields},
        )
        logger.info("Profile updated", fields=fields)
        return updated

    def _rebase(self, user: UserRecord) -> None:
        """Make the saved record the new baseline for further edits."""
        self.user = user
        self.first_name = user.first_name or ""
        self.last_name = user.last_name or ""
        self.username_check.rebase(user.username)
        self.email_change = EmailChangeWorkflow(
            self.api, self.email_change.cooldown, user.email or "", notify=self.notify
        )

    def close(self) -> None:
        """Stop pending username checks; cooldowns keep running."""
        self.username_check.close()
