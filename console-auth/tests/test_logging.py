"""
Unit Tests for Structured Logging
=================================
"""

import io
import json
import logging
import sys
from unittest.mock import AsyncMock

import pytest
import structlog

from console_auth.constants import RESET_PASSWORD_COOLDOWN_KEY
from console_auth.exceptions import CooldownActiveError
from console_auth.logging import (
    JSONFormatter,
    flow_context,
    flow_id_var,
    log_audit,
    log_event,
    service_name_var,
    setup_logging,
)
from console_auth.otp import OtpChallenge


@pytest.fixture
def json_logging():
    """Route logs as JSON into an owned buffer; undo afterwards."""
    stream = io.StringIO()
    setup_logging("inventory-console", level="DEBUG", stream=stream)
    yield lambda: [json.loads(line) for line in stream.getvalue().splitlines() if line]
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()
    service_name_var.set("console-auth")


class TestJSONFormatter:
    """Tests for the JSON formatter."""

    def test_format_includes_extra_data(self):
        record = logging.makeLogRecord({
            "msg": "Cooldown started",
            "levelname": "DEBUG",
            "name": "console_auth.cooldown",
            "extra_data": {"key": "oldEmailOtpCooldownEnd"},
        })

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "Cooldown started"
        assert data["level"] == "DEBUG"
        assert data["key"] == "oldEmailOtpCooldownEnd"
        assert "timestamp" in data
        assert "flow" not in data

    def test_format_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.makeLogRecord({"msg": "failed", "exc_info": sys.exc_info()})

        data = json.loads(JSONFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "boom"
        assert "Traceback" in data["exception"]["traceback"]


class TestSetupLogging:
    """Tests for structlog routing."""

    def test_structlog_event_rendered(self, json_logging):
        log = structlog.get_logger("console_auth.tests")

        with flow_context("password_reset", flow_id="abc12345"):
            log.info("OTP sent", cooldown_key="resetPasswordOtpResendTimer")

        entry = json_logging()[-1]
        assert entry["message"] == "OTP sent"
        assert entry["logger"] == "console_auth.tests"
        assert entry["cooldown_key"] == "resetPasswordOtpResendTimer"
        assert entry["service"] == "inventory-console"
        assert entry["flow"] == {"name": "password_reset", "id": "abc12345"}

    def test_level_filters(self):
        stream = io.StringIO()
        setup_logging("inventory-console", level="WARNING", stream=stream)
        try:
            log = structlog.get_logger("console_auth.tests")
            log.info("hidden")
            log.warning("shown")
        finally:
            logging.getLogger().handlers.clear()
            structlog.reset_defaults()
            service_name_var.set("console-auth")

        messages = [json.loads(line)["message"] for line in stream.getvalue().splitlines()]
        assert messages == ["shown"]

    def test_flow_context_resets(self, json_logging):
        with flow_context("email_change") as flow_id:
            assert flow_id_var.get() == flow_id
            assert len(flow_id) == 8

        assert flow_id_var.get() == ""


class TestDomainEvents:
    """Tests for event and audit lines."""

    def test_log_event(self, json_logging):
        log_event("otp.resend_blocked", level="WARNING", remaining=42)

        entry = json_logging()[-1]
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "console_auth.events"
        assert entry["message"] == "otp.resend_blocked"
        assert entry["event_data"] == {"remaining": 42}

    def test_audit_event(self, json_logging):
        log_audit("auth.login", actor_id="7", outcome="failure")

        entry = json_logging()[-1]
        assert entry["audit"] is True
        assert entry["message"] == "auth.login"
        assert entry["level"] == "WARNING"
        assert entry["actor"] == {"id": "7", "type": "user"}
        assert entry["outcome"] == "failure"
        assert "resource" not in entry

    @pytest.mark.asyncio
    async def test_blocked_resend_rendered(self, json_logging, timer, clock):
        challenge = OtpChallenge(
            target="user@example.com",
            cooldown=timer,
            cooldown_key=RESET_PASSWORD_COOLDOWN_KEY,
            sender=AsyncMock(return_value=None),
            verifier=AsyncMock(return_value=True),
        )
        await challenge.send()
        clock.advance(20)

        with pytest.raises(CooldownActiveError):
            await challenge.send()

        entry = json_logging()[-1]
        assert entry["message"] == "otp.resend_blocked"
        assert entry["event_data"] == {
            "target": "u****@example.com",
            "cooldown_key": RESET_PASSWORD_COOLDOWN_KEY,
            "remaining": 40,
        }
