"""
Unit Tests for Username Availability
====================================
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from console_auth.workflows import UsernameAvailabilityChecker, UsernameStatus


class TestUsernameAvailability:
    """Tests for the debounced, cancel-on-supersede lookup."""

    @pytest.mark.asyncio
    async def test_available(self):
        lookup = AsyncMock(return_value=True)
        checker = UsernameAvailabilityChecker(lookup, "jdoe", debounce_seconds=0)

        checker.update("janed")
        await checker.wait()

        lookup.assert_awaited_once_with("janed")
        assert checker.status == UsernameStatus.AVAILABLE
        assert checker.is_acceptable

    @pytest.mark.asyncio
    async def test_taken_blocks(self):
        checker = UsernameAvailabilityChecker(AsyncMock(return_value=False), "jdoe", debounce_seconds=0)

        checker.update("admin")
        await checker.wait()

        assert checker.status == UsernameStatus.TAKEN
        assert checker.is_acceptable is False

    @pytest.mark.asyncio
    async def test_debounce_only_checks_last_value(self):
        """Fast typing results in a single lookup."""
        lookup = AsyncMock(return_value=True)
        checker = UsernameAvailabilityChecker(lookup, "jdoe", debounce_seconds=0.05)

        for value in ("j", "ja", "jan", "jane"):
            checker.update(value)
        await checker.wait()

        lookup.assert_awaited_once_with("jane")

    @pytest.mark.asyncio
    async def test_superseded_lookup_never_applies(self):
        """A slow answer for an old value cannot overwrite the latest one."""
        release = asyncio.Event()
        calls = []

        async def lookup(value):
            calls.append(value)
            if value == "first":
                await release.wait()
                return True
            return False

        checker = UsernameAvailabilityChecker(lookup, "jdoe", debounce_seconds=0)
        checker.update("first")
        for _ in range(10):
            await asyncio.sleep(0)
        assert calls == ["first"]
        assert checker.status == UsernameStatus.CHECKING

        checker.update("second")
        release.set()
        await checker.wait()

        assert calls == ["first", "second"]
        assert checker.value == "second"
        assert checker.status == UsernameStatus.TAKEN

    @pytest.mark.asyncio
    async def test_lookup_error(self):
        lookup = AsyncMock(side_effect=RuntimeError("boom"))
        checker = UsernameAvailabilityChecker(lookup, "jdoe", debounce_seconds=0)

        checker.update("janed")
        await checker.wait()

        assert checker.status == UsernameStatus.ERROR
        assert checker.is_acceptable is False

    @pytest.mark.asyncio
    async def test_unchanged_needs_no_lookup(self):
        lookup = AsyncMock(return_value=True)
        checker = UsernameAvailabilityChecker(lookup, "jdoe", debounce_seconds=0)

        checker.update("other")
        checker.update("jdoe")
        await checker.wait()

        lookup.assert_not_awaited()
        assert checker.status is None
        assert checker.is_acceptable

    @pytest.mark.asyncio
    async def test_empty_is_not_acceptable(self):
        checker = UsernameAvailabilityChecker(AsyncMock(return_value=True), "jdoe", debounce_seconds=0)

        checker.update("")

        assert checker.status is None
        assert checker.is_acceptable is False

    @pytest.mark.asyncio
    async def test_close_cancels_pending(self):
        lookup = AsyncMock(return_value=True)
        checker = UsernameAvailabilityChecker(lookup, "jdoe", debounce_seconds=10)

        checker.update("janed")
        checker.close()
        await asyncio.sleep(0)

        lookup.assert_not_awaited()
        assert checker.is_acceptable is False

    @pytest.mark.asyncio
    async def test_new_value_drops_previous_result(self):
        """An available name does not vouch for the next one while it is pending."""
        lookup = AsyncMock(side_effect=[True, False])
        checker = UsernameAvailabilityChecker(lookup, "jdoe", debounce_seconds=0)
        checker.update("freename")
        await checker.wait()
        assert checker.status == UsernameStatus.AVAILABLE

        checker.debounce_seconds = 10
        checker.update("admin")

        assert checker.status == UsernameStatus.CHECKING
        assert checker.is_acceptable is False
        checker.close()
