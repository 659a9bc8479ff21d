"""
Unit tests for set_when_settable / wait_for_field_clearable.

Tests cover:
- Plain and paced delivery
- Fields that reformat input (retry from the clear)
- Idempotence on success
- Secure value redaction in the timeout message
"""

import time

import pytest

from uisync.core.exceptions import ElementNotInteractableError, WaitTimeoutError
from uisync.core.models import Selector, WaitSpec

from conftest import FakeElement


USERNAME = Selector.css("#username")
PASSWORD = Selector.css("#password")


# ============================================================================
# TEST: wait_for_field_clearable
# ============================================================================

class TestFieldClearable:

    @pytest.mark.asyncio
    async def test_clears_existing_value(self, helper, driver):
        element = driver.add(USERNAME, FakeElement(value="old"))

        assert await helper.wait_for_field_clearable(driver, USERNAME) is True
        assert element.value == ""

    @pytest.mark.asyncio
    async def test_retries_until_clear_succeeds(self, helper, driver):
        element = driver.add(USERNAME, FakeElement(value="old"), appear_after=1)
        element.clear_errors = [ElementNotInteractableError("read-only while loading")]

        assert await helper.wait_for_field_clearable(driver, USERNAME) is True
        assert element.clears == 1

    @pytest.mark.asyncio
    async def test_timeout_message(self, helper, driver):
        with pytest.raises(WaitTimeoutError) as exc_info:
            await helper.wait_for_field_clearable(driver, USERNAME, WaitSpec(timeout_ms=50))

        assert str(exc_info.value) == "Timed out waiting for element with css of '#username' to be clearable"


# ============================================================================
# TEST: set_when_settable
# ============================================================================

class TestSetWhenSettable:

    @pytest.mark.asyncio
    async def test_sets_value_in_one_write(self, helper, driver):
        element = driver.add(USERNAME, FakeElement(value="previous"))

        assert await helper.set_when_settable(driver, USERNAME, "hello") is True
        assert element.value == "hello"
        assert element.keystrokes == ["hello"]
        assert driver.sleeps == []

    @pytest.mark.asyncio
    async def test_is_idempotent(self, helper, driver):
        element = driver.add(USERNAME)

        await helper.set_when_settable(driver, USERNAME, "hello")
        await helper.set_when_settable(driver, USERNAME, "hello")

        assert element.value == "hello"
        assert element.clears == 2

    @pytest.mark.asyncio
    async def test_restarts_from_clear_when_field_reformats(self, helper, driver):
        writes = {"count": 0}

        def upper_on_first_write(current):
            writes["count"] += 1
            return current.upper() if writes["count"] == 1 else current

        element = driver.add(USERNAME, FakeElement(reformat=upper_on_first_write))

        assert await helper.set_when_settable(driver, USERNAME, "hello") is True
        assert element.value == "hello"
        assert element.keystrokes == ["hello", "hello"]
        assert element.clears == 2

    @pytest.mark.asyncio
    async def test_waits_for_field_to_appear(self, helper, driver):
        element = driver.add(USERNAME, appear_after=3)

        assert await helper.set_when_settable(driver, USERNAME, "hello") is True
        assert element.value == "hello"

    @pytest.mark.asyncio
    async def test_empty_value(self, helper, driver):
        element = driver.add(USERNAME, FakeElement(value="stale"))

        assert await helper.set_when_settable(driver, USERNAME, "") is True
        assert element.value == ""

    @pytest.mark.asyncio
    async def test_timeout_message_shows_value(self, helper, driver):
        driver.add(USERNAME, FakeElement(reformat=lambda current: current + "!"))

        with pytest.raises(WaitTimeoutError) as exc_info:
            await helper.set_when_settable(driver, USERNAME, "hello", WaitSpec(timeout_ms=100))

        assert str(exc_info.value) == (
            "Timed out waiting for element with css of '#username' to be settable to: 'hello'"
        )

    @pytest.mark.asyncio
    async def test_secure_value_is_masked(self, helper, driver):
        driver.add(PASSWORD, FakeElement(reformat=lambda current: current + "!"))

        with pytest.raises(WaitTimeoutError) as exc_info:
            await helper.set_when_settable(
                driver, PASSWORD, "hello", WaitSpec(timeout_ms=100, secure_value=True)
            )

        message = str(exc_info.value)
        assert "'*********'" in message
        assert "hello" not in message

    @pytest.mark.asyncio
    async def test_unclearable_field_reports_clearable_timeout(self, helper, driver):
        element = driver.add(USERNAME)
        element.clear_errors = [ElementNotInteractableError("disabled")] * 1000

        with pytest.raises(WaitTimeoutError) as exc_info:
            await helper.set_when_settable(driver, USERNAME, "hello", WaitSpec(timeout_ms=60))

        assert "to be clearable" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_late_clear_failure_stays_within_overall_deadline(self, helper, driver):
        class LockingField(FakeElement):
            """Reformats every value, then turns read-only after 250 ms."""

            def __init__(self):
                super().__init__(reformat=lambda v: v + "!")
                self.locks_at = time.monotonic() + 0.25

            async def clear(self) -> None:
                if time.monotonic() >= self.locks_at:
                    raise ElementNotInteractableError("read-only")
                await super().clear()

        driver.add(USERNAME, LockingField())

        start = time.monotonic()
        with pytest.raises(WaitTimeoutError):
            await helper.set_when_settable(driver, USERNAME, "hello", WaitSpec(timeout_ms=300))
        elapsed_ms = (time.monotonic() - start) * 1000

        # Deadline plus one poll interval, with scheduling slack
        assert elapsed_ms < 300 + 10 + 100


# ============================================================================
# TEST: Paced delivery
# ============================================================================

class TestPacedDelivery:

    @pytest.mark.asyncio
    async def test_types_one_character_at_a_time(self, helper, driver):
        element = driver.add(USERNAME)
        pause_ms = 20
        value = "abcd"

        started = time.monotonic()
        await helper.set_when_settable(
            driver, USERNAME, value, WaitSpec(timeout_ms=2000, pause_between_keys_ms=pause_ms)
        )
        elapsed_ms = (time.monotonic() - started) * 1000

        assert element.keystrokes == ["a", "b", "c", "d"]
        assert driver.sleeps == [pause_ms] * len(value)
        assert elapsed_ms >= pause_ms * (len(value) - 1)
        assert element.value == value

    @pytest.mark.asyncio
    async def test_zero_pause_never_sleeps(self, helper, driver):
        driver.add(USERNAME)

        await helper.set_when_settable(driver, USERNAME, "abcd", WaitSpec(pause_between_keys_ms=0))

        assert driver.sleeps == []
