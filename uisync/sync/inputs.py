"""
Input synchronisation: put a literal value into an editable field and keep
trying until reading the field back returns exactly that value.

Front-end frameworks may re-render the field after it is cleared, or
reformat its value after each keystroke. One attempt therefore runs the
whole sequence (clear, re-locate, type, read back) and a mismatch restarts
from the clear on the next attempt instead of resuming half way.
"""

import logging
import time

from ..config import Settings
from ..core.exceptions import NotYetReadyError
from ..core.models import Selector
from ..infrastructure.driver import BrowserDriver, ElementHandle
from .poller import ConditionPoller

logger = logging.getLogger(__name__)


class InputSynchronizer:
    """Clear-then-write routine run under a ConditionPoller."""

    def __init__(self, poller: ConditionPoller, settings: Settings):
        self.poller = poller
        self.settings = settings

    async def wait_for_field_clearable(
        self,
        driver: BrowserDriver,
        selector: Selector,
        timeout_ms: int
    ) -> bool:
        """
        Poll until the field can be cleared and reads back as empty.

        Raises:
            WaitTimeoutError: "... to be clearable"
        """
        async def attempt() -> bool:
            try:
                element = await driver.find_element(selector)
                await element.clear()
                return await element.get_attribute("value") == ""
            except NotYetReadyError as e:
                logger.debug("Field %s not clearable yet: %s", selector, e.message)
                return False

        return await self.poller.poll(
            attempt,
            timeout_ms,
            f"Timed out waiting for element with {selector.describe()} to be clearable"
        )

    async def set_when_settable(
        self,
        driver: BrowserDriver,
        selector: Selector,
        value: str,
        timeout_ms: int,
        pause_between_keys_ms: int = 0,
        secure_value: bool = False
    ) -> bool:
        """
        Clear the field, write ``value`` and confirm it by read-back.

        Args:
            driver: Browser session
            selector: Field to fill
            value: Exact text the field must end up holding
            timeout_ms: Deadline for the whole operation; each clear gets only
                the time left before it
            pause_between_keys_ms: Sleep before each keystroke; 0 types at once
            secure_value: Show a mask instead of ``value`` in diagnostics

        Raises:
            WaitTimeoutError: "... to be clearable" if the field never clears,
                "... to be settable to: '<value>'" if read-back never matches
        """
        log_value = self.settings.secure_value_mask if secure_value else value
        started = time.monotonic()

        async def attempt() -> bool:
            elapsed_ms = (time.monotonic() - started) * 1000
            await self.wait_for_field_clearable(driver, selector, max(1, timeout_ms - elapsed_ms))
            try:
                # Clearing may have re-rendered the field
                element = await driver.find_element(selector)
                await self._deliver(driver, element, value, pause_between_keys_ms)
                actual = await element.get_attribute("value")
            except NotYetReadyError as e:
                logger.debug("Field %s not settable yet: %s", selector, e.message)
                return False

            if actual != value:
                shown = self.settings.secure_value_mask if secure_value else actual
                logger.debug("Field %s reads back '%s', expected '%s'", selector, shown, log_value)
                return False
            return True

        return await self.poller.poll(
            attempt,
            timeout_ms,
            f"Timed out waiting for element with {selector.describe()} to be settable to: '{log_value}'"
        )

    @staticmethod
    async def _deliver(driver: BrowserDriver, element: ElementHandle, value: str, pause_ms: int) -> None:
        if pause_ms == 0:
            await element.send_keys(value)
            return
        for char in value:
            await driver.sleep(pause_ms)
            await element.send_keys(char)
