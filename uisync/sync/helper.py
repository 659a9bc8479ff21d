"""
Condition predicates for test steps.

Each wait is one ConditionPoller run around a single attempt:

    clickable            find -> click
    not present          no element matches
    followable           find -> read href -> navigate
    present & displayed  find -> is_displayed
    settable             clear -> write -> read back (see inputs.py)

An attempt answers False for every expected "not yet" (NotYetReadyError
from the driver, hidden element, empty href). Any other error propagates
out of the poll on the spot.
"""

import logging
from typing import List, Optional

from ..config import Settings, load_settings
from ..core.exceptions import NotYetReadyError, WaitTimeoutError
from ..core.models import Selector, WaitSpec, ConsoleLogEntry
from ..infrastructure.driver import BrowserDriver
from . import diagnostics
from .inputs import InputSynchronizer
from .poller import ConditionPoller
from .presence import is_element_present

logger = logging.getLogger(__name__)


class DriverHelper:
    """
    Wait-and-retry helpers bound to one configuration.

    The helper keeps no browser state: the session and the selector are
    passed to every call, so one helper can serve many drivers.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Args:
            settings: Wait configuration; loaded from the environment if omitted
        """
        self.settings = settings if settings is not None else load_settings()
        self.poller = ConditionPoller(self.settings.poll_interval_ms)
        self.inputs = InputSynchronizer(self.poller, self.settings)

    def _timeout_for(self, wait: Optional[WaitSpec]) -> int:
        if wait is not None and wait.timeout_ms is not None:
            return wait.timeout_ms
        return self.settings.explicit_wait_ms

    # ===== Polling predicates =====

    async def click_when_clickable(
        self,
        driver: BrowserDriver,
        selector: Selector,
        wait: Optional[WaitSpec] = None
    ) -> bool:
        """
        Click the element as soon as it can be clicked.

        At most one click is issued per attempt, and no attempt runs after
        a click has succeeded.

        Raises:
            WaitTimeoutError: "... to be clickable"
        """
        async def attempt() -> bool:
            try:
                element = await driver.find_element(selector)
                await element.click()
            except NotYetReadyError as e:
                logger.debug("Not clickable yet: %s", e.message)
                return False
            return True

        return await self.poller.poll(
            attempt,
            self._timeout_for(wait),
            f"Timed out waiting for element with {selector.describe()} to be clickable"
        )

    async def wait_till_not_present(
        self,
        driver: BrowserDriver,
        selector: Selector,
        wait: Optional[WaitSpec] = None
    ) -> bool:
        """
        Raises:
            WaitTimeoutError: "... to NOT be present"
        """
        async def attempt() -> bool:
            return not await is_element_present(driver, selector)

        return await self.poller.poll(
            attempt,
            self._timeout_for(wait),
            f"Timed out waiting for element with {selector.describe()} to NOT be present"
        )

    async def follow_link_when_followable(
        self,
        driver: BrowserDriver,
        selector: Selector,
        wait: Optional[WaitSpec] = None
    ) -> bool:
        """
        Navigate to the link's href once the link exists and has one.

        Raises:
            WaitTimeoutError: "Timed out waiting for link ... to be followable"
            BrowserError: If the navigation itself fails
        """
        async def attempt() -> bool:
            try:
                element = await driver.find_element(selector)
                href = await element.get_attribute("href")
            except NotYetReadyError as e:
                logger.debug("Link not followable yet: %s", e.message)
                return False
            if not href:
                return False
            await driver.navigate_to(href)
            return True

        return await self.poller.poll(
            attempt,
            self._timeout_for(wait),
            f"Timed out waiting for link with {selector.describe()} to be followable"
        )

    async def wait_till_present_and_displayed(
        self,
        driver: BrowserDriver,
        selector: Selector,
        wait: Optional[WaitSpec] = None
    ) -> bool:
        """
        Wait until the element is both in the document and visible.

        Raises:
            WaitTimeoutError: "... to be present and displayed"
        """
        return await self.poller.poll(
            self._displayed_attempt(driver, selector),
            self._timeout_for(wait),
            f"Timed out waiting for element with {selector.describe()} to be present and displayed"
        )

    async def is_eventually_present_and_displayed(
        self,
        driver: BrowserDriver,
        selector: Selector,
        wait: Optional[WaitSpec] = None
    ) -> bool:
        """Like wait_till_present_and_displayed, but answers False on timeout."""
        try:
            return await self.wait_till_present_and_displayed(driver, selector, wait)
        except WaitTimeoutError:
            return False

    def _displayed_attempt(self, driver: BrowserDriver, selector: Selector):
        async def attempt() -> bool:
            try:
                element = await driver.find_element(selector)
                return await element.is_displayed()
            except NotYetReadyError as e:
                logger.debug("Not displayed yet: %s", e.message)
                return False
        return attempt

    async def wait_for_field_clearable(
        self,
        driver: BrowserDriver,
        selector: Selector,
        wait: Optional[WaitSpec] = None
    ) -> bool:
        return await self.inputs.wait_for_field_clearable(driver, selector, self._timeout_for(wait))

    async def set_when_settable(
        self,
        driver: BrowserDriver,
        selector: Selector,
        value: str,
        wait: Optional[WaitSpec] = None
    ) -> bool:
        """
        Reliably place ``value`` into an editable field.

        ``wait.pause_between_keys_ms`` paces the typing one character at a
        time; ``wait.secure_value`` masks the value in the timeout message.

        Raises:
            WaitTimeoutError: "... to be clearable" or "... to be settable to: '...'"
        """
        wait = wait or WaitSpec()
        return await self.inputs.set_when_settable(
            driver,
            selector,
            value,
            self._timeout_for(wait),
            pause_between_keys_ms=wait.pause_between_keys_ms,
            secure_value=wait.secure_value
        )

    # ===== Single-shot checks =====

    async def is_element_present(self, driver: BrowserDriver, selector: Selector) -> bool:
        return await is_element_present(driver, selector)

    async def click_if_present(self, driver: BrowserDriver, selector: Selector, attempts: int = 1) -> None:
        """
        Best-effort click for optional elements (e.g. dismissing a dialog).

        Tries up to ``attempts`` times, one after the other, with no delay,
        stopping after the first click that goes through. Nothing is
        reported: missing elements and failed clicks are ignored, so callers
        must not rely on the click having happened.
        """
        for number in range(1, attempts + 1):
            try:
                element = await driver.find_element(selector)
                await element.click()
            except Exception as e:
                logger.debug("Best-effort click %d on %s ignored: %s", number, selector, e)
            else:
                return

    # ===== Diagnostics =====

    async def get_error_message_if_present(
        self,
        driver: BrowserDriver,
        selector: Optional[Selector] = None
    ) -> Optional[str]:
        selector = selector or Selector.css(self.settings.error_notice_selector)
        return await diagnostics.get_error_message_if_present(driver, selector)

    async def check_for_console_errors(self, driver: BrowserDriver) -> List[ConsoleLogEntry]:
        return await diagnostics.check_for_console_errors(
            driver,
            self.settings.console_error_ignore_patterns
        )

    async def close_current_window(self, driver: BrowserDriver) -> None:
        await diagnostics.close_current_window(driver)

    async def scroll_into_view(self, driver: BrowserDriver, selector: Selector):
        return await diagnostics.scroll_into_view(driver, selector)
