"""
Page diagnostics used by test steps around the waits.

None of these poll; they look at the page once.
"""

import logging
from typing import Iterable, List, Optional

from ..core.exceptions import NotYetReadyError
from ..core.models import Selector, ConsoleLogEntry
from ..infrastructure.driver import BrowserDriver

logger = logging.getLogger(__name__)

SCROLL_INTO_VIEW_SCRIPT = 'arguments[0].scrollIntoView( { block: "center", inline: "center" } )'


async def get_error_message_if_present(driver: BrowserDriver, selector: Selector) -> Optional[str]:
    """Text of the error notice matched by ``selector``, or None if there is none."""
    try:
        element = await driver.find_element(selector)
        return await element.get_text()
    except NotYetReadyError:
        return None


async def check_for_console_errors(
    driver: BrowserDriver,
    ignore_patterns: Iterable[str] = ()
) -> List[ConsoleLogEntry]:
    """
    Drain the browser log and report entries not matching ``ignore_patterns``.

    Each reported entry is logged at WARNING together with the current URL.

    Returns:
        The entries that were not ignored, in log order
    """
    patterns = list(ignore_patterns)
    entries = await driver.get_browser_logs()
    errors = [
        entry for entry in entries
        if not any(pattern in entry.message for pattern in patterns)
    ]
    if errors:
        url = await driver.get_current_url()
        for entry in errors:
            logger.warning('Found console error: "%s" on url \'%s\'', entry.message, url)
    return errors


async def close_current_window(driver: BrowserDriver) -> None:
    await driver.close()


async def scroll_into_view(driver: BrowserDriver, selector: Selector):
    """
    Center the element in the viewport.

    Raises:
        ElementNotFoundError: If the element does not exist
    """
    element = await driver.find_element(selector)
    return await driver.execute_script(SCROLL_INTO_VIEW_SCRIPT, element)
