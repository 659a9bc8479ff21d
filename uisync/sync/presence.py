"""Single-shot existence check."""

from ..core.models import Selector
from ..infrastructure.driver import BrowserDriver


async def is_element_present(driver: BrowserDriver, selector: Selector) -> bool:
    """True if at least one element matches right now. Does not poll."""
    elements = await driver.find_elements(selector)
    return bool(elements)
