"""Browser-control layer the waits run against."""

from .driver import BrowserDriver, ElementHandle
from .browser import BrowserService, PlaywrightElement, to_playwright_selector

__all__ = [
    "BrowserDriver",
    "ElementHandle",
    "BrowserService",
    "PlaywrightElement",
    "to_playwright_selector",
]
