"""
Shared fixtures: an in-memory browser driver whose DOM can be scripted to
change over time, and fast-polling settings.

No real browser is launched anywhere in the test suite.
"""

import asyncio
from typing import Callable, Dict, List, Optional

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from uisync.config import Settings
from uisync.core.exceptions import ElementNotFoundError, ElementNotInteractableError
from uisync.core.models import Selector, ConsoleLogEntry
from uisync.sync import DriverHelper


class FakeElement:
    """Element with a value, visibility, attributes and scripted failures."""

    def __init__(
        self,
        displayed: bool = True,
        text: str = "",
        value: str = "",
        attributes: Optional[Dict[str, str]] = None,
        reformat: Optional[Callable[[str], str]] = None
    ):
        self.displayed = displayed
        self.text = text
        self.value = value
        self.attributes = attributes or {}
        self.reformat = reformat
        self.click_errors: List[Exception] = []
        self.clear_errors: List[Exception] = []
        self.clicks = 0
        self.click_calls = 0
        self.clears = 0
        self.keystrokes: List[str] = []

    async def click(self) -> None:
        self.click_calls += 1
        if self.click_errors:
            raise self.click_errors.pop(0)
        if not self.displayed:
            raise ElementNotInteractableError("element is not visible")
        self.clicks += 1

    async def clear(self) -> None:
        if self.clear_errors:
            raise self.clear_errors.pop(0)
        self.clears += 1
        self.value = ""

    async def get_attribute(self, name: str) -> Optional[str]:
        if name == "value":
            return self.value
        return self.attributes.get(name)

    async def get_text(self) -> str:
        return self.text

    async def is_displayed(self) -> bool:
        return self.displayed

    async def send_keys(self, text: str) -> None:
        self.keystrokes.append(text)
        self.value += text
        if self.reformat:
            self.value = self.reformat(self.value)


class FakeDriver:
    """
    BrowserDriver over a dict of selector -> element.

    ``appear_after[selector] = n`` hides the element from the first ``n``
    lookups, simulating an element that is rendered later.
    """

    def __init__(self):
        self.elements: Dict[Selector, FakeElement] = {}
        self.appear_after: Dict[Selector, int] = {}
        self.lookups: Dict[Selector, int] = {}
        self.lookup_error: Optional[Exception] = None
        self.navigations: List[str] = []
        self.sleeps: List[float] = []
        self.scripts: List[tuple] = []
        self.logs: List[ConsoleLogEntry] = []
        self.current_url = "https://example.com/start"
        self.closed = False

    def add(self, selector: Selector, element: Optional[FakeElement] = None, appear_after: int = 0) -> FakeElement:
        element = element or FakeElement()
        self.elements[selector] = element
        self.appear_after[selector] = appear_after
        return element

    def remove(self, selector: Selector) -> None:
        self.elements.pop(selector, None)

    def _visible_match(self, selector: Selector) -> Optional[FakeElement]:
        if self.lookup_error is not None:
            raise self.lookup_error
        count = self.lookups.get(selector, 0) + 1
        self.lookups[selector] = count
        if count <= self.appear_after.get(selector, 0):
            return None
        return self.elements.get(selector)

    async def find_element(self, selector: Selector) -> FakeElement:
        element = self._visible_match(selector)
        if element is None:
            raise ElementNotFoundError(f"No element with {selector.describe()}", selector=selector)
        return element

    async def find_elements(self, selector: Selector) -> List[FakeElement]:
        element = self._visible_match(selector)
        return [element] if element is not None else []

    async def navigate_to(self, url: str) -> None:
        self.navigations.append(url)
        self.current_url = url

    async def sleep(self, ms: float) -> None:
        self.sleeps.append(ms)
        await asyncio.sleep(ms / 1000.0)

    async def execute_script(self, script: str, *args):
        self.scripts.append((script, args))
        return None

    async def get_current_url(self) -> str:
        return self.current_url

    async def close(self) -> None:
        self.closed = True

    async def get_browser_logs(self) -> List[ConsoleLogEntry]:
        entries, self.logs = self.logs, []
        return entries


@pytest.fixture
def settings():
    """Fast polling so timeouts can be short."""
    return Settings(
        explicit_wait_ms=300,
        poll_interval_ms=10,
        action_timeout_ms=100
    )


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def helper(settings):
    return DriverHelper(settings)
