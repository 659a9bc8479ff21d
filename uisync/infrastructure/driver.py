"""
Browser-control contract used by the wait helpers.

Anything that satisfies these protocols can be polled: the Playwright-backed
BrowserService in this package, or an in-memory fake in tests.

Readiness failures must be reported with the NotYetReadyError family
(ElementNotFoundError from ``find_element``, ElementNotInteractableError or
StaleElementError from element actions). Anything else is treated as a
genuine failure and aborts the wait.
"""

from typing import Protocol, List, Any, Optional, Sequence, runtime_checkable

from ..core.models import Selector, ConsoleLogEntry


@runtime_checkable
class ElementHandle(Protocol):
    """One located element."""

    async def click(self) -> None:
        ...

    async def clear(self) -> None:
        ...

    async def get_attribute(self, name: str) -> Optional[str]:
        """Property value if the element has one, else the attribute."""
        ...

    async def get_text(self) -> str:
        ...

    async def is_displayed(self) -> bool:
        ...

    async def send_keys(self, text: str) -> None:
        ...


@runtime_checkable
class BrowserDriver(Protocol):
    """One browser session."""

    async def find_element(self, selector: Selector) -> ElementHandle:
        """
        Raises:
            ElementNotFoundError: If nothing matches
        """
        ...

    async def find_elements(self, selector: Selector) -> Sequence[ElementHandle]:
        """Possibly empty list of matches; never raises for zero matches."""
        ...

    async def navigate_to(self, url: str) -> None:
        ...

    async def sleep(self, ms: float) -> None:
        ...

    async def execute_script(self, script: str, *args: Any) -> Any:
        """Run a function body; ``arguments[i]`` refers to ``args[i]``."""
        ...

    async def get_current_url(self) -> str:
        ...

    async def close(self) -> None:
        """Close the current window."""
        ...

    async def get_browser_logs(self) -> List[ConsoleLogEntry]:
        """Return and drain the browser log buffer."""
        ...
