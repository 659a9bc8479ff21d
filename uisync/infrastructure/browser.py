"""
Playwright implementation of the BrowserDriver contract.

This module gives the wait helpers a real browser to poll:
- Async context manager for guaranteed cleanup
- Translation of (strategy, value) selectors into Playwright selector syntax
- Mapping of Playwright errors onto the readiness vocabulary: transient
  problems become NotYetReadyError subclasses so the poller retries them,
  malformed selectors and failing scripts become BrowserError subclasses so
  the poller aborts
- Console and page-error capture, drained through get_browser_logs()

Every element action runs with a short ``action_timeout_ms`` so a single
attempt stays a single probe; retrying is the poller's job.
"""

import asyncio
import json
import logging
from typing import Optional, Any, List, Callable, Awaitable

from playwright.async_api import (
    async_playwright,
    Page,
    BrowserContext,
    Browser,
    ConsoleMessage,
    ElementHandle as PlaywrightHandle,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError
)

from ..config import Settings
from ..core.exceptions import (
    BrowserError,
    ConfigurationError,
    ElementNotFoundError,
    ElementNotInteractableError,
    InvalidSelectorError,
    ScriptExecutionError,
    StaleElementError,
)
from ..core.models import Selector, ConsoleLogEntry

logger = logging.getLogger(__name__)


# Playwright error fragments that mean "try again later"
_STALE_MARKERS = ("not attached", "detached", "execution context was destroyed")
_NOT_INTERACTABLE_MARKERS = (
    "not visible",
    "not enabled",
    "not editable",
    "intercepts pointer events",
    "is not an <input>",
    "outside of the viewport",
)
_BAD_SELECTOR_MARKERS = (
    "unexpected token",
    "is not a valid selector",
    "syntaxerror",
    "unknown engine",
)

_CONSOLE_LEVELS = {
    "error": "SEVERE",
    "warning": "WARNING",
    "debug": "DEBUG",
}

# WebDriver getAttribute: live property when present, booleans as "true"/None
GET_ATTRIBUTE_SCRIPT = """(el, name) => {
    const prop = el[name];
    if (typeof prop === 'boolean') {
        return prop ? "true" : null;
    }
    if (prop !== undefined && prop !== null && typeof prop !== 'object') {
        return String(prop);
    }
    return el.getAttribute(name);
}"""


def to_playwright_selector(selector: Selector) -> str:
    """
    Translate a WebDriver-style (strategy, value) pair into Playwright syntax.

    Raises:
        InvalidSelectorError: For an unknown strategy
    """
    strategy = selector.strategy.lower()
    value = selector.value

    if strategy in ("css", "css selector", "tag name"):
        return f"css={value}"
    if strategy == "xpath":
        return f"xpath={value}"
    if strategy == "id":
        return f"id={value}"
    if strategy == "class name":
        return f"css=.{value}"
    if strategy == "name":
        return f"css=[name={json.dumps(value)}]"
    if strategy == "link text":
        return f"css=a:text-is({json.dumps(value)})"
    if strategy == "partial link text":
        return f"css=a:has-text({json.dumps(value)})"

    raise InvalidSelectorError(
        f"Unsupported selector strategy '{selector.strategy}'",
        selector=selector
    )


def _contains_any(error: Exception, markers) -> bool:
    text = str(error).lower()
    return any(marker in text for marker in markers)


class PlaywrightElement:
    """
    ElementHandle backed by a Playwright element handle.

    Element actions translate Playwright failures:
    - timeouts and visibility/enabled checks -> ElementNotInteractableError
    - detached nodes -> StaleElementError
    - anything else -> BrowserError
    """

    def __init__(self, handle: PlaywrightHandle, page: Page, selector: Selector, action_timeout_ms: int):
        self.handle = handle
        self.page = page
        self.selector = selector
        self._timeout = action_timeout_ms

    async def _act(self, action: str, operation: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await operation()
        except PlaywrightTimeoutError as e:
            raise ElementNotInteractableError(
                f"Element not ready to {action}: {e}",
                selector=self.selector
            ) from e
        except PlaywrightError as e:
            if _contains_any(e, _STALE_MARKERS):
                raise StaleElementError(
                    f"Element went stale during {action}",
                    selector=self.selector
                ) from e
            if _contains_any(e, _NOT_INTERACTABLE_MARKERS):
                raise ElementNotInteractableError(
                    f"Element not ready to {action}: {e}",
                    selector=self.selector
                ) from e
            raise BrowserError(
                f"Failed to {action} element: {e}",
                context={"selector": str(self.selector)}
            ) from e

    async def click(self) -> None:
        await self._act("click", lambda: self.handle.click(timeout=self._timeout))

    async def clear(self) -> None:
        await self._act("clear", lambda: self.handle.fill("", timeout=self._timeout))

    async def get_attribute(self, name: str) -> Optional[str]:
        """
        Read ``name`` the way WebDriver does: the live DOM property when the
        element has one (so ``value`` reflects typing and ``href`` is
        absolute), otherwise the HTML attribute.
        """
        return await self._act(
            "read attribute",
            lambda: self.handle.evaluate(GET_ATTRIBUTE_SCRIPT, name)
        )

    async def get_text(self) -> str:
        return await self._act("read text", self.handle.inner_text)

    async def is_displayed(self) -> bool:
        return await self._act("check visibility", self.handle.is_visible)

    async def send_keys(self, text: str) -> None:
        async def type_text() -> None:
            await self.handle.focus()
            await self.page.keyboard.type(text)

        await self._act("type into", type_text)


class BrowserService:
    """
    Async Playwright browser session implementing BrowserDriver.

    Owns exactly one page. ``close()`` closes that page (the "current
    window"); ``stop()`` tears down the whole browser and is what the async
    context manager calls on exit.
    """

    def __init__(self, settings: Settings):
        """
        Args:
            settings: Validated settings (browser engine, headless, action timeout)
        """
        self.settings = settings
        self.playwright = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._log_buffer: List[ConsoleLogEntry] = []

    async def __aenter__(self) -> 'BrowserService':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # Cleanup must finish even if the surrounding task is cancelled
        await asyncio.shield(self.stop())
        return False

    async def start(self) -> None:
        """
        Launch the configured browser engine with one page.

        Raises:
            BrowserError: If the browser fails to launch
        """
        try:
            self.playwright = await async_playwright().start()
            engine = getattr(self.playwright, self.settings.browser_name)
            self.browser = await engine.launch(headless=self.settings.headless)
            self.context = await self.browser.new_context()
            self.page = await self.context.new_page()
        except Exception as e:
            await self.stop()
            raise BrowserError(
                f"Failed to launch browser: {e}",
                context={"browser_name": self.settings.browser_name}
            ) from e

        self.attach_log_listeners(self.page)
        logger.info("Started %s browser (headless=%s)", self.settings.browser_name, self.settings.headless)

    async def stop(self) -> None:
        """Shut down page, context, browser and Playwright, ignoring cleanup errors."""
        try:
            if self.page and not self.page.is_closed():
                await self.page.close()
            if self.context:
                await self.context.close()
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
        except Exception as e:
            logger.warning("Error during browser cleanup: %s", e)
        finally:
            self.page = None
            self.context = None
            self.browser = None
            self.playwright = None

    def attach_log_listeners(self, page: Page) -> None:
        """Route console messages and uncaught page errors into the log buffer."""
        page.on("console", self._on_console)
        page.on("pageerror", self._on_page_error)

    def _on_console(self, message: ConsoleMessage) -> None:
        level = _CONSOLE_LEVELS.get(message.type, "INFO")
        self._log_buffer.append(ConsoleLogEntry(message=message.text, level=level))

    def _on_page_error(self, error: Any) -> None:
        self._log_buffer.append(ConsoleLogEntry(message=str(error), level="SEVERE"))

    def _require_page(self) -> Page:
        if self.page is None:
            raise ConfigurationError("BrowserService used before start()")
        return self.page

    async def _query(self, selector: Selector, query: Callable[[str], Awaitable[Any]]) -> Any:
        target = to_playwright_selector(selector)
        try:
            return await query(target)
        except PlaywrightError as e:
            if _contains_any(e, _BAD_SELECTOR_MARKERS):
                raise InvalidSelectorError(f"Invalid selector: {e}", selector=selector) from e
            if _contains_any(e, _STALE_MARKERS):
                # Page navigated while the lookup ran
                raise ElementNotFoundError(f"Lookup interrupted: {e}", selector=selector) from e
            raise BrowserError(
                f"Element lookup failed: {e}",
                context={"selector": str(selector)}
            ) from e

    def _wrap(self, handle: PlaywrightHandle, selector: Selector) -> PlaywrightElement:
        return PlaywrightElement(handle, self._require_page(), selector, self.settings.action_timeout_ms)

    async def find_element(self, selector: Selector) -> PlaywrightElement:
        """
        Raises:
            ElementNotFoundError: If nothing matches
            InvalidSelectorError: If the selector cannot be evaluated
        """
        page = self._require_page()
        handle = await self._query(selector, page.query_selector)
        if handle is None:
            raise ElementNotFoundError(
                f"No element with {selector.describe()}",
                selector=selector
            )
        return self._wrap(handle, selector)

    async def find_elements(self, selector: Selector) -> List[PlaywrightElement]:
        page = self._require_page()
        handles = await self._query(selector, page.query_selector_all)
        return [self._wrap(handle, selector) for handle in handles]

    async def navigate_to(self, url: str) -> None:
        """
        Raises:
            BrowserError: If navigation fails or times out
        """
        page = self._require_page()
        try:
            await page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as e:
            raise BrowserError(f"Navigation failed: {e}", context={"url": url}) from e

    async def sleep(self, ms: float) -> None:
        await asyncio.sleep(ms / 1000.0)

    async def execute_script(self, script: str, *args: Any) -> Any:
        """
        Run ``script`` as a function body with WebDriver-style ``arguments``.

        PlaywrightElement arguments are passed as live element handles.

        Raises:
            ScriptExecutionError: If the script throws or does not compile
        """
        page = self._require_page()
        call_args = [arg.handle if isinstance(arg, PlaywrightElement) else arg for arg in args]
        try:
            return await page.evaluate(f"(arguments) => {{ {script} }}", call_args)
        except PlaywrightError as e:
            raise ScriptExecutionError(f"Script execution failed: {e}", context={"script": script}) from e

    async def get_current_url(self) -> str:
        return self._require_page().url

    async def close(self) -> None:
        """Close the current window (page)."""
        page = self._require_page()
        await page.close()

    async def get_browser_logs(self) -> List[ConsoleLogEntry]:
        entries, self._log_buffer = self._log_buffer, []
        return entries
