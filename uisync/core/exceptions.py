"""
Exception hierarchy for the wait-and-retry helpers.

Three families matter to callers:

1. NotYetReadyError and subclasses: an expected negative outcome of a single
   attempt (element absent, not interactable, replaced by a re-render). The
   poller retries these; they never reach the caller of a predicate.
2. WaitTimeoutError: the poll deadline elapsed. Its message is the exact
   diagnostic composed by the caller.
3. BrowserError and subclasses: something genuinely broken (malformed
   selector, failing script). These abort a poll immediately.
"""

from typing import Optional, Dict, Any


class UISyncBaseException(Exception):
    """
    Base exception for all uisync errors.

    Allows catching every library error with ``except UISyncBaseException``
    and carries structured context for debugging.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize base exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code for classification
            context: Additional context data for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def __str__(self) -> str:
        """String representation with error code."""
        if self.context:
            return f"[{self.error_code}] {self.message} | Context: {self.context}"
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(UISyncBaseException):
    """
    Raised when configuration is invalid or missing.

    Examples:
    - Adapter used before start()
    """
    pass


class NotYetReadyError(UISyncBaseException):
    """
    Expected negative outcome of one attempt.

    The poller treats it exactly like a falsy attempt result: it sleeps and
    tries again until the deadline.
    """

    def __init__(
        self,
        message: str,
        selector: Optional[Any] = None,
        **kwargs
    ):
        """
        Args:
            message: Error description
            selector: Selector the attempt was probing
        """
        context = kwargs.pop("context", {})
        context.update({"selector": str(selector) if selector is not None else None})
        super().__init__(message, context=context, **kwargs)


class ElementNotFoundError(NotYetReadyError):
    """No element matches the selector (yet)."""
    pass


class ElementNotInteractableError(NotYetReadyError):
    """
    Element exists but cannot take the action right now.

    Examples:
    - Hidden or zero-sized element
    - Covered by an overlay
    - Disabled or read-only input
    """
    pass


class StaleElementError(NotYetReadyError):
    """Element was detached from the DOM between lookup and use."""
    pass


class WaitTimeoutError(UISyncBaseException):
    """
    A poll ran out of time without a successful attempt.

    ``str(error)`` is exactly the diagnostic message handed to the poller,
    e.g. "Timed out waiting for element with css of '#login' to be present
    and displayed". Timing details live in ``context``.
    """

    def __init__(
        self,
        message: str,
        timeout_ms: Optional[float] = None,
        attempts: Optional[int] = None,
        **kwargs
    ):
        """
        Args:
            message: Precomposed diagnostic
            timeout_ms: Deadline that was exceeded
            attempts: Number of attempts evaluated before giving up
        """
        context = kwargs.pop("context", {})
        context.update({
            "timeout_ms": timeout_ms,
            "attempts": attempts
        })
        super().__init__(message, context=context, **kwargs)
        self.timeout_ms = timeout_ms
        self.attempts = attempts

    def __str__(self) -> str:
        return self.message


class BrowserError(UISyncBaseException):
    """
    Browser/Playwright failure that is not a readiness problem.

    Examples:
    - Browser failed to launch
    - Navigation to an invalid URL

    Never retried by the poller.
    """
    pass


class InvalidSelectorError(BrowserError):
    """
    Selector cannot be evaluated at all (syntax error, unknown strategy).

    Retrying cannot fix a malformed selector, so this aborts the poll.
    """

    def __init__(
        self,
        message: str,
        selector: Optional[Any] = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        context.update({"selector": str(selector) if selector is not None else None})
        super().__init__(message, context=context, **kwargs)


class ScriptExecutionError(BrowserError):
    """Injected JavaScript raised or failed to compile."""
    pass
