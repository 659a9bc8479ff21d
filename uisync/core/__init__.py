"""Core domain models and exceptions."""

from .exceptions import (
    UISyncBaseException,
    ConfigurationError,
    NotYetReadyError,
    ElementNotFoundError,
    ElementNotInteractableError,
    StaleElementError,
    WaitTimeoutError,
    BrowserError,
    InvalidSelectorError,
    ScriptExecutionError,
)
from .models import (
    Selector,
    WaitSpec,
    PollOutcome,
    ConsoleLogEntry,
)

__all__ = [
    # Exceptions
    "UISyncBaseException",
    "ConfigurationError",
    "NotYetReadyError",
    "ElementNotFoundError",
    "ElementNotInteractableError",
    "StaleElementError",
    "WaitTimeoutError",
    "BrowserError",
    "InvalidSelectorError",
    "ScriptExecutionError",
    # Models
    "Selector",
    "WaitSpec",
    "PollOutcome",
    "ConsoleLogEntry",
]
