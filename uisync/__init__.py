"""Wait-and-retry synchronisation helpers for browser test steps."""

from .config import Settings, load_settings
from .core import (
    Selector,
    WaitSpec,
    PollOutcome,
    NotYetReadyError,
    WaitTimeoutError,
    BrowserError,
)
from .sync import ConditionPoller, DriverHelper, InputSynchronizer, is_element_present

__all__ = [
    "Settings",
    "load_settings",
    "Selector",
    "WaitSpec",
    "PollOutcome",
    "NotYetReadyError",
    "WaitTimeoutError",
    "BrowserError",
    "ConditionPoller",
    "DriverHelper",
    "InputSynchronizer",
    "is_element_present",
]
