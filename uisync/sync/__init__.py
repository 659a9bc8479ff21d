"""Wait-and-retry primitives."""

from .poller import ConditionPoller
from .presence import is_element_present
from .inputs import InputSynchronizer
from .helper import DriverHelper

__all__ = ["ConditionPoller", "is_element_present", "InputSynchronizer", "DriverHelper"]
