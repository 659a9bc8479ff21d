"""
Pydantic models for the wait-and-retry contract.

All of these are created at call time and discarded when the call returns;
nothing here is cached across calls.
"""

from typing import Optional, Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator, computed_field

from .exceptions import WaitTimeoutError


# ===== Locators =====

class Selector(BaseModel):
    """
    Opaque locator: how to find (``strategy``) and what to find (``value``).

    The helpers never interpret a selector; they only render it into
    diagnostics and hand it to the browser driver.

    Example:
        Selector.css("#login") -> css of '#login'
    """

    model_config = ConfigDict(frozen=True)

    strategy: str = Field(
        ...,
        description="Lookup strategy, e.g. css, xpath, id, name, link text"
    )

    value: str = Field(
        ...,
        description="Literal lookup string for the strategy"
    )

    @field_validator("strategy", "value")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("selector strategy and value must be non-empty")
        return v

    @classmethod
    def css(cls, value: str) -> "Selector":
        return cls(strategy="css", value=value)

    @classmethod
    def xpath(cls, value: str) -> "Selector":
        return cls(strategy="xpath", value=value)

    def describe(self) -> str:
        """Render as used in diagnostics: ``css of '.button'``."""
        return f"{self.strategy} of '{self.value}'"

    def __str__(self) -> str:
        return self.describe()


# ===== Wait configuration =====

class WaitSpec(BaseModel):
    """
    Per-call wait options.

    ``timeout_ms=None`` means "use the configured explicit wait". A given
    timeout must be positive.
    """

    model_config = ConfigDict(frozen=True)

    timeout_ms: Optional[int] = Field(
        default=None,
        gt=0,
        description="Maximum wall-clock duration to retry"
    )

    pause_between_keys_ms: int = Field(
        default=0,
        ge=0,
        description="Delay before each keystroke; 0 delivers the whole value at once"
    )

    secure_value: bool = Field(
        default=False,
        description="Redact the literal value in diagnostics"
    )


# ===== Poll results =====

class PollOutcome(BaseModel):
    """
    Terminal result of one poll: either success with the attempt's value, or
    a timeout carrying the caller's diagnostic.
    """

    success: bool = Field(
        ...,
        description="Whether an attempt succeeded within the deadline"
    )

    value: Any = Field(
        default=None,
        description="Truthy result returned by the successful attempt"
    )

    message: Optional[str] = Field(
        default=None,
        description="Diagnostic when success=False"
    )

    timeout_ms: float = Field(
        ...,
        gt=0,
        description="Deadline the poll ran under"
    )

    attempts: int = Field(
        default=0,
        ge=0,
        description="Number of attempts evaluated"
    )

    elapsed_ms: float = Field(
        default=0.0,
        ge=0.0,
        description="Wall-clock duration of the poll"
    )

    @computed_field
    @property
    def timed_out(self) -> bool:
        return not self.success

    @classmethod
    def succeeded(cls, value: Any, timeout_ms: float, attempts: int, elapsed_ms: float) -> "PollOutcome":
        return cls(
            success=True,
            value=value,
            timeout_ms=timeout_ms,
            attempts=attempts,
            elapsed_ms=elapsed_ms
        )

    @classmethod
    def expired(cls, message: str, timeout_ms: float, attempts: int, elapsed_ms: float) -> "PollOutcome":
        return cls(
            success=False,
            message=message,
            timeout_ms=timeout_ms,
            attempts=attempts,
            elapsed_ms=elapsed_ms
        )

    def unwrap(self) -> Any:
        """
        Return the attempt's value, or raise the timeout.

        Raises:
            WaitTimeoutError: If the poll timed out
        """
        if self.success:
            return self.value
        raise WaitTimeoutError(
            self.message or "Timed out waiting for condition",
            timeout_ms=self.timeout_ms,
            attempts=self.attempts
        )


# ===== Browser logs =====

class ConsoleLogEntry(BaseModel):
    """One entry of the browser log."""

    message: str = Field(
        ...,
        description="Log text as reported by the browser"
    )

    level: Literal["SEVERE", "WARNING", "INFO", "DEBUG"] = Field(
        default="INFO",
        description="Severity, using WebDriver log level names"
    )
