"""
Configuration Management with Pydantic v2 Settings.

Wait durations, retry cadence and diagnostic knobs are loaded from the
environment (or a ``.env`` file) and validated at construction time, so a
misconfigured poll interval fails at startup rather than as a flaky wait.

The default explicit wait used to be a module-wide constant; it is now the
``explicit_wait_ms`` field and gets injected into every helper.
"""

from typing import List, Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import warnings


DEFAULT_CONSOLE_IGNORE_PATTERNS = [
    # Chrome cast sender noise when the extension is missing
    "cast_sender.js",
    # Private sites/posts legitimately 404
    "404",
    "Failed to execute 'postMessage' on 'DOMWindow'",
]


class Settings(BaseSettings):
    """
    Settings for the wait-and-retry helpers and the Playwright adapter.

    Every field can be overridden either by keyword (field name) or by the
    environment variable named in its alias.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"  # Ignore unknown env vars
    )

    # ===== Wait Configuration =====
    explicit_wait_ms: int = Field(
        default=20000,
        ge=1,
        alias="EXPLICIT_WAIT_MS",
        description="Default timeout for every poll when no WaitSpec override is given"
    )

    poll_interval_ms: int = Field(
        default=50,
        ge=1,
        le=1000,
        alias="POLL_INTERVAL_MS",
        description="Sleep between two attempts of the same poll"
    )

    @field_validator("poll_interval_ms")
    @classmethod
    def validate_poll_interval(cls, v: int) -> int:
        """Slow polling misses short-lived UI states."""
        if v >= 100:
            warnings.warn(
                f"POLL_INTERVAL_MS is high: {v}ms\n"
                "Intervals of 100ms or more can miss transient UI states"
            )
        return v

    action_timeout_ms: int = Field(
        default=1000,
        ge=1,
        alias="ACTION_TIMEOUT_MS",
        description="Playwright timeout for one click/clear/type inside an attempt"
    )

    # ===== Diagnostics =====
    secure_value_mask: str = Field(
        default="*********",
        alias="SECURE_VALUE_MASK",
        description="Replacement shown in messages for values marked secure"
    )

    @field_validator("secure_value_mask")
    @classmethod
    def validate_mask(cls, v: str) -> str:
        if not v:
            raise ValueError("SECURE_VALUE_MASK cannot be empty")
        return v

    error_notice_selector: str = Field(
        default=".notice.is-error .notice__text",
        alias="ERROR_NOTICE_SELECTOR",
        description="CSS selector of the page's error notice text"
    )

    console_error_ignore_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CONSOLE_IGNORE_PATTERNS),
        alias="CONSOLE_ERROR_IGNORE_PATTERNS",
        description="Browser log messages containing any of these are not reported"
    )

    # ===== Browser Configuration =====
    browser_name: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium",
        alias="BROWSER_NAME",
        description="Playwright browser engine"
    )

    headless: bool = Field(
        default=True,
        alias="HEADLESS",
        description="Run browser in headless mode"
    )


def load_settings() -> Settings:
    """
    Load and validate settings from environment.

    Returns:
        Validated Settings instance

    Raises:
        ValidationError: If a setting is present but invalid
    """
    return Settings()
