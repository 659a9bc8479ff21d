"""
Generic poll-until-condition-or-timeout engine.

Every wait in this package is one ConditionPoller run around a single
attempt coroutine. The retry loop itself is tenacity's AsyncRetrying:

- stop:  the deadline has passed once an attempt has settled
- wait:  the poll interval, capped at the time left before the deadline
- retry: the attempt returned something falsy, or raised NotYetReadyError

Any other exception is not retried; tenacity re-raises it as-is, which
aborts the poll. Attempts run strictly one after another and an attempt that
is in flight when the deadline passes is allowed to finish.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    retry_if_result,
    stop_after_delay,
)
from tenacity.wait import wait_base

from ..core.exceptions import NotYetReadyError
from ..core.models import PollOutcome

logger = logging.getLogger(__name__)

Attempt = Callable[[], Awaitable[Any]]

DEFAULT_POLL_INTERVAL_MS = 50


def _not_ready(result: Any) -> bool:
    return not result


class wait_within_deadline(wait_base):
    """Sleep ``interval`` seconds, but never past the deadline."""

    def __init__(self, interval: float, deadline: float):
        self.interval = interval
        self.deadline = deadline

    def __call__(self, retry_state: RetryCallState) -> float:
        remaining = self.deadline - retry_state.seconds_since_start
        return max(0.0, min(self.interval, remaining))


class ConditionPoller:
    """
    Repeatedly evaluates an attempt until it succeeds or time runs out.

    The poller holds no per-call state, so one instance can serve any
    number of sequential waits.
    """

    def __init__(self, interval_ms: int = DEFAULT_POLL_INTERVAL_MS):
        """
        Args:
            interval_ms: Pause between two attempts of the same poll
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.interval_ms = interval_ms

    async def run(self, attempt: Attempt, timeout_ms: float, message: str) -> PollOutcome:
        """
        Poll ``attempt`` and report how it ended without raising on timeout.

        Args:
            attempt: Zero-argument coroutine function probing the browser
            timeout_ms: Deadline measured from the start of this call
            message: Diagnostic for the timed-out outcome

        Returns:
            PollOutcome with the attempt's value or the diagnostic

        Raises:
            ValueError: If timeout_ms is not positive
            Exception: Whatever non-readiness error the attempt raised
        """
        if timeout_ms is None or timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")

        deadline = timeout_ms / 1000.0
        attempts = 0

        async def counted() -> Any:
            nonlocal attempts
            attempts += 1
            return await attempt()

        retrying = AsyncRetrying(
            stop=stop_after_delay(deadline),
            wait=wait_within_deadline(self.interval_ms / 1000.0, deadline),
            retry=retry_if_exception_type(NotYetReadyError) | retry_if_result(_not_ready),
            before_sleep=self._log_retry,
        )

        started = time.monotonic()
        try:
            value = await retrying(counted)
        except RetryError:
            elapsed_ms = (time.monotonic() - started) * 1000.0
            logger.info("%s (%d attempts in %.0fms)", message, attempts, elapsed_ms)
            return PollOutcome.expired(message, timeout_ms, attempts, elapsed_ms)

        elapsed_ms = (time.monotonic() - started) * 1000.0
        return PollOutcome.succeeded(value, timeout_ms, attempts, elapsed_ms)

    async def poll(self, attempt: Attempt, timeout_ms: float, message: str) -> Any:
        """
        Poll ``attempt`` and return its first truthy result.

        Raises:
            WaitTimeoutError: With exactly ``message`` once the deadline passes
            ValueError: If timeout_ms is not positive
            Exception: Whatever non-readiness error the attempt raised
        """
        outcome = await self.run(attempt, timeout_ms, message)
        return outcome.unwrap()

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        outcome: Optional[Any] = retry_state.outcome
        if outcome is not None and outcome.failed:
            reason = outcome.exception()
        else:
            reason = "condition not met"
        logger.debug(
            "Attempt %d not ready (%s); retrying in %.3fs",
            retry_state.attempt_number,
            reason,
            retry_state.next_action.sleep if retry_state.next_action else 0.0
        )
