"""
Bounded retry with linear backoff for storage operations.

Attempt ``k`` (0-based) that fails with a retryable error is followed by a
sleep of ``base_delay * (k + 1)`` before attempt ``k + 1``; at most
``max_retries`` retries follow the first attempt. Permanent errors end the
loop at once.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_incrementing,
)

from substore.shared.core.exceptions import is_retryable
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

SleepFunc = Callable[[float], Awaitable[None]]
FailureCallback = Callable[[BaseException, int], None]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and backoff unit (seconds)."""
    max_retries: int = 3
    base_delay: float = 1.0

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_before_retry(self, retry_number: int) -> float:
        """Delay preceding retry ``retry_number`` (1-based)."""
        return self.base_delay * retry_number

    def build(self, sleep: SleepFunc, operation: str = "operation") -> AsyncRetrying:
        """Create a tenacity controller for one run of ``operation``."""

        def _log_before_sleep(retry_state: RetryCallState):
            delay = retry_state.next_action.sleep if retry_state.next_action else 0
            logger.info(
                f"Retrying {operation} in {delay:.2f}s "
                f"(attempt {retry_state.attempt_number + 1} of {self.max_attempts})",
                operation=operation,
                retry_count=retry_state.attempt_number,
                delay_seconds=delay,
            )

        return AsyncRetrying(
            sleep=sleep,
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.base_delay, increment=self.base_delay),
            retry=retry_if_exception(is_retryable),
            before_sleep=_log_before_sleep,
            reraise=True,
        )


async def run_with_backoff(
    attempt_fn: Callable[[int], Awaitable[T]],
    policy: RetryPolicy,
    sleep: SleepFunc,
    operation: str = "operation",
    on_failure: Optional[FailureCallback] = None,
) -> T:
    """
    Run ``attempt_fn(retry_count)`` until it succeeds or the policy gives up.

    Args:
        attempt_fn: Coroutine function receiving the 0-based retry count
        policy: Retry budget and backoff unit
        sleep: Awaitable delay primitive, injected for testability
        operation: Name used in log messages
        on_failure: Called with (error, retry_count) after every failed attempt

    Returns:
        The value returned by the first successful attempt

    Raises:
        The last attempt's exception once retries are exhausted, or the first
        permanent (non-retryable) exception.
    """
    async for attempt in policy.build(sleep, operation):
        with attempt:
            retry_count = attempt.retry_state.attempt_number - 1
            try:
                return await attempt_fn(retry_count)
            except Exception as exc:
                if on_failure is not None:
                    on_failure(exc, retry_count)
                raise

    # AsyncRetrying always yields at least once and reraises on exhaustion
    raise RuntimeError(f"{operation} produced no attempt")
