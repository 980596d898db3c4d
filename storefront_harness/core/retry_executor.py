"""
Retry Executor for Flaky Automation Actions

Runs a single browser action (navigate, click, fill) with a bounded number of
attempts and a fixed delay between them. After the action succeeds, the executor
waits for the page's network to settle; a transient failure there counts as a
failed attempt too. Only errors tagged as transient automation failures are
retried, everything else propagates on the first attempt.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from storefront_harness.core.exceptions import ActionFailed
from storefront_harness.core.failure_classifier import FailureClassifier

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY_MS = 1000


class RetryState(Enum):
    """States of a single run_with_retry call."""

    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


@dataclass
class RetryAttempt:
    """Bookkeeping for one run_with_retry call."""

    attempts_made: int = 0
    last_error: BaseException | None = None
    state: RetryState = RetryState.IDLE


class RetryExecutor:
    """
    Bounded fixed-delay retry around automation actions.

    One executor belongs to one test session; it holds no state shared with
    other sessions, so its sleeps only block the owning test.
    """

    def __init__(
        self,
        wait_for_idle: Callable[[], None] | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        delay_ms: int = DEFAULT_DELAY_MS,
        failure_classifier: FailureClassifier | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            wait_for_idle: Bounded "network settled" wait run after each successful action
            max_attempts: Attempts per action, including the first
            delay_ms: Fixed delay between attempts in milliseconds
            failure_classifier: Decides which exceptions are transient
            sleep: Sleep function, replaceable in tests
        """
        self._validate(max_attempts, delay_ms)
        self.wait_for_idle = wait_for_idle
        self.max_attempts = max_attempts
        self.delay_ms = delay_ms
        self.failure_classifier = failure_classifier or FailureClassifier()
        self._sleep = sleep

    @staticmethod
    def _validate(max_attempts: int, delay_ms: int) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        if delay_ms < 0:
            raise ValueError(f"delay_ms must not be negative, got {delay_ms}")

    def run_with_retry(
        self,
        action: Callable[[], object],
        description: str = "action",
        max_attempts: int | None = None,
        delay_ms: int | None = None,
    ) -> RetryAttempt:
        """
        Run an action, retrying transient automation failures.

        Args:
            action: Zero-argument callable performing the browser action
            description: Human-readable description used in logs and errors
            max_attempts: Override of the executor's attempt count
            delay_ms: Override of the executor's delay

        Returns:
            RetryAttempt in the SUCCEEDED state

        Raises:
            ActionFailed: If every attempt raised a transient automation error
        """
        max_attempts = self.max_attempts if max_attempts is None else max_attempts
        delay_ms = self.delay_ms if delay_ms is None else delay_ms
        self._validate(max_attempts, delay_ms)

        attempt = RetryAttempt()

        def before_sleep(retry_state: RetryCallState) -> None:
            attempt.state = RetryState.RETRYING
            logger.warning(
                f"Attempt {retry_state.attempt_number} failed for '{description}', retrying... "
                f"({attempt.last_error})"
            )

        retrying = Retrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_fixed(delay_ms / 1000),
            retry=retry_if_exception(self.failure_classifier.is_transient),
            before_sleep=before_sleep,
            sleep=self._sleep,
        )

        def attempt_once() -> None:
            attempt.state = RetryState.ATTEMPTING
            attempt.attempts_made += 1
            try:
                action()
                if self.wait_for_idle is not None:
                    self.wait_for_idle()
            except Exception as e:
                attempt.last_error = e
                raise

        try:
            retrying(attempt_once)
        except RetryError as e:
            cause = e.last_attempt.exception()
            attempt.state = RetryState.EXHAUSTED
            logger.error(
                f"Failed to execute '{description}' after {attempt.attempts_made} attempts: {cause}"
            )
            raise ActionFailed(cause, attempt.attempts_made, description) from cause

        attempt.state = RetryState.SUCCEEDED
        if attempt.attempts_made > 1:
            logger.info(f"'{description}' succeeded on attempt {attempt.attempts_made}")
        return attempt
