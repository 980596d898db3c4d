"""
Unit tests for RetryExecutor
"""

import logging
from unittest.mock import Mock

import pytest
from selenium.common.exceptions import StaleElementReferenceException, TimeoutException

from storefront_harness.core.exceptions import ActionFailed, TransientAutomationError, ValidationError
from storefront_harness.core.retry_executor import RetryExecutor, RetryState


@pytest.fixture
def sleep():
    """Recorded sleep so tests never wait."""
    return Mock()


@pytest.fixture
def wait_for_idle():
    return Mock()


@pytest.fixture
def executor(wait_for_idle, sleep):
    return RetryExecutor(wait_for_idle=wait_for_idle, max_attempts=3, delay_ms=1000, sleep=sleep)


class TestRetryExecutor:
    """Test retry behaviour around automation actions."""

    def test_success_on_first_attempt(self, executor, wait_for_idle, sleep):
        action = Mock()

        attempt = executor.run_with_retry(action, "click login")

        assert action.call_count == 1
        assert attempt.attempts_made == 1
        assert attempt.state == RetryState.SUCCEEDED
        assert attempt.last_error is None
        wait_for_idle.assert_called_once()
        sleep.assert_not_called()

    def test_fails_twice_then_succeeds(self, executor, sleep):
        action = Mock(side_effect=[TimeoutException("slow"), StaleElementReferenceException("stale"), None])

        attempt = executor.run_with_retry(action, "click checkout")

        assert action.call_count == 3
        assert attempt.attempts_made == 3
        assert attempt.state == RetryState.SUCCEEDED
        assert isinstance(attempt.last_error, StaleElementReferenceException)
        assert sleep.call_count == 2
        sleep.assert_called_with(1.0)

    def test_always_failing_action_raises_action_failed(self, executor, sleep):
        cause = TimeoutException("page never loaded")
        action = Mock(side_effect=cause)

        with pytest.raises(ActionFailed) as exc_info:
            executor.run_with_retry(action, "Navigate to https://www.saucedemo.com")

        assert action.call_count == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert "after 3 attempts" in str(exc_info.value)
        # No sleep after the final attempt
        assert sleep.call_count == 2

    def test_delay_is_fixed(self, wait_for_idle, sleep):
        executor = RetryExecutor(wait_for_idle, max_attempts=4, delay_ms=250, sleep=sleep)
        action = Mock(side_effect=TransientAutomationError("flaky"))

        with pytest.raises(ActionFailed):
            executor.run_with_retry(action)

        assert [call.args[0] for call in sleep.call_args_list] == [0.25, 0.25, 0.25]

    @pytest.mark.parametrize(
        "error", [ValidationError("missing price"), AssertionError("wrong item"), TypeError("bug")]
    )
    def test_non_automation_errors_propagate_immediately(self, executor, sleep, error):
        action = Mock(side_effect=error)

        with pytest.raises(type(error)) as exc_info:
            executor.run_with_retry(action)

        assert exc_info.value is error
        assert action.call_count == 1
        sleep.assert_not_called()

    def test_idle_wait_timeout_counts_as_failed_attempt(self, wait_for_idle, sleep):
        wait_for_idle.side_effect = [TimeoutException("network busy"), None]
        executor = RetryExecutor(wait_for_idle, max_attempts=3, delay_ms=0, sleep=sleep)
        action = Mock()

        attempt = executor.run_with_retry(action)

        assert action.call_count == 2
        assert wait_for_idle.call_count == 2
        assert attempt.attempts_made == 2

    def test_idle_wait_not_run_when_action_fails(self, executor, wait_for_idle):
        action = Mock(side_effect=[TimeoutException(), None])

        executor.run_with_retry(action)

        assert wait_for_idle.call_count == 1

    def test_per_call_overrides(self, executor, sleep):
        action = Mock(side_effect=TimeoutException())

        with pytest.raises(ActionFailed) as exc_info:
            executor.run_with_retry(action, max_attempts=1, delay_ms=0)

        assert action.call_count == 1
        assert exc_info.value.attempts == 1
        sleep.assert_not_called()

    def test_without_idle_wait(self, sleep):
        executor = RetryExecutor(max_attempts=2, delay_ms=0, sleep=sleep)
        action = Mock()

        assert executor.run_with_retry(action).state == RetryState.SUCCEEDED

    @pytest.mark.parametrize("max_attempts, delay_ms", [(0, 100), (-1, 100), (3, -5)])
    def test_invalid_policy_rejected(self, max_attempts, delay_ms):
        with pytest.raises(ValueError):
            RetryExecutor(max_attempts=max_attempts, delay_ms=delay_ms)

    def test_logs_each_failed_attempt(self, executor, caplog):
        action = Mock(side_effect=TimeoutException("slow"))

        with caplog.at_level(logging.WARNING):
            with pytest.raises(ActionFailed):
                executor.run_with_retry(action, "Fill username")

        assert "Attempt 1 failed for 'Fill username', retrying..." in caplog.text
        assert "Attempt 2 failed for 'Fill username', retrying..." in caplog.text
        assert "Failed to execute 'Fill username' after 3 attempts" in caplog.text

    def test_nested_exhausted_retry_is_not_retried(self, executor):
        inner = ActionFailed(TimeoutException(), 3, "inner")
        action = Mock(side_effect=inner)

        with pytest.raises(ActionFailed) as exc_info:
            executor.run_with_retry(action, "outer")

        assert exc_info.value is inner
        assert action.call_count == 1
