"""
Unit tests for FailureClassifier error-kind tagging
"""

import pytest
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)

from storefront_harness.core.exceptions import (
    ActionFailed,
    ConfigurationError,
    TransientAutomationError,
    ValidationError,
)
from storefront_harness.core.failure_classifier import (
    FailureClassifier,
    FailureKind,
    FailureType,
    classify_failure,
)


class TestFailureClassifier:
    """Test classification of exceptions raised by automation actions."""

    @pytest.fixture
    def classifier(self):
        """Fixture for FailureClassifier instance."""
        return FailureClassifier()

    @pytest.mark.parametrize(
        "exception, failure_type",
        [
            (TimeoutException("timed out"), FailureType.TIMEOUT),
            (StaleElementReferenceException("stale"), FailureType.STALE_ELEMENT),
            (NoSuchElementException("missing"), FailureType.ELEMENT_MISSING),
            (ElementClickInterceptedException("covered"), FailureType.ELEMENT_NOT_INTERACTABLE),
            (WebDriverException("unknown error: net::ERR_CONNECTION_RESET"), FailureType.NETWORK_ERROR),
            (WebDriverException("chrome not reachable"), FailureType.BROWSER_ERROR),
        ],
    )
    def test_selenium_exceptions_are_transient(self, classifier, exception, failure_type):
        result = classifier.classify_exception(exception)

        assert result.failure_kind == FailureKind.TRANSIENT_AUTOMATION
        assert result.failure_type == failure_type
        assert result.retryable is True
        assert result.details["exception_type"] == type(exception).__name__

    def test_harness_transient_error(self, classifier):
        result = classifier.classify_exception(TransientAutomationError("network error on fetch"))

        assert result.retryable
        assert result.failure_type == FailureType.NETWORK_ERROR

    def test_validation_error_is_not_retried(self, classifier):
        result = classifier.classify_exception(ValidationError("missing price"))

        assert result.failure_kind == FailureKind.VALIDATION
        assert not result.retryable

    def test_configuration_error_is_not_retried(self, classifier):
        assert classifier.classify_exception(ConfigurationError("x")).failure_kind == (
            FailureKind.CONFIGURATION
        )

    @pytest.mark.parametrize("exception", [AssertionError("boom"), TypeError("bad"), KeyError("k")])
    def test_programming_errors_are_not_retried(self, classifier, exception):
        assert classifier.classify_exception(exception).failure_kind == FailureKind.PROGRAMMING
        assert not classifier.is_transient(exception)

    def test_exhausted_inner_retry_is_not_retried(self, classifier):
        exhausted = ActionFailed(TimeoutException("t"), 3, "inner")

        assert not classifier.is_transient(exhausted)

    def test_module_level_helper(self):
        assert classify_failure(TimeoutException()) == FailureKind.TRANSIENT_AUTOMATION
        assert classify_failure(ValueError()) == FailureKind.PROGRAMMING
