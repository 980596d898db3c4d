"""
Failure Classification for Browser Automation

Tags exceptions raised during a test with an error kind so the retry loop can
decide whether an attempt is worth repeating. Only transient automation failures
are retried; validation, configuration and programming errors pass through.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
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

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    """Error kinds the retry loop distinguishes."""

    TRANSIENT_AUTOMATION = "transient_automation"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    PROGRAMMING = "programming"


class FailureType(Enum):
    """Finer-grained description of a transient failure, used for logging."""

    TIMEOUT = "timeout"
    STALE_ELEMENT = "stale_element"
    ELEMENT_MISSING = "element_missing"
    ELEMENT_NOT_INTERACTABLE = "element_not_interactable"
    NETWORK_ERROR = "network_error"
    BROWSER_ERROR = "browser_error"
    NOT_TRANSIENT = "not_transient"


@dataclass
class FailureContext:
    """Classification result for a single exception."""

    failure_kind: FailureKind
    failure_type: FailureType
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def retryable(self) -> bool:
        return self.failure_kind is FailureKind.TRANSIENT_AUTOMATION


class FailureClassifier:
    """
    Classifies exceptions raised by automation actions.

    Selenium exceptions are all treated as transient; the failure type only
    refines the log message. Harness exceptions carry their own kind.
    """

    NETWORK_PATTERNS = [
        r"net::err_",
        r"connection.*(refused|reset|closed|aborted)",
        r"err_connection",
        r"err_name_not_resolved",
        r"err_internet_disconnected",
        r"network.*error",
    ]

    def classify_exception(self, exception: BaseException) -> FailureContext:
        """
        Classify an exception raised while running an automation action.

        Args:
            exception: The exception that occurred

        Returns:
            FailureContext with the error kind and details
        """
        details = {
            "exception_type": type(exception).__name__,
            "exception_message": str(exception),
        }

        if isinstance(exception, ValidationError):
            return FailureContext(FailureKind.VALIDATION, FailureType.NOT_TRANSIENT, details)

        if isinstance(exception, ConfigurationError):
            return FailureContext(FailureKind.CONFIGURATION, FailureType.NOT_TRANSIENT, details)

        # An exhausted retry nested inside another retry must not restart the outer loop
        if isinstance(exception, ActionFailed):
            return FailureContext(FailureKind.PROGRAMMING, FailureType.NOT_TRANSIENT, details)

        if isinstance(exception, TransientAutomationError):
            return FailureContext(
                FailureKind.TRANSIENT_AUTOMATION, self._match_network(str(exception)), details
            )

        if isinstance(exception, WebDriverException):
            return FailureContext(
                FailureKind.TRANSIENT_AUTOMATION, self._selenium_failure_type(exception), details
            )

        return FailureContext(FailureKind.PROGRAMMING, FailureType.NOT_TRANSIENT, details)

    def is_transient(self, exception: BaseException) -> bool:
        """Check whether an exception should be retried."""
        return self.classify_exception(exception).retryable

    def _selenium_failure_type(self, exception: WebDriverException) -> FailureType:
        if isinstance(exception, TimeoutException):
            return FailureType.TIMEOUT
        if isinstance(exception, StaleElementReferenceException):
            return FailureType.STALE_ELEMENT
        if isinstance(exception, NoSuchElementException):
            return FailureType.ELEMENT_MISSING
        if isinstance(
            exception, (ElementClickInterceptedException, ElementNotInteractableException)
        ):
            return FailureType.ELEMENT_NOT_INTERACTABLE
        return self._match_network(str(exception))

    def _match_network(self, message: str) -> FailureType:
        for pattern in self.NETWORK_PATTERNS:
            if re.search(pattern, message, re.IGNORECASE):
                return FailureType.NETWORK_ERROR
        return FailureType.BROWSER_ERROR


_default_classifier = FailureClassifier()


def classify_failure(exception: BaseException) -> FailureKind:
    """Return the error kind of an exception using the default classifier."""
    return _default_classifier.classify_exception(exception).failure_kind
