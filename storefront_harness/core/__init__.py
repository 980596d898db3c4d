"""
Storefront Harness Core Module
Provides retrying action execution, network monitoring, configuration and session lifecycle.
"""

from .error_classifier import ErrorClassifier
from .exceptions import (
    ActionFailed,
    ConfigurationError,
    HarnessError,
    TransientAutomationError,
    ValidationError,
)
from .failure_classifier import FailureClassifier, FailureContext, FailureKind, FailureType
from .network_monitor import FailedRequest, NetworkMonitor
from .retry_executor import RetryAttempt, RetryExecutor, RetryState

__all__ = [
    "ActionFailed",
    "ConfigurationError",
    "ErrorClassifier",
    "FailedRequest",
    "FailureClassifier",
    "FailureContext",
    "FailureKind",
    "FailureType",
    "HarnessError",
    "NetworkMonitor",
    "RetryAttempt",
    "RetryExecutor",
    "RetryState",
    "TransientAutomationError",
    "ValidationError",
]
