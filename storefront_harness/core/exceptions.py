"""
Exception hierarchy for the storefront test harness.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from storefront_harness.inventory.inventory_validator import ValidationReport


class HarnessError(Exception):
    """Base class for all harness errors."""

    pass


class TransientAutomationError(HarnessError):
    """A browser automation failure worth retrying (network hiccup, stale element)."""

    pass


class ValidationError(HarnessError):
    """Inventory data failed validation. Never retried."""

    def __init__(self, message: str, report: "ValidationReport | None" = None):
        super().__init__(message)
        self.report = report


class ConfigurationError(HarnessError):
    """A required setting is missing or invalid. Fatal at startup."""

    pass


class ActionFailed(HarnessError):
    """Raised when every retry attempt of an automation action failed."""

    def __init__(self, cause: BaseException, attempts: int, description: str = "action"):
        super().__init__(
            f"Failed to execute '{description}' after {attempts} attempts: {cause}"
        )
        self.cause = cause
        self.attempts = attempts
        self.description = description
