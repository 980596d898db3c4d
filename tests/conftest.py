"""
Pytest configuration and fixtures for storefront harness tests
"""

import os
from unittest.mock import MagicMock

import pytest

from storefront_harness.core.error_classifier import ErrorClassifier
from storefront_harness.core.settings_manager import (
    BrowserSettings,
    HarnessSettings,
    NetworkSettings,
    RetrySettings,
)

DEFAULT_IGNORED_PATTERNS = [".*401.*", ".*favicon.ico.*", ".*analytics.*"]


def pytest_addoption(parser):
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests against a real browser and storefront",
    )


def pytest_collection_modifyitems(config, items):
    run_e2e = config.getoption("--run-e2e") or os.getenv("HARNESS_RUN_E2E", "").lower() == "true"
    if run_e2e:
        return
    skip_e2e = pytest.mark.skip(reason="needs --run-e2e or HARNESS_RUN_E2E=true")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.fixture
def harness_settings():
    """HarnessSettings built in code, independent of config files."""
    return HarnessSettings(
        base_url="https://www.saucedemo.com",
        browser=BrowserSettings(timeout_ms=30000, headless=True),
        retry=RetrySettings(count=3, delay_ms=1000),
        network=NetworkSettings(ignored_error_patterns=DEFAULT_IGNORED_PATTERNS),
    )


@pytest.fixture
def error_classifier():
    """ErrorClassifier with the default ignore patterns."""
    return ErrorClassifier(DEFAULT_IGNORED_PATTERNS)


@pytest.fixture
def sample_inventory_snapshot():
    """Inventory snapshot as the storefront renders it."""
    return [
        ("Sauce Labs Backpack", "$29.99"),
        ("Sauce Labs Bike Light", "$9.99"),
        ("Sauce Labs Bolt T-Shirt", "$15.99"),
        ("Sauce Labs Fleece Jacket", "$49.99"),
        ("Sauce Labs Onesie", "$7.99"),
        ("Test.allTheThings() T-Shirt (Red)", "$15.99"),
    ]


@pytest.fixture
def tied_inventory_snapshot():
    """Snapshot with two items sharing the highest price."""
    return [("A", "$10.00"), ("B", "$10.00"), ("C", "$5.00")]


@pytest.fixture
def mock_driver():
    """Mocked WebDriver with empty browser logs."""
    driver = MagicMock()
    driver.get_log.return_value = []
    driver.current_url = "https://www.saucedemo.com/inventory.html"
    driver.execute_script.return_value = "complete"
    return driver
