"""
Test Session Lifecycle

One browser engine per suite, one isolated browsing context per test. Each test
session owns its context, network monitor and retry executor, so nothing is
shared between concurrently running tests except the read-only engine handle.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from storefront_harness.core.error_classifier import ErrorClassifier
from storefront_harness.core.network_monitor import FailedRequest, NetworkMonitor
from storefront_harness.core.retry_executor import RetryAttempt, RetryExecutor
from storefront_harness.core.settings_manager import HarnessSettings
from storefront_harness.utils.browser import BrowserContext, BrowserEngine

logger = logging.getLogger(__name__)


class HarnessSession:
    """Per-test handle: browsing context, failure ledger and retrying actions."""

    def __init__(
        self,
        name: str,
        context: BrowserContext,
        monitor: NetworkMonitor,
        retry_executor: RetryExecutor,
        base_url: str,
    ):
        self.name = name
        self.context = context
        self.monitor = monitor
        self.retry_executor = retry_executor
        self.base_url = base_url

    @property
    def failed_requests(self) -> tuple[FailedRequest, ...]:
        self.context.events.poll()
        return self.monitor.failed_requests

    def log_navigation(self, url: str) -> None:
        logger.info(f"Navigating to: {url}")

    def log_action(self, action: str) -> None:
        logger.info(f"Action: {action}")

    def log_assertion(self, assertion: str) -> None:
        logger.info(f"Asserting: {assertion}")

    def navigate_with_retry(self, url: str) -> RetryAttempt:
        """Navigate to a URL, retrying transient failures."""

        def navigate():
            self.log_navigation(url)
            self.context.navigate(url)

        return self.retry_executor.run_with_retry(navigate, f"Navigate to {url}")

    def click_with_retry(self, selector: str, description: str) -> RetryAttempt:
        """Click an element, retrying transient failures."""

        def click():
            self.log_action(f"Clicking {description}")
            self.context.click(selector)

        return self.retry_executor.run_with_retry(click, f"Click {description}")

    def fill_with_retry(self, selector: str, value: str, description: str) -> RetryAttempt:
        """Fill a form field, retrying transient failures."""

        def fill():
            self.log_action(f"Filling {description}")
            self.context.fill(selector, value)

        return self.retry_executor.run_with_retry(fill, f"Fill {description}")


class SessionLifecycle:
    """
    Suite and test setup/teardown.

    ``start_suite``/``end_suite`` bracket the whole run; ``start_test``/``end_test``
    bracket each test. ``end_test`` always closes the context, whatever happened.
    """

    def __init__(self, settings: HarnessSettings, engine: BrowserEngine | None = None):
        self.settings = settings
        self.engine = engine or BrowserEngine(settings.browser)
        self.classifier = ErrorClassifier(settings.network.ignored_error_patterns)

    def start_suite(self) -> None:
        logger.info("=== Starting Test Suite ===")
        self.engine.start()
        logger.info("Browser launched successfully")

    def end_suite(self) -> None:
        logger.info("Closing browser engine")
        self.engine.stop()
        logger.info("=== Test Suite Completed ===")

    def start_test(self, name: str) -> HarnessSession:
        """Create an isolated context with network monitoring for one test."""
        logger.info(f"--- Starting Test: {name} ---")
        logger.debug("Creating new browser context")

        context = self.engine.new_context()
        try:
            monitor = NetworkMonitor(self.classifier)
            monitor.attach(context.events)
            retry_executor = RetryExecutor(
                wait_for_idle=context.wait_for_network_idle,
                max_attempts=self.settings.retry.count,
                delay_ms=self.settings.retry.delay_ms,
            )
        except Exception as e:
            logger.error(f"Failed to set up browser context: {e}")
            context.close()
            raise

        logger.debug("Browser context created successfully")
        return HarnessSession(name, context, monitor, retry_executor, self.settings.base_url)

    def end_test(self, session: HarnessSession) -> list[FailedRequest]:
        """
        Report the test's network anomalies and close its context.

        Returns:
            The ledger of failed requests recorded during the test
        """
        logger.info(f"--- Test Completed: {session.name} ---")
        try:
            # Closing drains events still buffered in the browser logs into the ledger
            logger.debug("Closing browser context")
            session.context.close()
        finally:
            session.monitor.report()
            failed = session.monitor.flush()
        return failed

    @contextmanager
    def suite(self) -> Iterator["SessionLifecycle"]:
        self.start_suite()
        try:
            yield self
        finally:
            self.end_suite()

    @contextmanager
    def test(self, name: str) -> Iterator[HarnessSession]:
        session = self.start_test(name)
        try:
            yield session
        finally:
            self.end_test(session)
