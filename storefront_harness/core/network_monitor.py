"""
Network Monitor

Records network anomalies observed while one test runs: responses with an HTTP
error status and uncaught page errors. Known noise is filtered out through the
ErrorClassifier. The monitor only records; it never aborts a test, retries or
touches the page.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any

from storefront_harness.core.browser_events import (
    ConsoleEvent,
    PageErrorEvent,
    RequestEvent,
    ResponseEvent,
)
from storefront_harness.core.error_classifier import ErrorClassifier

logger = logging.getLogger(__name__)

HTTP_ERROR_THRESHOLD = 400


@dataclass(frozen=True)
class FailedRequest:
    """A failing network event; status 0 marks a page error."""

    url: str
    status: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return f"URL: {self.url}, Status: {self.status}, Error: {self.message}"


class NetworkMonitor:
    """
    Failure ledger for a single test.

    Attach it to the event source of the test's browsing context; the ledger
    lists failing events in the order the browser emitted them.
    """

    def __init__(self, classifier: ErrorClassifier):
        self.classifier = classifier
        self._failed_requests: list[FailedRequest] = []

    def attach(self, event_source) -> None:
        """Subscribe to every event type of a browsing context's event source."""
        event_source.on("request", self.on_request)
        event_source.on("response", self.on_response)
        event_source.on("console", self.on_console)
        event_source.on("page_error", self.on_page_error)

    def on_request(self, event: RequestEvent) -> None:
        try:
            if self.classifier.is_ignorable(event.url):
                logger.debug(f"Ignoring request to: {event.url}")
                return
            logger.debug(f"Request: {event.method} {event.url}")
        except Exception as e:
            logger.error(f"Could not process request event {event!r}: {e}")

    def on_response(self, event: ResponseEvent) -> None:
        try:
            if self.classifier.is_ignorable(event.url):
                return
            if event.status >= HTTP_ERROR_THRESHOLD:
                error = f"Request failed: {event.method} {event.url}"
                logger.warning(f"Response error: {error} - Status: {event.status}")
                self._failed_requests.append(FailedRequest(event.url, event.status, error))
        except Exception as e:
            logger.error(f"Could not process response event {event!r}: {e}")

    def on_console(self, event: ConsoleEvent) -> None:
        try:
            if not self.classifier.is_ignorable(event.text):
                logger.debug(f"Browser Console [{event.level}]: {event.text}")
        except Exception as e:
            logger.error(f"Could not process console event {event!r}: {e}")

    def on_page_error(self, event: PageErrorEvent) -> None:
        try:
            if self.classifier.is_ignorable(event.message):
                logger.debug(f"Ignoring page error: {event.message}")
                return
            logger.error(f"Page Error: {event.message}")
            self._failed_requests.append(FailedRequest(event.page_url, 0, event.message))
        except Exception as e:
            logger.error(f"Could not process page error event {event!r}: {e}")

    @property
    def failed_requests(self) -> tuple[FailedRequest, ...]:
        return tuple(self._failed_requests)

    @property
    def has_failures(self) -> bool:
        return bool(self._failed_requests)

    def report(self) -> list[FailedRequest]:
        """Log the ledger and return a copy of it."""
        if self._failed_requests:
            logger.warning("Network issues encountered during test:")
            for request in self._failed_requests:
                logger.warning(f"  - {request}")
        return list(self._failed_requests)

    def flush(self) -> list[FailedRequest]:
        """Return the ledger and clear it."""
        failed, self._failed_requests = self._failed_requests, []
        return failed
