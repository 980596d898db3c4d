"""
Browser Event Stream

Turns Chrome's performance log (Network.* DevTools events) and browser log
(console output and uncaught page errors) into typed request, response, console
and page_error events, delivered to subscribers in emission order.

Chrome buffers both logs until they are read, so polling drains everything that
happened since the previous poll without losing events.
"""

import json
import logging
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from selenium.common.exceptions import InvalidArgumentException, WebDriverException

logger = logging.getLogger(__name__)

PERFORMANCE_LOG = "performance"
BROWSER_LOG = "browser"

EVENT_TYPES = ("request", "response", "console", "page_error")


@dataclass(frozen=True)
class RequestEvent:
    url: str
    method: str
    request_id: str
    timestamp: float = 0.0


@dataclass(frozen=True)
class ResponseEvent:
    url: str
    status: int
    method: str
    request_id: str
    timestamp: float = 0.0


@dataclass(frozen=True)
class ConsoleEvent:
    level: str
    text: str
    timestamp: float = 0.0


@dataclass(frozen=True)
class PageErrorEvent:
    message: str
    page_url: str = ""
    timestamp: float = 0.0


class BrowserEventSource:
    """
    Event stream of one browsing context.

    Handlers are registered per event type with ``on`` and called synchronously
    from ``poll``. The source also tracks in-flight requests so callers can tell
    when the network has settled.
    """

    def __init__(self, driver):
        self.driver = driver
        self._handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        self._request_methods: dict[str, str] = {}
        self._inflight: set[str] = set()
        self._last_activity = time.monotonic()
        self._unsupported_logs: set[str] = set()
        self.closed = False

    def on(self, event_type: str, handler: Callable[[Any], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type}")
        self._handlers[event_type].append(handler)

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    def idle_for(self) -> float:
        """Seconds since the last network activity was observed."""
        return time.monotonic() - self._last_activity

    def poll(self) -> int:
        """
        Drain the browser logs and dispatch their events in timestamp order.

        Returns:
            Number of events dispatched
        """
        if self.closed:
            return 0

        entries = [(entry, PERFORMANCE_LOG) for entry in self._read_log(PERFORMANCE_LOG)]
        entries += [(entry, BROWSER_LOG) for entry in self._read_log(BROWSER_LOG)]
        # sorted() is stable, so entries sharing a timestamp keep their log order
        entries.sort(key=lambda item: item[0].get("timestamp", 0))

        page_url = None
        dispatched = 0
        for entry, source in entries:
            if source == PERFORMANCE_LOG:
                event = self._parse_performance_entry(entry)
            else:
                event = self._parse_browser_entry(entry)
            if event is None:
                continue

            event_type, payload = event
            if event_type == "page_error":
                if page_url is None:
                    page_url = self._current_url()
                payload = PageErrorEvent(payload.message, page_url, payload.timestamp)

            self._dispatch(event_type, payload)
            dispatched += 1

        return dispatched

    def close(self) -> None:
        """Drain remaining events and stop dispatching."""
        if self.closed:
            return
        try:
            self.poll()
        finally:
            self.closed = True
            self._handlers.clear()

    def _read_log(self, log_type: str) -> list[dict[str, Any]]:
        if log_type in self._unsupported_logs:
            return []
        try:
            return self.driver.get_log(log_type) or []
        except WebDriverException as e:
            if self._is_unsupported_log_error(e):
                logger.warning(f"Browser log '{log_type}' unavailable, not monitoring it: {e}")
                self._unsupported_logs.add(log_type)
            else:
                # Entries stay buffered in Chrome until a read succeeds
                logger.warning(f"Could not read browser log '{log_type}', retrying next poll: {e}")
            return []

    @staticmethod
    def _is_unsupported_log_error(error: WebDriverException) -> bool:
        if isinstance(error, InvalidArgumentException):
            return True
        message = (error.msg or str(error)).lower()
        return "log type" in message

    def _current_url(self) -> str:
        try:
            return self.driver.current_url
        except WebDriverException as e:
            logger.debug(f"Could not read current URL: {e}")
            return ""

    def _dispatch(self, event_type: str, payload: Any) -> None:
        for handler in list(self._handlers.get(event_type, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Handler for '{event_type}' event failed: {e}")

    def _parse_performance_entry(self, entry: dict[str, Any]):
        try:
            message = json.loads(entry["message"])["message"]
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Skipping unreadable performance log entry: {e}")
            return None

        method = message.get("method", "")
        params = message.get("params", {})
        timestamp = entry.get("timestamp", 0)
        request_id = params.get("requestId", "")

        if method == "Network.requestWillBeSent":
            request = params.get("request", {})
            http_method = request.get("method", "GET")
            self._request_methods[request_id] = http_method
            self._inflight.add(request_id)
            self._last_activity = time.monotonic()
            url = request.get("url", "")
            return "request", RequestEvent(url, http_method, request_id, timestamp)

        if method == "Network.responseReceived":
            response = params.get("response", {})
            self._last_activity = time.monotonic()
            return "response", ResponseEvent(
                response.get("url", ""),
                int(response.get("status", 0)),
                self._request_methods.get(request_id, "GET"),
                request_id,
                timestamp,
            )

        if method in ("Network.loadingFinished", "Network.loadingFailed"):
            self._inflight.discard(request_id)
            self._request_methods.pop(request_id, None)
            self._last_activity = time.monotonic()
            if method == "Network.loadingFailed":
                logger.debug(f"Request {request_id} failed to load: {params.get('errorText', '')}")
            return None

        return None

    def _parse_browser_entry(self, entry: dict[str, Any]):
        level = str(entry.get("level", "INFO"))
        text = str(entry.get("message", ""))
        source = entry.get("source", "")
        timestamp = entry.get("timestamp", 0)

        # "Failed to load resource" lines duplicate the response events
        if source == "network":
            return None

        if source == "javascript" and level == "SEVERE" and "Uncaught" in text:
            return "page_error", PageErrorEvent(text, "", timestamp)

        return "console", ConsoleEvent(level.lower(), text, timestamp)
