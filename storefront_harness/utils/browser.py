"""
Browser engine and isolated browsing contexts for tests.

The engine is a single chromedriver service started once per suite. Every test
gets its own browsing context: a fresh WebDriver session with a throwaway
profile directory, so cookies, storage and open handles never leak between tests.
"""

import logging
import os
import shutil
import tempfile
import time

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from storefront_harness.core.browser_events import BrowserEventSource
from storefront_harness.core.exceptions import ConfigurationError
from storefront_harness.core.settings_manager import BrowserSettings
from storefront_harness.utils.chrome_options import get_harness_chrome_options

logger = logging.getLogger(__name__)

NETWORK_IDLE_TIME = 0.5


def get_locator_type(selector: str) -> str:
    """Determine locator type based on selector format."""
    if selector.startswith("//") or selector.startswith(".//") or selector.startswith("(//"):
        return By.XPATH
    return By.CSS_SELECTOR


class BrowserContext:
    """One isolated browsing session owned by a single test."""

    def __init__(self, driver, profile_dir: str | None, settings: BrowserSettings):
        self.driver = driver
        self.profile_dir = profile_dir
        self.settings = settings
        self.timeout = settings.timeout_ms / 1000
        self.events = BrowserEventSource(driver)
        self.closed = False

    def _slow_down(self) -> None:
        if self.settings.slow_mo_ms > 0:
            time.sleep(self.settings.slow_mo_ms / 1000)

    def navigate(self, url: str) -> None:
        """Navigate to URL."""
        self._slow_down()
        self.driver.get(url)

    def click(self, selector: str) -> None:
        """Wait for an element to be clickable and click it."""
        self._slow_down()
        element = WebDriverWait(self.driver, self.timeout).until(
            EC.element_to_be_clickable((get_locator_type(selector), selector))
        )
        element.click()

    def fill(self, selector: str, value: str) -> None:
        """Clear an input and type a value into it."""
        self._slow_down()
        element = WebDriverWait(self.driver, self.timeout).until(
            EC.visibility_of_element_located((get_locator_type(selector), selector))
        )
        element.clear()
        element.send_keys(value)

    @property
    def current_url(self) -> str:
        return self.driver.current_url

    def query_selector(self, selector: str) -> WebElement | None:
        elements = self.driver.find_elements(get_locator_type(selector), selector)
        return elements[0] if elements else None

    def query_selector_all(self, selector: str) -> list[WebElement]:
        return self.driver.find_elements(get_locator_type(selector), selector)

    def element_exists(self, selector: str) -> bool:
        return self.query_selector(selector) is not None

    def text_content(self, selector: str) -> str | None:
        element = self.query_selector(selector)
        if element is None:
            return None
        return element.get_attribute("textContent")

    def get_attribute(self, selector: str, name: str) -> str | None:
        element = self.query_selector(selector)
        if element is None:
            return None
        return element.get_attribute(name)

    def wait_for_selector(self, selector: str, timeout: float | None = None) -> WebElement:
        return WebDriverWait(self.driver, timeout or self.timeout).until(
            EC.presence_of_element_located((get_locator_type(selector), selector))
        )

    def clear_cookies(self) -> None:
        self.driver.delete_all_cookies()

    def execute_script(self, script: str, *args):
        return self.driver.execute_script(script, *args)

    def wait_for_network_idle(self, timeout: float | None = None) -> None:
        """
        Wait until the document is loaded and no request has been in flight for 500 ms.

        Raises:
            TimeoutException: If the network does not settle within the timeout
        """
        timeout = self.timeout if timeout is None else timeout

        def settled(driver) -> bool:
            self.events.poll()
            if driver.execute_script("return document.readyState") != "complete":
                return False
            return self.events.inflight_count == 0 and self.events.idle_for() >= NETWORK_IDLE_TIME

        WebDriverWait(self.driver, timeout, poll_frequency=0.1).until(
            settled, message=f"Network did not become idle within {timeout}s"
        )

    def close(self) -> None:
        """Drain pending events, end the WebDriver session and remove the profile."""
        if self.closed:
            return
        self.closed = True
        try:
            self.events.close()
        except WebDriverException as e:
            logger.warning(f"Could not drain browser events on close: {e}")
        finally:
            try:
                self.driver.quit()
            except WebDriverException as e:
                logger.warning(f"Error closing browser context: {e}")
            finally:
                if self.profile_dir:
                    shutil.rmtree(self.profile_dir, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class BrowserEngine:
    """
    Process-wide browser engine handle.

    Holds the chromedriver service (or a remote WebDriver URL). Tests only read
    from it to open new contexts.
    """

    def __init__(self, settings: BrowserSettings):
        self.settings = settings
        self.service: ChromeService | None = None
        self._executor_url: str | None = settings.remote_url

    @property
    def running(self) -> bool:
        return self._executor_url is not None

    def start(self) -> None:
        """Start the chromedriver service unless a remote WebDriver URL is configured."""
        if self.running:
            return

        driver_path = self.settings.driver_path or shutil.which("chromedriver")
        if not driver_path:
            raise ConfigurationError(
                "chromedriver not found: set browser.driver_path or put chromedriver on PATH"
            )

        logger.info("Launching Chromium browser engine...")
        start_time = time.time()
        try:
            self.service = ChromeService(executable_path=driver_path, log_output=os.devnull)
            self.service.start()
        except WebDriverException as e:
            raise ConfigurationError(f"Failed to start chromedriver: {e}") from e

        self._executor_url = self.service.service_url
        logger.info(f"Browser engine started in {time.time() - start_time:.2f}s")

    def new_context(self) -> BrowserContext:
        """Open a fresh isolated browsing context."""
        if not self.running:
            raise RuntimeError("Browser engine is not running")

        profile_dir = tempfile.mkdtemp(prefix="storefront_profile_")
        options = get_harness_chrome_options(
            headless=self.settings.headless,
            profile_dir=profile_dir,
            ignore_https_errors=self.settings.ignore_https_errors,
            window_width=self.settings.window_width,
            window_height=self.settings.window_height,
        )
        if self.settings.binary_location:
            options.binary_location = self.settings.binary_location

        try:
            driver = webdriver.Remote(command_executor=self._executor_url, options=options)
        except Exception:
            shutil.rmtree(profile_dir, ignore_errors=True)
            raise

        try:
            driver.set_page_load_timeout(self.settings.timeout_ms / 1000)
            driver.set_script_timeout(self.settings.timeout_ms / 1000)
        except Exception:
            driver.quit()
            shutil.rmtree(profile_dir, ignore_errors=True)
            raise

        logger.debug(f"Browser context created (profile: {profile_dir})")
        return BrowserContext(driver, profile_dir, self.settings)

    def stop(self) -> None:
        if self.service is not None:
            try:
                self.service.stop()
            except WebDriverException as e:
                logger.warning(f"Error stopping browser engine: {e}")
        self.service = None
        self._executor_url = self.settings.remote_url
        logger.info("Browser engine stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
