from __future__ import annotations

import logging
from threading import Lock
from urllib.parse import urljoin

from selenium.common.exceptions import NoSuchElementException, TimeoutException, WebDriverException
from selenium.webdriver.common.by import By

from autoheal.config.schema import AutoHealConfig
from autoheal.core.exceptions import HealingFailedError
from autoheal.healing.collaborators import DriverMarkupSource, DriverResolver
from autoheal.healing.engine import XPathHealer
from autoheal.utils.page_load import PageLoadTracker
from autoheal.utils.wait import wait_until

logger = logging.getLogger(__name__)


class AutoHealDriver:
    """Selenium driver wrapper that heals broken XPath locators on lookup.

    Anything not defined here is forwarded to the wrapped driver, so the
    wrapper can stand in wherever a plain WebDriver is expected.
    """

    def __init__(
        self,
        driver,
        config: AutoHealConfig | None = None,
        *,
        report=None,
        healer: XPathHealer | None = None,
        audit_logger=None,
    ) -> None:
        self.driver = driver
        self.config = config or AutoHealConfig()
        self.report = report
        self.healer = healer or XPathHealer(
            DriverMarkupSource(driver),
            DriverResolver(driver),
            text_mode=self.config.healing.text_mode,
            audit_logger=audit_logger,
        )
        self.page_load_tracker = PageLoadTracker(driver, self.config.page_load.default_timeout_ms)
        self.implicit_wait_ms: int | None = None
        self._retry_counts: dict[str, int] = {}
        self._retry_lock = Lock()

    def __getattr__(self, name: str):
        if name == "driver":
            raise AttributeError(name)
        return getattr(self.driver, name)

    def find_element(self, by: str = By.ID, value: str | None = None):
        try:
            return self.driver.find_element(by, value)
        except NoSuchElementException as exc:
            key = self._locator_key(by, value)
            if self._claim_retry(key):
                try:
                    healed = self._heal(key, by, value)
                    if healed is not None:
                        return self.find_element(By.XPATH, healed)
                finally:
                    self._release_retry(key)
            self._error(f"Failed to find element with locator: {key}", exc)
            raise HealingFailedError(f"Element not found even after healing attempt: {key}") from exc

    def find_elements(self, by: str = By.ID, value: str | None = None):
        try:
            return self.driver.find_elements(by, value)
        except WebDriverException as exc:
            key = self._locator_key(by, value)
            if self._claim_retry(key):
                try:
                    healed = self._heal(key, by, value)
                    if healed is not None:
                        return self.find_elements(By.XPATH, healed)
                finally:
                    self._release_retry(key)
            self._error(f"Failed to find elements with locator: {key}", exc)
            raise

    def wait_for_element(self, by: str, value: str):
        timeout = self.explicit_wait_seconds()
        matches = wait_until(lambda: self.driver.find_elements(by, value), timeout)
        if matches:
            return matches[0]
        key = self._locator_key(by, value)
        self._warn(f"Timeout waiting for element: {key}. Attempting to heal...")
        if by == By.XPATH and self.config.healing.enabled:
            healed = self.healer.heal(value)
            if healed is not None:
                self._info(f"XPath healed successfully: {value} -> {healed}")
                matches = wait_until(lambda: self.driver.find_elements(By.XPATH, healed), timeout)
                if matches:
                    return matches[0]
        raise TimeoutException(f"Timed out waiting for element: {key}")

    def get(self, url: str) -> None:
        tracking = self.config.page_load.tracking_enabled
        if tracking:
            self.page_load_tracker.start_tracking()
        try:
            self.driver.get(url)
        except WebDriverException as exc:
            if tracking:
                self.page_load_tracker.stop_tracking(url)
            self._error(f"Failed to load page: {url}", exc)
            raise
        if tracking:
            load_time = self.page_load_tracker.stop_tracking(url)
            self._info(f"Page loaded: {url} in {load_time}ms")
            self.update_timeouts()

    def open(self, path: str = "") -> None:
        """Navigates to `path` resolved against the configured base URL."""

        base_url = self.config.environment.base_url
        if not base_url:
            raise ValueError("environment.base_url is not configured")
        self.get(urljoin(base_url, path))

    def update_timeouts(self) -> int | None:
        """Sets the implicit wait to twice the average measured load time.

        Nothing is applied until at least one navigation has been measured.
        """

        if not self.page_load_tracker.all_load_times():
            return None
        settings = self.config.page_load
        wait_ms = max(settings.min_implicit_wait_ms, self.page_load_tracker.average() * 2)
        self.driver.implicitly_wait(wait_ms / 1000)
        self.implicit_wait_ms = wait_ms
        self._info(f"Updated implicit wait to: {wait_ms}ms based on page load time")
        return wait_ms

    def explicit_wait_seconds(self) -> int:
        settings = self.config.page_load
        average_seconds = self.page_load_tracker.average() // 1000
        return max(settings.min_explicit_wait_seconds, average_seconds + settings.explicit_wait_buffer_seconds)

    def quit(self) -> None:
        if self.config.page_load.tracking_enabled:
            self._info(f"Page load statistics: {self.page_load_tracker.statistics()}")
        self.driver.quit()

    def _heal(self, key: str, by: str, value: str | None) -> str | None:
        if not self.config.healing.enabled:
            return None
        self._warn(f"Element not found with locator: {key}. Attempting to heal...")
        if by != By.XPATH or value is None:
            return None
        healed = self.healer.heal(value)
        if healed is not None:
            self._info(f"XPath healed successfully: {value} -> {healed}")
        return healed

    def _claim_retry(self, key: str) -> bool:
        with self._retry_lock:
            count = self._retry_counts.get(key, 0)
            if count >= self.config.healing.max_retry_attempts:
                return False
            self._retry_counts[key] = count + 1
            return True

    def _release_retry(self, key: str) -> None:
        with self._retry_lock:
            count = self._retry_counts.get(key, 0) - 1
            if count <= 0:
                self._retry_counts.pop(key, None)
            else:
                self._retry_counts[key] = count

    @staticmethod
    def _locator_key(by: str, value: str | None) -> str:
        return f"By.{by}: {value}"

    def _info(self, message: str) -> None:
        if self.report is not None:
            self.report.log_info(message)
        else:
            logger.info(message)

    def _warn(self, message: str) -> None:
        if self.report is not None:
            self.report.log_warning(message)
        else:
            logger.warning(message)

    def _error(self, message: str, error: BaseException) -> None:
        if self.report is not None:
            self.report.log_failure_with_screenshot(self.driver, message, error)
        else:
            logger.error("%s: %s", message, error)
