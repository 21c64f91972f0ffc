from __future__ import annotations

from selenium import webdriver
from selenium.webdriver import ChromeOptions, FirefoxOptions

from autoheal.config.schema import AutoHealConfig, EnvironmentConfig
from autoheal.core.driver import AutoHealDriver
from autoheal.core.exceptions import UnsupportedBrowserError


class BrowserSession:
    """Creates browser instances using Selenium Manager."""

    def __init__(self, environment: EnvironmentConfig) -> None:
        self.environment = environment

    def start(self, browser_name: str | None = None):
        normalized = (browser_name or self.environment.browser).lower()
        if normalized == "chrome":
            driver = webdriver.Chrome(options=self.chrome_options())
        elif normalized == "firefox":
            driver = webdriver.Firefox(options=self.firefox_options())
        else:
            raise UnsupportedBrowserError(f"Unsupported browser: {browser_name}")
        driver.set_page_load_timeout(self.environment.page_load_timeout_seconds)
        return driver

    def chrome_options(self) -> ChromeOptions:
        options = ChromeOptions()
        if self.environment.headless:
            options.add_argument("--headless=new")
        options.add_argument(f"--window-size={self.environment.window_size}")
        options.add_argument("--disable-notifications")
        return options

    def firefox_options(self) -> FirefoxOptions:
        options = FirefoxOptions()
        if self.environment.headless:
            options.add_argument("-headless")
        return options


def create_driver(
    config: AutoHealConfig,
    browser_name: str | None = None,
    *,
    report=None,
    audit_logger=None,
) -> AutoHealDriver:
    driver = BrowserSession(config.environment).start(browser_name)
    return AutoHealDriver(driver, config, report=report, audit_logger=audit_logger)
