from __future__ import annotations

from typing import Protocol, runtime_checkable

from selenium.common.exceptions import InvalidSelectorException, WebDriverException
from selenium.webdriver.common.by import By


@runtime_checkable
class MarkupSource(Protocol):
    def current_markup(self) -> str: ...


@runtime_checkable
class Resolver(Protocol):
    def resolve(self, expression: str) -> bool: ...


class DriverMarkupSource:
    """Reads the live page markup from a Selenium driver."""

    def __init__(self, driver) -> None:
        self.driver = driver

    def current_markup(self) -> str:
        return self.driver.page_source or ""


class DriverResolver:
    """Checks whether an XPath currently matches anything in the browser."""

    def __init__(self, driver) -> None:
        self.driver = driver

    def resolve(self, expression: str) -> bool:
        try:
            matches = self.driver.find_elements(By.XPATH, expression)
        except (InvalidSelectorException, WebDriverException):
            return False
        return bool(matches)
