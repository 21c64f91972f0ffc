from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import pytest
from lxml import etree
from lxml import html as lxml_html
from selenium.common.exceptions import (
    InvalidSelectorException,
    NoSuchElementException,
    WebDriverException,
)
from selenium.webdriver.common.by import By

from autoheal.core.browser import create_driver
from autoheal.core.driver import AutoHealDriver
from autoheal.healing.document import DocumentNode, DocumentTree

LOGIN_PAGE = """
<html>
  <head><title>Login</title></head>
  <body>
    <main>
      <section>
        <div id="login-btn">Sign in</div>
      </section>
    </main>
  </body>
</html>
"""


class StaticPage:
    """Markup source and resolver over a fixed document, evaluated with lxml."""

    def __init__(self, markup: str) -> None:
        self.markup_calls = 0
        self.resolve_calls: list[str] = []
        self.set_markup(markup)

    def set_markup(self, markup: str) -> None:
        self.markup = markup
        self.document = lxml_html.document_fromstring(markup)

    def current_markup(self) -> str:
        self.markup_calls += 1
        return self.markup

    def select(self, expression: str) -> list:
        result = self.document.xpath(expression)
        if not isinstance(result, list):
            return []
        return [item for item in result if isinstance(item, etree._Element) and isinstance(item.tag, str)]

    def resolve(self, expression: str) -> bool:
        self.resolve_calls.append(expression)
        try:
            return bool(self.select(expression))
        except etree.XPathError:
            return False


class RejectingResolver:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def resolve(self, expression: str) -> bool:
        self.calls.append(expression)
        return False


class FakeDriver:
    """Just enough of a Selenium driver to exercise the wrapper offline."""

    def __init__(self, markup: str = LOGIN_PAGE, pages: dict[str, str] | None = None) -> None:
        self.page = StaticPage(markup)
        self.pages = pages or {}
        self.current_url = "about:blank"
        self.title = "Fake"
        self.implicit_waits: list[float] = []
        self.find_calls: list[tuple[str, str]] = []
        self.quit_called = False

    @property
    def page_source(self) -> str:
        return self.page.markup

    def get(self, url: str) -> None:
        if url not in self.pages:
            raise WebDriverException(f"Unreachable: {url}")
        self.page.set_markup(self.pages[url])
        self.current_url = url

    def find_elements(self, by: str, value: str) -> list:
        self.find_calls.append((by, value))
        if by == By.ID:
            return self.page.select(f"//*[@id='{value}']")
        if by != By.XPATH:
            return []
        try:
            return self.page.select(value)
        except etree.XPathError as exc:
            raise InvalidSelectorException(f"Invalid xpath: {value}") from exc

    def find_element(self, by: str, value: str):
        matches = self.find_elements(by, value)
        if not matches:
            raise NoSuchElementException(f"No element for {by}={value}")
        return matches[0]

    def implicitly_wait(self, seconds: float) -> None:
        self.implicit_waits.append(seconds)

    def execute_script(self, script: str, *args):
        if "readyState" in script:
            return "complete"
        return None

    def save_screenshot(self, filename: str) -> bool:
        Path(filename).write_bytes(b"\x89PNG fake")
        return True

    def quit(self) -> None:
        self.quit_called = True


def element_path(tree: DocumentTree, node: DocumentNode) -> str:
    """Positional path in the same format as lxml's getpath()."""

    steps: list[str] = []
    current: DocumentNode | None = node
    while current is not None:
        siblings = tree.same_tag_siblings(current)
        if len(siblings) > 1:
            position = [item.index for item in siblings].index(current.index) + 1
            steps.append(f"{current.tag}[{position}]")
        else:
            steps.append(current.tag)
        current = tree.parent_of(current)
    return "/" + "/".join(reversed(steps))


def lxml_path(element) -> str:
    return element.getroottree().getpath(element)


@contextmanager
def managed_driver(config) -> Iterator[AutoHealDriver]:
    try:
        driver = create_driver(config)
    except WebDriverException as exc:
        pytest.skip(f"WebDriver could not start for {config.environment.browser}: {exc}")
    try:
        yield driver
    finally:
        driver.quit()
