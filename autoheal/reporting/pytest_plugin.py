"""Pytest plugin that mirrors test results into a RunReport.

Enable with ``pytest -p autoheal.reporting.pytest_plugin``. Failed tests get
a screenshot when one of their fixtures is a driver.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from autoheal.config.loader import ConfigLoader
from autoheal.config.schema import ReportSettings
from autoheal.core.driver import AutoHealDriver
from autoheal.reporting.artifacts import ArtifactManager
from autoheal.reporting.report import RunReport

REPORT_KEY = pytest.StashKey[RunReport]()


class ReportListener:
    """Translates pytest phase results into report entries."""

    def __init__(self, report: RunReport) -> None:
        self.report = report

    def on_start(self, name: str, description: str | None = None) -> None:
        self.report.start_test(name, description)
        self.report.log_info(f"Test started: {name}")

    def on_result(self, name: str, when: str, outcome: str, details: str = "", driver=None) -> None:
        record = self.report.current_test()
        if outcome == "failed":
            self.report.log_fail(f"Test failed: {name}", phase=when, details=details)
            if driver is not None:
                self.report.attach_screenshot(driver, f"{name}_failure")
            status = "fail"
        elif outcome == "skipped":
            self.report.log_warning(f"Test skipped: {name}", phase=when)
            status = "skip"
        elif when == "call":
            self.report.log_pass(f"Test passed: {name}")
            status = "pass"
        else:
            status = None
        if record is not None and status and record.status != "fail":
            record.status = status

    def on_finish(self) -> None:
        self.report.end_test()


def pytest_addoption(parser) -> None:
    group = parser.getgroup("autoheal")
    group.addoption(
        "--autoheal-artifacts",
        action="store",
        default=None,
        help="Directory that receives the AutoHeal run report and screenshots. Overrides reporting.artifacts_root.",
    )
    group.addoption(
        "--autoheal-config",
        action="store",
        default="config/autoheal.json",
        help="AutoHeal config file, relative to the pytest root directory.",
    )


def build_report(settings: ReportSettings, artifacts_root: str | None = None) -> RunReport:
    root = artifacts_root or settings.artifacts_root
    return RunReport(ArtifactManager(root), title=settings.report_title)


def pytest_configure(config) -> None:
    config_path = Path(config.rootpath) / config.getoption("--autoheal-config")
    settings = ConfigLoader.load_or_default(config_path).reporting
    config.stash[REPORT_KEY] = build_report(settings, config.getoption("--autoheal-artifacts"))


@pytest.fixture()
def autoheal_report(request) -> RunReport:
    return request.config.stash[REPORT_KEY]


def pytest_runtest_setup(item) -> None:
    function = getattr(item, "function", None)
    description = (function.__doc__ or "").strip() if function is not None else ""
    ReportListener(item.config.stash[REPORT_KEY]).on_start(item.name, description or None)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    result = outcome.get_result()
    listener = ReportListener(item.config.stash[REPORT_KEY])
    driver = _find_driver(item) if result.failed else None
    listener.on_result(item.name, result.when, result.outcome, result.longreprtext, driver)
    if result.when == "teardown":
        listener.on_finish()


def pytest_sessionfinish(session) -> None:
    report = session.config.stash.get(REPORT_KEY, None)
    if report is not None:
        path = report.flush()
        report.log_info(f"Test execution completed. Report available at: {path}")


def _find_driver(item):
    for value in getattr(item, "funcargs", {}).values():
        if isinstance(value, AutoHealDriver):
            return value.driver
        if hasattr(value, "save_screenshot"):
            return value
    return None
