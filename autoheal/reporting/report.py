from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from selenium.common.exceptions import WebDriverException

from autoheal.core.metadata import ReportEvent, TestRecord
from autoheal.reporting.artifacts import ArtifactManager

logger = logging.getLogger(__name__)


class RunReport:
    """Collects per-test events and writes them out as one JSON report.

    Each thread has its own current test, so parallel workers sharing a
    report do not interleave their events. Messages logged while no test is
    active go to the stdlib logger only.
    """

    def __init__(self, artifact_manager: ArtifactManager, title: str = "AutoHeal Test Report") -> None:
        self.artifact_manager = artifact_manager
        self.title = title
        self.records: list[TestRecord] = []
        self._current: dict[int, TestRecord] = {}
        self._lock = threading.Lock()
        self.last_report_path: Path | None = None

    def start_test(self, name: str, description: str | None = None) -> TestRecord:
        record = TestRecord(name=name, description=description or name)
        with self._lock:
            self.records.append(record)
            self._current[threading.get_ident()] = record
        return record

    def current_test(self) -> TestRecord | None:
        with self._lock:
            return self._current.get(threading.get_ident())

    def end_test(self, status: str | None = None) -> TestRecord | None:
        with self._lock:
            record = self._current.pop(threading.get_ident(), None)
        if record is not None and status:
            record.status = status
        return record

    def log_info(self, message: str, **details: Any) -> None:
        logger.info(message)
        self._add("info", message, details)

    def log_warning(self, message: str, **details: Any) -> None:
        logger.warning(message)
        self._add("warning", message, details)

    def log_pass(self, message: str, **details: Any) -> None:
        logger.info(message)
        self._add("pass", message, details)

    def log_fail(self, message: str, **details: Any) -> None:
        logger.error(message)
        self._add("fail", message, details)

    def log_error(self, message: str, error: BaseException | None = None) -> None:
        details: dict[str, Any] = {}
        if error is not None:
            details = {"error_type": type(error).__name__, "error": str(error)}
            logger.error("%s: %s", message, error)
        else:
            logger.error(message)
        self._add("fail", message, details)

    def attach_screenshot(self, driver, name: str) -> Path | None:
        path = self.artifact_manager.screenshot_path(name)
        try:
            driver.save_screenshot(str(path))
        except WebDriverException as exc:
            self.log_error(f"Failed to attach screenshot: {name}", exc)
            return None
        record = self.current_test()
        if record is not None:
            record.screenshots.append(str(path))
        self.log_info(f"Screenshot attached: {name}", path=str(path))
        return path

    def log_failure_with_screenshot(self, driver, message: str, error: BaseException | None = None) -> None:
        self.log_error(message, error)
        self.attach_screenshot(driver, "failure_screenshot")

    def summary(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        with self._lock:
            for record in self.records:
                counts[record.status] = counts.get(record.status, 0) + 1
        return counts

    def flush(self) -> Path:
        path = self.artifact_manager.report_path()
        with self._lock:
            tests = [asdict(record) for record in self.records]
        payload = {
            "title": self.title,
            "generated_at": datetime.now(UTC).isoformat(),
            "summary": self.summary(),
            "tests": tests,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        self.last_report_path = path
        return path

    def _add(self, status: str, message: str, details: dict[str, Any]) -> None:
        record = self.current_test()
        if record is None:
            return
        record.events.append(
            ReportEvent(
                status=status,
                message=message,
                timestamp=datetime.now(UTC).isoformat(),
                details=details,
            )
        )
