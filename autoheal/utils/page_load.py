from __future__ import annotations

import logging
import statistics
import time
from threading import Lock
from typing import Any, Callable

from selenium.common.exceptions import WebDriverException

logger = logging.getLogger(__name__)


class PageLoadTracker:
    """Records navigation durations so wait timeouts can follow the site."""

    def __init__(
        self,
        driver,
        default_timeout_ms: int = 30000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.driver = driver
        self.clock = clock
        self.default_timeout_ms = default_timeout_ms
        self._started_at: float | None = None
        self._load_times: list[int] = []
        self._by_url: dict[str, int] = {}
        self._lock = Lock()

    def start_tracking(self) -> None:
        self._started_at = self.clock()

    def stop_tracking(self, url: str | None = None) -> int:
        if self._started_at is None:
            return 0
        load_time = int((self.clock() - self._started_at) * 1000)
        self._started_at = None
        current_url = url or self._current_url()
        if not self._document_ready():
            logger.warning("Stopped tracking %s before the document finished loading", current_url or "page")
        with self._lock:
            self._load_times.append(load_time)
            if current_url:
                self._by_url[current_url] = load_time
        return load_time

    def average(self) -> int:
        with self._lock:
            if not self._load_times:
                return self.default_timeout_ms
            return sum(self._load_times) // len(self._load_times)

    def median(self) -> int:
        with self._lock:
            if not self._load_times:
                return self.default_timeout_ms
            return int(statistics.median(self._load_times))

    def maximum(self) -> int:
        with self._lock:
            return max(self._load_times, default=self.default_timeout_ms)

    def minimum(self) -> int:
        with self._lock:
            return min(self._load_times, default=self.default_timeout_ms)

    def load_time_for(self, url: str) -> int | None:
        with self._lock:
            return self._by_url.get(url)

    def all_load_times(self) -> list[int]:
        with self._lock:
            return list(self._load_times)

    def statistics(self) -> dict[str, Any]:
        with self._lock:
            count = len(self._load_times)
            by_url = dict(self._by_url)
        return {
            "average": self.average(),
            "median": self.median(),
            "max": self.maximum(),
            "min": self.minimum(),
            "count": count,
            "page_load_times": by_url,
        }

    def reset(self) -> None:
        with self._lock:
            self._load_times.clear()
            self._by_url.clear()
        self._started_at = None

    def _document_ready(self) -> bool:
        try:
            return self.driver.execute_script("return document.readyState") == "complete"
        except WebDriverException:
            return False

    def _current_url(self) -> str:
        try:
            return self.driver.current_url or ""
        except WebDriverException:
            return ""
