from __future__ import annotations

import re
import shutil
from datetime import UTC, datetime
from pathlib import Path

_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]+")


class ArtifactManager:
    """Creates and manages framework artifact files."""

    def __init__(self, root: str | Path = "artifacts") -> None:
        self.root = Path(root)
        self.dom_root = self.root / "dom_snapshots"
        self.screenshot_root = self.root / "screenshots"
        self.run_log_root = self.root / "run_logs"
        self.report_root = self.root / "reports"
        self._ensure_structure()

    def _ensure_structure(self) -> None:
        for directory in (self.root, self.dom_root, self.screenshot_root, self.run_log_root, self.report_root):
            directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def timestamp() -> str:
        return datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")

    @staticmethod
    def safe_name(value: str) -> str:
        return _UNSAFE_NAME.sub("_", value).strip("_") or "artifact"

    def write_dom_snapshot(self, label: str, page_source: str, timestamp: str | None = None) -> Path:
        stamp = timestamp or self.timestamp()
        path = self.dom_root / f"{stamp}_{self.safe_name(label)}.html"
        path.write_text(page_source, encoding="utf-8")
        return path

    def screenshot_path(self, label: str, timestamp: str | None = None) -> Path:
        stamp = timestamp or self.timestamp()
        return self.screenshot_root / f"{stamp}_{self.safe_name(label)}.png"

    def write_run_log(self, message: str, timestamp: str | None = None) -> Path:
        stamp = timestamp or self.timestamp()
        path = self.run_log_root / f"{stamp}.log"
        path.write_text(message, encoding="utf-8")
        return path

    def report_path(self, timestamp: str | None = None) -> Path:
        stamp = timestamp or self.timestamp()
        return self.report_root / f"report_{stamp}.json"

    def reset(self) -> Path:
        self._ensure_structure()
        for child in self.root.iterdir():
            if child.is_file() and child.name != ".gitkeep":
                child.unlink()
        for directory in (self.dom_root, self.screenshot_root, self.run_log_root, self.report_root):
            self._clear_directory(directory)
        return self.root

    @staticmethod
    def _clear_directory(directory: Path) -> None:
        for child in directory.iterdir():
            if child.is_dir():
                shutil.rmtree(child)
            elif child.is_file() and child.name != ".gitkeep":
                child.unlink()
