from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from threading import Lock

from autoheal.core.metadata import HealAttempt


class HealingAuditLogger:
    """Appends every heal attempt to a JSONL trail."""

    def __init__(self, root: str | Path = "artifacts") -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.healed_elements_path = self.root / "healed_elements.jsonl"
        self._lock = Lock()

    def write(self, attempt: HealAttempt) -> None:
        payload = asdict(attempt)
        payload["success"] = attempt.success
        with self._lock, self.healed_elements_path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload) + "\n")

    def read_attempts(self) -> list[HealAttempt]:
        if not self.healed_elements_path.exists():
            return []
        attempts: list[HealAttempt] = []
        with self.healed_elements_path.open("r", encoding="utf-8") as handle:
            for line in handle:
                if not line.strip():
                    continue
                payload = json.loads(line)
                payload.pop("success", None)
                attempts.append(HealAttempt(**payload))
        return attempts

    def healed_locators(self) -> dict[str, str]:
        """Latest successful replacement per original locator."""

        return {
            attempt.original_locator: attempt.healed_locator
            for attempt in self.read_attempts()
            if attempt.success
        }
