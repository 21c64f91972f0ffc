from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class HealAttempt:
    original_locator: str
    outcome: str
    healed_locator: str = ""
    signals: dict[str, str | None] = field(default_factory=dict)
    candidate_count: int = 0
    score: int = 0
    strategy: str = ""
    timestamp: str = ""

    @property
    def success(self) -> bool:
        return bool(self.healed_locator)


@dataclass(slots=True)
class ReportEvent:
    status: str
    message: str
    timestamp: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class TestRecord:
    __test__ = False

    name: str
    description: str
    status: str = "running"
    events: list[ReportEvent] = field(default_factory=list)
    screenshots: list[str] = field(default_factory=list)
