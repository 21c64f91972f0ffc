from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Iterator


class HealCache:
    """In-memory map of broken locator -> last validated replacement.

    Entries only arrive after a resolver has accepted them, but the page
    can change afterwards, so callers revalidate every hit. Use
    `transaction()` to serialize the lookup/validate/evict/put sequence for
    one locator across threads.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._guard = Lock()
        self._key_locks: dict[str, Lock] = {}

    def lookup(self, original: str) -> str | None:
        with self._guard:
            return self._entries.get(original)

    def put(self, original: str, healed: str) -> None:
        with self._guard:
            self._entries[original] = healed

    def evict(self, original: str) -> str | None:
        with self._guard:
            return self._entries.pop(original, None)

    def clear(self) -> None:
        with self._guard:
            self._entries.clear()

    def snapshot(self) -> dict[str, str]:
        with self._guard:
            return dict(self._entries)

    @contextmanager
    def transaction(self, original: str) -> Iterator[HealCache]:
        with self._guard:
            key_lock = self._key_locks.setdefault(original, Lock())
        with key_lock:
            yield self

    def __contains__(self, original: object) -> bool:
        with self._guard:
            return original in self._entries

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
