from __future__ import annotations

import time
from typing import Callable, TypeVar

T = TypeVar("T")


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Polls `predicate` until it returns something truthy or time runs out.

    The predicate gets one last call after the deadline, and its value is
    returned either way; callers decide what a falsy result means.
    """

    deadline = clock() + max(timeout, 0)
    while clock() < deadline:
        result = predicate()
        if result:
            return result
        sleep(interval)
    return predicate()
