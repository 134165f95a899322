"""Time sources used by the challenge and ledger services.

Every timestamp in the service is an integer count of milliseconds since the
Unix epoch. Services never read the wall clock themselves; callers pass
``now_ms`` in, which keeps the timing window testable without sleeping.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current instant in epoch milliseconds."""

    def now_ms(self) -> int: ...


class WallClock:
    """Clock backed by the system's real-time clock."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


_WALL_CLOCK = WallClock()


def get_clock() -> Clock:
    """Return the process-wide clock."""
    return _WALL_CLOCK
