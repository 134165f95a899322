"""Game modes and their value bounds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from reflex_ledger.core.settings import Settings, settings


class Mode(str, Enum):
    """Ranked game modes."""

    SIMPLE = "simple"
    PRO = "pro"
    AIM = "aim"


class Direction(str, Enum):
    """Which way a stored value improves."""

    ASCENDING = "asc"  # lower is better
    DESCENDING = "desc"  # higher is better


@dataclass(frozen=True)
class ModeRules:
    """Ordering and accepted value range for a mode."""

    direction: Direction
    min_value: int
    max_value: int

    def is_better(self, candidate: int, current: int) -> bool:
        """Return True if ``candidate`` strictly improves on ``current``."""
        if self.direction is Direction.ASCENDING:
            return candidate < current
        return candidate > current

    def in_range(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value


def mode_rules(mode: Mode, config: Settings = settings) -> ModeRules:
    """Return the rules configured for ``mode``.

    Aim scores are bounded by the fastest plausible average with no misses
    and the slowest allowed hit with the maximum number of misses.
    """
    if mode is Mode.SIMPLE:
        return ModeRules(Direction.ASCENDING, config.simple_min_ms, config.simple_max_ms)
    if mode is Mode.PRO:
        return ModeRules(Direction.ASCENDING, config.pro_min_ms, config.pro_max_ms)
    return ModeRules(
        Direction.ASCENDING,
        config.aim_min_avg_ms,
        config.aim_max_hit_ms + config.aim_max_misses * config.aim_miss_penalty,
    )
