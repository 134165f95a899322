# src/reflex_ledger/schemas/leaderboard.py
"""Leaderboard row and listing schemas."""
from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

from reflex_ledger.core.modes import Mode
from reflex_ledger.services.ranking import RankedEntry


class RankedRow(BaseModel):
    """Fields shared by every mode's leaderboard row."""

    rank: int
    name: str
    best_value: int

    @classmethod
    def from_ranked(cls, ranked: RankedEntry) -> RankedRow:
        entry = ranked.entry
        values = {field: getattr(entry, field) for field in cls.model_fields if field != "rank"}
        return cls(rank=ranked.rank, **values)


class SimpleRow(RankedRow):
    false_starts: int


class ProRow(RankedRow):
    pass


class AimRow(RankedRow):
    avg_ms: int
    misses: int


RowT = TypeVar("RowT", bound=RankedRow)


class LeaderboardOut(BaseModel, Generic[RowT]):
    """Top of a mode's leaderboard plus the caller's own position."""

    mode: Mode
    rows: list[RowT]
    me: RowT | None = None


class LeaderboardAllOut(BaseModel, Generic[RowT]):
    mode: Mode
    rows: list[RowT]
