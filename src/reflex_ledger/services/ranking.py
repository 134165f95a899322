"""Competitive rank and leaderboard queries.

Each mode is totally ordered by ``best_value`` in the mode's direction with
ties broken by ascending name, so no two players ever share a rank. A
player's rank is one plus the number of entries strictly ahead of them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session, aliased

from reflex_ledger.core.modes import Direction, Mode, mode_rules
from reflex_ledger.core.settings import settings
from reflex_ledger.models import SCORE_MODELS, ScoreEntry


@dataclass(frozen=True)
class RankedEntry:
    """A ledger row together with its position."""

    rank: int
    entry: ScoreEntry


def _strictly_ahead(candidate: Any, reference: Any, direction: Direction) -> Any:
    """SQL predicate: ``candidate`` sorts before ``reference``."""
    if direction is Direction.ASCENDING:
        better = candidate.best_value < reference.best_value
    else:
        better = candidate.best_value > reference.best_value
    return or_(
        better,
        and_(candidate.best_value == reference.best_value, candidate.name < reference.name),
    )


def _ordering(model: Any, direction: Direction) -> tuple[Any, Any]:
    value = model.best_value.asc() if direction is Direction.ASCENDING else model.best_value.desc()
    return value, model.name.asc()


class RankQueryEngine:
    """Read-only rank lookups over the score ledger."""

    def __init__(self, max_limit: int | None = None) -> None:
        self.max_limit = settings.leaderboard_max_limit if max_limit is None else max_limit

    def rank_of(self, db: Session, mode: Mode, name: str) -> RankedEntry | None:
        """Return ``name``'s rank in ``mode``, or None if they have no entry.

        The row and its rank are read in a single statement so the result is
        a consistent snapshot even while other players are writing.
        """
        if not name:
            return None
        model = SCORE_MODELS[mode]
        direction = mode_rules(mode).direction
        ahead = aliased(model)
        ahead_count = (
            select(func.count())
            .select_from(ahead)
            .where(_strictly_ahead(ahead, model, direction))
            .correlate(model)
            .scalar_subquery()
        )
        row = db.execute(select(model, ahead_count).where(model.name == name)).first()
        if row is None:
            return None
        entry, count = row
        return RankedEntry(rank=int(count) + 1, entry=entry)

    def top(self, db: Session, mode: Mode, limit: int) -> list[RankedEntry]:
        """Return the first ``limit`` entries of ``mode`` (1 <= limit <= max_limit)."""
        limit = max(1, min(self.max_limit, limit))
        return self._ranked(db, mode, limit)

    def all(self, db: Session, mode: Mode) -> list[RankedEntry]:
        """Return every entry of ``mode`` in rank order."""
        return self._ranked(db, mode, None)

    def _ranked(self, db: Session, mode: Mode, limit: int | None) -> list[RankedEntry]:
        model = SCORE_MODELS[mode]
        stmt = select(model).order_by(*_ordering(model, mode_rules(mode).direction))
        if limit is not None:
            stmt = stmt.limit(limit)
        entries: Sequence[ScoreEntry] = db.scalars(stmt).all()
        return [RankedEntry(rank=index, entry=entry) for index, entry in enumerate(entries, start=1)]


def get_rank_engine() -> RankQueryEngine:
    """Return a rank query engine."""
    return RankQueryEngine()
