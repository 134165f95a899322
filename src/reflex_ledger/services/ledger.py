"""Per-mode best-score ledger and false-start bookkeeping.

Writes here only flush; the caller owns the transaction and commits once the
whole submission has been applied.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from reflex_ledger.core.modes import Mode, mode_rules
from reflex_ledger.models import SCORE_MODELS, FalseStartCycle, ScoreEntry
from reflex_ledger.services.locks import KeyedLock, get_ledger_locks

_FALSE_START_KEY = "false-start"


@dataclass(frozen=True)
class LedgerWrite:
    """Result of an improve-if-better update."""

    entry: ScoreEntry
    improved: bool


class ScoreLedger:
    """Best-score store with improve-if-better semantics."""

    def __init__(self, locks: KeyedLock | None = None) -> None:
        self._locks = locks if locks is not None else get_ledger_locks()

    @contextmanager
    def locked(self, mode: Mode, name: str) -> Iterator[None]:
        """Serialize read-compare-write sequences for one player in one mode."""
        with self._locks.hold(mode.value, name):
            yield

    @contextmanager
    def locked_client(self, client_id: str) -> Iterator[None]:
        """Serialize updates to one client's false-start counter."""
        with self._locks.hold(_FALSE_START_KEY, client_id):
            yield

    def best(self, db: Session, mode: Mode, name: str) -> ScoreEntry | None:
        """Return the stored entry for ``name`` in ``mode``, if any."""
        return db.get(SCORE_MODELS[mode], name)

    def record(
        self,
        db: Session,
        mode: Mode,
        name: str,
        value: int,
        now_ms: int,
        **fields: Any,
    ) -> LedgerWrite:
        """Store ``value`` (and mode-specific ``fields``) if it beats the current best.

        A value equal to the stored best is not an improvement. Callers must
        hold :meth:`locked` for ``(mode, name)``.
        """
        model = SCORE_MODELS[mode]
        entry = db.get(model, name, with_for_update=True, populate_existing=True)
        if entry is None:
            entry = model(name=name, best_value=value, updated_at=now_ms, **fields)
            db.add(entry)
            db.flush()
            return LedgerWrite(entry=entry, improved=True)

        if not mode_rules(mode).is_better(value, entry.best_value):
            return LedgerWrite(entry=entry, improved=False)

        entry.best_value = value
        entry.updated_at = now_ms
        for key, field_value in fields.items():
            setattr(entry, key, field_value)
        db.flush()
        return LedgerWrite(entry=entry, improved=True)

    # --- False starts ---------------------------------------------------------------
    def pending_false_starts(self, db: Session, client_id: str) -> int:
        """Return false starts reported by ``client_id`` since its last record."""
        count = db.scalar(
            select(FalseStartCycle.pending_count).where(FalseStartCycle.client_id == client_id)
        )
        return count or 0

    def add_false_start(self, db: Session, client_id: str, name: str, now_ms: int) -> int:
        """Count one false start for ``client_id`` and return the new pending total."""
        cycle = db.get(FalseStartCycle, client_id, with_for_update=True, populate_existing=True)
        if cycle is None:
            cycle = FalseStartCycle(client_id=client_id, name=name, pending_count=1, updated_at=now_ms)
            db.add(cycle)
        else:
            cycle.pending_count = FalseStartCycle.pending_count + 1
            cycle.name = name
            cycle.updated_at = now_ms
        db.flush()
        return cycle.pending_count

    def reset_false_starts(
        self, db: Session, client_id: str, name: str, now_ms: int, *, consumed: int
    ) -> int:
        """Settle the ``consumed`` false starts credited to a new record.

        The decrement is applied in the database, so false starts another
        worker reported after ``consumed`` was read stay pending. Returns the
        count still pending.
        """
        pending = FalseStartCycle.pending_count
        db.execute(
            update(FalseStartCycle)
            .where(FalseStartCycle.client_id == client_id)
            .values(
                pending_count=case((pending > consumed, pending - consumed), else_=0),
                name=name,
                updated_at=now_ms,
            )
            .execution_options(synchronize_session="fetch")
        )
        return self.pending_false_starts(db, client_id)


def get_score_ledger() -> ScoreLedger:
    """Return a ledger bound to the process-wide lock table."""
    return ScoreLedger()
