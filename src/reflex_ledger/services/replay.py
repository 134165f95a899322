"""Replay protection for challenge tokens."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Final

import blake3
from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from reflex_ledger.core.settings import settings
from reflex_ledger.models import ConsumedChallenge

logger = logging.getLogger(__name__)

_NEVER: Final[int] = -1


def token_digest(token: str) -> str:
    """Return the storage key for ``token``; raw tokens are never persisted."""
    return blake3.blake3(token.encode("utf-8")).hexdigest()


class ReplayGuard:
    """Tracks spent challenge tokens and rejects their reuse.

    One-time use is enforced by the primary key on ``consumed_challenge``:
    of any number of racing inserts for the same digest, exactly one commits.
    """

    def __init__(
        self,
        *,
        retention_ms: int | None = None,
        sweep_interval_ms: int | None = None,
    ) -> None:
        self.retention_ms = (
            settings.replay_retention_ms if retention_ms is None else retention_ms
        )
        self.sweep_interval_ms = (
            settings.replay_sweep_interval_ms if sweep_interval_ms is None else sweep_interval_ms
        )
        self._sweep_lock = Lock()
        self._last_sweep_ms = _NEVER

    def try_consume(self, db: Session, token: str, now_ms: int) -> bool:
        """Claim ``token`` inside the caller's transaction.

        Returns True if this call claimed the token. On a duplicate the
        session's pending unit of work is rolled back and False is returned.
        The claim only becomes durable when the caller commits.
        """
        stmt = insert(ConsumedChallenge).values(
            token_digest=token_digest(token), consumed_at=now_ms
        )
        try:
            db.execute(stmt)
        except IntegrityError:
            db.rollback()
            return False
        return True

    def is_consumed(self, db: Session, token: str) -> bool:
        """Return True if ``token`` has already been spent."""
        return db.get(ConsumedChallenge, token_digest(token)) is not None

    def sweep(self, db: Session, now_ms: int) -> int | None:
        """Purge records older than the retention window.

        Runs at most once per ``sweep_interval_ms``; returns the number of
        purged rows, or None when the call was throttled. A sweep that fails is
        not counted, so the next call tries again.
        """
        with self._sweep_lock:
            if (
                self._last_sweep_ms != _NEVER
                and now_ms - self._last_sweep_ms < self.sweep_interval_ms
            ):
                return None

        cutoff = now_ms - self.retention_ms
        result = db.execute(
            delete(ConsumedChallenge).where(ConsumedChallenge.consumed_at < cutoff)
        )
        db.commit()
        with self._sweep_lock:
            self._last_sweep_ms = max(self._last_sweep_ms, now_ms)
        purged = result.rowcount or 0
        if purged:
            logger.info("Purged %d consumed challenges older than %d", purged, cutoff)
        return purged


_REPLAY_GUARD = ReplayGuard()


def get_replay_guard() -> ReplayGuard:
    """Return the process-wide replay guard."""
    return _REPLAY_GUARD
