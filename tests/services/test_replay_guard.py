# tests/services/test_replay_guard.py
"""Tests for one-time challenge consumption and retention sweeps."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from reflex_ledger.models import ConsumedChallenge
from reflex_ledger.services.replay import ReplayGuard, token_digest

NOW = 1_760_000_000_000


def test_first_consume_wins_second_is_refused(db_session: Session) -> None:
    guard = ReplayGuard(retention_ms=10_000, sweep_interval_ms=1_000)

    assert guard.try_consume(db_session, "tok-1", NOW) is True
    db_session.commit()
    assert guard.try_consume(db_session, "tok-1", NOW + 5) is False
    assert guard.is_consumed(db_session, "tok-1")


def test_distinct_tokens_do_not_collide(db_session: Session) -> None:
    guard = ReplayGuard()
    assert guard.try_consume(db_session, "tok-a", NOW)
    assert guard.try_consume(db_session, "tok-b", NOW)
    db_session.commit()
    assert not guard.is_consumed(db_session, "tok-c")


def test_only_digest_is_stored(db_session: Session) -> None:
    guard = ReplayGuard()
    guard.try_consume(db_session, "secret-token", NOW)
    db_session.commit()

    stored = db_session.scalars(select(ConsumedChallenge.token_digest)).all()
    assert stored == [token_digest("secret-token")]
    assert len(stored[0]) == 64


def test_uncommitted_claim_is_discarded_on_rollback(db_session: Session) -> None:
    guard = ReplayGuard()
    assert guard.try_consume(db_session, "tok-rb", NOW)
    db_session.rollback()

    assert not guard.is_consumed(db_session, "tok-rb")


def test_sweep_purges_expired_records(db_session: Session) -> None:
    guard = ReplayGuard(retention_ms=1_000, sweep_interval_ms=500)
    guard.try_consume(db_session, "old", NOW)
    guard.try_consume(db_session, "fresh", NOW + 1_500)
    db_session.commit()

    purged = guard.sweep(db_session, NOW + 2_000)

    assert purged == 1
    assert not guard.is_consumed(db_session, "old")
    assert guard.is_consumed(db_session, "fresh")


def test_sweep_is_throttled(db_session: Session) -> None:
    guard = ReplayGuard(retention_ms=1_000, sweep_interval_ms=500)

    assert guard.sweep(db_session, NOW) == 0
    assert guard.sweep(db_session, NOW + 499) is None
    assert guard.sweep(db_session, NOW + 500) == 0


def test_failed_sweep_is_retried_on_next_call() -> None:
    guard = ReplayGuard(retention_ms=1_000, sweep_interval_ms=60_000)
    session = MagicMock(spec=Session)
    session.execute.side_effect = [
        OperationalError("DELETE FROM consumed_challenge", {}, Exception("database is locked")),
        MagicMock(rowcount=3),
    ]

    with pytest.raises(OperationalError):
        guard.sweep(session, NOW)

    assert guard.sweep(session, NOW + 1) == 3
    assert guard.sweep(session, NOW + 2) is None
    assert session.commit.call_count == 1
