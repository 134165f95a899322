"""Accept or reject timed runs and apply them to the ledger.

Simple-mode submissions go through the full challenge protocol: input checks,
token authentication, identity binding, the ready/expiry window and one-time
use, then the improve-if-better ledger write. Pro and aim submissions share
the ledger write but carry no challenge.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from reflex_ledger.core.errors import (
    ChallengeAlreadyUsed,
    ChallengeExpired,
    ChallengeMismatch,
    InvalidChallenge,
    InvalidInput,
    StorageFailure,
    TooEarly,
    UnsupportedClient,
)
from reflex_ledger.core.modes import Mode, mode_rules
from reflex_ledger.core.settings import Settings, settings
from reflex_ledger.core.tokens import ChallengePayload, ChallengeTokenCodec, InvalidToken
from reflex_ledger.core.validation import (
    require_client_id,
    require_int_in_range,
    require_name,
    require_samples,
    round_half_up,
)
from reflex_ledger.services.challenge import get_token_codec
from reflex_ledger.services.ledger import ScoreLedger, get_score_ledger
from reflex_ledger.services.replay import ReplayGuard, get_replay_guard

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SimpleOutcome:
    best_value: int
    record_broken: bool
    # False starts spent before this record; None when no record was set.
    false_starts_before_record: int | None
    pending_false_starts: int


@dataclass(frozen=True)
class ProOutcome:
    best_value: int
    record_broken: bool


@dataclass(frozen=True)
class AimOutcome:
    best_value: int
    avg_ms: int
    misses: int
    record_broken: bool


@contextmanager
def _storage_errors(db: Session, action: str) -> Iterator[None]:
    """Roll back and surface unexpected persistence errors as StorageFailure."""
    try:
        yield
    except SQLAlchemyError as err:
        db.rollback()
        logger.exception("Storage failure while %s", action)
        raise StorageFailure() from err


class SubmissionValidator:
    """Orchestrates token checks, replay protection and ledger writes."""

    def __init__(
        self,
        codec: ChallengeTokenCodec,
        replay_guard: ReplayGuard,
        ledger: ScoreLedger,
        config: Settings = settings,
    ) -> None:
        self._codec = codec
        self._replay = replay_guard
        self._ledger = ledger
        self._config = config

    # --- Simple mode ----------------------------------------------------------------
    def submit_simple(
        self,
        db: Session,
        name: str,
        elapsed_ms: int,
        client_id: str,
        token: str,
        now_ms: int,
    ) -> SimpleOutcome:
        """Validate a challenge-gated reaction time and apply it.

        Checks run in a fixed order and the first failure wins, so an expired
        token is reported as expired even if it was never spent.

        Raises:
            InvalidInput, InvalidChallenge, ChallengeMismatch, TooEarly,
            ChallengeExpired, ChallengeAlreadyUsed, StorageFailure.
        """
        rules = mode_rules(Mode.SIMPLE, self._config)
        require_name(name, self._config.name_max_length)
        require_client_id(client_id)
        require_int_in_range(elapsed_ms, rules.min_value, rules.max_value, "elapsed time")
        if not isinstance(token, str) or not token:
            raise InvalidChallenge("missing challenge")

        with _storage_errors(db, "sweeping consumed challenges"):
            self._replay.sweep(db, now_ms)

        challenge = self._authenticate(token, name, client_id, now_ms)

        with self._ledger.locked(Mode.SIMPLE, name), self._ledger.locked_client(client_id):
            with _storage_errors(db, "recording a simple run"):
                # Claim the token before any ledger row: across workers the
                # consumed_challenge key decides the race, and a failed write
                # rolls the claim back with it.
                if not self._replay.try_consume(db, token, now_ms):
                    logger.warning("Rejected replayed challenge for %r", challenge.claimed_name)
                    raise ChallengeAlreadyUsed()
                pending = self._ledger.pending_false_starts(db, client_id)
                write = self._ledger.record(
                    db, Mode.SIMPLE, name, elapsed_ms, now_ms, false_starts=pending
                )
                remaining = pending
                if write.improved:
                    remaining = self._ledger.reset_false_starts(
                        db, client_id, name, now_ms, consumed=pending
                    )
                best_value = write.entry.best_value
                db.commit()

        if write.improved:
            logger.info("New simple best for %r: %d ms", name, best_value)
            return SimpleOutcome(
                best_value=best_value,
                record_broken=True,
                false_starts_before_record=pending,
                pending_false_starts=remaining,
            )
        return SimpleOutcome(
            best_value=best_value,
            record_broken=False,
            false_starts_before_record=None,
            pending_false_starts=pending,
        )

    def _authenticate(
        self, token: str, name: str, client_id: str, now_ms: int
    ) -> ChallengePayload:
        try:
            challenge = self._codec.decode(token)
        except InvalidToken as err:
            logger.info("Rejected challenge token: %s", err)
            raise InvalidChallenge() from err

        if challenge.client_id != client_id or challenge.claimed_name != name:
            raise ChallengeMismatch()
        if now_ms < challenge.ready_at:
            logger.warning(
                "Submission for %r arrived %d ms before the cue",
                name,
                challenge.ready_at - now_ms,
            )
            raise TooEarly()
        if now_ms > challenge.expires_at:
            raise ChallengeExpired()
        return challenge

    # --- False starts ---------------------------------------------------------------
    def report_false_start(self, db: Session, client_id: str, name: str, now_ms: int) -> int:
        """Count a false start for ``client_id`` and return its pending total."""
        require_client_id(client_id)
        require_name(name, self._config.name_max_length)
        with self._ledger.locked_client(client_id):
            return self._write(
                db,
                "recording a false start",
                lambda: self._ledger.add_false_start(db, client_id, name, now_ms),
            )

    def pending_false_starts(self, db: Session, client_id: str) -> int:
        require_client_id(client_id)
        with _storage_errors(db, "reading false starts"):
            return self._ledger.pending_false_starts(db, client_id)

    # --- Pro mode -------------------------------------------------------------------
    def submit_pro(self, db: Session, name: str, elapsed_ms: int, now_ms: int) -> ProOutcome:
        """Apply a pro-mode reaction time.

        Pro mode trusts the client-reported time: there is no challenge gate
        and no false-start tracking, only server-side bounds.
        """
        rules = mode_rules(Mode.PRO, self._config)
        require_name(name, self._config.name_max_length)
        require_int_in_range(elapsed_ms, rules.min_value, rules.max_value, "elapsed time")

        def apply() -> ProOutcome:
            write = self._ledger.record(db, Mode.PRO, name, elapsed_ms, now_ms)
            return ProOutcome(best_value=write.entry.best_value, record_broken=write.improved)

        with self._ledger.locked(Mode.PRO, name):
            outcome = self._write(db, "recording a pro run", apply)
        if outcome.record_broken:
            logger.info("New pro best for %r: %d ms", name, outcome.best_value)
        return outcome

    # --- Aim mode -------------------------------------------------------------------
    def submit_aim(
        self,
        db: Session,
        name: str,
        hits: Sequence[float],
        misses: int,
        now_ms: int,
        *,
        touch_client: bool = False,
    ) -> AimOutcome:
        """Score an aim run and apply it.

        ``score = round(mean(hits)) + misses * penalty``; lower is better.
        Touch clients are refused before anything else is looked at.
        """
        config = self._config
        if touch_client:
            raise UnsupportedClient("mobile not allowed")
        require_name(name, config.name_max_length)
        clean_hits = require_samples(
            hits, config.aim_targets, config.aim_min_hit_ms, config.aim_max_hit_ms, "hits"
        )
        require_int_in_range(misses, 0, config.aim_max_misses, "misses")

        avg_ms = round_half_up(sum(clean_hits) / len(clean_hits))
        if avg_ms < config.aim_min_avg_ms:
            logger.warning("Rejected implausible aim average %d ms for %r", avg_ms, name)
            raise InvalidInput("average too low")
        score = avg_ms + misses * config.aim_miss_penalty

        def apply() -> AimOutcome:
            write = self._ledger.record(
                db, Mode.AIM, name, score, now_ms, avg_ms=avg_ms, misses=misses
            )
            entry = write.entry
            return AimOutcome(
                best_value=entry.best_value,
                avg_ms=entry.avg_ms,
                misses=entry.misses,
                record_broken=write.improved,
            )

        with self._ledger.locked(Mode.AIM, name):
            return self._write(db, "recording an aim run", apply)

    def _write(self, db: Session, action: str, operation: Callable[[], T]) -> T:
        """Run ``operation`` and commit it as one unit.

        ``operation`` must read whatever it returns before the commit expires
        the session's instances.
        """
        with _storage_errors(db, action):
            result = operation()
            db.commit()
        return result


def get_submission_validator() -> SubmissionValidator:
    """Return a validator wired to the process-wide guard and ledger locks."""
    return SubmissionValidator(get_token_codec(), get_replay_guard(), get_score_ledger())
