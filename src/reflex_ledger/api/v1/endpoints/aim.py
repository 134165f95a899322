# src/reflex_ledger/api/v1/endpoints/aim.py
"""Aim accuracy mode endpoints."""

from fastapi import APIRouter, Request

from reflex_ledger.core.errors import LedgerError
from reflex_ledger.core.modes import Mode
from reflex_ledger.core.settings import settings
from reflex_ledger.core.validation import is_touch_client
from reflex_ledger.schemas import (
    AimRow,
    AimSubmission,
    AimSubmissionOut,
    LeaderboardAllOut,
    LeaderboardOut,
)

from ..dependencies import (
    ClockDep,
    LimitQuery,
    RankEngineDep,
    SessionDep,
    ValidatorDep,
    raise_rejection,
)

router = APIRouter(prefix="/aim", tags=["aim"])


@router.post("/submit", response_model=AimSubmissionOut)
def submit_run(
    submission: AimSubmission,
    request: Request,
    db: SessionDep,
    validator: ValidatorDep,
    clock: ClockDep,
) -> AimSubmissionOut:
    """Submit hit latencies and misses for one aim run.

    Phones and tablets are refused; the mode is only ranked for pointer devices.
    """
    try:
        outcome = validator.submit_aim(
            db,
            submission.name,
            submission.hits,
            submission.misses,
            clock.now_ms(),
            touch_client=is_touch_client(request.headers),
        )
    except LedgerError as err:
        raise_rejection(err)
    return AimSubmissionOut(
        best_value=outcome.best_value,
        avg_ms=outcome.avg_ms,
        misses=outcome.misses,
        record_broken=outcome.record_broken,
    )


@router.get("/leaderboard", response_model=LeaderboardOut[AimRow])
def get_leaderboard(
    db: SessionDep,
    ranks: RankEngineDep,
    name: str | None = None,
    limit: LimitQuery = settings.leaderboard_default_limit,
) -> LeaderboardOut[AimRow]:
    rows = [AimRow.from_ranked(ranked) for ranked in ranks.top(db, Mode.AIM, limit)]
    me = ranks.rank_of(db, Mode.AIM, name) if name else None
    return LeaderboardOut[AimRow](
        mode=Mode.AIM,
        rows=rows,
        me=AimRow.from_ranked(me) if me else None,
    )


@router.get("/leaderboard/all", response_model=LeaderboardAllOut[AimRow])
def get_full_leaderboard(db: SessionDep, ranks: RankEngineDep) -> LeaderboardAllOut[AimRow]:
    rows = [AimRow.from_ranked(ranked) for ranked in ranks.all(db, Mode.AIM)]
    return LeaderboardAllOut[AimRow](mode=Mode.AIM, rows=rows)
