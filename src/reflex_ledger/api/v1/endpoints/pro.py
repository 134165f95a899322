# src/reflex_ledger/api/v1/endpoints/pro.py
"""Pro reaction mode endpoints.

Pro runs are not challenge-gated; the reported time is trusted within the
configured bounds.
"""

from fastapi import APIRouter

from reflex_ledger.core.errors import LedgerError
from reflex_ledger.core.modes import Mode
from reflex_ledger.core.settings import settings
from reflex_ledger.schemas import (
    LeaderboardAllOut,
    LeaderboardOut,
    ProRow,
    ProSubmission,
    ProSubmissionOut,
)

from ..dependencies import (
    ClockDep,
    LimitQuery,
    RankEngineDep,
    SessionDep,
    ValidatorDep,
    raise_rejection,
)

router = APIRouter(prefix="/pro", tags=["pro"])


@router.post("/submit", response_model=ProSubmissionOut)
def submit_run(
    submission: ProSubmission,
    db: SessionDep,
    validator: ValidatorDep,
    clock: ClockDep,
) -> ProSubmissionOut:
    """Submit a pro-mode reaction time."""
    try:
        outcome = validator.submit_pro(db, submission.name, submission.elapsed_ms, clock.now_ms())
    except LedgerError as err:
        raise_rejection(err)
    return ProSubmissionOut(best_value=outcome.best_value, record_broken=outcome.record_broken)


@router.get("/leaderboard", response_model=LeaderboardOut[ProRow])
def get_leaderboard(
    db: SessionDep,
    ranks: RankEngineDep,
    name: str | None = None,
    limit: LimitQuery = settings.leaderboard_default_limit,
) -> LeaderboardOut[ProRow]:
    rows = [ProRow.from_ranked(ranked) for ranked in ranks.top(db, Mode.PRO, limit)]
    me = ranks.rank_of(db, Mode.PRO, name) if name else None
    return LeaderboardOut[ProRow](
        mode=Mode.PRO,
        rows=rows,
        me=ProRow.from_ranked(me) if me else None,
    )


@router.get("/leaderboard/all", response_model=LeaderboardAllOut[ProRow])
def get_full_leaderboard(db: SessionDep, ranks: RankEngineDep) -> LeaderboardAllOut[ProRow]:
    rows = [ProRow.from_ranked(ranked) for ranked in ranks.all(db, Mode.PRO)]
    return LeaderboardAllOut[ProRow](mode=Mode.PRO, rows=rows)
