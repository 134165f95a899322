# src/reflex_ledger/api/v1/endpoints/simple.py
"""Simple reaction mode: challenges, submissions, false starts and rankings."""

from fastapi import APIRouter, Query

from reflex_ledger.core.errors import LedgerError
from reflex_ledger.core.modes import Mode
from reflex_ledger.core.settings import settings
from reflex_ledger.schemas import (
    ChallengeOut,
    ChallengeRequest,
    FalseStartOut,
    FalseStartReport,
    LeaderboardAllOut,
    LeaderboardOut,
    SimpleRow,
    SimpleSubmission,
    SimpleSubmissionOut,
)

from ..dependencies import (
    ClockDep,
    IssuerDep,
    LimitQuery,
    RankEngineDep,
    SessionDep,
    ValidatorDep,
    raise_rejection,
)

router = APIRouter(prefix="/simple", tags=["simple"])


@router.post("/challenge", response_model=ChallengeOut)
async def issue_challenge(
    request: ChallengeRequest,
    issuer: IssuerDep,
    clock: ClockDep,
) -> ChallengeOut:
    """Issue a signed challenge bound to the client and claimed name."""
    try:
        challenge = issuer.issue(request.client_id, request.claimed_name, clock.now_ms())
    except LedgerError as err:
        raise_rejection(err)
    return ChallengeOut(
        token=challenge.token,
        ready_at=challenge.ready_at,
        expires_at=challenge.expires_at,
    )


@router.post("/submit", response_model=SimpleSubmissionOut)
def submit_run(
    submission: SimpleSubmission,
    db: SessionDep,
    validator: ValidatorDep,
    clock: ClockDep,
) -> SimpleSubmissionOut:
    """Submit a reaction time together with the challenge it answers."""
    try:
        outcome = validator.submit_simple(
            db,
            name=submission.name,
            elapsed_ms=submission.elapsed_ms,
            client_id=submission.client_id,
            token=submission.token,
            now_ms=clock.now_ms(),
        )
    except LedgerError as err:
        raise_rejection(err)
    return SimpleSubmissionOut(
        best_value=outcome.best_value,
        record_broken=outcome.record_broken,
        false_starts_before_record=outcome.false_starts_before_record,
        pending_false_starts=outcome.pending_false_starts,
    )


@router.post("/false-start", response_model=FalseStartOut)
def report_false_start(
    report: FalseStartReport,
    db: SessionDep,
    validator: ValidatorDep,
    clock: ClockDep,
) -> FalseStartOut:
    """Count a premature click against the client's current record attempt."""
    try:
        pending = validator.report_false_start(db, report.client_id, report.name, clock.now_ms())
    except LedgerError as err:
        raise_rejection(err)
    return FalseStartOut(pending_false_starts=pending)


@router.get("/stats", response_model=FalseStartOut)
def get_stats(
    db: SessionDep,
    validator: ValidatorDep,
    client_id: str = Query(..., description="Client to report on."),
) -> FalseStartOut:
    """Return false starts reported since the client's last record."""
    try:
        pending = validator.pending_false_starts(db, client_id)
    except LedgerError as err:
        raise_rejection(err)
    return FalseStartOut(pending_false_starts=pending)


@router.get("/leaderboard", response_model=LeaderboardOut[SimpleRow])
def get_leaderboard(
    db: SessionDep,
    ranks: RankEngineDep,
    name: str | None = None,
    limit: LimitQuery = settings.leaderboard_default_limit,
) -> LeaderboardOut[SimpleRow]:
    """Return the fastest players and, if ``name`` is given, that player's rank."""
    rows = [SimpleRow.from_ranked(ranked) for ranked in ranks.top(db, Mode.SIMPLE, limit)]
    me = ranks.rank_of(db, Mode.SIMPLE, name) if name else None
    return LeaderboardOut[SimpleRow](
        mode=Mode.SIMPLE,
        rows=rows,
        me=SimpleRow.from_ranked(me) if me else None,
    )


@router.get("/leaderboard/all", response_model=LeaderboardAllOut[SimpleRow])
def get_full_leaderboard(db: SessionDep, ranks: RankEngineDep) -> LeaderboardAllOut[SimpleRow]:
    """Return every simple-mode entry in rank order."""
    rows = [SimpleRow.from_ranked(ranked) for ranked in ranks.all(db, Mode.SIMPLE)]
    return LeaderboardAllOut[SimpleRow](mode=Mode.SIMPLE, rows=rows)
