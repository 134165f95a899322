"""Shared API dependencies for the ledger endpoints."""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from reflex_ledger.core.clock import Clock, get_clock
from reflex_ledger.core.errors import LedgerError, StorageFailure
from reflex_ledger.core.settings import settings
from reflex_ledger.db.session import get_db
from reflex_ledger.services.challenge import ChallengeIssuer, get_token_codec
from reflex_ledger.services.identity import IdentityResolver, get_identity_resolver
from reflex_ledger.services.ranking import RankQueryEngine, get_rank_engine
from reflex_ledger.services.submission import SubmissionValidator, get_submission_validator


def get_challenge_issuer(
    identity: Annotated[IdentityResolver, Depends(get_identity_resolver)],
) -> ChallengeIssuer:
    """Return a challenge issuer keyed with the configured secret."""
    return ChallengeIssuer(get_token_codec(), identity=identity)


def get_submission_validator_dep() -> SubmissionValidator:
    """Return the shared submission validator."""
    return get_submission_validator()


def get_rank_engine_dep() -> RankQueryEngine:
    """Return the rank query engine."""
    return get_rank_engine()


# Type aliases for dependency injection
SessionDep = Annotated[Session, Depends(get_db)]
ClockDep = Annotated[Clock, Depends(get_clock)]
IssuerDep = Annotated[ChallengeIssuer, Depends(get_challenge_issuer)]
ValidatorDep = Annotated[SubmissionValidator, Depends(get_submission_validator_dep)]
RankEngineDep = Annotated[RankQueryEngine, Depends(get_rank_engine_dep)]
LimitQuery = Annotated[
    int,
    Query(ge=1, le=settings.leaderboard_max_limit, description="Number of rows to return."),
]


def raise_rejection(err: LedgerError) -> NoReturn:
    """Translate a service rejection into an HTTP error response.

    Rejections are client-visible outcomes and carry their code verbatim;
    storage failures only ever expose a generic message.
    """
    message = "server error" if isinstance(err, StorageFailure) else str(err)
    raise HTTPException(
        status_code=err.status_code,
        detail={"error": err.code, "message": message},
    ) from err
