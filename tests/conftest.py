# tests/conftest.py
from __future__ import annotations

import os
import random
from collections.abc import Callable, Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from reflex_ledger.api.v1.dependencies import (  # noqa: E402
    get_challenge_issuer,
    get_submission_validator_dep,
)
from reflex_ledger.core.clock import get_clock  # noqa: E402
from reflex_ledger.core.settings import settings  # noqa: E402
from reflex_ledger.core.tokens import ChallengeTokenCodec  # noqa: E402
from reflex_ledger.db.session import Base  # noqa: E402
from reflex_ledger.db.session import get_db as app_get_session  # noqa: E402
from reflex_ledger.main import app as fastapi_app  # noqa: E402
from reflex_ledger.services.challenge import ChallengeIssuer, IssuedChallenge  # noqa: E402
from reflex_ledger.services.ledger import ScoreLedger  # noqa: E402
from reflex_ledger.services.locks import KeyedLock  # noqa: E402
from reflex_ledger.services.ranking import RankQueryEngine  # noqa: E402
from reflex_ledger.services.replay import ReplayGuard  # noqa: E402
from reflex_ledger.services.submission import SubmissionValidator  # noqa: E402

TEST_DB_URL = "sqlite://"
START_MS = 1_760_000_000_000
BASE_DELAY_MS = 1_500
JITTER_MS = 2_500
TTL_MS = 30_000


class ManualClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, now_ms: int = START_MS) -> None:
        self.current = now_ms

    def now_ms(self) -> int:
        return self.current

    def advance(self, ms: int) -> int:
        self.current += ms
        return self.current

    def set(self, now_ms: int) -> None:
        self.current = now_ms


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        # Services commit, so wipe every table to keep tests independent.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def codec() -> ChallengeTokenCodec:
    return ChallengeTokenCodec(settings.secret_key)


@pytest.fixture()
def issuer(codec: ChallengeTokenCodec) -> ChallengeIssuer:
    return ChallengeIssuer(
        codec,
        base_delay_ms=BASE_DELAY_MS,
        jitter_ms=JITTER_MS,
        ttl_ms=TTL_MS,
        rng=random.Random(1234),
    )


@pytest.fixture()
def replay_guard() -> ReplayGuard:
    return ReplayGuard(retention_ms=86_400_000, sweep_interval_ms=60_000)


@pytest.fixture()
def ledger() -> ScoreLedger:
    return ScoreLedger(KeyedLock())


@pytest.fixture()
def ranks() -> RankQueryEngine:
    return RankQueryEngine(max_limit=100)


@pytest.fixture()
def validator(
    codec: ChallengeTokenCodec, replay_guard: ReplayGuard, ledger: ScoreLedger
) -> SubmissionValidator:
    return SubmissionValidator(codec, replay_guard, ledger)


@pytest.fixture()
def ready_challenge(
    issuer: ChallengeIssuer, clock: ManualClock
) -> Callable[..., IssuedChallenge]:
    """Issue a challenge and move the clock just past its ready instant."""

    def _issue(client_id: str = "client-a", name: str = "alice", wait_ms: int = 250) -> IssuedChallenge:
        challenge = issuer.issue(client_id, name, clock.now_ms())
        clock.set(challenge.ready_at + wait_ms)
        return challenge

    return _issue


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(
    app: FastAPI,
    clock: ManualClock,
    issuer: ChallengeIssuer,
    validator: SubmissionValidator,
) -> Iterator[TestClient]:
    overrides: dict[Callable[..., object], Callable[[], object]] = {
        get_clock: lambda: clock,
        get_challenge_issuer: lambda: issuer,
        get_submission_validator_dep: lambda: validator,
    }
    app.dependency_overrides.update(overrides)
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)
