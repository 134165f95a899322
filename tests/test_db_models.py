"""Unit tests for the ledger ORM models and the initial migration.

These tests verify basic mapping correctness (table names, primary keys,
the per-mode extra columns) and that the Alembic revision builds the same
tables the models describe.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from reflex_ledger.core.modes import Mode
from reflex_ledger.core.settings import settings
from reflex_ledger.db.session import Base
from reflex_ledger.models import (
    SCORE_MODELS,
    AimScore,
    ConsumedChallenge,
    FalseStartCycle,
    ProScore,
    SimpleScore,
)

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert SimpleScore.__tablename__ == "simple_score"
    assert ProScore.__tablename__ == "pro_score"
    assert AimScore.__tablename__ == "aim_score"
    assert FalseStartCycle.__tablename__ == "false_start_cycle"
    assert ConsumedChallenge.__tablename__ == "consumed_challenge"


def test_score_models_cover_every_mode():
    assert set(SCORE_MODELS) == set(Mode)


@pytest.mark.parametrize("model", [SimpleScore, ProScore, AimScore])
def test_score_tables_are_keyed_by_name(model):
    pk_names = {c.name for c in model.__table__.primary_key}
    assert pk_names == {"name"}


def test_mode_specific_columns():
    assert "false_starts" in SimpleScore.__table__.c
    assert "false_starts" not in ProScore.__table__.c
    assert {"avg_ms", "misses"} <= set(AimScore.__table__.c.keys())


def test_consumed_challenge_keyed_by_digest():
    pk_names = {c.name for c in ConsumedChallenge.__table__.primary_key}
    assert pk_names == {"token_digest"}


def test_migration_matches_models(tmp_path, monkeypatch):
    """Upgrading an empty database yields the tables and columns of the models."""
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("ALEMBIC_URL", url)
    cfg = Config(str(REPO_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(REPO_ROOT / "migrations"))

    command.upgrade(cfg, "head")

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        for table in Base.metadata.sorted_tables:
            migrated = {col["name"] for col in inspector.get_columns(table.name)}
            assert migrated == set(table.c.keys()), table.name
    finally:
        engine.dispose()

    command.downgrade(cfg, "base")
    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()


def test_migrations_default_to_configured_database(tmp_path, monkeypatch):
    """Without ALEMBIC_URL the application's DATABASE_URL is migrated."""
    url = f"sqlite:///{tmp_path / 'configured.db'}"
    monkeypatch.delenv("ALEMBIC_URL", raising=False)
    monkeypatch.setattr(settings, "database_url", url)
    cfg = Config(str(REPO_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(REPO_ROOT / "migrations"))

    command.upgrade(cfg, "head")

    engine = create_engine(url)
    try:
        assert {"simple_score", "consumed_challenge"} <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
