# src/reflex_ledger/models/score.py
"""Per-mode best-score tables.

Each table holds one row per player name. ``best_value`` only ever moves in
the mode's better direction; rows are never deleted in normal operation.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, CheckConstraint, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from reflex_ledger.core.modes import Mode
from reflex_ledger.db.session import Base


class ScoreEntryMixin:
    """Columns shared by every mode's ledger."""

    name: Mapped[str] = mapped_column(Text, primary_key=True)
    best_value: Mapped[int] = mapped_column(Integer, nullable=False)
    # Epoch milliseconds of the last improvement.
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)


class SimpleScore(ScoreEntryMixin, Base):
    """Best reaction time in the challenge-gated simple mode."""

    __tablename__ = "simple_score"
    __table_args__ = (
        CheckConstraint("false_starts >= 0", name="ck_simple_score_false_starts"),
        Index("ix_simple_score_rank", "best_value", "name"),
    )

    # False starts spent before this record was set.
    false_starts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class ProScore(ScoreEntryMixin, Base):
    """Best reaction time in pro mode."""

    __tablename__ = "pro_score"
    __table_args__ = (Index("ix_pro_score_rank", "best_value", "name"),)


class AimScore(ScoreEntryMixin, Base):
    """Best aim score: rounded mean hit time plus miss penalties."""

    __tablename__ = "aim_score"
    __table_args__ = (
        CheckConstraint("misses >= 0", name="ck_aim_score_misses"),
        Index("ix_aim_score_rank", "best_value", "name"),
    )

    avg_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    misses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


ScoreEntry = SimpleScore | ProScore | AimScore

SCORE_MODELS: dict[Mode, type[SimpleScore] | type[ProScore] | type[AimScore]] = {
    Mode.SIMPLE: SimpleScore,
    Mode.PRO: ProScore,
    Mode.AIM: AimScore,
}
