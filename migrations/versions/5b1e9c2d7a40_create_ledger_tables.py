"""create ledger tables

Revision ID: 5b1e9c2d7a40
Revises:
Create Date: 2026-10-18 09:12:41.318205

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1e9c2d7a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _score_columns() -> list[sa.Column]:
    return [
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("best_value", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
    ]


def upgrade() -> None:
    """Create score, false-start and consumed-challenge tables."""
    op.create_table(
        "simple_score",
        *_score_columns(),
        sa.Column("false_starts", sa.Integer(), nullable=False),
        sa.CheckConstraint("false_starts >= 0", name="ck_simple_score_false_starts"),
        sa.PrimaryKeyConstraint("name"),
    )
    op.create_index("ix_simple_score_rank", "simple_score", ["best_value", "name"])

    op.create_table(
        "pro_score",
        *_score_columns(),
        sa.PrimaryKeyConstraint("name"),
    )
    op.create_index("ix_pro_score_rank", "pro_score", ["best_value", "name"])

    op.create_table(
        "aim_score",
        *_score_columns(),
        sa.Column("avg_ms", sa.Integer(), nullable=False),
        sa.Column("misses", sa.Integer(), nullable=False),
        sa.CheckConstraint("misses >= 0", name="ck_aim_score_misses"),
        sa.PrimaryKeyConstraint("name"),
    )
    op.create_index("ix_aim_score_rank", "aim_score", ["best_value", "name"])

    op.create_table(
        "false_start_cycle",
        sa.Column("client_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("pending_count", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("pending_count >= 0", name="ck_false_start_cycle_pending"),
        sa.PrimaryKeyConstraint("client_id"),
    )

    op.create_table(
        "consumed_challenge",
        sa.Column("token_digest", sa.String(length=64), nullable=False),
        sa.Column("consumed_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("token_digest"),
    )
    op.create_index(
        "ix_consumed_challenge_consumed_at", "consumed_challenge", ["consumed_at"]
    )


def downgrade() -> None:
    """Drop every ledger table."""
    op.drop_index("ix_consumed_challenge_consumed_at", table_name="consumed_challenge")
    op.drop_table("consumed_challenge")
    op.drop_table("false_start_cycle")
    op.drop_index("ix_aim_score_rank", table_name="aim_score")
    op.drop_table("aim_score")
    op.drop_index("ix_pro_score_rank", table_name="pro_score")
    op.drop_table("pro_score")
    op.drop_index("ix_simple_score_rank", table_name="simple_score")
    op.drop_table("simple_score")
