# src/reflex_ledger/models/replay_protection.py
"""Models supporting challenge replay protection."""


from sqlalchemy import BigInteger, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from reflex_ledger.db.session import Base


class ConsumedChallenge(Base):
    """Record indicating that a challenge token has already been spent."""

    __tablename__ = "consumed_challenge"
    __table_args__ = (Index("ix_consumed_challenge_consumed_at", "consumed_at"),)

    # Hex BLAKE3 digest of the full token; existence means "already used".
    token_digest: Mapped[str] = mapped_column(String(64), primary_key=True)
    consumed_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
