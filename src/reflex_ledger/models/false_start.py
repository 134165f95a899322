# src/reflex_ledger/models/false_start.py
"""False-start bookkeeping for the simple mode."""

from sqlalchemy import BigInteger, CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from reflex_ledger.db.session import Base


class FalseStartCycle(Base):
    """False starts a client has reported since its name's last record.

    The counter resets to zero exactly when that client sets a new simple-mode
    best and increments on every reported false start.
    """

    __tablename__ = "false_start_cycle"
    __table_args__ = (
        CheckConstraint("pending_count >= 0", name="ck_false_start_cycle_pending"),
    )

    client_id: Mapped[str] = mapped_column(Text, primary_key=True)
    # Name most recently associated with the client.
    name: Mapped[str] = mapped_column(Text, nullable=False)
    pending_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
