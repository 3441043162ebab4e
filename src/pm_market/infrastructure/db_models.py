"""SQLAlchemy ORM model for the market_snapshots table.

Used for type reference and Alembic metadata only; persistence.py uses raw
text() SQL. Amounts are NUMERIC(78, 0) so full 256-bit integers fit.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.pm_common.database import Base

_AMOUNT = Numeric(78, 0)


class MarketSnapshotORM(Base):
    __tablename__ = "market_snapshots"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    outcome1: Mapped[str] = mapped_column(Text, nullable=False)
    outcome2: Mapped[str] = mapped_column(Text, nullable=False)
    creator: Mapped[str] = mapped_column(Text, nullable=False)
    phase: Mapped[str] = mapped_column(Text, nullable=False)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False)
    asserted_outcome_id: Mapped[str] = mapped_column(Text, nullable=False)
    asserted_outcome: Mapped[str | None] = mapped_column(Text)
    active_assertion_id: Mapped[str | None] = mapped_column(Text)
    reward: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    required_bond: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    total_collateral: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    claim1_supply: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    claim2_supply: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    reserve1: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    reserve2: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    creator_fees_accrued: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    protocol_fees_accrued: Mapped[int] = mapped_column(_AMOUNT, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
