"""PortfolioHistory model - append-only snapshots of portfolio totals."""

from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utcnow


class PortfolioHistory(Base):
    """Portfolio totals captured after a recompute, used for value charts.

    Rows are only ever inserted; a day may hold several snapshots.
    """

    __tablename__ = "portfolio_history"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    portfolio_id = Column(
        String(36), ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False, index=True
    )
    record_date = Column(Date, nullable=False, index=True)
    recorded_at = Column(DateTime, nullable=False, default=utcnow)
    total_value = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    total_investment = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    gain_loss = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    gain_loss_percentage = Column(Numeric(10, 4), nullable=False, default=Decimal("0"))

    # Relationships
    portfolio = relationship("Portfolio", back_populates="history")
