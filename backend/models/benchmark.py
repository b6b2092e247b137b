"""Benchmark model - a market index tracked alongside a portfolio."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utcnow


class Benchmark(Base):
    """An index (S&P 500, NIFTY 50, ...) used to compare portfolio performance.

    Values are refreshed through the price resolver and may be null until
    the first successful lookup.
    """

    __tablename__ = "benchmarks"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    portfolio_id = Column(
        String(36), ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False, index=True
    )
    symbol = Column(String(20), nullable=False)
    name = Column(String, nullable=False)
    index_type = Column(String(50), nullable=True)  # EQUITY, BOND, COMMODITY, CURRENCY
    description = Column(String(500), nullable=True)
    currency = Column(String(10), nullable=False, default="USD")

    current_value = Column(Numeric(19, 4), nullable=True)
    change_amount = Column(Numeric(19, 4), nullable=True)
    change_percentage = Column(Numeric(10, 4), nullable=True)

    last_updated = Column(DateTime, nullable=True)
    added_at = Column(DateTime, default=utcnow)

    # Relationships
    portfolio = relationship("Portfolio", back_populates="benchmarks")
