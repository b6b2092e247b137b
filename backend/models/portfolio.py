"""Portfolio model - a named collection of owned assets and watchlist entries."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid, utcnow


class Portfolio(Base):
    """A user's investment portfolio with cached aggregate totals.

    Totals reflect owned (non-watchlist) assets only and are rewritten
    whenever an asset's price or quantity changes.
    """

    __tablename__ = "portfolios"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    description = Column(String(1000), nullable=True)
    base_currency = Column(String(3), nullable=False, default="USD")
    total_value = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    total_investment = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    total_gain_loss = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    gain_loss_percentage = Column(Numeric(10, 4), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    assets = relationship(
        "Asset",
        back_populates="portfolio",
        cascade="all, delete-orphan",
        order_by="Asset.created_at",
    )
    history = relationship(
        "PortfolioHistory",
        back_populates="portfolio",
        cascade="all, delete-orphan",
        order_by="PortfolioHistory.recorded_at",
    )
    benchmarks = relationship(
        "Benchmark",
        back_populates="portfolio",
        cascade="all, delete-orphan",
        order_by="Benchmark.added_at",
    )
