"""Asset model - an owned holding or a watchlist entry within a portfolio."""

from decimal import Decimal

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.asset_types import AssetDetails, details_to_payload, parse_details
from models.utils import generate_uuid, utcnow


class Asset(Base):
    """A single tracked security: either owned (``is_wishlist=False``) or watched.

    Derived columns (invested_amount, current_value, gain_loss,
    gain_loss_percentage) are written by
    :func:`services.valuation_service.compute_position_metrics`.
    """

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    portfolio_id = Column(
        String(36), ForeignKey("portfolios.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String, nullable=False)
    symbol = Column(String(20), nullable=False, index=True)
    asset_type = Column(String(20), nullable=False, default="STOCK")  # Discriminant
    details = Column(JSON, nullable=True)  # Type-specific payload, see models.asset_types

    quantity = Column(Numeric(18, 4), nullable=False, default=Decimal("0"))
    purchase_price = Column(Numeric(19, 4), nullable=False, default=Decimal("0"))
    current_price = Column(Numeric(19, 4), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    purchase_date = Column(Date, nullable=True)

    invested_amount = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    current_value = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    gain_loss = Column(Numeric(19, 2), nullable=False, default=Decimal("0"))
    gain_loss_percentage = Column(Numeric(10, 4), nullable=False, default=Decimal("0"))

    # Watchlist fields
    is_wishlist = Column(Boolean, nullable=False, default=False)
    category = Column(String(20), nullable=True)  # STOCK, ETF, MF, BOND
    notes = Column(Text, nullable=True)
    price_when_added = Column(Numeric(19, 4), nullable=True)
    change_amount = Column(Numeric(19, 4), nullable=True)  # vs. previous close
    change_percentage = Column(Numeric(10, 4), nullable=True)
    target_price = Column(Numeric(19, 4), nullable=True)
    alert_enabled = Column(Boolean, nullable=False, default=False)
    alert_fired = Column(Boolean, nullable=False, default=False)

    last_price_update = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    portfolio = relationship("Portfolio", back_populates="assets")

    def get_details(self) -> AssetDetails:
        """Parse the JSON payload into the dataclass for this asset's type."""
        return parse_details(self.asset_type, self.details)

    def set_details(self, details: AssetDetails) -> None:
        self.details = details_to_payload(details)
