"""Pydantic schemas for watchlist entries."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from services.valuation_service import performance_since_added


class WishlistItemCreate(BaseModel):
    """Schema for adding a symbol to the watchlist."""

    symbol: str = Field(..., min_length=1, max_length=20)
    category: str = Field("STOCK", max_length=20)  # STOCK, ETF, MF, BOND
    target_price: Optional[Decimal] = Field(None, gt=0)
    notes: Optional[str] = None


class WishlistItemUpdate(BaseModel):
    """A new target price re-arms the alert."""

    target_price: Optional[Decimal] = Field(None, gt=0)
    notes: Optional[str] = None


class WishlistItemResponse(BaseModel):
    """Schema for a watchlist entry."""

    id: str
    portfolio_id: str
    symbol: str
    name: str
    category: Optional[str] = None
    notes: Optional[str] = None
    current_price: Optional[Decimal] = None
    price_when_added: Optional[Decimal] = None
    change_amount: Optional[Decimal] = None
    change_percentage: Optional[Decimal] = None
    target_price: Optional[Decimal] = None
    alert_enabled: bool
    alert_fired: bool
    last_price_update: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def performance_since_added(self) -> Decimal:
        return performance_since_added(self)


class WishlistSummaryResponse(BaseModel):
    total: int
    gainers: int
    losers: int
    active_alerts: int
    fired_alerts: int

    model_config = ConfigDict(from_attributes=True)
