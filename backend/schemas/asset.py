"""Pydantic schemas for owned assets."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.asset_types import AssetType


class AssetCreate(BaseModel):
    """Schema for adding a holding.

    ``details`` carries the type-specific fields (e.g. ``coupon_rate`` for
    a bond). Leave ``current_price`` out to have it looked up.
    """

    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1, max_length=20)
    asset_type: AssetType = AssetType.STOCK
    quantity: Decimal = Field(..., ge=0)
    purchase_price: Decimal = Field(..., ge=0)
    current_price: Optional[Decimal] = Field(None, gt=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    purchase_date: Optional[date] = None
    details: Optional[dict[str, Any]] = None

    @field_validator("asset_type", mode="before")
    @classmethod
    def normalize_asset_type(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v


class AssetUpdate(BaseModel):
    """Schema for editing a holding. Omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1)
    quantity: Optional[Decimal] = Field(None, ge=0)
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    current_price: Optional[Decimal] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    purchase_date: Optional[date] = None
    details: Optional[dict[str, Any]] = None


class AssetSell(BaseModel):
    quantity: Decimal


class AssetPriceUpdate(BaseModel):
    """Explicit price, or null to look one up."""

    price: Optional[Decimal] = None


class AssetResponse(BaseModel):
    """Schema for Asset API response."""

    id: str
    portfolio_id: str
    name: str
    symbol: str
    asset_type: str
    details: Optional[dict[str, Any]] = None
    quantity: Decimal
    purchase_price: Decimal
    current_price: Optional[Decimal] = None
    currency: str
    purchase_date: Optional[date] = None
    invested_amount: Decimal
    current_value: Decimal
    gain_loss: Decimal
    gain_loss_percentage: Decimal
    last_price_update: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
