"""Pydantic schemas for portfolios, dashboard and history."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.asset import AssetResponse


class PortfolioCreate(BaseModel):
    """Schema for creating a Portfolio."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    base_currency: str = Field("USD", min_length=3, max_length=3)


class PortfolioUpdate(BaseModel):
    """Schema for updating a Portfolio. Omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    base_currency: Optional[str] = Field(None, min_length=3, max_length=3)


class PortfolioResponse(BaseModel):
    """Schema for Portfolio API response."""

    id: str
    name: str
    description: Optional[str] = None
    base_currency: str
    total_value: Decimal
    total_investment: Decimal
    total_gain_loss: Decimal
    gain_loss_percentage: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PortfolioHistoryResponse(BaseModel):
    """A single portfolio totals snapshot."""

    record_date: date
    recorded_at: datetime
    total_value: Decimal
    total_investment: Decimal
    gain_loss: Decimal
    gain_loss_percentage: Decimal

    model_config = ConfigDict(from_attributes=True)


class AllocationResponse(BaseModel):
    asset_type: str
    total_value: Decimal
    count: int
    percentage: Decimal

    model_config = ConfigDict(from_attributes=True)


class DashboardSummaryResponse(BaseModel):
    """Totals, allocation, top performers and recent history for one portfolio."""

    portfolio_id: str
    name: str
    base_currency: str
    total_value: Decimal
    total_investment: Decimal
    total_gain_loss: Decimal
    gain_loss_percentage: Decimal
    asset_count: int
    wishlist_count: int
    allocation: list[AllocationResponse]
    top_performers: list[AssetResponse]
    performance: list[PortfolioHistoryResponse]

    model_config = ConfigDict(from_attributes=True)


class RefreshResponse(BaseModel):
    """Outcome of a price refresh."""

    refreshed: int
    failed: list[str]
    alerts_fired: list[str]
    portfolio_ids: list[str]

    model_config = ConfigDict(from_attributes=True)
