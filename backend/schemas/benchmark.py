"""Pydantic schemas for portfolio benchmarks."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BenchmarkCreate(BaseModel):
    """Schema for adding a benchmark. ``name`` defaults to the symbol."""

    symbol: str = Field(..., min_length=1, max_length=20)
    name: Optional[str] = Field(None, max_length=255)
    index_type: Optional[str] = Field(None, max_length=50)  # EQUITY, BOND, COMMODITY, CURRENCY
    description: Optional[str] = Field(None, max_length=500)
    currency: str = Field("USD", min_length=3, max_length=10)


class BenchmarkResponse(BaseModel):
    """Schema for Benchmark API response."""

    id: str
    portfolio_id: str
    symbol: str
    name: str
    index_type: Optional[str] = None
    description: Optional[str] = None
    currency: str
    current_value: Optional[Decimal] = None
    change_amount: Optional[Decimal] = None
    change_percentage: Optional[Decimal] = None
    last_updated: Optional[datetime] = None
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)
