"""Pydantic schemas for price lookups."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from integrations.quote_protocol import PriceSource


class PriceQuoteResponse(BaseModel):
    """A resolved price and the tier that produced it."""

    symbol: str
    price: Decimal
    source: PriceSource
    fetched_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StockDataResponse(BaseModel):
    symbol: str
    name: str
    current_price: Decimal
    previous_close: Decimal
    change_amount: Decimal
    change_percentage: Decimal
    source: PriceSource

    model_config = ConfigDict(from_attributes=True)


class BatchPriceResponse(BaseModel):
    """Prices keyed by the symbols as requested."""

    prices: dict[str, Decimal]


class BenchmarkValueResponse(BaseModel):
    """Index level with change; ``symbol`` is the name as requested."""

    symbol: str
    value: Decimal
    previous_close: Decimal
    change_amount: Decimal
    change_percentage: Decimal
    source: PriceSource

    model_config = ConfigDict(from_attributes=True)


class ExchangeRateResponse(BaseModel):
    from_currency: str
    to_currency: str
    rate: Decimal
