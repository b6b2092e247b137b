"""Market data API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from api.helpers import get_price_service
from schemas.market_data import (
    BatchPriceResponse,
    BenchmarkValueResponse,
    ExchangeRateResponse,
    PriceQuoteResponse,
    StockDataResponse,
)
from services.price_service import PriceService, get_exchange_rate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/market-data", tags=["market-data"])


@router.get("/price/{symbol}", response_model=PriceQuoteResponse)
def get_price(symbol: str, service: PriceService = Depends(get_price_service)):
    """Resolve the current price for a symbol.

    Always succeeds for a non-blank symbol; ``source`` tells which tier
    answered (live-primary, live-secondary, synthetic or cached).
    """
    try:
        return service.resolve_price(symbol)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/quote/{symbol}", response_model=StockDataResponse)
def get_quote(symbol: str, service: PriceService = Depends(get_price_service)):
    """Current price plus change against the previous close."""
    try:
        return service.fetch_stock_data(symbol)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/prices", response_model=BatchPriceResponse)
def get_batch_prices(
    symbols: list[str], service: PriceService = Depends(get_price_service)
):
    """Resolve several symbols at once.

    Symbols are passed in the request body as a JSON array. The response
    is keyed by the symbols as given.
    """
    return {"prices": service.get_batch_prices(symbols)}


@router.delete("/cache", status_code=204)
def clear_price_cache(service: PriceService = Depends(get_price_service)):
    """Drop every cached price."""
    service.clear_cache()


@router.get("/benchmark/{symbol}", response_model=BenchmarkValueResponse)
def get_benchmark(symbol: str, service: PriceService = Depends(get_price_service)):
    """Index level and day change. Accepts names like ``SP500`` or ``NIFTY50``."""
    try:
        return service.fetch_benchmark(symbol)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/exchange-rate", response_model=ExchangeRateResponse)
def get_rate(
    from_currency: str = Query(..., alias="from"),
    to_currency: str = Query(..., alias="to"),
):
    """Units of ``to`` per one unit of ``from``."""
    try:
        rate = get_exchange_rate(from_currency, to_currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return ExchangeRateResponse(
        from_currency=from_currency.strip().upper(),
        to_currency=to_currency.strip().upper(),
        rate=rate,
    )
