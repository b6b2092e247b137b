"""Alpha Vantage quote provider (secondary live source)."""

import logging
from decimal import Decimal, InvalidOperation

import httpx

from integrations.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderDataError,
    raise_for_status,
)
from integrations.quote_protocol import QuoteResult

logger = logging.getLogger(__name__)

ALPHAVANTAGE_BASE_URL = "https://www.alphavantage.co"

# Keys Alpha Vantage uses for throttling and usage notices, served with HTTP 200
_NOTICE_KEYS = ("Note", "Information")


class AlphaVantageClient:
    """Quote provider using the Alpha Vantage ``GLOBAL_QUOTE`` function."""

    def __init__(
        self, api_key: str, timeout: float = 5.0, base_url: str = ALPHAVANTAGE_BASE_URL
    ):
        self._api_key = api_key
        self._client = httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def provider_name(self) -> str:
        return "alphavantage"

    def get_quote(self, symbol: str) -> QuoteResult:
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self._api_key}
        try:
            response = self._client.get("/query", params=params)
        except httpx.TimeoutException as e:
            raise ProviderConnectionError(
                f"Alpha Vantage timed out for {symbol}", provider_name=self.provider_name
            ) from e
        except httpx.TransportError as e:
            raise ProviderConnectionError(
                f"Alpha Vantage request failed for {symbol}: {e}",
                provider_name=self.provider_name,
            ) from e

        raise_for_status(response, self.provider_name)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderDataError(
                f"Alpha Vantage returned non-JSON body for {symbol}",
                provider_name=self.provider_name,
            ) from e
        if not isinstance(data, dict):
            raise ProviderDataError(
                f"Alpha Vantage returned unexpected payload for {symbol}",
                provider_name=self.provider_name,
            )

        for key in _NOTICE_KEYS:
            if key in data:
                raise ProviderAPIError(
                    f"Alpha Vantage throttled request for {symbol}: {data[key]}",
                    provider_name=self.provider_name,
                    status_code=429,
                )

        quote = data.get("Global Quote")
        if not isinstance(quote, dict) or "05. price" not in quote:
            raise ProviderDataError(
                f"Alpha Vantage has no quote for {symbol}", provider_name=self.provider_name
            )

        try:
            price = Decimal(str(quote["05. price"]).strip())
        except (InvalidOperation, ValueError) as e:
            raise ProviderDataError(
                f"Alpha Vantage price for {symbol} is not numeric: {quote['05. price']!r}",
                provider_name=self.provider_name,
            ) from e
        if not price.is_finite() or price <= 0:
            raise ProviderDataError(
                f"Alpha Vantage price for {symbol} is not positive: {price}",
                provider_name=self.provider_name,
            )

        previous_close = None
        raw_pc = quote.get("08. previous close")
        if raw_pc:
            try:
                previous_close = Decimal(str(raw_pc).strip())
            except (InvalidOperation, ValueError):
                previous_close = None
            if previous_close is not None and (
                not previous_close.is_finite() or previous_close <= 0
            ):
                previous_close = None

        logger.debug("Alpha Vantage: %s = %s", symbol, price)
        return QuoteResult(symbol=symbol, price=price, previous_close=previous_close)
