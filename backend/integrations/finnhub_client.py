"""Finnhub quote provider (primary live source)."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from integrations.exceptions import (
    ProviderConnectionError,
    ProviderDataError,
    raise_for_status,
)
from integrations.quote_protocol import QuoteResult

logger = logging.getLogger(__name__)

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"


def _positive_decimal(value: Any) -> Optional[Decimal]:
    """Parse a numeric JSON field, returning None unless it is > 0."""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite() or parsed <= 0:
        return None
    return parsed


class FinnhubClient:
    """Quote provider using the Finnhub ``/quote`` endpoint.

    The response is ``{"c": current, "pc": previous_close, "o", "h", "l", ...}``.
    A missing, non-numeric or zero ``c`` means Finnhub has no quote for
    the symbol and is reported as :class:`ProviderDataError`.
    """

    def __init__(self, api_key: str, timeout: float = 5.0, base_url: str = FINNHUB_BASE_URL):
        self._api_key = api_key
        self._client = httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def provider_name(self) -> str:
        return "finnhub"

    def get_quote(self, symbol: str) -> QuoteResult:
        try:
            response = self._client.get(
                "/quote", params={"symbol": symbol, "token": self._api_key}
            )
        except httpx.TimeoutException as e:
            raise ProviderConnectionError(
                f"Finnhub timed out for {symbol}", provider_name=self.provider_name
            ) from e
        except httpx.TransportError as e:
            raise ProviderConnectionError(
                f"Finnhub request failed for {symbol}: {e}", provider_name=self.provider_name
            ) from e

        raise_for_status(response, self.provider_name)

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderDataError(
                f"Finnhub returned non-JSON body for {symbol}", provider_name=self.provider_name
            ) from e
        if not isinstance(data, dict):
            raise ProviderDataError(
                f"Finnhub returned unexpected payload for {symbol}",
                provider_name=self.provider_name,
            )

        price = _positive_decimal(data.get("c"))
        if price is None:
            raise ProviderDataError(
                f"Finnhub has no current price for {symbol} (c={data.get('c')!r})",
                provider_name=self.provider_name,
            )

        logger.debug("Finnhub: %s = %s", symbol, price)
        return QuoteResult(
            symbol=symbol,
            price=price,
            previous_close=_positive_decimal(data.get("pc")),
        )
