"""Quote provider protocol definitions.

Defines the interface for live quote sources (Finnhub, Alpha Vantage) and
the quote value types passed between the resolver, the cache and callers.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Protocol


class PriceSource(str, Enum):
    """Which tier of the resolution chain produced a price."""

    LIVE_PRIMARY = "live-primary"
    LIVE_SECONDARY = "live-secondary"
    SYNTHETIC = "synthetic"
    CACHED = "cached"


@dataclass
class QuoteResult:
    """Raw result from a single quote provider call."""

    symbol: str
    price: Decimal
    previous_close: Optional[Decimal] = None  # Not every provider reports it


@dataclass(frozen=True)
class PriceQuote:
    """A resolved price. Ephemeral, never persisted."""

    symbol: str
    price: Decimal
    source: PriceSource
    fetched_at: datetime
    previous_close: Optional[Decimal] = None


class QuoteProvider(Protocol):
    """Protocol for live quote providers.

    Implementations raise a :class:`~integrations.exceptions.ProviderError`
    subtype on any failure and only return prices greater than zero.
    """

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'finnhub')."""
        ...

    def get_quote(self, symbol: str) -> QuoteResult:
        """Fetch the latest quote for ``symbol``."""
        ...
