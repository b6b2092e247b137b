"""External quote provider integrations.

This package contains:
- Quote protocol: Common interface for price quote sources
- Finnhub client: Primary live quote source
- Alpha Vantage client: Secondary live quote source
"""

from integrations.quote_protocol import PriceQuote, PriceSource, QuoteProvider, QuoteResult

__all__ = [
    "PriceQuote",
    "PriceSource",
    "QuoteProvider",
    "QuoteResult",
]
