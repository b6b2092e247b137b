"""Price resolution: cache, primary live source, secondary live source, synthetic.

The first tier that produces a positive price wins. Live-source failures are
soft: they are logged and the next tier is tried. The synthetic tier never
fails, so :meth:`PriceService.resolve_price` always returns a quote for a
non-empty symbol.
"""

import hashlib
import logging
import math
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional

from integrations.quote_protocol import PriceQuote, PriceSource, QuoteProvider
from services.price_cache import DEFAULT_TTL_SECONDS, PriceCache

logger = logging.getLogger(__name__)

# Placeholder key shipped in sample configs; never sent upstream
DEMO_API_KEY = "demo"

_CENT = Decimal("0.01")
_RATIO = Decimal("0.0001")
_HUNDRED = Decimal("100")
# Previous close assumed when the live source did not report one
_FALLBACK_PREVIOUS_CLOSE_FACTOR = Decimal("0.98")
_BENCHMARK_PREVIOUS_CLOSE_FACTOR = Decimal("0.995")

# Friendly index names accepted for benchmarks
BENCHMARK_ALIASES: dict[str, str] = {
    "SP500": "^GSPC",
    "NIFTY50": "^NSEI",
    "DJI": "^DJI",
    "NASDAQ": "^IXIC",
}

# Static reference rates, units of currency per 1 USD
_USD_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.92"),
    "GBP": Decimal("0.79"),
    "INR": Decimal("83.12"),
    "JPY": Decimal("149.50"),
    "CNY": Decimal("7.24"),
}

_COMPANY_NAMES: dict[str, str] = {
    "AAPL": "Apple Inc.",
    "GOOGL": "Alphabet Inc.",
    "MSFT": "Microsoft Corporation",
    "AMZN": "Amazon.com Inc.",
    "TSLA": "Tesla Inc.",
    "META": "Meta Platforms Inc.",
    "NVDA": "NVIDIA Corporation",
    "JPM": "JPMorgan Chase & Co.",
    "V": "Visa Inc.",
    "WMT": "Walmart Inc.",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _key_configured(api_key: Optional[str]) -> bool:
    return bool(api_key) and api_key.strip().lower() != DEMO_API_KEY


def normalize_symbol(symbol: Optional[str]) -> str:
    """Strip and uppercase a ticker.

    Raises:
        ValueError: If the symbol is empty or blank.
    """
    normalized = (symbol or "").strip().upper()
    if not normalized:
        raise ValueError("Symbol must not be empty")
    return normalized


def synthetic_price(symbol: str, now: Optional[datetime] = None) -> Decimal:
    """Deterministic pseudo-price for ``symbol`` on the UTC day of ``now``.

    ``base = 50 + h mod 450`` where ``h`` is the SHA-256 digest of the
    symbol, plus a daily ``sin`` wobble of at most 5. The result lies in
    [45, 504] and is stable for a symbol within one UTC day.
    """
    now = now or _utc_now()
    digest = int.from_bytes(hashlib.sha256(symbol.encode("utf-8")).digest(), "big")
    base = 50 + digest % 450
    day_factor = int(now.timestamp()) // 86400
    variance = math.sin(day_factor + digest % 1000) * 5
    return (Decimal(base) + Decimal(variance)).quantize(_CENT, rounding=ROUND_HALF_UP)


def get_company_name(symbol: str) -> str:
    """Display name for well-known tickers, ``"<SYMBOL> Inc."`` otherwise."""
    upper = symbol.strip().upper()
    return _COMPANY_NAMES.get(upper, f"{upper} Inc.")


def get_exchange_rate(from_currency: str, to_currency: str) -> Decimal:
    """Units of ``to_currency`` per one unit of ``from_currency``.

    Rates come from a static USD table; pairs without USD are crossed
    through USD. Results are rounded to 4 dp.

    Raises:
        ValueError: If either currency is not in the table.
    """
    source = (from_currency or "").strip().upper()
    target = (to_currency or "").strip().upper()
    for code in (source, target):
        if code not in _USD_RATES:
            raise ValueError(f"Unsupported currency {code!r}")
    if source == target:
        return Decimal("1.0000")
    rate = _USD_RATES[target] / _USD_RATES[source]
    return rate.quantize(_RATIO, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceServiceConfig:
    """Explicit resolver configuration."""

    primary_api_key: str = ""
    secondary_api_key: str = ""
    live_enabled: bool = False
    timeout_seconds: float = 5.0
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS

    @classmethod
    def from_settings(cls, settings) -> "PriceServiceConfig":
        return cls(
            primary_api_key=settings.FINNHUB_API_KEY,
            secondary_api_key=settings.ALPHAVANTAGE_API_KEY,
            live_enabled=settings.FINNHUB_API_ENABLED,
            timeout_seconds=settings.QUOTE_TIMEOUT_SECONDS,
            cache_ttl_seconds=settings.PRICE_CACHE_TTL_SECONDS,
        )

    @property
    def primary_enabled(self) -> bool:
        return self.live_enabled and _key_configured(self.primary_api_key)

    @property
    def secondary_enabled(self) -> bool:
        return _key_configured(self.secondary_api_key)


@dataclass(frozen=True)
class StockData:
    """Current price plus day change, as shown for a watched security."""

    symbol: str
    name: str
    current_price: Decimal
    previous_close: Decimal
    change_amount: Decimal
    change_percentage: Decimal
    source: PriceSource


@dataclass(frozen=True)
class BenchmarkData:
    """Index level plus day change. ``symbol`` is the name as requested."""

    symbol: str
    value: Decimal
    previous_close: Decimal
    change_amount: Decimal
    change_percentage: Decimal
    source: PriceSource


class PriceService:
    """Resolves a symbol to a price through the fallback chain."""

    def __init__(
        self,
        config: Optional[PriceServiceConfig] = None,
        primary: Optional[QuoteProvider] = None,
        secondary: Optional[QuoteProvider] = None,
        cache: Optional[PriceCache] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize with optional providers for dependency injection.

        Args:
            config: Resolver configuration. Defaults to live sources disabled.
            primary: Primary quote provider. If None, a FinnhubClient is
                     created on first use when the primary tier is enabled.
            secondary: Secondary quote provider. If None, an
                       AlphaVantageClient is created on first use.
            cache: Price cache. If None, one is created with the config TTL.
            clock: Returns the current UTC time. Used for cache expiry,
                   quote timestamps and the synthetic day factor.
        """
        self._config = config or PriceServiceConfig()
        self._primary = primary
        self._secondary = secondary
        self._clock = clock or _utc_now
        self._cache = cache or PriceCache(self._config.cache_ttl_seconds, clock=self._clock)
        self._provider_lock = threading.Lock()
        self._owned_clients: list = []  # Clients built here, closed by close()

    @property
    def config(self) -> PriceServiceConfig:
        return self._config

    @property
    def cache(self) -> PriceCache:
        return self._cache

    @property
    def primary(self) -> QuoteProvider:
        """Get the primary quote provider, creating if not provided."""
        if self._primary is None:
            with self._provider_lock:
                if self._primary is None:
                    from integrations.finnhub_client import FinnhubClient

                    client = FinnhubClient(
                        self._config.primary_api_key, timeout=self._config.timeout_seconds
                    )
                    self._owned_clients.append(client)
                    self._primary = client
        return self._primary

    @property
    def secondary(self) -> QuoteProvider:
        """Get the secondary quote provider, creating if not provided."""
        if self._secondary is None:
            with self._provider_lock:
                if self._secondary is None:
                    from integrations.alphavantage_client import AlphaVantageClient

                    client = AlphaVantageClient(
                        self._config.secondary_api_key, timeout=self._config.timeout_seconds
                    )
                    self._owned_clients.append(client)
                    self._secondary = client
        return self._secondary

    def close(self) -> None:
        """Close the HTTP clients this service created.

        Injected providers are left to their owner. A later lookup builds
        fresh clients.
        """
        with self._provider_lock:
            for client in self._owned_clients:
                if client is self._primary:
                    self._primary = None
                if client is self._secondary:
                    self._secondary = None
                client.close()
            self._owned_clients.clear()

    def _try_live(
        self, provider: QuoteProvider, symbol: str, source: PriceSource
    ) -> Optional[PriceQuote]:
        """Call one live provider; any failure is logged and yields None."""
        try:
            result = provider.get_quote(symbol)
        except Exception as e:
            logger.warning(
                "Price source %s failed for %s: %s: %s",
                source.value, symbol, type(e).__name__, e,
            )
            return None

        price = None
        if result.price is not None:
            price = result.price.quantize(_CENT, rounding=ROUND_HALF_UP)
        # Rounded first: a sub-cent quote must fall through, not become 0.00
        if price is None or price <= 0:
            logger.warning(
                "Price source %s returned non-positive price for %s: %s",
                source.value, symbol, result.price,
            )
            return None

        return PriceQuote(
            symbol=symbol,
            price=price,
            source=source,
            fetched_at=self._clock(),
            previous_close=result.previous_close,
        )

    def resolve_price(self, symbol: str) -> PriceQuote:
        """Resolve ``symbol`` to a positive price.

        Raises:
            ValueError: If the symbol is empty or blank.
        """
        symbol = normalize_symbol(symbol)

        cached = self._cache.get(symbol)
        if cached is not None:
            logger.debug("Price cache hit for %s (%s)", symbol, cached.origin.value)
            return replace(cached.quote, source=PriceSource.CACHED)

        quote: Optional[PriceQuote] = None
        if self._config.primary_enabled:
            quote = self._try_live(self.primary, symbol, PriceSource.LIVE_PRIMARY)
        if quote is None and self._config.secondary_enabled:
            quote = self._try_live(self.secondary, symbol, PriceSource.LIVE_SECONDARY)
        if quote is None:
            now = self._clock()
            quote = PriceQuote(
                symbol=symbol,
                price=synthetic_price(symbol, now),
                source=PriceSource.SYNTHETIC,
                fetched_at=now,
            )
            logger.info("Using synthetic price for %s: %s", symbol, quote.price)

        self._cache.put(quote)
        return quote

    def get_current_price(self, symbol: str) -> Decimal:
        return self.resolve_price(symbol).price

    def get_batch_prices(self, symbols: Iterable[str]) -> dict[str, Decimal]:
        """Resolve many symbols, keyed by the symbols as given.

        Duplicates collapse into one entry. Blank symbols are skipped.
        """
        prices: dict[str, Decimal] = {}
        for symbol in symbols:
            if symbol in prices or not (symbol or "").strip():
                continue
            prices[symbol] = self.resolve_price(symbol).price
        logger.info("Resolved %d prices", len(prices))
        return prices

    @staticmethod
    def _change(
        quote: PriceQuote, fallback_factor: Decimal
    ) -> tuple[Decimal, Decimal, Decimal]:
        """``(previous_close, change, change_percentage)`` for a quote.

        A missing or non-positive previous close is replaced by
        ``price * fallback_factor``. The percentage is 0 when no positive
        previous close can be had.
        """
        previous_close = quote.previous_close
        if previous_close is not None:
            previous_close = previous_close.quantize(_CENT, rounding=ROUND_HALF_UP)
        if previous_close is None or previous_close <= 0:
            previous_close = (quote.price * fallback_factor).quantize(
                _CENT, rounding=ROUND_HALF_UP
            )

        change = quote.price - previous_close
        if previous_close <= 0:
            return previous_close, change, Decimal("0.0000")
        ratio = (change / previous_close).quantize(_RATIO, rounding=ROUND_HALF_UP)
        return previous_close, change, ratio * _HUNDRED

    def fetch_stock_data(self, symbol: str) -> StockData:
        """Current price plus change against the previous close."""
        quote = self.resolve_price(symbol)
        previous_close, change, change_pct = self._change(
            quote, _FALLBACK_PREVIOUS_CLOSE_FACTOR
        )
        return StockData(
            symbol=quote.symbol,
            name=get_company_name(quote.symbol),
            current_price=quote.price,
            previous_close=previous_close,
            change_amount=change,
            change_percentage=change_pct,
            source=quote.source,
        )

    def fetch_benchmark(self, symbol: str) -> BenchmarkData:
        """Index level and day change for a benchmark.

        Friendly names from :data:`BENCHMARK_ALIASES` (``SP500``,
        ``NIFTY50``, ...) are mapped to their index tickers. Without a
        reported previous close the change is taken against
        ``value * 0.995``.

        Raises:
            ValueError: If the symbol is empty or blank.
        """
        name = normalize_symbol(symbol)
        quote = self.resolve_price(BENCHMARK_ALIASES.get(name, name))
        previous_close, change, change_pct = self._change(
            quote, _BENCHMARK_PREVIOUS_CLOSE_FACTOR
        )
        return BenchmarkData(
            symbol=name,
            value=quote.price,
            previous_close=previous_close,
            change_amount=change,
            change_percentage=change_pct,
            source=quote.source,
        )

    def clear_cache(self) -> None:
        self._cache.clear()
