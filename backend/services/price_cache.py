"""In-memory TTL cache for resolved prices."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from integrations.quote_protocol import PriceQuote, PriceSource

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CachedPrice:
    """A quote plus the instant after which it must not be served."""

    quote: PriceQuote
    expires_at: datetime

    @property
    def origin(self) -> PriceSource:
        """The tier that originally produced the cached quote."""
        return self.quote.source

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class PriceCache:
    """Thread-safe symbol -> CachedPrice map with lazy expiry.

    Entries are replaced wholesale under a lock. Expired entries are
    dropped the next time they are read.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds!r}")
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or _utc_now
        self._entries: dict[str, CachedPrice] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, symbol: str) -> Optional[CachedPrice]:
        """Return the unexpired entry for ``symbol``, or None."""
        key = symbol.upper()
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[key]
                logger.debug("Price cache entry for %s expired", key)
                return None
            return entry

    def put(self, quote: PriceQuote) -> CachedPrice:
        entry = CachedPrice(quote=quote, expires_at=self._clock() + self._ttl)
        with self._lock:
            self._entries[quote.symbol.upper()] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cleared %d cached prices", count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
