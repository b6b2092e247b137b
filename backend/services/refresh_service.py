"""Refresh orchestrator: re-price holdings, revalue them and evaluate alerts."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Optional, Sequence, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models import Asset
from services.alert_service import evaluate_alert
from services.portfolio_service import get_portfolio_or_404, recalculate_portfolio
from services.price_service import PriceService, StockData
from services.valuation_service import compute_position_metrics

logger = logging.getLogger(__name__)

# Price plus, for watchlist entries, the day-change data
_Quote = tuple[Decimal, Optional[StockData]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RefreshResult:
    """Outcome of a refresh run."""

    refreshed: int = 0
    failed: list[str] = field(default_factory=list)  # Symbols that kept their prior price
    alerts_fired: list[str] = field(default_factory=list)
    portfolio_ids: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.refreshed + len(self.failed)


class RefreshService:
    """Re-prices positions one at a time, tolerating per-position failures.

    Between requests the service waits ``request_delay`` seconds to stay
    within free-tier quote rate limits. With ``max_workers > 1`` positions
    are priced on a bounded thread pool. Workers only fetch quotes; the
    session-bound positions are updated on the calling thread.
    """

    def __init__(
        self,
        price_service: PriceService,
        request_delay: float = 0.0,
        max_workers: int = 1,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers!r}")
        self._price_service = price_service
        self._request_delay = request_delay
        self._max_workers = max_workers
        self._clock = clock or _utc_now
        self._sleep = sleep


    def _lookup(self, symbol: str, is_wishlist: bool) -> Union[_Quote, Exception]:
        """Fetch a price without touching the position. Failures are returned."""
        try:
            if is_wishlist:
                data = self._price_service.fetch_stock_data(symbol)
                return data.current_price, data
            return self._price_service.resolve_price(symbol).price, None
        except Exception as e:
            return e

    def _apply(
        self, position: Asset, outcome: Union[_Quote, Exception], result: RefreshResult
    ) -> None:
        """Write a lookup outcome onto the position and tally it."""
        if isinstance(outcome, Exception):
            logger.warning(
                "Failed to refresh %s (%s): %s", position.symbol, position.id, outcome
            )
            result.failed.append(position.symbol)
            return

        price, data = outcome
        if data is not None:
            position.change_amount = data.change_amount
            position.change_percentage = data.change_percentage
        compute_position_metrics(position, price)
        position.last_price_update = self._clock()
        result.refreshed += 1
        if evaluate_alert(position):
            result.alerts_fired.append(position.symbol)

    def refresh_all(
        self, positions: Sequence[Asset], result: Optional[RefreshResult] = None
    ) -> list[Asset]:
        """Refresh every position and return them in input order.

        A position whose refresh fails keeps its previous price and metrics.
        Pool workers only fetch prices; positions and ``result`` are written
        on the calling thread.
        """
        result = result if result is not None else RefreshResult()
        positions = list(positions)
        jobs = [(p.symbol, bool(p.is_wishlist)) for p in positions]

        if self._max_workers == 1 or len(positions) <= 1:
            for i, (position, job) in enumerate(zip(positions, jobs)):
                if i and self._request_delay:
                    self._sleep(self._request_delay)
                self._apply(position, self._lookup(*job), result)
        else:
            def work(job: tuple[str, bool]) -> Union[_Quote, Exception]:
                outcome = self._lookup(*job)
                if self._request_delay:
                    self._sleep(self._request_delay)
                return outcome

            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                outcomes = list(pool.map(work, jobs))
            for position, outcome in zip(positions, outcomes):
                self._apply(position, outcome, result)

        logger.info(
            "Refreshed %d/%d positions (%d failed, %d alerts fired)",
            result.refreshed, len(positions), len(result.failed), len(result.alerts_fired),
        )
        return positions
    def refresh_portfolio(self, db: Session, portfolio_id: str) -> RefreshResult:
        """Refresh all assets of one portfolio, then recompute and snapshot it.

        Raises:
            HTTPException: 404 if the portfolio doesn't exist.
        """
        portfolio = get_portfolio_or_404(db, portfolio_id)
        result = RefreshResult(portfolio_ids=[portfolio.id])
        self.refresh_all(portfolio.assets, result)
        recalculate_portfolio(db, portfolio)
        return result

    def refresh_stale(self, db: Session, stale_after: timedelta) -> RefreshResult:
        """Refresh every asset not priced within ``stale_after``.

        Each portfolio that owns a refreshed asset is recomputed and gets a
        history snapshot.
        """
        cutoff = self._clock() - stale_after
        stale = (
            db.query(Asset)
            .filter(
                or_(
                    Asset.last_price_update.is_(None),
                    Asset.last_price_update < cutoff,
                )
            )
            .order_by(Asset.portfolio_id, Asset.created_at)
            .all()
        )
        result = RefreshResult()
        if not stale:
            logger.debug("No stale assets to refresh")
            return result

        self.refresh_all(stale, result)

        seen: set[str] = set()
        for asset in stale:
            if asset.portfolio_id in seen:
                continue
            seen.add(asset.portfolio_id)
            recalculate_portfolio(db, asset.portfolio)
            result.portfolio_ids.append(asset.portfolio_id)
        return result
