"""Service for the per-portfolio watchlist of securities not (yet) owned."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models import Asset
from models.asset_types import AssetType
from models.utils import utcnow
from services.alert_service import reset_alert
from services.portfolio_service import get_portfolio_or_404
from services.price_service import PriceService, normalize_symbol
from services.refresh_service import RefreshResult, RefreshService
from services.valuation_service import compute_position_metrics

logger = logging.getLogger(__name__)


@dataclass
class WishlistSummary:
    total: int
    gainers: int
    losers: int
    active_alerts: int  # Enabled and not yet fired
    fired_alerts: int


class WishlistService:
    """Add, edit, re-price and summarize watchlist entries.

    Watchlist entries are :class:`~models.Asset` rows with
    ``is_wishlist=True`` and zero quantity, so they never count toward
    portfolio totals.
    """

    def __init__(
        self,
        price_service: PriceService,
        refresh_service: Optional[RefreshService] = None,
    ):
        self._price_service = price_service
        self._refresh_service = refresh_service or RefreshService(price_service)

    def _query(self, db: Session, portfolio_id: str):
        return db.query(Asset).filter(
            Asset.portfolio_id == portfolio_id, Asset.is_wishlist.is_(True)
        )

    def get_item(self, db: Session, portfolio_id: str, item_id: str) -> Asset:
        """Fetch a watchlist entry, 404 unless it belongs to ``portfolio_id``."""
        item = self._query(db, portfolio_id).filter(Asset.id == item_id).first()
        if not item:
            raise HTTPException(status_code=404, detail="Wishlist item not found")
        return item

    def list(self, db: Session, portfolio_id: str) -> List[Asset]:
        """Watchlist entries, most recently added first."""
        get_portfolio_or_404(db, portfolio_id)
        return self._query(db, portfolio_id).order_by(Asset.created_at.desc()).all()

    def add(
        self,
        db: Session,
        portfolio_id: str,
        symbol: str,
        category: str = "STOCK",
        target_price: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> Asset:
        """Start watching ``symbol``, capturing its current price.

        Raises:
            HTTPException: 404 if the portfolio doesn't exist, 400 for a
                blank symbol, 409 if the symbol is already watched.
        """
        portfolio = get_portfolio_or_404(db, portfolio_id)
        try:
            symbol = normalize_symbol(symbol)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if self._query(db, portfolio_id).filter(Asset.symbol == symbol).first():
            raise HTTPException(
                status_code=409, detail=f"{symbol} is already on the wishlist"
            )

        data = self._price_service.fetch_stock_data(symbol)
        item = Asset(
            name=data.name,
            symbol=symbol,
            asset_type=AssetType.STOCK.value,
            is_wishlist=True,
            category=category.upper(),
            notes=notes,
            quantity=Decimal("0"),
            purchase_price=Decimal("0"),
            current_price=data.current_price,
            price_when_added=data.current_price,
            change_amount=data.change_amount,
            change_percentage=data.change_percentage,
            target_price=target_price,
            alert_enabled=target_price is not None,
            alert_fired=False,
            last_price_update=utcnow(),
        )
        compute_position_metrics(item)
        portfolio.assets.append(item)
        db.flush()
        logger.info("Added %s to wishlist for portfolio %s", symbol, portfolio_id)
        return item

    def update(
        self,
        db: Session,
        portfolio_id: str,
        item_id: str,
        target_price: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> Asset:
        """Change the target price and/or notes.

        A new target re-arms the alert: it is enabled and its fired flag
        cleared.
        """
        item = self.get_item(db, portfolio_id, item_id)
        if target_price is not None:
            item.target_price = target_price
            item.alert_enabled = True
            reset_alert(item)
        if notes is not None:
            item.notes = notes
        db.flush()
        return item

    def remove(self, db: Session, portfolio_id: str, item_id: str) -> None:
        item = self.get_item(db, portfolio_id, item_id)
        db.delete(item)
        db.flush()
        logger.info("Removed %s from wishlist (portfolio %s)", item.symbol, portfolio_id)

    def refresh_prices(self, db: Session, portfolio_id: str) -> RefreshResult:
        """Re-price every watchlist entry and evaluate alerts.

        Entries that fail to refresh keep their previous values.
        """
        items = self.list(db, portfolio_id)
        result = RefreshResult(portfolio_ids=[portfolio_id])
        self._refresh_service.refresh_all(items, result)
        db.flush()
        return result

    def summary(self, db: Session, portfolio_id: str) -> WishlistSummary:
        items = self.list(db, portfolio_id)
        return WishlistSummary(
            total=len(items),
            gainers=sum(1 for i in items if i.change_percentage is not None and i.change_percentage > 0),
            losers=sum(1 for i in items if i.change_percentage is not None and i.change_percentage < 0),
            active_alerts=sum(1 for i in items if i.alert_enabled and not i.alert_fired),
            fired_alerts=sum(1 for i in items if i.alert_fired),
        )
