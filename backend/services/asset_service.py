"""Service for owned holdings: create, edit, re-price, sell and remove."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models import Asset
from models.asset_types import (
    AssetType,
    check_details_match,
    details_to_payload,
    parse_asset_type,
    parse_details,
)
from models.utils import utcnow
from services.portfolio_service import get_portfolio_or_404, recalculate_portfolio
from services.price_service import PriceService, normalize_symbol
from services.valuation_service import compute_position_metrics

logger = logging.getLogger(__name__)

# Fields a client may change through update()
_UPDATABLE_FIELDS = frozenset(
    {"name", "quantity", "purchase_price", "current_price", "currency", "purchase_date"}
)


def _asset_type_or_400(value: Any) -> AssetType:
    try:
        return parse_asset_type(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _details_or_400(asset_type: AssetType, payload: Optional[dict]) -> dict:
    try:
        details = parse_details(asset_type, payload)
        check_details_match(asset_type, details)
    except (ValueError, TypeError, ArithmeticError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid details: {e}") from e
    return details_to_payload(details)


class AssetService:
    """Service for managing owned assets within a portfolio.

    Every mutation revalues the asset and recalculates the owning
    portfolio, which appends a history snapshot.
    """

    def __init__(self, price_service: PriceService):
        self._price_service = price_service

    def get(self, db: Session, asset_id: str) -> Asset:
        asset = (
            db.query(Asset)
            .filter(Asset.id == asset_id, Asset.is_wishlist.is_(False))
            .first()
        )
        if not asset:
            raise HTTPException(status_code=404, detail="Asset not found")
        return asset

    def list_for_portfolio(
        self, db: Session, portfolio_id: str, asset_type: Optional[str] = None
    ) -> List[Asset]:
        """Owned assets of a portfolio, optionally filtered by type."""
        get_portfolio_or_404(db, portfolio_id)
        query = db.query(Asset).filter(
            Asset.portfolio_id == portfolio_id, Asset.is_wishlist.is_(False)
        )
        if asset_type is not None:
            query = query.filter(Asset.asset_type == _asset_type_or_400(asset_type).value)
        return query.order_by(Asset.created_at).all()

    def create(
        self,
        db: Session,
        portfolio_id: str,
        name: str,
        symbol: str,
        quantity: Decimal,
        purchase_price: Decimal,
        asset_type: str = AssetType.STOCK.value,
        current_price: Optional[Decimal] = None,
        currency: str = "USD",
        purchase_date: Optional[date] = None,
        details: Optional[dict] = None,
    ) -> Asset:
        """Add a holding to a portfolio.

        Without ``current_price`` the price at the time of adding is looked
        up through the resolver.

        Raises:
            HTTPException: 404 if the portfolio doesn't exist, 400 for an
                unknown asset type, a blank symbol or invalid details.
        """
        portfolio = get_portfolio_or_404(db, portfolio_id)
        kind = _asset_type_or_400(asset_type)
        try:
            symbol = normalize_symbol(symbol)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if current_price is None:
            current_price = self._price_service.resolve_price(symbol).price

        asset = Asset(
            name=name,
            symbol=symbol,
            asset_type=kind.value,
            details=_details_or_400(kind, details),
            quantity=quantity,
            purchase_price=purchase_price,
            current_price=current_price,
            currency=currency.upper(),
            purchase_date=purchase_date,
            is_wishlist=False,
            last_price_update=utcnow(),
        )
        compute_position_metrics(asset)
        portfolio.assets.append(asset)
        db.flush()
        recalculate_portfolio(db, portfolio)
        logger.info("Added %s %s to portfolio %s", quantity, symbol, portfolio_id)
        return asset

    def update(self, db: Session, asset_id: str, changes: dict[str, Any]) -> Asset:
        """Apply field changes. ``details`` replaces the whole detail payload.

        Unknown keys are ignored.
        """
        asset = self.get(db, asset_id)
        for key, value in changes.items():
            if key in _UPDATABLE_FIELDS and value is not None:
                setattr(asset, key, value.upper() if key == "currency" else value)
        if changes.get("details") is not None:
            asset.details = _details_or_400(
                _asset_type_or_400(asset.asset_type), changes["details"]
            )
        compute_position_metrics(asset)
        recalculate_portfolio(db, asset.portfolio)
        return asset

    def update_price(self, db: Session, asset_id: str, price: Optional[Decimal] = None) -> Asset:
        """Set a price explicitly, or resolve a fresh one when ``price`` is None."""
        asset = self.get(db, asset_id)
        if price is None:
            price = self._price_service.resolve_price(asset.symbol).price
        elif price <= 0:
            raise HTTPException(status_code=400, detail="Price must be greater than 0")
        compute_position_metrics(asset, price)
        asset.last_price_update = utcnow()
        recalculate_portfolio(db, asset.portfolio)
        return asset

    def sell(self, db: Session, asset_id: str, quantity: Decimal) -> Asset:
        """Reduce the held quantity. The asset stays, even at zero quantity.

        Raises:
            HTTPException: 400 if quantity is not positive or exceeds the
                held quantity.
        """
        asset = self.get(db, asset_id)
        if quantity <= 0:
            raise HTTPException(status_code=400, detail="Quantity to sell must be greater than 0")
        if quantity > asset.quantity:
            raise HTTPException(status_code=400, detail="Cannot sell more than owned quantity")

        asset.quantity = asset.quantity - quantity
        compute_position_metrics(asset)
        recalculate_portfolio(db, asset.portfolio)
        logger.info("Sold %s %s from asset %s", quantity, asset.symbol, asset_id)
        return asset

    def delete(self, db: Session, asset_id: str) -> None:
        asset = self.get(db, asset_id)
        portfolio = asset.portfolio
        portfolio.assets.remove(asset)
        db.flush()
        recalculate_portfolio(db, portfolio)
        logger.info("Deleted asset %s (%s)", asset_id, asset.symbol)
