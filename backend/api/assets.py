"""Asset (holding) API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import get_asset_service
from database import get_db
from schemas.asset import AssetCreate, AssetPriceUpdate, AssetResponse, AssetSell, AssetUpdate
from services.asset_service import AssetService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assets"])


@router.get("/api/portfolios/{portfolio_id}/assets", response_model=list[AssetResponse])
def list_assets(
    portfolio_id: str,
    asset_type: Optional[str] = Query(None, description="Filter by asset type"),
    db: Session = Depends(get_db),
    service: AssetService = Depends(get_asset_service),
):
    return service.list_for_portfolio(db, portfolio_id, asset_type)


@router.post(
    "/api/portfolios/{portfolio_id}/assets", response_model=AssetResponse, status_code=201
)
def create_asset(
    portfolio_id: str,
    data: AssetCreate,
    db: Session = Depends(get_db),
    service: AssetService = Depends(get_asset_service),
):
    """
    Add a holding to a portfolio.

    Without ``current_price`` the price is looked up at creation time.
    """
    asset = service.create(
        db,
        portfolio_id,
        name=data.name,
        symbol=data.symbol,
        quantity=data.quantity,
        purchase_price=data.purchase_price,
        asset_type=data.asset_type.value,
        current_price=data.current_price,
        currency=data.currency,
        purchase_date=data.purchase_date,
        details=data.details,
    )
    db.commit()
    db.refresh(asset)
    return asset


@router.get("/api/assets/{asset_id}", response_model=AssetResponse)
def get_asset(
    asset_id: str,
    db: Session = Depends(get_db),
    service: AssetService = Depends(get_asset_service),
):
    return service.get(db, asset_id)


@router.patch("/api/assets/{asset_id}", response_model=AssetResponse)
def update_asset(
    asset_id: str,
    data: AssetUpdate,
    db: Session = Depends(get_db),
    service: AssetService = Depends(get_asset_service),
):
    asset = service.update(db, asset_id, data.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(asset)
    return asset


@router.post("/api/assets/{asset_id}/price", response_model=AssetResponse)
def update_asset_price(
    asset_id: str,
    data: AssetPriceUpdate,
    db: Session = Depends(get_db),
    service: AssetService = Depends(get_asset_service),
):
    asset = service.update_price(db, asset_id, data.price)
    db.commit()
    db.refresh(asset)
    return asset


@router.post("/api/assets/{asset_id}/sell", response_model=AssetResponse)
def sell_asset(
    asset_id: str,
    data: AssetSell,
    db: Session = Depends(get_db),
    service: AssetService = Depends(get_asset_service),
):
    """Reduce the held quantity. Returns 400 for a non-positive or excess quantity."""
    asset = service.sell(db, asset_id, data.quantity)
    db.commit()
    db.refresh(asset)
    return asset


@router.delete("/api/assets/{asset_id}", status_code=204)
def delete_asset(
    asset_id: str,
    db: Session = Depends(get_db),
    service: AssetService = Depends(get_asset_service),
):
    service.delete(db, asset_id)
    db.commit()
