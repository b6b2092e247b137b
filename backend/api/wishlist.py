"""Wishlist (watchlist) API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.helpers import get_wishlist_service
from database import get_db
from schemas.portfolio import RefreshResponse
from schemas.wishlist import (
    WishlistItemCreate,
    WishlistItemResponse,
    WishlistItemUpdate,
    WishlistSummaryResponse,
)
from services.wishlist_service import WishlistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolios/{portfolio_id}/wishlist", tags=["wishlist"])


@router.get("", response_model=list[WishlistItemResponse])
def list_wishlist(
    portfolio_id: str,
    db: Session = Depends(get_db),
    service: WishlistService = Depends(get_wishlist_service),
):
    return service.list(db, portfolio_id)


@router.post("", response_model=WishlistItemResponse, status_code=201)
def add_to_wishlist(
    portfolio_id: str,
    data: WishlistItemCreate,
    db: Session = Depends(get_db),
    service: WishlistService = Depends(get_wishlist_service),
):
    """
    Start watching a symbol.

    Returns 409 if the symbol is already on this portfolio's wishlist.
    """
    item = service.add(
        db, portfolio_id, data.symbol, data.category, data.target_price, data.notes
    )
    db.commit()
    db.refresh(item)
    return item


@router.get("/summary", response_model=WishlistSummaryResponse)
def get_wishlist_summary(
    portfolio_id: str,
    db: Session = Depends(get_db),
    service: WishlistService = Depends(get_wishlist_service),
):
    return service.summary(db, portfolio_id)


@router.post("/refresh", response_model=RefreshResponse)
def refresh_wishlist(
    portfolio_id: str,
    db: Session = Depends(get_db),
    service: WishlistService = Depends(get_wishlist_service),
):
    result = service.refresh_prices(db, portfolio_id)
    db.commit()
    return result


@router.patch("/{item_id}", response_model=WishlistItemResponse)
def update_wishlist_item(
    portfolio_id: str,
    item_id: str,
    data: WishlistItemUpdate,
    db: Session = Depends(get_db),
    service: WishlistService = Depends(get_wishlist_service),
):
    item = service.update(db, portfolio_id, item_id, data.target_price, data.notes)
    db.commit()
    db.refresh(item)
    return item


@router.delete("/{item_id}", status_code=204)
def remove_from_wishlist(
    portfolio_id: str,
    item_id: str,
    db: Session = Depends(get_db),
    service: WishlistService = Depends(get_wishlist_service),
):
    service.remove(db, portfolio_id, item_id)
    db.commit()
