"""Portfolio API endpoints."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.helpers import get_refresh_service
from database import get_db
from schemas.portfolio import (
    DashboardSummaryResponse,
    PortfolioCreate,
    PortfolioHistoryResponse,
    PortfolioResponse,
    PortfolioUpdate,
    RefreshResponse,
)
from services.portfolio_service import PortfolioService
from services.refresh_service import RefreshService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolios", tags=["portfolios"])
service = PortfolioService()


@router.get("", response_model=list[PortfolioResponse])
def list_portfolios(db: Session = Depends(get_db)):
    return service.list_all(db)


@router.post("", response_model=PortfolioResponse, status_code=201)
def create_portfolio(data: PortfolioCreate, db: Session = Depends(get_db)):
    portfolio = service.create(db, data.name, data.description, data.base_currency)
    db.commit()
    db.refresh(portfolio)
    return portfolio


@router.get("/{portfolio_id}", response_model=PortfolioResponse)
def get_portfolio(portfolio_id: str, db: Session = Depends(get_db)):
    return service.get(db, portfolio_id)


@router.patch("/{portfolio_id}", response_model=PortfolioResponse)
def update_portfolio(
    portfolio_id: str, data: PortfolioUpdate, db: Session = Depends(get_db)
):
    portfolio = service.update(
        db, portfolio_id, data.name, data.description, data.base_currency
    )
    db.commit()
    db.refresh(portfolio)
    return portfolio


@router.delete("/{portfolio_id}", status_code=204)
def delete_portfolio(portfolio_id: str, db: Session = Depends(get_db)):
    """Delete a portfolio with all of its assets, watchlist and history."""
    service.delete(db, portfolio_id)
    db.commit()


@router.post("/{portfolio_id}/refresh", response_model=RefreshResponse)
def refresh_portfolio(
    portfolio_id: str,
    db: Session = Depends(get_db),
    refresh_service: RefreshService = Depends(get_refresh_service),
):
    """
    Fetch fresh prices for every asset, then recompute totals.

    Assets whose price could not be refreshed keep their previous values
    and are listed under ``failed``.
    """
    result = refresh_service.refresh_portfolio(db, portfolio_id)
    db.commit()
    return result


@router.post("/{portfolio_id}/recalculate", response_model=PortfolioResponse)
def recalculate_portfolio(portfolio_id: str, db: Session = Depends(get_db)):
    """Recompute totals from stored prices without fetching new ones."""
    portfolio = service.recalculate(db, portfolio_id)
    db.commit()
    db.refresh(portfolio)
    return portfolio


@router.get("/{portfolio_id}/dashboard", response_model=DashboardSummaryResponse)
def get_dashboard(portfolio_id: str, db: Session = Depends(get_db)):
    """
    Totals, allocation by asset type, top 5 performers and the last
    30 days of history snapshots.
    """
    summary = service.get_dashboard_summary(db, portfolio_id)
    return DashboardSummaryResponse.model_validate(summary)


@router.get("/{portfolio_id}/history", response_model=list[PortfolioHistoryResponse])
def get_history(
    portfolio_id: str,
    start: Optional[date] = Query(None, description="Start date (inclusive)"),
    end: Optional[date] = Query(None, description="End date (inclusive)"),
    db: Session = Depends(get_db),
):
    return service.get_history(db, portfolio_id, start, end)
