"""Portfolio CRUD, recompute and dashboard aggregation."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from models import Asset, Portfolio, PortfolioHistory
from services.valuation_service import (
    AllocationEntry,
    PortfolioTotals,
    apply_totals,
    compute_position_metrics,
    recalculate_portfolio_totals,
    top_performers,
)

logger = logging.getLogger(__name__)

DASHBOARD_TOP_PERFORMERS = 5
DASHBOARD_PERFORMANCE_DAYS = 30


@dataclass
class DashboardSummary:
    """Everything the portfolio dashboard renders in one payload."""

    portfolio_id: str
    name: str
    base_currency: str
    total_value: Decimal
    total_investment: Decimal
    total_gain_loss: Decimal
    gain_loss_percentage: Decimal
    asset_count: int
    wishlist_count: int
    allocation: list[AllocationEntry] = field(default_factory=list)
    top_performers: list[Asset] = field(default_factory=list)
    performance: list[PortfolioHistory] = field(default_factory=list)


def get_portfolio_or_404(db: Session, portfolio_id: str) -> Portfolio:
    portfolio = db.query(Portfolio).filter(Portfolio.id == portfolio_id).first()
    if not portfolio:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return portfolio


def record_snapshot(
    db: Session, portfolio: Portfolio, totals: PortfolioTotals, now: Optional[datetime] = None
) -> PortfolioHistory:
    """Append a history row for ``portfolio`` with the given totals."""
    now = now or datetime.now(timezone.utc)
    snapshot = PortfolioHistory(
        portfolio_id=portfolio.id,
        record_date=now.date(),
        recorded_at=now,
        total_value=totals.total_value,
        total_investment=totals.total_investment,
        gain_loss=totals.total_gain_loss,
        gain_loss_percentage=totals.gain_loss_percentage,
    )
    db.add(snapshot)
    return snapshot


def recalculate_portfolio(db: Session, portfolio: Portfolio) -> PortfolioTotals:
    """Revalue every asset at its stored price, write totals and snapshot them.

    Prices are not looked up; run a refresh first for fresh prices.
    """
    for asset in portfolio.assets:
        compute_position_metrics(asset)
    totals = recalculate_portfolio_totals(portfolio.assets)
    apply_totals(portfolio, totals)
    record_snapshot(db, portfolio, totals)
    db.flush()
    logger.debug(
        "Recalculated portfolio %s: value=%s gain=%s",
        portfolio.id, totals.total_value, totals.total_gain_loss,
    )
    return totals


class PortfolioService:
    """Service for managing portfolios and their aggregate views."""

    def list_all(self, db: Session) -> List[Portfolio]:
        return db.query(Portfolio).order_by(Portfolio.created_at).all()

    def get(self, db: Session, portfolio_id: str) -> Portfolio:
        return get_portfolio_or_404(db, portfolio_id)

    def create(
        self,
        db: Session,
        name: str,
        description: Optional[str] = None,
        base_currency: str = "USD",
    ) -> Portfolio:
        portfolio = Portfolio(
            name=name,
            description=description,
            base_currency=base_currency.upper(),
        )
        db.add(portfolio)
        db.flush()
        logger.info("Created portfolio %s (%s)", portfolio.id, name)
        return portfolio

    def update(
        self,
        db: Session,
        portfolio_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        base_currency: Optional[str] = None,
    ) -> Portfolio:
        """Update the descriptive fields of a portfolio. None leaves a field unchanged."""
        portfolio = get_portfolio_or_404(db, portfolio_id)
        if name is not None:
            portfolio.name = name
        if description is not None:
            portfolio.description = description
        if base_currency is not None:
            portfolio.base_currency = base_currency.upper()
        db.flush()
        return portfolio

    def delete(self, db: Session, portfolio_id: str) -> None:
        """Delete a portfolio together with its assets and history."""
        portfolio = get_portfolio_or_404(db, portfolio_id)
        db.delete(portfolio)
        db.flush()
        logger.info("Deleted portfolio %s", portfolio_id)

    def recalculate(self, db: Session, portfolio_id: str) -> Portfolio:
        portfolio = get_portfolio_or_404(db, portfolio_id)
        recalculate_portfolio(db, portfolio)
        return portfolio

    def get_history(
        self,
        db: Session,
        portfolio_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[PortfolioHistory]:
        """History snapshots in chronological order, optionally bounded by date (inclusive)."""
        get_portfolio_or_404(db, portfolio_id)
        query = db.query(PortfolioHistory).filter(PortfolioHistory.portfolio_id == portfolio_id)
        if start is not None:
            query = query.filter(PortfolioHistory.record_date >= start)
        if end is not None:
            query = query.filter(PortfolioHistory.record_date <= end)
        return query.order_by(PortfolioHistory.recorded_at).all()

    def get_dashboard_summary(
        self, db: Session, portfolio_id: str, today: Optional[date] = None
    ) -> DashboardSummary:
        """Totals, allocation, best performers and the last 30 days of history.

        Aggregates are computed from the stored asset values; nothing is
        written.
        """
        portfolio = get_portfolio_or_404(db, portfolio_id)
        assets = list(portfolio.assets)
        totals = recalculate_portfolio_totals(assets)

        today = today or datetime.now(timezone.utc).date()
        performance = self.get_history(
            db, portfolio_id, start=today - timedelta(days=DASHBOARD_PERFORMANCE_DAYS)
        )

        return DashboardSummary(
            portfolio_id=portfolio.id,
            name=portfolio.name,
            base_currency=portfolio.base_currency,
            total_value=totals.total_value,
            total_investment=totals.total_investment,
            total_gain_loss=totals.total_gain_loss,
            gain_loss_percentage=totals.gain_loss_percentage,
            asset_count=sum(1 for a in assets if not a.is_wishlist),
            wishlist_count=sum(1 for a in assets if a.is_wishlist),
            allocation=totals.allocation,
            top_performers=top_performers(assets, DASHBOARD_TOP_PERFORMERS),
            performance=performance,
        )
