"""Unit tests for PortfolioService."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi import HTTPException

from models import Asset, Portfolio, PortfolioHistory
from services.portfolio_service import (
    PortfolioService,
    recalculate_portfolio,
    record_snapshot,
)
from services.valuation_service import PortfolioTotals


@pytest.fixture
def service():
    return PortfolioService()


class TestCrud:
    def test_create(self, db, service):
        portfolio = service.create(db, "Growth", "Tech heavy", "usd")
        db.commit()
        assert portfolio.id is not None
        assert portfolio.base_currency == "USD"
        assert portfolio.total_value == Decimal("0")

    def test_list_all(self, db, service):
        service.create(db, "One")
        service.create(db, "Two")
        db.commit()
        assert {p.name for p in service.list_all(db)} == {"One", "Two"}

    def test_get_missing_is_404(self, db, service):
        with pytest.raises(HTTPException) as exc_info:
            service.get(db, "does-not-exist")
        assert exc_info.value.status_code == 404

    def test_update_only_given_fields(self, db, service, portfolio):
        service.update(db, portfolio.id, name="Renamed")
        db.commit()
        assert portfolio.name == "Renamed"
        assert portfolio.description == "Long-term holdings"

    def test_delete_cascades(self, db, service, stocked_portfolio):
        portfolio_id = stocked_portfolio.id
        recalculate_portfolio(db, stocked_portfolio)
        db.commit()

        service.delete(db, portfolio_id)
        db.commit()

        assert db.query(Portfolio).count() == 0
        assert db.query(Asset).filter_by(portfolio_id=portfolio_id).count() == 0
        assert db.query(PortfolioHistory).count() == 0


class TestRecalculate:
    def test_writes_totals_and_snapshot(self, db, service, stocked_portfolio):
        portfolio = service.recalculate(db, stocked_portfolio.id)
        db.commit()

        # AAPL 1800 + MSFT 1750 + bond 1900; the watchlist entry is excluded
        assert portfolio.total_value == Decimal("5450.00")
        assert portfolio.total_investment == Decimal("5000.00")
        assert portfolio.total_gain_loss == Decimal("450.00")
        assert portfolio.gain_loss_percentage == Decimal("9.0000")

        history = service.get_history(db, portfolio.id)
        assert len(history) == 1
        assert history[0].total_value == Decimal("5450.00")
        assert history[0].gain_loss == Decimal("450.00")

    def test_each_recalculation_appends_history(self, db, service, stocked_portfolio):
        service.recalculate(db, stocked_portfolio.id)
        service.recalculate(db, stocked_portfolio.id)
        db.commit()
        assert len(service.get_history(db, stocked_portfolio.id)) == 2


class TestHistory:
    def test_date_bounds_are_inclusive(self, db, service, portfolio):
        totals = PortfolioTotals()
        for day in (1, 2, 3, 4):
            record_snapshot(db, portfolio, totals, datetime(2025, 1, day, tzinfo=timezone.utc))
        db.commit()

        history = service.get_history(db, portfolio.id, date(2025, 1, 2), date(2025, 1, 3))
        assert [h.record_date for h in history] == [date(2025, 1, 2), date(2025, 1, 3)]


class TestDashboard:
    def test_summary(self, db, service, stocked_portfolio):
        recalculate_portfolio(db, stocked_portfolio)
        db.commit()

        summary = service.get_dashboard_summary(db, stocked_portfolio.id)

        assert summary.total_value == Decimal("5450.00")
        assert summary.asset_count == 3
        assert summary.wishlist_count == 1
        assert {e.asset_type for e in summary.allocation} == {"STOCK", "BOND"}
        assert sum(e.percentage for e in summary.allocation) == Decimal("100")
        assert summary.top_performers[0].symbol == "AAPL"
        assert len(summary.performance) == 1

    def test_performance_limited_to_30_days(self, db, service, portfolio):
        today = date(2025, 6, 30)
        old = datetime(2025, 5, 1, tzinfo=timezone.utc)
        recent = datetime(2025, 6, 20, tzinfo=timezone.utc)
        record_snapshot(db, portfolio, PortfolioTotals(), old)
        record_snapshot(db, portfolio, PortfolioTotals(), recent)
        db.commit()

        summary = service.get_dashboard_summary(db, portfolio.id, today=today)
        assert [h.record_date for h in summary.performance] == [recent.date()]

    def test_empty_portfolio(self, db, service, portfolio):
        summary = service.get_dashboard_summary(db, portfolio.id)
        assert summary.total_value == Decimal("0")
        assert summary.allocation == []
        assert summary.top_performers == []
