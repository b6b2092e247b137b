"""Integration tests for portfolio API endpoints."""

from datetime import date, datetime, timezone
from decimal import Decimal

from fastapi.testclient import TestClient

from models import Portfolio, PortfolioHistory


class TestPortfolioCRUD:
    def test_create(self, client: TestClient):
        response = client.post(
            "/api/portfolios",
            json={"name": "Brokerage", "description": "Taxable", "base_currency": "eur"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Brokerage"
        assert data["base_currency"] == "EUR"
        assert Decimal(data["total_value"]) == Decimal("0")

    def test_create_requires_name(self, client: TestClient):
        response = client.post("/api/portfolios", json={"name": ""})
        assert response.status_code == 422

    def test_list(self, client: TestClient, portfolio: Portfolio):
        response = client.get("/api/portfolios")
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Retirement"]

    def test_get_not_found(self, client: TestClient):
        response = client.get("/api/portfolios/missing")
        assert response.status_code == 404
        assert response.json()["detail"] == "Portfolio not found"

    def test_update_partial(self, client: TestClient, portfolio: Portfolio):
        response = client.patch(f"/api/portfolios/{portfolio.id}", json={"name": "IRA"})
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "IRA"
        assert data["description"] == "Long-term holdings"

    def test_delete_cascades(self, client: TestClient, db, stocked_portfolio: Portfolio):
        client.post(f"/api/portfolios/{stocked_portfolio.id}/recalculate")

        response = client.delete(f"/api/portfolios/{stocked_portfolio.id}")
        assert response.status_code == 204
        assert client.get(f"/api/portfolios/{stocked_portfolio.id}").status_code == 404
        assert db.query(PortfolioHistory).count() == 0


class TestRecalculate:
    def test_totals_exclude_wishlist(self, client: TestClient, stocked_portfolio: Portfolio):
        response = client.post(f"/api/portfolios/{stocked_portfolio.id}/recalculate")
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_investment"]) == Decimal("5000.00")
        assert Decimal(data["total_value"]) == Decimal("5450.00")
        assert Decimal(data["total_gain_loss"]) == Decimal("450.00")
        assert Decimal(data["gain_loss_percentage"]) == Decimal("9.00")

    def test_appends_history(self, client: TestClient, stocked_portfolio: Portfolio):
        client.post(f"/api/portfolios/{stocked_portfolio.id}/recalculate")
        client.post(f"/api/portfolios/{stocked_portfolio.id}/recalculate")

        response = client.get(f"/api/portfolios/{stocked_portfolio.id}/history")
        assert response.status_code == 200
        assert len(response.json()) == 2


class TestRefresh:
    def test_refreshes_every_asset(self, client: TestClient, stocked_portfolio: Portfolio):
        response = client.post(f"/api/portfolios/{stocked_portfolio.id}/refresh")
        assert response.status_code == 200
        data = response.json()
        assert data["refreshed"] == 4
        assert data["failed"] == []
        assert data["portfolio_ids"] == [stocked_portfolio.id]

    def test_uses_live_prices(self, client: TestClient, stocked_portfolio: Portfolio):
        client.post(f"/api/portfolios/{stocked_portfolio.id}/refresh")
        assets = client.get(f"/api/portfolios/{stocked_portfolio.id}/assets").json()
        by_symbol = {a["symbol"]: a for a in assets}
        assert Decimal(by_symbol["MSFT"]["current_price"]) == Decimal("350.25")
        assert Decimal(by_symbol["MSFT"]["current_value"]) == Decimal("1751.25")

    def test_unknown_portfolio(self, client: TestClient):
        assert client.post("/api/portfolios/missing/refresh").status_code == 404


class TestDashboard:
    def test_summary(self, client: TestClient, stocked_portfolio: Portfolio):
        client.post(f"/api/portfolios/{stocked_portfolio.id}/recalculate")

        response = client.get(f"/api/portfolios/{stocked_portfolio.id}/dashboard")
        assert response.status_code == 200
        data = response.json()
        assert data["asset_count"] == 3
        assert data["wishlist_count"] == 1
        assert Decimal(data["total_value"]) == Decimal("5450.00")
        assert [a["symbol"] for a in data["top_performers"]] == ["AAPL", "MSFT", "UST10"]
        assert {a["asset_type"] for a in data["allocation"]} == {"STOCK", "BOND"}
        assert len(data["performance"]) == 1

    def test_empty_portfolio(self, client: TestClient, portfolio: Portfolio):
        data = client.get(f"/api/portfolios/{portfolio.id}/dashboard").json()
        assert data["asset_count"] == 0
        assert data["allocation"] == []
        assert data["top_performers"] == []


class TestHistory:
    def _snapshot(self, db, portfolio, day: date, value: str):
        db.add(
            PortfolioHistory(
                portfolio_id=portfolio.id,
                record_date=day,
                recorded_at=datetime(day.year, day.month, day.day, 16, tzinfo=timezone.utc),
                total_value=Decimal(value),
            )
        )

    def test_date_range_is_inclusive(self, client: TestClient, db, portfolio: Portfolio):
        for day, value in [
            (date(2025, 1, 1), "100"),
            (date(2025, 1, 2), "110"),
            (date(2025, 1, 3), "120"),
        ]:
            self._snapshot(db, portfolio, day, value)
        db.commit()

        response = client.get(
            f"/api/portfolios/{portfolio.id}/history",
            params={"start": "2025-01-02", "end": "2025-01-03"},
        )
        assert response.status_code == 200
        assert [Decimal(h["total_value"]) for h in response.json()] == [
            Decimal("110"),
            Decimal("120"),
        ]
