"""Integration tests for asset API endpoints."""

from decimal import Decimal

from fastapi.testclient import TestClient

from models import Portfolio


def _by_symbol(portfolio: Portfolio, symbol: str):
    return next(a for a in portfolio.assets if a.symbol == symbol)


class TestCreateAsset:
    def test_create_with_explicit_price(self, client: TestClient, portfolio: Portfolio):
        response = client.post(
            f"/api/portfolios/{portfolio.id}/assets",
            json={
                "name": "Apple",
                "symbol": "aapl",
                "quantity": "10",
                "purchase_price": "150",
                "current_price": "160",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["symbol"] == "AAPL"
        assert data["asset_type"] == "STOCK"
        assert Decimal(data["current_value"]) == Decimal("1600.00")
        assert Decimal(data["gain_loss"]) == Decimal("100.00")

        totals = client.get(f"/api/portfolios/{portfolio.id}").json()
        assert Decimal(totals["total_value"]) == Decimal("1600.00")

    def test_create_resolves_price(self, client: TestClient, portfolio: Portfolio):
        response = client.post(
            f"/api/portfolios/{portfolio.id}/assets",
            json={"name": "Microsoft", "symbol": "MSFT", "quantity": "2", "purchase_price": "300"},
        )
        assert response.status_code == 201
        assert Decimal(response.json()["current_price"]) == Decimal("350.25")

    def test_create_bond_with_details(self, client: TestClient, portfolio: Portfolio):
        response = client.post(
            f"/api/portfolios/{portfolio.id}/assets",
            json={
                "name": "Treasury 2034",
                "symbol": "UST34",
                "asset_type": "bond",
                "quantity": "1",
                "purchase_price": "1000",
                "current_price": "990",
                "details": {"coupon_rate": "4.25", "maturity_date": "2034-05-15", "color": "red"},
            },
        )
        assert response.status_code == 201
        details = response.json()["details"]
        assert details["coupon_rate"] == "4.25"
        assert details["maturity_date"] == "2034-05-15"
        assert "color" not in details

    def test_unknown_asset_type(self, client: TestClient, portfolio: Portfolio):
        response = client.post(
            f"/api/portfolios/{portfolio.id}/assets",
            json={"name": "X", "symbol": "X", "asset_type": "CRYPTO", "quantity": "1", "purchase_price": "1"},
        )
        assert response.status_code == 422

    def test_negative_quantity(self, client: TestClient, portfolio: Portfolio):
        response = client.post(
            f"/api/portfolios/{portfolio.id}/assets",
            json={"name": "X", "symbol": "X", "quantity": "-1", "purchase_price": "1"},
        )
        assert response.status_code == 422

    def test_unknown_portfolio(self, client: TestClient):
        response = client.post(
            "/api/portfolios/missing/assets",
            json={"name": "X", "symbol": "X", "quantity": "1", "purchase_price": "1"},
        )
        assert response.status_code == 404


class TestListAssets:
    def test_excludes_wishlist(self, client: TestClient, stocked_portfolio: Portfolio):
        response = client.get(f"/api/portfolios/{stocked_portfolio.id}/assets")
        assert response.status_code == 200
        assert {a["symbol"] for a in response.json()} == {"AAPL", "MSFT", "UST10"}

    def test_filter_by_type(self, client: TestClient, stocked_portfolio: Portfolio):
        response = client.get(
            f"/api/portfolios/{stocked_portfolio.id}/assets", params={"asset_type": "bond"}
        )
        assert [a["symbol"] for a in response.json()] == ["UST10"]


class TestAssetMutations:
    def test_get_wishlist_entry_is_404(self, client: TestClient, stocked_portfolio: Portfolio):
        nvda = _by_symbol(stocked_portfolio, "NVDA")
        assert client.get(f"/api/assets/{nvda.id}").status_code == 404

    def test_update_quantity(self, client: TestClient, stocked_portfolio: Portfolio):
        aapl = _by_symbol(stocked_portfolio, "AAPL")
        response = client.patch(f"/api/assets/{aapl.id}", json={"quantity": "20"})
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["invested_amount"]) == Decimal("3000.00")
        assert Decimal(data["current_value"]) == Decimal("3600.00")

    def test_set_price(self, client: TestClient, stocked_portfolio: Portfolio):
        aapl = _by_symbol(stocked_portfolio, "AAPL")
        response = client.post(f"/api/assets/{aapl.id}/price", json={"price": "200"})
        assert response.status_code == 200
        assert Decimal(response.json()["current_value"]) == Decimal("2000.00")

    def test_price_lookup(self, client: TestClient, stocked_portfolio: Portfolio):
        msft = _by_symbol(stocked_portfolio, "MSFT")
        response = client.post(f"/api/assets/{msft.id}/price", json={})
        assert Decimal(response.json()["current_price"]) == Decimal("350.25")

    def test_sell_partial(self, client: TestClient, stocked_portfolio: Portfolio):
        aapl = _by_symbol(stocked_portfolio, "AAPL")
        response = client.post(f"/api/assets/{aapl.id}/sell", json={"quantity": "4"})
        assert response.status_code == 200
        assert Decimal(response.json()["quantity"]) == Decimal("6")

    def test_sell_everything_keeps_asset(self, client: TestClient, stocked_portfolio: Portfolio):
        aapl = _by_symbol(stocked_portfolio, "AAPL")
        response = client.post(f"/api/assets/{aapl.id}/sell", json={"quantity": "10"})
        assert response.status_code == 200
        assert Decimal(response.json()["current_value"]) == Decimal("0")
        assert client.get(f"/api/assets/{aapl.id}").status_code == 200

    def test_sell_too_many(self, client: TestClient, stocked_portfolio: Portfolio):
        aapl = _by_symbol(stocked_portfolio, "AAPL")
        response = client.post(f"/api/assets/{aapl.id}/sell", json={"quantity": "11"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot sell more than owned quantity"

    def test_sell_zero(self, client: TestClient, stocked_portfolio: Portfolio):
        aapl = _by_symbol(stocked_portfolio, "AAPL")
        response = client.post(f"/api/assets/{aapl.id}/sell", json={"quantity": "0"})
        assert response.status_code == 400

    def test_delete_updates_totals(self, client: TestClient, stocked_portfolio: Portfolio):
        ust = _by_symbol(stocked_portfolio, "UST10")
        response = client.delete(f"/api/assets/{ust.id}")
        assert response.status_code == 204

        totals = client.get(f"/api/portfolios/{stocked_portfolio.id}").json()
        assert Decimal(totals["total_value"]) == Decimal("3550.00")
        assert Decimal(totals["total_investment"]) == Decimal("3000.00")
