"""Test fixtures and sample data."""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from models import Asset, Portfolio
from services.valuation_service import compute_position_metrics


def make_asset(
    symbol: str = "AAPL",
    quantity: str = "10",
    purchase_price: str = "150.00",
    current_price: str | None = "180.00",
    asset_type: str = "STOCK",
    is_wishlist: bool = False,
    **kwargs,
) -> Asset:
    """Build an unsaved Asset with computed metrics."""
    kwargs.setdefault("name", f"{symbol} Inc.")
    kwargs.setdefault("alert_enabled", False)
    kwargs.setdefault("alert_fired", False)
    asset = Asset(
        symbol=symbol,
        asset_type=asset_type,
        quantity=Decimal(quantity),
        purchase_price=Decimal(purchase_price),
        current_price=Decimal(current_price) if current_price is not None else None,
        currency="USD",
        is_wishlist=is_wishlist,
        **kwargs,
    )
    compute_position_metrics(asset)
    return asset


def make_watch_item(
    symbol: str = "NVDA",
    current_price: str = "100.00",
    target_price: str | None = "95.00",
    **kwargs,
) -> Asset:
    return make_asset(
        symbol=symbol,
        quantity="0",
        purchase_price="0",
        current_price=current_price,
        is_wishlist=True,
        target_price=Decimal(target_price) if target_price is not None else None,
        alert_enabled=target_price is not None,
        price_when_added=Decimal(current_price),
        category="STOCK",
        **kwargs,
    )


@pytest.fixture
def portfolio(db: Session) -> Portfolio:
    """Create an empty test portfolio."""
    portfolio = Portfolio(name="Retirement", description="Long-term holdings")
    db.add(portfolio)
    db.commit()
    return portfolio


@pytest.fixture
def stocked_portfolio(db: Session, portfolio: Portfolio) -> Portfolio:
    """Portfolio with two owned stocks, one bond and one watchlist entry."""
    portfolio.assets.extend(
        [
            make_asset("AAPL", "10", "150.00", "180.00"),
            make_asset("MSFT", "5", "300.00", "350.00"),
            make_asset(
                "UST10",
                "2",
                "1000.00",
                "950.00",
                asset_type="BOND",
                details={"coupon_rate": "4.25", "maturity_date": date(2034, 5, 15).isoformat()},
            ),
            make_watch_item("NVDA", "100.00", "95.00"),
        ]
    )
    db.commit()
    return portfolio
