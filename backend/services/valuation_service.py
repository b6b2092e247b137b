"""Valuation engine: per-position metrics and portfolio aggregates.

Money amounts are rounded to 2 decimal places, half-up. Percentages are
computed as a ratio rounded to 4 decimal places, half-up, then multiplied
by 100, so 20% is ``Decimal("20.0000")``.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from models import Asset, Portfolio

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
_CENT = Decimal("0.01")
_RATIO = Decimal("0.0001")
_HUNDRED = Decimal("100")


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _dec(value) -> Decimal:
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def percentage(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator × 100`` with a 4-dp ratio, 0 when denominator <= 0."""
    if denominator <= 0:
        return Decimal("0.0000")
    ratio = (numerator / denominator).quantize(_RATIO, rounding=ROUND_HALF_UP)
    return ratio * _HUNDRED


@dataclass
class AllocationEntry:
    asset_type: str
    total_value: Decimal
    count: int
    percentage: Decimal


@dataclass
class PortfolioTotals:
    total_value: Decimal = ZERO
    total_investment: Decimal = ZERO
    total_gain_loss: Decimal = ZERO
    gain_loss_percentage: Decimal = ZERO
    allocation: list[AllocationEntry] = field(default_factory=list)


def compute_position_metrics(position: Asset, current_price: Optional[Decimal] = None) -> Asset:
    """Recompute the derived money fields of ``position`` in place.

    If ``current_price`` is given it replaces the stored price first. A
    position without a current price is valued at zero.
    """
    if current_price is not None:
        position.current_price = current_price

    quantity = _dec(position.quantity)
    invested = _money(_dec(position.purchase_price) * quantity)
    current = _money(_dec(position.current_price) * quantity)
    gain = current - invested

    position.invested_amount = invested
    position.current_value = current
    position.gain_loss = gain
    position.gain_loss_percentage = percentage(gain, invested)
    return position


def owned_positions(positions: Iterable[Asset]) -> list[Asset]:
    """Positions that count toward portfolio totals (watchlist entries excluded)."""
    return [p for p in positions if not p.is_wishlist]


def recalculate_portfolio_totals(positions: Iterable[Asset]) -> PortfolioTotals:
    """Aggregate owned positions into portfolio totals and an allocation breakdown.

    Uses each position's stored derived fields; call
    :func:`compute_position_metrics` first if prices changed.
    """
    owned = owned_positions(positions)

    total_value = sum((_dec(p.current_value) for p in owned), ZERO)
    total_investment = sum((_dec(p.invested_amount) for p in owned), ZERO)
    total_gain = total_value - total_investment

    allocation: list[AllocationEntry] = []
    if total_value > 0:
        by_type: dict[str, AllocationEntry] = {}
        for p in owned:
            key = p.asset_type or "UNKNOWN"
            entry = by_type.get(key)
            if entry is None:
                entry = AllocationEntry(asset_type=key, total_value=ZERO, count=0, percentage=ZERO)
                by_type[key] = entry
                allocation.append(entry)
            entry.total_value += _dec(p.current_value)
            entry.count += 1
        for entry in allocation:
            entry.percentage = percentage(entry.total_value, total_value)

    return PortfolioTotals(
        total_value=_money(total_value),
        total_investment=_money(total_investment),
        total_gain_loss=_money(total_gain),
        gain_loss_percentage=percentage(total_gain, total_investment),
        allocation=allocation,
    )


def apply_totals(portfolio: Portfolio, totals: PortfolioTotals) -> Portfolio:
    portfolio.total_value = totals.total_value
    portfolio.total_investment = totals.total_investment
    portfolio.total_gain_loss = totals.total_gain_loss
    portfolio.gain_loss_percentage = totals.gain_loss_percentage
    return portfolio


def _gain_pct(position: Asset) -> Decimal:
    return _dec(position.gain_loss_percentage)


def top_performers(positions: Iterable[Asset], limit: int = 5) -> list[Asset]:
    """Owned positions by gain percentage, best first. Ties keep input order."""
    return sorted(owned_positions(positions), key=_gain_pct, reverse=True)[:limit]


def worst_performers(positions: Iterable[Asset], limit: int = 5) -> list[Asset]:
    """Owned positions by gain percentage, worst first. Ties keep input order."""
    return sorted(owned_positions(positions), key=_gain_pct)[:limit]


def performance_since_added(position: Asset) -> Decimal:
    """Percent move of a watched security since it was added."""
    added = _dec(position.price_when_added)
    if added <= 0 or position.current_price is None:
        return Decimal("0.0000")
    return percentage(_dec(position.current_price) - added, added)
