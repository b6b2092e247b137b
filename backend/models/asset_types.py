"""Asset type discriminant and the type-specific detail payloads.

All assets share one table. ``Asset.asset_type`` is the discriminant and
``Asset.details`` holds a JSON payload whose shape depends on it. The
payload is parsed into one of the frozen dataclasses below by looking up
the discriminant in ``_DETAILS_BY_TYPE``.
"""

from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union, get_args, get_type_hints


class AssetType(str, Enum):
    """Discriminant for the asset tagged union."""

    STOCK = "STOCK"
    BOND = "BOND"
    MUTUAL_FUND = "MUTUAL_FUND"
    SIP = "SIP"


@dataclass(frozen=True)
class StockDetails:
    exchange: Optional[str] = None  # e.g., NYSE, NASDAQ, NSE
    sector: Optional[str] = None
    market_cap: Optional[Decimal] = None
    dividend_yield: Optional[Decimal] = None
    pe_ratio: Optional[Decimal] = None


@dataclass(frozen=True)
class BondDetails:
    coupon_rate: Optional[Decimal] = None  # Annual interest rate
    maturity_date: Optional[date] = None
    face_value: Optional[Decimal] = None
    bond_type: Optional[str] = None  # Government, Corporate, Municipal
    issuer: Optional[str] = None
    credit_rating: Optional[str] = None


@dataclass(frozen=True)
class MutualFundDetails:
    nav: Optional[Decimal] = None
    fund_type: Optional[str] = None  # Equity, Debt, Hybrid, Index
    fund_house: Optional[str] = None
    aum: Optional[Decimal] = None
    expense_ratio: Optional[Decimal] = None
    risk_level: Optional[str] = None  # LOW, MEDIUM, HIGH
    scheme_code: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class SipDetails:
    monthly_investment: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    frequency: str = "MONTHLY"  # MONTHLY, QUARTERLY, YEARLY
    scheme_name: Optional[str] = None
    fund_house: Optional[str] = None
    is_active: bool = True
    total_installments: int = 0


AssetDetails = Union[StockDetails, BondDetails, MutualFundDetails, SipDetails]

_DETAILS_BY_TYPE: dict[AssetType, type] = {
    AssetType.STOCK: StockDetails,
    AssetType.BOND: BondDetails,
    AssetType.MUTUAL_FUND: MutualFundDetails,
    AssetType.SIP: SipDetails,
}


def _coerce(value: Any, hint: Any) -> Any:
    """Convert a JSON scalar into the Python type named by ``hint``."""
    if value is None:
        return None
    args = get_args(hint) or (hint,)
    if Decimal in args:
        return Decimal(str(value))
    if date in args:
        return value if isinstance(value, date) else date.fromisoformat(str(value))
    if bool in args:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes")
        return bool(value)
    if int in args:
        return int(value)
    return str(value)


def parse_asset_type(value: str | AssetType) -> AssetType:
    """Normalize a discriminant value, accepting any case.

    Raises:
        ValueError: If the value is not a known asset type.
    """
    if isinstance(value, AssetType):
        return value
    try:
        return AssetType(str(value).strip().upper())
    except ValueError:
        valid = ", ".join(t.value for t in AssetType)
        raise ValueError(f"Unknown asset type {value!r}; expected one of {valid}") from None


def parse_details(
    asset_type: str | AssetType, payload: Optional[dict[str, Any]] = None
) -> AssetDetails:
    """Build the detail dataclass for ``asset_type`` from a JSON payload.

    Keys that the variant does not define are dropped.
    """
    details_cls = _DETAILS_BY_TYPE[parse_asset_type(asset_type)]
    payload = payload or {}
    hints = get_type_hints(details_cls)
    kwargs = {
        f.name: _coerce(payload[f.name], hints[f.name])
        for f in fields(details_cls)
        if f.name in payload and payload[f.name] is not None
    }
    return details_cls(**kwargs)


def details_to_payload(details: AssetDetails) -> dict[str, Any]:
    """Serialize a detail dataclass into a JSON-safe dict."""
    payload: dict[str, Any] = {}
    for f in fields(details):
        value = getattr(details, f.name)
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, date):
            value = value.isoformat()
        payload[f.name] = value
    return payload


def check_details_match(asset_type: str | AssetType, details: AssetDetails) -> None:
    """Reject a detail payload that belongs to a different asset type."""
    expected = _DETAILS_BY_TYPE[parse_asset_type(asset_type)]
    if not isinstance(details, expected):
        raise ValueError(
            f"{type(details).__name__} does not match asset type {parse_asset_type(asset_type).value}"
        )
