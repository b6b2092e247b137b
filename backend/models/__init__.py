"""SQLAlchemy ORM models."""

from .asset import Asset
from .asset_types import AssetType
from .benchmark import Benchmark
from .portfolio import Portfolio
from .portfolio_history import PortfolioHistory
from .utils import generate_uuid, utcnow

__all__ = [
    "Asset",
    "AssetType",
    "Benchmark",
    "Portfolio",
    "PortfolioHistory",
    "generate_uuid",
    "utcnow",
]
