"""API route handlers."""
from . import assets, benchmarks, market_data, portfolios, wishlist

__all__ = ["assets", "benchmarks", "market_data", "portfolios", "wishlist"]
