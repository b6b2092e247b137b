"""Shared API helpers for route handlers.

Service providers used with ``Depends`` so tests can swap them through
``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from config import settings
from services.asset_service import AssetService
from services.benchmark_service import BenchmarkService
from services.price_service import PriceService, PriceServiceConfig
from services.refresh_service import RefreshService
from services.wishlist_service import WishlistService


@lru_cache
def get_price_service() -> PriceService:
    """Process-wide resolver; the price cache lives as long as the app."""
    return PriceService(PriceServiceConfig.from_settings(settings))


def get_refresh_service(
    price_service: PriceService = Depends(get_price_service),
) -> RefreshService:
    return RefreshService(
        price_service,
        request_delay=settings.REFRESH_REQUEST_DELAY_SECONDS,
        max_workers=settings.REFRESH_MAX_WORKERS,
    )


def get_asset_service(
    price_service: PriceService = Depends(get_price_service),
) -> AssetService:
    return AssetService(price_service)


def get_wishlist_service(
    price_service: PriceService = Depends(get_price_service),
    refresh_service: RefreshService = Depends(get_refresh_service),
) -> WishlistService:
    return WishlistService(price_service, refresh_service)


def get_benchmark_service(
    price_service: PriceService = Depends(get_price_service),
) -> BenchmarkService:
    return BenchmarkService(price_service)
