"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import assets, benchmarks, market_data, portfolios, wishlist
from api.helpers import get_price_service
from config import settings
from database import get_session_local, init_db
from logging_config import setup_logging
from services.refresh_scheduler import RefreshScheduler
from services.refresh_service import RefreshService

setup_logging()
logger = logging.getLogger(__name__)


def build_scheduler() -> RefreshScheduler:
    refresh_service = RefreshService(
        get_price_service(),
        request_delay=settings.REFRESH_REQUEST_DELAY_SECONDS,
        max_workers=settings.REFRESH_MAX_WORKERS,
    )
    return RefreshScheduler(
        refresh_service,
        get_session_local(),
        interval=timedelta(minutes=settings.REFRESH_INTERVAL_MINUTES),
        stale_after=timedelta(minutes=settings.REFRESH_STALE_AFTER_MINUTES),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and, if enabled, run the background price refresh."""
    init_db()

    scheduler = None
    if settings.REFRESH_SCHEDULER_ENABLED:
        try:
            scheduler = build_scheduler()
            scheduler.start()
        except Exception:
            logger.warning("Price refresh scheduler failed to start", exc_info=True)
            scheduler = None
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.stop()
        get_price_service().close()


app = FastAPI(
    title="FinBuddy",
    description="Personal portfolio tracking with live price valuation",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(market_data.router)
app.include_router(portfolios.router)
app.include_router(assets.router)
app.include_router(wishlist.router)
app.include_router(benchmarks.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
