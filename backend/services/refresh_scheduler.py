"""Periodic background refresh of stale prices using APScheduler."""

import logging
from datetime import timedelta
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from services.refresh_service import RefreshService

logger = logging.getLogger(__name__)

JOB_ID = "refresh_stale_prices"


class RefreshScheduler:
    """Runs :meth:`RefreshService.refresh_stale` every ``interval``.

    Each run opens its own session from ``session_factory`` and commits it.
    A failing run is logged and rolled back; it never propagates.
    """

    def __init__(
        self,
        refresh_service: RefreshService,
        session_factory: Callable[[], Session],
        interval: timedelta = timedelta(minutes=15),
        stale_after: timedelta = timedelta(minutes=15),
    ):
        self._refresh_service = refresh_service
        self._session_factory = session_factory
        self._interval = interval
        self._stale_after = stale_after
        self._scheduler: Optional[BackgroundScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def run_once(self) -> None:
        """Execute one refresh cycle. Errors are logged, not raised."""
        db = self._session_factory()
        try:
            result = self._refresh_service.refresh_stale(db, self._stale_after)
            db.commit()
            if result.total:
                logger.info(
                    "Scheduled refresh: %d refreshed, %d failed across %d portfolios",
                    result.refreshed, len(result.failed), len(result.portfolio_ids),
                )
        except Exception:
            db.rollback()
            logger.exception("Scheduled price refresh failed")
        finally:
            db.close()

    def start(self) -> None:
        if self.running:
            return
        scheduler = BackgroundScheduler(timezone="UTC")
        scheduler.add_job(
            self.run_once,
            trigger=IntervalTrigger(seconds=self._interval.total_seconds()),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Price refresh scheduler started (every %s)", self._interval)

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Price refresh scheduler stopped")
