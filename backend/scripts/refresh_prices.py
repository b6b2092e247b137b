#!/usr/bin/env python
"""Refresh asset prices once, outside the web app.

Re-prices either one portfolio or every asset whose price is older than
the stale threshold, then recomputes the affected portfolios.

Usage:
    python -m scripts.refresh_prices
    python -m scripts.refresh_prices --portfolio <portfolio-id>
    python -m scripts.refresh_prices --stale-minutes 60 --dry-run
"""

import argparse
from datetime import timedelta
from typing import Optional

from config import settings
from database import get_session_local, init_db
from logging_config import setup_logging
from services.price_service import PriceService, PriceServiceConfig
from services.refresh_service import RefreshResult, RefreshService


def refresh_prices(
    portfolio_id: Optional[str] = None,
    stale_minutes: Optional[int] = None,
    dry_run: bool = False,
) -> RefreshResult:
    """Run one refresh and print a summary. Rolls back when ``dry_run``."""
    init_db()
    SessionLocal = get_session_local()
    db = SessionLocal()

    price_service = PriceService(PriceServiceConfig.from_settings(settings))
    service = RefreshService(
        price_service,
        request_delay=settings.REFRESH_REQUEST_DELAY_SECONDS,
        max_workers=settings.REFRESH_MAX_WORKERS,
    )

    try:
        if portfolio_id:
            result = service.refresh_portfolio(db, portfolio_id)
        else:
            minutes = stale_minutes if stale_minutes is not None else settings.REFRESH_STALE_AFTER_MINUTES
            result = service.refresh_stale(db, timedelta(minutes=minutes))

        if dry_run:
            db.rollback()
        else:
            db.commit()

        print("Summary:")
        print(f"  Refreshed: {result.refreshed}")
        print(f"  Failed: {len(result.failed)}")
        for symbol in result.failed:
            print(f"    - {symbol}")
        print(f"  Alerts fired: {len(result.alerts_fired)}")
        for symbol in result.alerts_fired:
            print(f"    - {symbol}")
        print(f"  Portfolios recalculated: {len(result.portfolio_ids)}")
        if dry_run:
            print("\n[DRY RUN] No changes saved. Run without --dry-run to apply.")
        return result

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()
        price_service.close()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Refresh asset prices once")
    parser.add_argument("--portfolio", help="Only refresh this portfolio ID")
    parser.add_argument(
        "--stale-minutes",
        type=int,
        default=None,
        help="Refresh assets not priced within this many minutes "
        "(default: REFRESH_STALE_AFTER_MINUTES)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and compute prices without saving them",
    )
    args = parser.parse_args(argv)

    setup_logging()
    refresh_prices(
        portfolio_id=args.portfolio,
        stale_minutes=args.stale_minutes,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":
    main()
