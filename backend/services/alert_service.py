"""Target-price alerts for watchlist entries.

An alert fires when the current price falls to or below the target. Once
fired it stays fired until :func:`reset_alert` is called, which also
happens whenever the target price changes.
"""

import logging

from models import Asset

logger = logging.getLogger(__name__)


def should_fire(position: Asset) -> bool:
    if not position.alert_enabled or position.alert_fired:
        return False
    if position.target_price is None or position.current_price is None:
        return False
    return position.current_price <= position.target_price


def evaluate_alert(position: Asset) -> bool:
    """Mark the alert fired if its condition holds. Returns True only on the transition."""
    if not should_fire(position):
        return False
    position.alert_fired = True
    logger.info(
        "Price alert fired for %s: %s <= target %s",
        position.symbol, position.current_price, position.target_price,
    )
    return True


def reset_alert(position: Asset) -> None:
    position.alert_fired = False
