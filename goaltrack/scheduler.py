"""Daily reconciliation sweep."""

import asyncio
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Optional

from .database import Database
from .objectives.enums import Status, TrackingType
from .objectives.ledger import utc_today
from .objectives.reconciler import reconcile_objectives

logger = logging.getLogger(__name__)

# 00:00 UTC
SWEEP_TIME = time(0, 0, tzinfo=timezone.utc)


def seconds_until_next_run(now: Optional[datetime] = None) -> float:
    """Seconds from ``now`` until the next SWEEP_TIME (a full day if exactly on it)."""
    now = now or datetime.now(timezone.utc)
    next_run = datetime.combine(now.date(), SWEEP_TIME)
    if next_run <= now:
        next_run += timedelta(days=1)
    return (next_run - now).total_seconds()


def run_sweep(db: Database) -> int:
    """Reconcile every active boolean objective of every user."""
    objectives = db.list_objectives(
        status=Status.ACTIVE.value, tracking_type=TrackingType.BOOLEAN.value,
        skip_invalid=True,
    )
    logger.info(f"Running reconciliation sweep over {len(objectives)} objective(s)")
    return reconcile_objectives(db, objectives, utc_today())


async def daily_sweep_loop(db: Database):
    """Run the sweep once a day until cancelled."""
    while True:
        delay = seconds_until_next_run()
        logger.info(f"Next reconciliation sweep in {delay:.0f}s")
        await asyncio.sleep(delay)
        try:
            await asyncio.to_thread(run_sweep, db)
        except Exception as e:
            logger.error(f"Reconciliation sweep failed: {e}", exc_info=True)
