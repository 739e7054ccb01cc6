"""Gap-filling of boolean progress ledgers."""

import logging
import sqlite3
from datetime import date
from typing import TYPE_CHECKING, Iterable

from .enums import Status, TrackingType
from .ledger import iter_days
from .models import Objective

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


def needs_reconcile(objective: Objective) -> bool:
    """Only active boolean objectives are gap-filled."""
    return (
        objective.tracking_type == TrackingType.BOOLEAN
        and objective.status == Status.ACTIVE
    )


def reconcile(objective: Objective, today: date) -> list[date]:
    """
    Record ``False`` for every elapsed day missing from the ledger.

    Covers start_date <= day < today. Today itself is never written and
    existing entries are left alone, so repeated calls are no-ops.

    Args:
        objective: Objective whose ledger is updated in place
        today: Reference day (UTC)

    Returns:
        The days that were inserted, ascending
    """
    if not needs_reconcile(objective):
        return []

    inserted = []
    for day in iter_days(objective.start_date, today):
        if day not in objective.progress:
            objective.progress[day] = False
            inserted.append(day)
    return inserted


def reconcile_objectives(
    db: "Database", objectives: Iterable[Objective], today: date
) -> int:
    """
    Reconcile and persist a batch of objectives.

    A storage failure for one objective is logged and its ledger is put back
    to the stored state; the remaining objectives are still processed.

    Returns:
        Number of objectives whose ledger was written
    """
    updated = 0
    for objective in objectives:
        stored = objective.progress.copy()
        inserted = reconcile(objective, today)
        if not inserted:
            continue

        try:
            db.save_progress(objective.id, objective.progress)
        except sqlite3.Error as e:
            logger.error(f"Failed to reconcile objective {objective.id}: {e}")
            objective.progress = stored
            continue

        updated += 1
        logger.debug(
            f"Filled {len(inserted)} missing day(s) for objective {objective.id}"
        )

    if updated:
        logger.info(f"Reconciled {updated} objective(s)")
    return updated
