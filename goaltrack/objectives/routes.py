"""Objective CRUD, progress, statistics and reconciliation endpoints."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from ..auth import get_current_user
from ..database import Database
from ..dependencies import get_db, success
from ..errors import AuthenticationError, BadRequestError, NotFoundError
from ..merge import (
    NULLABLE,
    Blank,
    FieldPolicy,
    keep_if_falsy,
    merge_with_defaults,
    parse_float_or_none,
)
from .enums import Cadence, Category, Status, TrackingType
from .ledger import CommentLedger, Ledger, parse_day, utc_today
from .models import (
    DEFAULT_DURATION,
    CommentUpdate,
    Objective,
    ObjectiveCreate,
    ObjectiveUpdate,
    ProgressUpdate,
    StatusUpdate,
)
from .reconciler import reconcile_objectives
from .statistics import StatisticsAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/objectives", tags=["objectives"])


OBJECTIVE_POLICIES = {
    "name": keep_if_falsy(),
    "category": keep_if_falsy(Category),
    "tracking_type": keep_if_falsy(TrackingType),
    "cadence": keep_if_falsy(Cadence),
    "status": keep_if_falsy(Status),
    "duration": keep_if_falsy(int),
    "start_date": keep_if_falsy(parse_day),
    # null, "" and 0 all clear the target
    "target": FieldPolicy(
        null=Blank.CLEAR, empty=Blank.CLEAR, zero=Blank.CLEAR, parse=parse_float_or_none
    ),
    "description": NULLABLE,
    "progress": keep_if_falsy(),
    "comments": keep_if_falsy(),
}


def get_owned_objective(db: Database, objective_id: str, user: dict) -> Objective:
    """
    Load an objective owned by ``user``.

    Raises:
        NotFoundError: If no such objective exists
        AuthenticationError: If it belongs to another user
    """
    objective = db.get_objective(objective_id)
    if objective is None:
        raise NotFoundError("Objective not found")
    if objective.user_id != user["id"]:
        raise AuthenticationError("Not authorized to access this objective")
    return objective


@router.get("")
async def list_objectives(
    db: Database = Depends(get_db), user: dict = Depends(get_current_user)
):
    """List the user's objectives, gap-filling boolean ledgers first."""
    objectives = db.list_objectives(user_id=user["id"])
    reconcile_objectives(db, objectives, utc_today())
    return success([o.to_dict() for o in objectives], count=len(objectives))


@router.post("", status_code=201)
async def create_objective(
    body: ObjectiveCreate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    today = utc_today()
    progress = Ledger(body.tracking_type)
    if body.tracking_type == TrackingType.BOOLEAN:
        progress[today] = False

    objective = Objective(
        id="",
        user_id=user["id"],
        name=body.name,
        description=body.description or None,
        category=body.category,
        tracking_type=body.tracking_type,
        cadence=body.cadence,
        target=body.target or None,
        status=body.status or Status.ACTIVE,
        start_date=body.start_date or today,
        duration=body.duration or DEFAULT_DURATION,
        progress=progress,
        comments=CommentLedger.from_json(body.comments),
    )
    db.create_objective(objective)
    return success(objective.to_dict())


@router.get("/statistics")
async def get_statistics(
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    """Completion statistics, optionally bounded to start <= day <= end."""
    window_start = parse_day(start) if start else None
    window_end = parse_day(end) if end else None

    objectives = db.list_objectives(user_id=user["id"])
    stats = StatisticsAggregator(utc_today()).summarize(
        objectives, window_start, window_end
    )
    return success(stats.to_dict())


@router.post("/reconcile")
async def reconcile_mine(
    db: Database = Depends(get_db), user: dict = Depends(get_current_user)
):
    objectives = db.list_objectives(
        user_id=user["id"],
        status=Status.ACTIVE.value,
        tracking_type=TrackingType.BOOLEAN.value,
    )
    updated = reconcile_objectives(db, objectives, utc_today())
    return success(
        {"updated": updated},
        message=f"{updated} objective(s) updated with missing progress.",
    )


@router.get("/{objective_id}")
async def get_objective(
    objective_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return success(get_owned_objective(db, objective_id, user).to_dict())


@router.put("/{objective_id}")
async def update_objective(
    objective_id: str,
    body: ObjectiveUpdate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    """
    Partially update an objective.

    Fields missing from the body keep their stored values; see
    OBJECTIVE_POLICIES for how null and empty values are treated. Replacement
    ledgers are validated against the resulting tracking type.
    """
    objective = get_owned_objective(db, objective_id, user)

    existing: dict[str, Any] = {
        "name": objective.name,
        "category": objective.category,
        "tracking_type": objective.tracking_type,
        "cadence": objective.cadence,
        "status": objective.status,
        "duration": objective.duration,
        "start_date": objective.start_date,
        "target": objective.target,
        "description": objective.description,
        "progress": objective.progress.to_json(),
        "comments": objective.comments.to_json(),
    }
    merged = merge_with_defaults(
        existing, body.model_dump(exclude_unset=True), OBJECTIVE_POLICIES
    )

    updated = Objective(
        id=objective.id,
        user_id=objective.user_id,
        name=merged["name"],
        description=merged["description"],
        category=merged["category"],
        tracking_type=merged["tracking_type"],
        cadence=merged["cadence"],
        target=merged["target"],
        status=merged["status"],
        start_date=merged["start_date"],
        duration=merged["duration"],
        progress=Ledger.from_json(merged["tracking_type"], merged["progress"]),
        comments=CommentLedger.from_json(merged["comments"]),
        created_at=objective.created_at,
    )
    db.update_objective(updated)
    return success(updated.to_dict())


@router.delete("/{objective_id}")
async def delete_objective(
    objective_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    get_owned_objective(db, objective_id, user)
    db.delete_objective(objective_id)
    return success({})


@router.patch("/{objective_id}/progress")
async def update_progress(
    objective_id: str,
    body: ProgressUpdate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    """Write one day of progress; the value must match the tracking type."""
    if not body.date or body.value is None:
        raise BadRequestError("Please provide a date and a value")

    objective = get_owned_objective(db, objective_id, user)
    objective.progress[body.date] = body.value
    db.save_progress(objective.id, objective.progress)
    return success(objective.to_dict())


@router.patch("/{objective_id}/status")
async def update_status(
    objective_id: str,
    body: StatusUpdate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    if not body.status:
        raise BadRequestError("Please provide a status")

    objective = get_owned_objective(db, objective_id, user)
    objective.status = Status(body.status)
    db.set_objective_status(objective.id, objective.status.value)
    logger.info(f"Objective {objective.id} is now {objective.status.value}")
    return success(objective.to_dict())


@router.patch("/{objective_id}/comment")
async def update_comment(
    objective_id: str,
    body: CommentUpdate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    if not body.date or body.comment is None:
        raise BadRequestError("Please provide a date and a comment")

    objective = get_owned_objective(db, objective_id, user)
    objective.comments[body.date] = body.comment
    db.save_comments(objective.id, objective.comments)
    return success(objective.to_dict())
