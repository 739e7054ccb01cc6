"""Finance journal endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from ..auth import get_current_user
from ..database import Database
from ..dependencies import get_db, success
from ..errors import AuthenticationError, NotFoundError
from ..merge import KEEP_IF_FALSY, NULLABLE, keep_if_falsy, merge_with_defaults
from ..objectives.ledger import parse_day, utc_today
from .models import (
    DEFAULT_CURRENCY,
    FinanceCreate,
    FinanceUpdate,
    SettingsUpdate,
    build_finance_stats,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/finances", tags=["finances"])

FINANCE_POLICIES = {
    "name": KEEP_IF_FALSY,
    "type": keep_if_falsy(lambda v: getattr(v, "value", v)),
    "currency": KEEP_IF_FALSY,
    "date": keep_if_falsy(lambda v: parse_day(v).isoformat()),
    "amount": NULLABLE,
    "category": NULLABLE,
    "description": NULLABLE,
    "recurring": NULLABLE,
    "frequency": NULLABLE,
}

SETTINGS_POLICIES = {
    "default_currency": KEEP_IF_FALSY,
    "theme": KEEP_IF_FALSY,
}


def get_owned_finance(db: Database, finance_id: str, user: dict) -> dict[str, Any]:
    entry = db.get_finance(finance_id)
    if entry is None:
        raise NotFoundError("Finance entry not found")
    if entry["user_id"] != user["id"]:
        raise AuthenticationError("Not authorized to access this finance entry")
    return entry


@router.get("")
async def list_finances(
    db: Database = Depends(get_db), user: dict = Depends(get_current_user)
):
    entries = db.list_finances(user["id"])
    return success(entries, count=len(entries))


@router.post("", status_code=201)
async def create_finance(
    body: FinanceCreate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    data = body.model_dump()
    data.update(
        type=body.type.value,
        date=body.date.isoformat(),
        currency=body.currency or DEFAULT_CURRENCY,
        recurring=bool(body.recurring),
    )
    return success(db.create_finance(user["id"], data))


@router.get("/stats")
async def finance_stats(
    db: Database = Depends(get_db), user: dict = Depends(get_current_user)
):
    """Current-month totals and the six-month evolution."""
    return success(build_finance_stats(db.list_finances(user["id"]), utc_today()))


@router.get("/settings")
async def get_settings(
    db: Database = Depends(get_db), user: dict = Depends(get_current_user)
):
    return success(db.get_settings(user["id"]))


@router.put("/settings")
async def update_settings(
    body: SettingsUpdate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    merged = merge_with_defaults(
        db.get_settings(user["id"]),
        body.model_dump(exclude_unset=True),
        SETTINGS_POLICIES,
    )
    return success(
        db.update_settings(user["id"], merged["default_currency"], merged["theme"])
    )


@router.get("/{finance_id}")
async def get_finance(
    finance_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return success(get_owned_finance(db, finance_id, user))


@router.put("/{finance_id}")
async def update_finance(
    finance_id: str,
    body: FinanceUpdate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    entry = get_owned_finance(db, finance_id, user)
    merged = merge_with_defaults(
        entry, body.model_dump(exclude_unset=True), FINANCE_POLICIES
    )
    return success(db.update_finance(finance_id, merged))


@router.delete("/{finance_id}")
async def delete_finance(
    finance_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    get_owned_finance(db, finance_id, user)
    db.delete_finance(finance_id)
    logger.info(f"Deleted finance entry {finance_id}")
    return success({})
