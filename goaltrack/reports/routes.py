"""File downloads: PDF report, Excel workbook and printable template."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ..auth import get_download_user
from ..database import Database
from ..dependencies import get_db
from ..objectives.enums import Category
from ..objectives.ledger import utc_today
from ..objectives.models import Objective
from .assembler import Period, ReportAssembler, group_by_category
from .excel import build_workbook
from .pdf import ReportRenderer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])

PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
ALL_CATEGORIES = "all"


def _objectives_for(db: Database, user: dict, category: Optional[str]) -> list[Objective]:
    if category and category != ALL_CATEGORIES:
        return db.list_objectives(user_id=user["id"], category=Category(category).value)
    return db.list_objectives(user_id=user["id"])


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/pdf")
async def export_pdf(
    period: Period = Query(Period.WEEKLY),
    category: Optional[str] = Query(None),
    db: Database = Depends(get_db),
    user: dict = Depends(get_download_user),
):
    objectives = _objectives_for(db, user, category)
    report = ReportAssembler(utc_today()).build(
        objectives, period, owner=user.get("name") or user["email"]
    )
    return _attachment(ReportRenderer().render_report(report), PDF_MEDIA_TYPE, "objectives.pdf")


@router.get("/excel")
async def export_excel(
    category: Optional[str] = Query(None),
    db: Database = Depends(get_db),
    user: dict = Depends(get_download_user),
):
    objectives = _objectives_for(db, user, category)
    report = ReportAssembler(utc_today()).build(objectives, Period.WEEKLY)
    return _attachment(build_workbook(report), XLSX_MEDIA_TYPE, "objectives.xlsx")


@router.get("/template")
async def export_template(
    category: Optional[str] = Query(None),
    db: Database = Depends(get_db),
    user: dict = Depends(get_download_user),
):
    objectives = _objectives_for(db, user, category)
    content = ReportRenderer().render_template(group_by_category(objectives), utc_today())
    return _attachment(content, PDF_MEDIA_TYPE, "template-objectives.pdf")
