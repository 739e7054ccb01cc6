"""Excel export of the last seven days of tracking."""

import io
import logging
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from ..objectives.enums import CATEGORY_LABELS, Category, TrackingType
from .assembler import ObjectiveBlock, Report

logger = logging.getLogger(__name__)

SUMMARY_HEADERS = ["Category", "Objective count", "Completion rate (7 days)"]
OBJECTIVE_HEADERS = ["Name", "Type", "Cadence", "Target", "Description"]
MISSING = "-"

# Sheet titles are limited to 31 characters
MAX_TITLE = 31


def cell_value(objective: ObjectiveBlock, value: Any) -> Any:
    if value is None:
        return MISSING
    if objective.tracking_type == TrackingType.BOOLEAN:
        return "Yes" if value else "No"
    return value


def _bold_header(ws, headers: list[str]):
    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)


def _fit_columns(ws, width: int = 16):
    for index in range(1, ws.max_column + 1):
        ws.column_dimensions[get_column_letter(index)].width = width


def build_workbook(report: Report) -> bytes:
    """
    Write a summary sheet and one sheet per category present in the report.

    Args:
        report: A weekly report

    Returns:
        xlsx file content
    """
    wb = Workbook()

    ws = wb.active
    ws.title = "Summary"
    _bold_header(ws, SUMMARY_HEADERS)
    for category in Category:
        ws.append(
            [
                CATEGORY_LABELS[category],
                report.summary.category_counts[category],
                f"{report.summary.category_rates[category]:.2f}%",
            ]
        )
    _fit_columns(ws, 28)

    day_headers = [day.strftime("%d/%m/%Y") for day in report.days]
    for block in report.categories:
        sheet = wb.create_sheet(title=block.title[:MAX_TITLE])
        _bold_header(sheet, OBJECTIVE_HEADERS + day_headers)
        for objective in block.objectives:
            sheet.append(
                [
                    objective.name,
                    objective.tracking_label,
                    objective.cadence_label,
                    objective.target if objective.target is not None else MISSING,
                    objective.description or "",
                ]
                + [cell_value(objective, value) for value in objective.values]
            )
        _fit_columns(sheet)

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(f"Built workbook with {len(wb.sheetnames)} sheet(s)")
    return buffer.getvalue()
