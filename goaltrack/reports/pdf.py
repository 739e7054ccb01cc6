"""PDF rendering of reports and printable tracking templates."""

import io
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from ..objectives.enums import CATEGORY_LABELS, Category, TrackingType
from ..objectives.ledger import format_number
from ..objectives.models import Objective
from .assembler import CategoryBlock, ObjectiveBlock, Report

logger = logging.getLogger(__name__)

# A4 at 150 dpi
PAGE_WIDTH = 1240
PAGE_HEIGHT = 1754
RESOLUTION = 150.0
MARGIN = 100
FOOTER_HEIGHT = 80

COLORS = {
    "primary": "#4caf50",
    "secondary": "#2196f3",
    "accent": "#ff9800",
    "text": "#333333",
    "text_light": "#666666",
    "background": "#f9f9f9",
    "cover": "#f5f5f5",
    "header_bg": "#e0e0e0",
    "alt_row": "#f5f5f5",
    "grid": "#dddddd",
}

CATEGORY_COLORS = {
    Category.SPIRITUAL: "#673ab7",
    Category.PROFESSIONAL: "#2196f3",
    Category.PERSONAL: "#4caf50",
    Category.FINANCE: "#ff9800",
}

CHART_COLORS = ["#4caf50", "#2196f3", "#ff9800", "#9c27b0", "#f44336", "#009688", "#795548"]

# Lines per category chart
MAX_CHART_SERIES = 5

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

INSTRUCTIONS = [
    (
        "1. Fill it in every day",
        "For each objective, write down your daily progress in the box for that day of the week.",
    ),
    (
        "2. Yes/No objectives",
        "For boolean objectives, tick the box when the objective was reached that day.",
    ),
    (
        "3. Numeric objectives",
        "For objectives with numeric values, write the value reached (e.g. 5 km, 30 minutes).",
    ),
    (
        "4. Use the notes page",
        "The last page lets you note your observations, difficulties or particular successes.",
    ),
    (
        "5. Review your progress",
        "At the end of the week, take time to review your progress and adjust your objectives if needed.",
    ),
]

TIPS = [
    "Track consistently to keep your motivation up.",
    "Celebrate small wins, even when they seem insignificant.",
    "If you miss a day, don't get discouraged and start again the next day.",
    "Adjust your objectives if they are too easy or too hard.",
    "Share your progress with a friend or mentor for more accountability.",
]


def format_day(day: date) -> str:
    return day.strftime("%d/%m/%Y")


class _Document:
    """Sequence of page images with a vertical write cursor."""

    def __init__(self):
        self.pages: list[Image.Image] = []
        self.draw: Optional[ImageDraw.ImageDraw] = None
        self.y = MARGIN

    def add_page(self, background: str = COLORS["background"]) -> ImageDraw.ImageDraw:
        image = Image.new("RGB", (PAGE_WIDTH, PAGE_HEIGHT), background)
        self.pages.append(image)
        self.draw = ImageDraw.Draw(image)
        self.y = MARGIN
        return self.draw

    def fits(self, height: int) -> bool:
        return self.y + height <= PAGE_HEIGHT - FOOTER_HEIGHT


class ReportRenderer:
    """Renders Report documents and blank templates to multi-page PDFs."""

    def __init__(self):
        self.fonts = self._load_fonts()

    def _load_fonts(self) -> dict:
        """Load fonts for rendering."""
        fonts = {}

        font_paths = [
            (
                "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
                "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            ),
            ("/System/Library/Fonts/Helvetica.ttc", "/System/Library/Fonts/Helvetica.ttc"),
        ]

        try:
            for regular, bold in font_paths:
                if Path(regular).exists():
                    bold = bold if Path(bold).exists() else regular
                    fonts["cover"] = ImageFont.truetype(bold, 56)
                    fonts["header"] = ImageFont.truetype(bold, 40)
                    fonts["title"] = ImageFont.truetype(bold, 28)
                    fonts["normal"] = ImageFont.truetype(regular, 22)
                    fonts["small"] = ImageFont.truetype(regular, 18)
                    logger.info(f"Loaded fonts from {regular}")
                    break
        except OSError as e:
            logger.warning(f"Could not load TrueType fonts: {e}, using default")
            fonts = {}

        if not fonts:
            default_font = ImageFont.load_default()
            for name in ("cover", "header", "title", "normal", "small"):
                fonts[name] = default_font

        return fonts

    # Public API

    def render_report(self, report: Report) -> bytes:
        """
        Render a progress report.

        Args:
            report: Assembled report document

        Returns:
            PDF file content
        """
        logger.info(f"Rendering PDF report with {len(report.categories)} categories")
        doc = _Document()

        self._draw_cover(doc, report.title, report.owner, report.generated_on)
        self._draw_summary(doc, report)
        for block in report.categories:
            self._draw_category(doc, report, block)

        return self._save(doc)

    def render_template(
        self, grouped: dict[Category, list[Objective]], generated_on: date
    ) -> bytes:
        """
        Render a printable weekly tracking sheet.

        Args:
            grouped: Objectives by category, in display order
            generated_on: Day printed on the cover

        Returns:
            PDF file content
        """
        logger.info(
            f"Rendering PDF template for {sum(len(v) for v in grouped.values())} objectives"
        )
        doc = _Document()

        self._draw_cover(doc, "Objective Tracking Template", "To fill in by hand", generated_on)
        self._draw_instructions(doc)
        for category, objectives in grouped.items():
            self._draw_template_category(doc, category, objectives)
        self._draw_notes_page(doc)

        return self._save(doc)

    # Page furniture

    def _save(self, doc: _Document) -> bytes:
        total = len(doc.pages)
        for number, page in enumerate(doc.pages, start=1):
            self._draw_footer(ImageDraw.Draw(page), number, total)

        buffer = io.BytesIO()
        doc.pages[0].save(
            buffer,
            "PDF",
            save_all=True,
            append_images=doc.pages[1:],
            resolution=RESOLUTION,
        )
        logger.info(f"Rendered {total} PDF page(s)")
        return buffer.getvalue()

    def _draw_footer(self, draw: ImageDraw.ImageDraw, number: int, total: int):
        y = PAGE_HEIGHT - FOOTER_HEIGHT + 20
        draw.line([MARGIN, y - 10, PAGE_WIDTH - MARGIN, y - 10], fill=COLORS["grid"], width=2)
        text = f"Page {number} / {total}"
        self._draw_centered(draw, text, y, self.fonts["small"], COLORS["text_light"])

    def _draw_cover(self, doc: _Document, title: str, subtitle: str, generated_on: date):
        draw = doc.add_page(COLORS["cover"])

        draw.rectangle(
            [40, 40, PAGE_WIDTH - 40, PAGE_HEIGHT - 40], outline=COLORS["primary"], width=4
        )
        cx = PAGE_WIDTH // 2
        draw.ellipse([cx - 100, 200, cx + 100, 400], fill=COLORS["primary"])

        self._draw_centered(draw, title, 500, self.fonts["cover"], COLORS["text"])
        if subtitle:
            self._draw_centered(draw, subtitle, 600, self.fonts["title"], COLORS["text_light"])
        self._draw_centered(
            draw,
            f"Generated on {generated_on.strftime('%A %d %B %Y')}",
            680,
            self.fonts["normal"],
            COLORS["text_light"],
        )

        # Decorative dots
        for i in range(10):
            x = 110 + i * 113
            color = COLORS["primary"] if i % 2 == 0 else COLORS["secondary"]
            draw.ellipse([x - 20, PAGE_HEIGHT - 220, x + 20, PAGE_HEIGHT - 180], fill=color)

    def _draw_page_header(self, doc: _Document, title: str, color: str):
        draw = doc.add_page()
        draw.rectangle([0, 0, PAGE_WIDTH, 30], fill=color)
        draw.text((MARGIN, 60), title, fill=color, font=self.fonts["header"])
        draw.line([MARGIN, 120, PAGE_WIDTH - MARGIN, 120], fill=color, width=2)
        doc.y = 150

    # Report sections

    def _draw_summary(self, doc: _Document, report: Report):
        summary = report.summary
        self._draw_page_header(doc, "Progress summary", COLORS["primary"])
        draw = doc.draw

        lines = [
            f"Total objectives: {summary.total_objectives}",
            f"Global completion rate: {summary.completion_rate:.2f}%",
            f"Top performers: {', '.join(summary.top_performers) or 'None'}",
            f"Objectives to improve: {', '.join(summary.bottom_performers) or 'None'}",
        ]
        box_height = 80 + 36 * len(lines)
        draw.rectangle(
            [MARGIN, doc.y, PAGE_WIDTH - MARGIN, doc.y + box_height],
            fill="white",
            outline=COLORS["secondary"],
            width=3,
        )
        draw.text((MARGIN + 30, doc.y + 20), "Global statistics", fill=COLORS["secondary"], font=self.fonts["title"])
        y = doc.y + 70
        for line in lines:
            draw.text((MARGIN + 30, y), line, fill=COLORS["text"], font=self.fonts["normal"])
            y += 36
        doc.y += box_height + 40

        self._draw_bar_chart(
            doc,
            "Objectives per category",
            [CATEGORY_LABELS[c].replace(" Objectives", "") for c in Category],
            [summary.category_counts[c] for c in Category],
            [CATEGORY_COLORS[c] for c in Category],
        )
        self._draw_line_chart(
            doc,
            "Global completion rate (%)",
            report.days,
            [("Completion", summary.daily_rates, COLORS["primary"])],
        )

        self._ensure_space(doc, 120, "Progress summary", COLORS["primary"])
        doc.draw.text((MARGIN, doc.y), "Recommendations", fill=COLORS["primary"], font=self.fonts["title"])
        doc.y += 50
        for recommendation in report.recommendations:
            self._draw_paragraph(doc, f"• {recommendation}", MARGIN + 20, "Progress summary", COLORS["primary"])
            doc.y += 10

    def _draw_category(self, doc: _Document, report: Report, block: CategoryBlock):
        color = CATEGORY_COLORS[block.category]
        self._draw_page_header(doc, block.title, color)
        doc.draw.text(
            (MARGIN, doc.y),
            f"Category completion rate: {block.completion_rate:.2f}%",
            fill=COLORS["text"],
            font=self.fonts["normal"],
        )
        doc.y += 50

        series = [
            (objective.name, objective.chart, CHART_COLORS[i % len(CHART_COLORS)])
            for i, objective in enumerate(block.objectives[:MAX_CHART_SERIES])
        ]
        self._draw_line_chart(doc, "Progress by objective (%)", report.days, series)

        for objective in block.objectives:
            self._draw_objective(doc, report, objective, block.title, color)

    def _draw_objective(
        self,
        doc: _Document,
        report: Report,
        objective: ObjectiveBlock,
        page_title: str,
        color: str,
    ):
        self._ensure_space(doc, 260, page_title, color)
        draw = doc.draw

        top = doc.y
        draw.rectangle([MARGIN - 20, top, PAGE_WIDTH - MARGIN + 20, top + 170], fill="white", outline=color, width=3)
        draw.text((MARGIN, top + 15), objective.name, fill=COLORS["text"], font=self.fonts["title"])
        if objective.description:
            draw.text(
                (MARGIN, top + 55),
                self._truncate(draw, objective.description, self.fonts["small"], PAGE_WIDTH - 2 * MARGIN),
                fill=COLORS["text_light"],
                font=self.fonts["small"],
            )

        info = f"Type: {objective.tracking_label}    Cadence: {objective.cadence_label}"
        if objective.target:
            info += f"    Target: {format_number(objective.target)}"
        draw.text((MARGIN, top + 85), info, fill=COLORS["text"], font=self.fonts["small"])

        self._draw_progress_bar(draw, MARGIN, top + 122, 600, 28, objective.completion_rate, color)
        draw.text(
            (MARGIN + 620, top + 122),
            f"{objective.completion_rate:.2f}%",
            fill=COLORS["text"],
            font=self.fonts["normal"],
        )
        doc.y = top + 200

        y_max = None
        if objective.tracking_type != TrackingType.BOOLEAN and not objective.target:
            y_max = max((v for v in objective.chart if v is not None), default=0) or 1
        self._draw_line_chart(
            doc, "Progress", report.days, [(objective.name, objective.chart, color)], y_max=y_max, height=260
        )

        self._ensure_space(doc, 80, page_title, color)
        doc.draw.text((MARGIN, doc.y), "Detailed progress", fill=color, font=self.fonts["title"])
        doc.y += 45
        if objective.entries:
            self._draw_entry_table(doc, objective, page_title, color)
        else:
            doc.draw.text((MARGIN, doc.y), "No progress recorded", fill=COLORS["text_light"], font=self.fonts["normal"])
            doc.y += 40
        doc.y += 40

    def _draw_entry_table(
        self, doc: _Document, objective: ObjectiveBlock, page_title: str, color: str
    ):
        columns = [("Date", 200), ("Value", 220), ("Comment", PAGE_WIDTH - 2 * MARGIN - 420)]
        row_height = 40

        def header():
            x = MARGIN
            for name, width in columns:
                doc.draw.rectangle([x, doc.y, x + width, doc.y + row_height], fill=COLORS["header_bg"], outline=color)
                doc.draw.text((x + 10, doc.y + 8), name, fill=COLORS["text"], font=self.fonts["normal"])
                x += width
            doc.y += row_height

        header()
        for index, entry in enumerate(objective.entries):
            if not doc.fits(row_height):
                self._draw_page_header(doc, page_title, color)
                header()

            fill = COLORS["alt_row"] if index % 2 == 0 else "white"
            cells = [format_day(entry.day), entry.display, entry.comment]
            x = MARGIN
            for (_, width), text in zip(columns, cells):
                doc.draw.rectangle([x, doc.y, x + width, doc.y + row_height], fill=fill, outline=color)
                doc.draw.text(
                    (x + 10, doc.y + 10),
                    self._truncate(doc.draw, text, self.fonts["small"], width - 20),
                    fill=COLORS["text"],
                    font=self.fonts["small"],
                )
                x += width
            doc.y += row_height

    # Template sections

    def _draw_instructions(self, doc: _Document):
        self._draw_page_header(doc, "How to use this template", COLORS["primary"])
        for title, text in INSTRUCTIONS:
            doc.draw.text((MARGIN, doc.y), title, fill=COLORS["text"], font=self.fonts["title"])
            doc.y += 45
            self._draw_paragraph(doc, text, MARGIN + 40, "How to use this template", COLORS["primary"])
            doc.y += 25

        doc.y += 20
        doc.draw.text((MARGIN, doc.y), "Tips for success", fill=COLORS["secondary"], font=self.fonts["title"])
        doc.y += 50
        for tip in TIPS:
            self._draw_paragraph(doc, f"• {tip}", MARGIN + 40, "How to use this template", COLORS["primary"])
            doc.y += 10

    def _draw_template_category(
        self, doc: _Document, category: Category, objectives: list[Objective]
    ):
        title = CATEGORY_LABELS[category]
        color = CATEGORY_COLORS[category]
        self._draw_page_header(doc, title, color)

        name_width = 300
        cell_width = (PAGE_WIDTH - 2 * MARGIN - name_width) // len(WEEKDAYS)
        header_height = 60
        cell_height = 80

        for objective in objectives:
            self._ensure_space(doc, 120 + header_height + cell_height, title, color)
            draw = doc.draw

            top = doc.y
            draw.rectangle([MARGIN - 20, top, PAGE_WIDTH - MARGIN + 20, top + 90], fill="white", outline=color, width=3)
            draw.text((MARGIN, top + 12), objective.name, fill=COLORS["text"], font=self.fonts["title"])
            if objective.description:
                draw.text(
                    (MARGIN, top + 52),
                    self._truncate(draw, objective.description, self.fonts["small"], PAGE_WIDTH - 2 * MARGIN),
                    fill=COLORS["text_light"],
                    font=self.fonts["small"],
                )
            grid_top = top + 110

            draw.rectangle([MARGIN, grid_top, MARGIN + name_width, grid_top + header_height], fill=COLORS["header_bg"], outline=color)
            draw.text((MARGIN + 10, grid_top + 18), "Objective", fill=COLORS["text"], font=self.fonts["normal"])
            for i, day_name in enumerate(WEEKDAYS):
                x = MARGIN + name_width + i * cell_width
                fill = "#e8e8e8" if i % 2 == 0 else COLORS["header_bg"]
                draw.rectangle([x, grid_top, x + cell_width, grid_top + header_height], fill=fill, outline=color)
                draw.text((x + 6, grid_top + 20), day_name[:3], fill=COLORS["text"], font=self.fonts["small"])

            row_top = grid_top + header_height
            draw.rectangle([MARGIN, row_top, MARGIN + name_width, row_top + cell_height], fill=COLORS["alt_row"], outline=color)
            draw.text(
                (MARGIN + 10, row_top + 28),
                self._truncate(draw, objective.name, self.fonts["small"], name_width - 20),
                fill=COLORS["text"],
                font=self.fonts["small"],
            )
            for i in range(len(WEEKDAYS)):
                x = MARGIN + name_width + i * cell_width
                fill = "white" if i % 2 == 0 else COLORS["background"]
                draw.rectangle([x, row_top, x + cell_width, row_top + cell_height], fill=fill, outline=color)
                if objective.tracking_type == TrackingType.BOOLEAN:
                    cx = x + cell_width // 2
                    draw.rectangle([cx - 15, row_top + 12, cx + 15, row_top + 42], outline=COLORS["text_light"], width=2)
                    self._draw_centered(
                        draw, "Yes / No", row_top + 52, self.fonts["small"], COLORS["text_light"], x, cell_width
                    )
                else:
                    draw.line(
                        [x + 12, row_top + cell_height - 22, x + cell_width - 12, row_top + cell_height - 22],
                        fill=COLORS["text_light"],
                        width=2,
                    )

            doc.y = row_top + cell_height + 50

    def _draw_notes_page(self, doc: _Document):
        draw = doc.add_page()
        self._draw_centered(draw, "Notes and Observations", MARGIN, self.fonts["header"], COLORS["primary"])
        top = MARGIN + 90
        draw.rectangle([MARGIN, top, PAGE_WIDTH - MARGIN, top + 900], fill="white", outline=COLORS["secondary"], width=3)
        draw.text((MARGIN + 20, top + 20), "Notes:", fill=COLORS["secondary"], font=self.fonts["title"])
        for i in range(12):
            y = top + 110 + i * 62
            draw.line([MARGIN + 20, y, PAGE_WIDTH - MARGIN - 20, y], fill=COLORS["text_light"], width=1)

    # Charts and primitives

    def _draw_progress_bar(
        self,
        draw: ImageDraw.ImageDraw,
        x: int,
        y: int,
        width: int,
        height: int,
        percent: float,
        color: str,
    ):
        """Horizontal bar filled to ``percent`` (clamped to 0..100)."""
        filled_width = int(width * max(0.0, min(percent, 100.0)) / 100)
        if filled_width > 0:
            draw.rectangle([x, y, x + filled_width, y + height], fill=color, outline=color)
        draw.rectangle([x, y, x + width, y + height], outline=COLORS["text"], width=2)

        # Quarter markers
        for i in range(1, 4):
            seg_x = x + int(i * width / 4)
            draw.line([seg_x, y, seg_x, y + height], fill=COLORS["grid"], width=1)

    def _draw_bar_chart(
        self,
        doc: _Document,
        title: str,
        labels: Sequence[str],
        values: Sequence[float],
        colors: Sequence[str],
        height: int = 320,
    ):
        self._ensure_space(doc, height + 60, title, COLORS["primary"])
        draw = doc.draw
        draw.text((MARGIN, doc.y), title, fill=COLORS["text"], font=self.fonts["title"])

        top = doc.y + 50
        bottom = top + height - 40
        left, right = MARGIN + 50, PAGE_WIDTH - MARGIN
        draw.line([left, top, left, bottom], fill=COLORS["text"], width=2)
        draw.line([left, bottom, right, bottom], fill=COLORS["text"], width=2)

        peak = max(values, default=0) or 1
        slot = (right - left) / max(len(values), 1)
        for i, (label, value, color) in enumerate(zip(labels, values, colors)):
            bar_left = int(left + i * slot + slot * 0.2)
            bar_right = int(left + (i + 1) * slot - slot * 0.2)
            bar_top = int(bottom - (bottom - top - 20) * value / peak)
            if value:
                draw.rectangle([bar_left, bar_top, bar_right, bottom], fill=color)
            self._draw_centered(draw, str(value), bar_top - 26, self.fonts["small"], COLORS["text"], bar_left, bar_right - bar_left)
            self._draw_centered(draw, label, bottom + 8, self.fonts["small"], COLORS["text"], bar_left - 20, bar_right - bar_left + 40)

        doc.y = bottom + 60

    def _draw_line_chart(
        self,
        doc: _Document,
        title: str,
        days: Sequence[date],
        series: Sequence[tuple[str, Sequence[Optional[float]], str]],
        y_max: Optional[float] = None,
        height: int = 360,
    ):
        """
        Plot one or more day-indexed series; None values leave gaps.

        Args:
            doc: Target document
            title: Chart title
            days: X axis, oldest first
            series: (label, values aligned with days, color) triples
            y_max: Top of the Y axis (100 when omitted)
            height: Total chart height in pixels
        """
        self._ensure_space(doc, height + 40, title, COLORS["primary"])
        draw = doc.draw
        draw.text((MARGIN, doc.y), title, fill=COLORS["text"], font=self.fonts["title"])

        y_max = y_max or 100
        top = doc.y + 50
        bottom = top + height - 110
        left, right = MARGIN + 60, PAGE_WIDTH - MARGIN

        for i in range(5):
            value = y_max * i / 4
            y = int(bottom - (bottom - top) * i / 4)
            draw.line([left, y, right, y], fill=COLORS["grid"], width=1)
            draw.text((MARGIN, y - 10), f"{value:g}", fill=COLORS["text_light"], font=self.fonts["small"])
        draw.line([left, top, left, bottom], fill=COLORS["text"], width=2)
        draw.line([left, bottom, right, bottom], fill=COLORS["text"], width=2)

        step = (right - left) / max(len(days) - 1, 1)
        label_every = max(1, len(days) // 7)
        for i, day in enumerate(days):
            if i % label_every == 0 or i == len(days) - 1:
                x = int(left + i * step)
                draw.text((x - 24, bottom + 8), day.strftime("%d/%m"), fill=COLORS["text_light"], font=self.fonts["small"])

        for _, values, color in series:
            previous = None
            for i, value in enumerate(values):
                if value is None:
                    previous = None
                    continue
                point = (
                    int(left + i * step),
                    int(bottom - (bottom - top) * min(value, y_max) / y_max),
                )
                if previous:
                    draw.line([previous, point], fill=color, width=3)
                draw.ellipse([point[0] - 5, point[1] - 5, point[0] + 5, point[1] + 5], fill=color)
                previous = point

        # Legend
        legend_x = left
        legend_y = bottom + 40
        for label, _, color in series:
            draw.rectangle([legend_x, legend_y + 4, legend_x + 16, legend_y + 20], fill=color)
            text = self._truncate(draw, label, self.fonts["small"], 220)
            draw.text((legend_x + 24, legend_y), text, fill=COLORS["text"], font=self.fonts["small"])
            legend_x += 260

        doc.y = bottom + 90

    def _ensure_space(self, doc: _Document, height: int, page_title: str, color: str):
        """Start a continuation page when ``height`` no longer fits."""
        if doc.draw is None or not doc.fits(height):
            self._draw_page_header(doc, page_title, color)

    def _draw_paragraph(self, doc: _Document, text: str, x: int, page_title: str, color: str):
        font = self.fonts["normal"]
        for line in self._wrap(doc.draw, text, font, PAGE_WIDTH - MARGIN - x):
            self._ensure_space(doc, 34, page_title, color)
            doc.draw.text((x, doc.y), line, fill=COLORS["text"], font=font)
            doc.y += 34

    def _draw_centered(
        self,
        draw: ImageDraw.ImageDraw,
        text: str,
        y: int,
        font,
        fill: str,
        x: int = 0,
        width: int = PAGE_WIDTH,
    ):
        bbox = draw.textbbox((0, 0), text, font=font)
        text_width = bbox[2] - bbox[0]
        draw.text((x + (width - text_width) // 2, y), text, fill=fill, font=font)

    def _wrap(self, draw: ImageDraw.ImageDraw, text: str, font, width: int) -> list[str]:
        lines = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}".strip()
            if current and draw.textlength(candidate, font=font) > width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines

    def _truncate(self, draw: ImageDraw.ImageDraw, text: str, font, width: int) -> str:
        if draw.textlength(text, font=font) <= width:
            return text
        while text and draw.textlength(text + "...", font=font) > width:
            text = text[:-1]
        return text + "..."
