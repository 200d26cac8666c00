"""One-click PDF spec sheet for a generated material recipe.

Drawn directly on a reportlab canvas with the dashboard's dark palette. Text
flows top to bottom; when a block would run past the bottom margin the sheet
continues on a fresh page.
"""
from __future__ import annotations

from io import BytesIO
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from .logger import setup_logger
from .types import AnalysisResult, MaterialRecipe

logger = setup_logger(__name__)


def c(hex_code: str) -> colors.Color:
    return colors.HexColor(hex_code)


PALETTE = {
    "bg0": c("#060B1A"),
    "bg1": c("#0D1733"),
    "panel": c("#111A36"),
    "panel2": c("#172347"),
    "text": c("#E8EEF9"),
    "muted": c("#A2B2CE"),
    "mint": c("#9FE7D3"),
    "sky": c("#9ED2FF"),
    "rose": c("#F6B4D5"),
    "peach": c("#F7C6A0"),
    "line": c("#26345E"),
}

QUADRANT_ACCENT = {
    "BIO_BIO": "mint",
    "BIO_DURABLE": "peach",
    "FOSSIL_BIO": "rose",
    "NEXT_GEN": "sky",
}

MARGIN = 40
BOTTOM = 48


def lerp_color(a: colors.Color, b: colors.Color, t: float) -> colors.Color:
    return colors.Color(a.red + (b.red - a.red) * t, a.green + (b.green - a.green) * t, a.blue + (b.blue - a.blue) * t)


def draw_gradient_bg(cv: canvas.Canvas, width: float, height: float) -> None:
    steps = 70
    for i in range(steps):
        cv.setFillColor(lerp_color(PALETTE["bg0"], PALETTE["bg1"], i / float(steps - 1)))
        cv.rect(0, height * (i / float(steps)), width, height / float(steps) + 1, stroke=0, fill=1)


def wrap_lines(text: str, width: float, font: str = "Helvetica", size: int = 10) -> List[str]:
    lines: List[str] = []
    for para in str(text or "").splitlines() or [""]:
        lines.extend(simpleSplit(para, font, size, width) or [""])
    return lines


def draw_chip(cv: canvas.Canvas, x: float, y: float, text: str, accent: colors.Color) -> float:
    """Draw a rounded label and return its width."""
    w = max(60, 12 + cv.stringWidth(text, "Helvetica", 9))
    cv.setFillColor(PALETTE["panel2"])
    cv.setStrokeColor(accent)
    cv.roundRect(x, y, w, 18, 9, stroke=1, fill=1)
    cv.setFillColor(PALETTE["text"])
    cv.setFont("Helvetica", 9)
    cv.drawString(x + 6, y + 5, text)
    return w


class SheetWriter:
    def __init__(self, cv: canvas.Canvas, title: str) -> None:
        self.cv = cv
        self.width, self.height = A4
        self.title = title
        self.page = 0
        self.y = 0.0
        self.new_page()

    def new_page(self) -> None:
        if self.page:
            self.cv.showPage()
        self.page += 1
        draw_gradient_bg(self.cv, self.width, self.height)
        self.cv.setFillColor(PALETTE["muted"])
        self.cv.setFont("Helvetica", 8)
        self.cv.drawString(MARGIN, self.height - 28, "MATERIAL STRATEGY ENGINE  |  SPEC SHEET")
        self.cv.drawRightString(self.width - MARGIN, 24, f"{self.title}  |  Page {self.page}")
        self.y = self.height - 56

    def ensure(self, needed: float) -> None:
        if self.y - needed < BOTTOM:
            self.new_page()

    @property
    def inner_width(self) -> float:
        return self.width - 2 * MARGIN

    def heading(self, text: str, accent: colors.Color) -> None:
        self.ensure(34)
        self.cv.setFillColor(accent)
        self.cv.roundRect(MARGIN, self.y - 16, 4, 18, 2, stroke=0, fill=1)
        self.cv.setFillColor(PALETTE["text"])
        self.cv.setFont("Helvetica-Bold", 12)
        self.cv.drawString(MARGIN + 10, self.y - 12, text)
        self.y -= 28

    def paragraph(self, text: str, size: int = 10, color: Optional[colors.Color] = None, indent: float = 0) -> None:
        leading = size + 3
        self.cv.setFont("Helvetica", size)
        for line in wrap_lines(text, self.inner_width - indent, size=size):
            self.ensure(leading)
            self.cv.setFillColor(color or PALETTE["muted"])
            self.cv.setFont("Helvetica", size)
            self.cv.drawString(MARGIN + indent, self.y - size, line)
            self.y -= leading
        self.y -= 6

    def bullets(self, items: List[str]) -> None:
        for item in items:
            self.paragraph(f"• {item}", indent=8)

    def table(self, header: List[str], rows: List[List[str]], col_widths: List[float]) -> None:
        scale = self.inner_width / float(sum(col_widths))
        widths = [w * scale for w in col_widths]
        self._table_row(header, widths, bold=True)
        for row in rows:
            self._table_row(row, widths, bold=False)
        self.y -= 8

    def _table_row(self, cells: List[str], widths: List[float], bold: bool) -> None:
        font = "Helvetica-Bold" if bold else "Helvetica"
        wrapped = [simpleSplit(str(cell or ""), font, 9, w - 10) or [""] for cell, w in zip(cells, widths)]
        row_h = 12 * max(len(lines) for lines in wrapped) + 8
        self.ensure(row_h)
        self.cv.setFillColor(PALETTE["panel2"] if bold else PALETTE["panel"])
        self.cv.setStrokeColor(PALETTE["line"])
        self.cv.rect(MARGIN, self.y - row_h, self.inner_width, row_h, stroke=1, fill=1)
        x = MARGIN
        for lines, w in zip(wrapped, widths):
            self.cv.setFillColor(PALETTE["text"] if bold else PALETTE["muted"])
            self.cv.setFont(font, 9)
            ty = self.y - 14
            for line in lines:
                self.cv.drawString(x + 5, ty, line)
                ty -= 12
            x += w
        self.y -= row_h

    def chips(self, labels: List[str], accent: colors.Color) -> None:
        self.ensure(26)
        x = MARGIN
        for label in labels:
            w = max(60, 12 + self.cv.stringWidth(label, "Helvetica", 9))
            if x + w > self.width - MARGIN:
                self.y -= 24
                self.ensure(26)
                x = MARGIN
            x += draw_chip(self.cv, x, self.y - 18, label, accent) + 6
        self.y -= 32


def render_spec_sheet_pdf(recipe: MaterialRecipe, analysis: Optional[AnalysisResult] = None) -> bytes:
    buf = BytesIO()
    cv = canvas.Canvas(buf, pagesize=A4)
    cv.setTitle(f"{recipe.name} spec sheet")
    accent = PALETTE[QUADRANT_ACCENT.get(recipe.quadrant, "sky")]
    sheet = SheetWriter(cv, recipe.name)

    cv.setFillColor(PALETTE["text"])
    cv.setFont("Helvetica-Bold", 26)
    title_lines = simpleSplit(recipe.name, "Helvetica-Bold", 26, sheet.inner_width) or [recipe.name]
    for line in title_lines:
        cv.drawString(MARGIN, sheet.y - 26, line)
        sheet.y -= 32
    sheet.chips([recipe.quadrant.replace("_", "-"), f"Sustainability {recipe.sustainability_score:.0f}/100"], accent)

    # score bar
    sheet.ensure(20)
    cv.setFillColor(PALETTE["panel2"])
    cv.roundRect(MARGIN, sheet.y - 8, sheet.inner_width, 8, 4, stroke=0, fill=1)
    cv.setFillColor(accent)
    filled = sheet.inner_width * max(0.0, min(100.0, recipe.sustainability_score)) / 100.0
    if filled > 0:
        cv.roundRect(MARGIN, sheet.y - 8, max(filled, 8), 8, 4, stroke=0, fill=1)
    sheet.y -= 24

    if recipe.description:
        sheet.heading("Overview", accent)
        sheet.paragraph(recipe.description, color=PALETTE["text"])

    if recipe.ingredients:
        sheet.heading("Formulation", PALETTE["mint"])
        sheet.table(
            ["Ingredient", "Share", "Function"],
            [[ing.name, ing.percentage, ing.function] for ing in recipe.ingredients],
            [3, 1, 5],
        )

    if recipe.properties:
        sheet.heading("Properties", PALETTE["sky"])
        sheet.table(["Property", "Value"], [[p.name, p.value] for p in recipe.properties], [4, 5])

    if recipe.applications:
        sheet.heading("Applications", PALETTE["peach"])
        sheet.chips(recipe.applications, PALETTE["peach"])

    if recipe.processing_steps:
        sheet.heading("Processing", PALETTE["rose"])
        sheet.bullets([f"{i}. {step}" for i, step in enumerate(recipe.processing_steps, start=1)])

    if recipe.variations:
        sheet.heading("Variations", PALETTE["sky"])
        for var in recipe.variations:
            sheet.paragraph(var.name, color=PALETTE["text"])
            if var.description:
                sheet.paragraph(var.description, indent=8)

    if analysis is not None:
        sheet.heading("Engineering Analysis", accent)
        sheet.paragraph(analysis.summary, color=PALETTE["text"])
        logic = analysis.engineering_logic
        for label, body in [
            ("Advanced Compounding", logic.compounding),
            ("Application Engineering", logic.processing),
            ("System Intelligence", logic.system),
        ]:
            sheet.paragraph(label, color=PALETTE["text"])
            sheet.paragraph(body, indent=8)
        if analysis.constraints:
            sheet.heading("Constraints", PALETTE["rose"])
            sheet.bullets(analysis.constraints)

    cv.save()
    data = buf.getvalue()
    logger.info("Rendered spec sheet for %r (%d pages, %d bytes)", recipe.name, sheet.page, len(data))
    return data
