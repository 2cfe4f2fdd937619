"""Render an already-fetched asset list as CSV, XLSX or PDF.

EXPORT_COLUMNS is the only column list: all three renderers walk it in
order, and all of them format cells through ``format_cell`` so empty values,
booleans, amounts and dates read the same in every file.
"""
import csv
import enum
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from functools import partial
from typing import Any
from xml.sax.saxutils import escape

import xlsxwriter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from assetbridge.core.exceptions import ExportSerializationError

logger = logging.getLogger(__name__)


class ExportFormat(str, enum.Enum):
    csv = "csv"
    workbook = "xlsx"
    document = "pdf"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]


_MEDIA_TYPES = {
    ExportFormat.csv: "text/csv; charset=utf-8",
    ExportFormat.workbook: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.document: "application/pdf",
}


@dataclass(frozen=True)
class ExportColumn:
    header: str
    field: str
    pdf_width: float  # points, landscape A4


EXPORT_COLUMNS: tuple[ExportColumn, ...] = (
    ExportColumn("Name", "name", 70),
    ExportColumn("Code", "code", 40),
    ExportColumn("Status", "status", 45),
    ExportColumn("Location", "location", 50),
    ExportColumn("Unit", "unit", 45),
    ExportColumn("Value", "value", 40),
    ExportColumn("Acquisition Date", "acquisition_date", 45),
    ExportColumn("Manufacturer", "manufacturer", 45),
    ExportColumn("Model", "model", 40),
    ExportColumn("Color", "color", 30),
    ExportColumn("Serial Number", "serial_number", 45),
    ExportColumn("Capacity", "capacity", 35),
    ExportColumn("Voltage", "voltage", 35),
    ExportColumn("Condition", "condition", 40),
    ExportColumn("Holder", "holder", 45),
    ExportColumn("Origin", "origin", 35),
    ExportColumn("Inalienable", "inalienable", 35),
    ExportColumn("Notes", "notes", 60),
)

YES_LABEL = "Yes"
NO_LABEL = "No"
REPORT_TITLE = "Asset Report"
SHEET_NAME = "Assets"
MIN_SHEET_COLUMN_WIDTH = 12
# Longest cell text the PDF table shows; one wrapped row must fit in a page frame.
PDF_CELL_MAX_CHARS = 300
PDF_TRUNCATION_MARK = "..."


@dataclass(frozen=True)
class ExportArtifact:
    format: ExportFormat
    filename: str
    payload: bytes

    @property
    def media_type(self) -> str:
        return self.format.media_type


# ─── Shared cell formatting ───

def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return YES_LABEL if value else NO_LABEL
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def header_row() -> list[str]:
    return [c.header for c in EXPORT_COLUMNS]


def record_row(record: Any) -> list[str]:
    return [format_cell(getattr(record, c.field, None)) for c in EXPORT_COLUMNS]


# ─── CSV ───

def render_csv(records: Sequence[Any]) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header_row())
    for record in records:
        writer.writerow(record_row(record))
    # BOM so spreadsheet apps pick UTF-8 for accented text.
    return buf.getvalue().encode("utf-8-sig")


# ─── XLSX ───

def sheet_column_width(header: str) -> int:
    return max(len(header) + 2, MIN_SHEET_COLUMN_WIDTH)


def render_workbook(records: Sequence[Any]) -> bytes:
    output = io.BytesIO()
    workbook = xlsxwriter.Workbook(output, {"in_memory": True})
    worksheet = workbook.add_worksheet(SHEET_NAME)

    header_format = workbook.add_format({"bold": True, "bg_color": "#D3D3D3", "border": 1})
    amount_format = workbook.add_format({"num_format": "0.00"})

    for col, column in enumerate(EXPORT_COLUMNS):
        worksheet.write_string(0, col, column.header, header_format)
        worksheet.set_column(col, col, sheet_column_width(column.header))
    worksheet.freeze_panes(1, 0)

    for row, record in enumerate(records, start=1):
        for col, column in enumerate(EXPORT_COLUMNS):
            raw = getattr(record, column.field, None)
            if column.field == "value" and raw is not None:
                worksheet.write_number(row, col, float(raw), amount_format)
                continue
            text = format_cell(raw)
            if text:
                worksheet.write_string(row, col, text)

    workbook.close()
    return output.getvalue()


# ─── PDF ───

class PageFooter:
    """Draws the product identifier and page number at the foot of each page."""

    def __init__(self, product_name: str):
        self.product_name = product_name

    def __call__(self, canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 7)
        canvas.setFillColor(colors.grey)
        canvas.drawString(doc.leftMargin, 5 * mm, self.product_name)
        canvas.drawRightString(doc.pagesize[0] - doc.rightMargin, 5 * mm, f"Page {doc.page}")
        canvas.restoreState()


def pdf_cell_text(text: str, limit: int = PDF_CELL_MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - len(PDF_TRUNCATION_MARK)].rstrip() + PDF_TRUNCATION_MARK


def _pdf_styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": base["Title"],
        "subtitle": ParagraphStyle("subtitle", parent=base["Normal"], fontSize=9, textColor=colors.grey),
        "cell": ParagraphStyle("cell", parent=base["Normal"], fontSize=6, leading=7),
        "head": ParagraphStyle("head", parent=base["Normal"], fontName="Helvetica-Bold", fontSize=6, leading=7),
    }


def render_document(
    records: Sequence[Any],
    owner_name: str = "",
    generated_at: datetime | None = None,
    product_name: str = "AssetBridge",
) -> bytes:
    output = io.BytesIO()
    styles = _pdf_styles()
    generated_at = generated_at or datetime.now()

    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(A4),
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=10 * mm,
        bottomMargin=12 * mm,
        title=REPORT_TITLE,
        author=product_name,
    )

    subtitle = f"Generated {generated_at:%Y-%m-%d %H:%M}"
    if owner_name:
        subtitle = f"{escape(owner_name)} · {subtitle}"
    story = [
        Paragraph(REPORT_TITLE, styles["title"]),
        Paragraph(subtitle, styles["subtitle"]),
        Spacer(1, 4 * mm),
    ]

    data = [[Paragraph(escape(h), styles["head"]) for h in header_row()]]
    for record in records:
        data.append([Paragraph(escape(pdf_cell_text(text)), styles["cell"]) for text in record_row(record)])

    table = Table(data, colWidths=[c.pdf_width for c in EXPORT_COLUMNS], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#D3D3D3")),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
        ("LEFTPADDING", (0, 0), (-1, -1), 2),
        ("RIGHTPADDING", (0, 0), (-1, -1), 2),
    ]))
    story.append(table)

    footer = PageFooter(product_name)
    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    return output.getvalue()


# ─── Entry point ───

def serialize(
    records: Sequence[Any],
    fmt: ExportFormat,
    filename: str,
    *,
    owner_name: str = "",
    generated_at: datetime | None = None,
    product_name: str = "AssetBridge",
) -> ExportArtifact:
    """Render ``records`` in ``fmt``; any renderer failure aborts the export."""
    renderers = {
        ExportFormat.csv: render_csv,
        ExportFormat.workbook: render_workbook,
        ExportFormat.document: partial(
            render_document,
            owner_name=owner_name,
            generated_at=generated_at,
            product_name=product_name,
        ),
    }
    try:
        payload = renderers[fmt](records)
    except Exception as exc:
        logger.error("Export rendering failed format=%s records=%d: %s", fmt.value, len(records), exc, exc_info=True)
        raise ExportSerializationError(fmt.value, exc) from exc

    logger.info("Rendered %s export: %d records, %d bytes", fmt.value, len(records), len(payload))
    return ExportArtifact(format=fmt, filename=filename, payload=payload)
