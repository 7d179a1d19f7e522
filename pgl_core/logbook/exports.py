# pgl_core/logbook/exports.py
"""
Logbook exports for one student and one log type: CSV, Excel and PDF.
"""
from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Sequence
from xml.sax.saxutils import escape

from django.utils.text import slugify
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from pgl_core.iam.models import UserProfile
from pgl_core.logbook.models import LogEntry
from pgl_core.logbook.registry import LogType

CONTENT_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content_type: str
    content: bytes


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def table_for(log_type: LogType, entries: Iterable[LogEntry]) -> tuple[List[str], List[List[str]]]:
    headers = ["Sl. No"] + [label for _, label in log_type.export_columns]
    rows = [
        [str(entry.sl_no)] + [_cell(getattr(entry, field, None)) for field, _ in log_type.export_columns]
        for entry in entries
    ]
    return headers, rows


def render_csv(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    writer.writerows(rows)
    return output.getvalue().encode("utf-8")


def render_xlsx(title: str, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]  # Excel sheet name limit

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")

    ws.append(list(headers))
    for col in range(1, len(headers) + 1):
        cell = ws.cell(row=1, column=col)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    for row in rows:
        ws.append(list(row))

    for idx, header in enumerate(headers, start=1):
        longest = max([len(header)] + [len(r[idx - 1]) for r in rows])
        ws.column_dimensions[get_column_letter(idx)].width = min(max(longest + 2, 10), 60)

    ws.freeze_panes = "A2"

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def render_pdf(title: str, subtitle: str, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=1 * cm,
        leftMargin=1 * cm,
        topMargin=1 * cm,
        bottomMargin=1 * cm,
        title=title,
    )
    styles = getSampleStyleSheet()
    cell_style = styles["BodyText"]
    cell_style.fontSize = 8
    cell_style.leading = 10

    data = [list(headers)] + [[Paragraph(escape(value), cell_style) for value in row] for row in rows]
    table = Table(data, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1f4e78")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, 0), 9),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cbd5e0")),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f1f5f9")]),
            ]
        )
    )

    content = [
        Paragraph(title, styles["Title"]),
        Paragraph(escape(subtitle), styles["Normal"]),
        Spacer(1, 12),
        table,
    ]
    doc.build(content)
    return buffer.getvalue()


def build_export(*, log_type: LogType, student: UserProfile, entries: Iterable[LogEntry], file_format: str) -> ExportFile:
    headers, rows = table_for(log_type, entries)
    base = f"{slugify(log_type.label)}-{slugify(student.display_name) or student.pk}"

    if file_format == "xlsx":
        content = render_xlsx(log_type.label, headers, rows)
    elif file_format == "pdf":
        batch = student.batch.name if student.batch_id else "-"
        subtitle = f"{student.display_name} | Batch: {batch} | Semester: {student.current_semester}"
        content = render_pdf(log_type.label, subtitle, headers, rows)
    elif file_format == "csv":
        content = render_csv(headers, rows)
    else:
        raise ValueError(f"Unsupported export format: {file_format}")

    return ExportFile(filename=f"{base}.{file_format}", content_type=CONTENT_TYPES[file_format], content=content)
