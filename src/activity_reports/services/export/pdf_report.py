"""Print-ready PDF rendering of a single customer report."""

from __future__ import annotations

import io
import logging
import re
from datetime import date
from pathlib import Path
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, portrait
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ...errors import RenderTargetMissing
from ...models.domain import CustomerReport, ReportDocument
from ...persistence.filesystem import FileStorage
from ..geocoding import GeocodeResolver
from ..geocoding.resolver import NO_LOCATION
from ..reports.duration import format_duration

PAGE_MARGIN = 10 * mm
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/"]|[^\x20-\x7e]')

logger = logging.getLogger(__name__)


def pdf_filename(email: str, report_date: date | str) -> str:
    day = report_date.isoformat() if isinstance(report_date, date) else str(report_date)
    safe_email = _UNSAFE_FILENAME_CHARS.sub("_", email)
    return f"Customer_Report_{safe_email}_{day}.pdf"


def build_report_document(
    report: CustomerReport,
    *,
    email: Optional[str] = None,
    resolver: Optional[GeocodeResolver] = None,
    start_label: Optional[str] = None,
) -> ReportDocument:
    """Lay out the summary block and activity table for one report."""
    customer = report.customer_name or "Unknown"
    summary = [
        ("Working Duration", format_duration(report.activities, start_label=start_label)),
        ("Customer", customer),
        ("Role", report.role or "No role specified"),
        ("Total Activities", str(len(report.activities))),
    ]
    if email or report.email:
        summary.insert(2, ("Email", email or report.email or ""))

    rows: list[tuple[str, str, str]] = []
    for activity in report.activities:
        if resolver is not None:
            location = resolver.resolve(activity.location)
        else:
            location = activity.location or NO_LOCATION
        rows.append((activity.time or "N/A", location, activity.status or "No status"))

    return ReportDocument(
        title=f"Activity Report: {customer} ({report.report_date})",
        summary=summary,
        activity_rows=rows,
        description=report.description or None,
    )


def _table_style(header_background) -> TableStyle:
    return TableStyle(
        [
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("BACKGROUND", (0, 0), (-1, 0), header_background),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 5),
            ("RIGHTPADDING", (0, 0), (-1, -1), 5),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.Color(0.98, 0.98, 0.98)]),
        ]
    )


def to_pdf(document: Optional[ReportDocument]) -> bytes:
    """Render a report document to A4 portrait PDF bytes.

    Output is byte-for-byte reproducible for the same document.
    """
    if document is None:
        raise RenderTargetMissing("No rendered report to export")

    styles = getSampleStyleSheet()
    cell_style = ParagraphStyle("Cell", parent=styles["BodyText"], fontSize=9, leading=11)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=portrait(A4),
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=document.title,
        invariant=1,
    )

    story = [Paragraph(_escape(document.title), styles["Title"]), Spacer(1, 4 * mm)]

    summary_table = Table(
        [["Report Summary", ""]] + [[label, value] for label, value in document.summary],
        colWidths=[doc.width * 0.35, doc.width * 0.65],
        hAlign="LEFT",
    )
    summary_style = _table_style(colors.whitesmoke)
    summary_style.add("SPAN", (0, 0), (-1, 0))
    summary_table.setStyle(summary_style)
    story.append(summary_table)

    if document.description:
        story.append(Spacer(1, 3 * mm))
        story.append(Paragraph(f"<b>Description:</b> {_escape(document.description)}", styles["BodyText"]))

    story.append(Spacer(1, 6 * mm))
    if document.activity_rows:
        data = [["Time", "Location", "Status"]]
        data += [
            [time_text, Paragraph(_escape(location), cell_style), Paragraph(_escape(status), cell_style)]
            for time_text, location, status in document.activity_rows
        ]
        activity_table = Table(
            data,
            colWidths=[doc.width * 0.18, doc.width * 0.52, doc.width * 0.30],
            hAlign="LEFT",
            repeatRows=1,
        )
        activity_table.setStyle(_table_style(colors.Color(0.9, 0.93, 0.98)))
        story.append(activity_table)
    else:
        story.append(Paragraph("No activities found for this date", styles["Italic"]))

    doc.build(story)
    return buffer.getvalue()


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def save_pdf(
    document: Optional[ReportDocument],
    email: str,
    report_date: date | str,
    *,
    storage: FileStorage | None = None,
) -> Path:
    storage = storage or FileStorage()
    path = storage.save_export(pdf_filename(email, report_date), to_pdf(document), prefix="pdf")
    logger.info(f"Saved PDF export to {path}")
    return path
