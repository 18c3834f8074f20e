"""Serialize report batches to CSV."""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Sequence

from ...config import settings
from ...errors import EmptyBatch
from ...models.domain import Activity, CustomerReport
from ...persistence.filesystem import FileStorage

# Wire names of CustomerReport fields, in declaration order.
CSV_COLUMNS = ("customerName", "role", "description", "reportDate", "activities")

logger = logging.getLogger(__name__)


def csv_filename(from_date: date | str, to_date: date | str) -> str:
    return f"daily_report_{_date_text(from_date)}_to_{_date_text(to_date)}.csv"


def _date_text(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def _row(report: CustomerReport) -> list[str]:
    activities = json.dumps([asdict(activity) for activity in report.activities], separators=(",", ":"))
    return [
        report.customer_name or "",
        report.role or "",
        report.description or "",
        report.report_date or "",
        activities,
    ]


def to_csv(batch: Sequence[CustomerReport], *, quoting: bool | None = None) -> bytes:
    """Render a batch as UTF-8 CSV, one row per report.

    An empty batch yields an empty document. With ``quoting`` disabled the
    fields are joined with bare commas.
    """
    if not batch:
        logger.info("CSV export requested for an empty batch")
        return b""

    use_quoting = settings.csv_rfc4180_quoting if quoting is None else quoting
    buffer = io.StringIO()
    if use_quoting:
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        for report in batch:
            writer.writerow(_row(report))
    else:
        buffer.write(",".join(CSV_COLUMNS) + "\n")
        for report in batch:
            buffer.write(",".join(_row(report)) + "\n")
    return buffer.getvalue().encode("utf-8")


def read_csv(data: bytes) -> list[CustomerReport]:
    """Parse a quoted CSV document produced by :func:`to_csv`."""
    text = data.decode("utf-8")
    if not text:
        return []
    reports: list[CustomerReport] = []
    for row in csv.DictReader(io.StringIO(text)):
        activities = tuple(Activity(**item) for item in json.loads(row["activities"] or "[]"))
        reports.append(
            CustomerReport(
                customer_name=row["customerName"],
                role=row["role"] or None,
                description=row["description"] or None,
                report_date=row["reportDate"],
                activities=activities,
            )
        )
    return reports


def save_csv(
    batch: Sequence[CustomerReport],
    from_date: date | str,
    to_date: date | str,
    *,
    storage: FileStorage | None = None,
) -> Path:
    """Write the batch under the data root using the daily report filename."""
    if not batch:
        raise EmptyBatch("No reports to export")
    storage = storage or FileStorage()
    path = storage.save_export(csv_filename(from_date, to_date), to_csv(batch), prefix="csv")
    logger.info(f"Saved CSV export with {len(batch)} reports to {path}")
    return path
