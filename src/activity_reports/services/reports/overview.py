"""Per-report summary rows for the daily overview."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import CustomerReport, OverviewRow
from ..geocoding import GeocodeResolver


def build_overview(batch: Sequence[CustomerReport], resolver: GeocodeResolver | None = None) -> list[OverviewRow]:
    """Summarise each report that has activity; the latest entry is the last in log order."""
    active = [report for report in batch if report.activities]

    locations: dict[str, str] = {}
    if resolver is not None:
        locations = resolver.resolve_many(report.activities[-1].location for report in active)

    rows: list[OverviewRow] = []
    for report in active:
        latest = report.activities[-1]
        if resolver is not None:
            location = locations.get(latest.location) or resolver.resolve(latest.location)
        else:
            location = latest.location or None
        rows.append(
            OverviewRow(
                customer_name=report.customer_name or "Unknown Customer",
                role=report.role or "No role",
                description=report.description or "No description",
                report_date=report.report_date or "Unknown date",
                activity_count=len(report.activities),
                latest_time=latest.time or None,
                latest_location=location,
                latest_status=latest.status or None,
            )
        )
    return rows
