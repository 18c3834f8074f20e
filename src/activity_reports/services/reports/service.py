"""High-level orchestration for report queries and exports."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ...config import settings
from ...errors import EmptyBatch, ReportFetchError
from ...models.domain import Customer, CustomerReport, OverviewRow
from ...persistence.filesystem import FileStorage
from ...schemas.reports import ReportQuery
from ..dates import expand_date_range
from ..export import build_report_document, csv_filename, pdf_filename, to_csv, to_pdf
from ..geocoding import get_geocode_resolver
from .aggregator import collect_outcomes, eligible_customers, reports_from_outcomes
from .client import ReportSourceClient
from .duration import format_duration
from .overview import build_overview

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchResult:
    start_date: date
    end_date: date
    requested: int
    reports: list[CustomerReport]
    overview: list[OverviewRow]


@dataclass(slots=True)
class GroupResult:
    start_date: date
    end_date: date
    reports: list[CustomerReport]

    @property
    def total_users(self) -> int:
        return len({(report.email or report.customer_name).lower() for report in self.reports})

    @property
    def total_events(self) -> int:
        return sum(len(report.activities) for report in self.reports)

    @property
    def period(self) -> str:
        return f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"


def _wanted_emails(query: ReportQuery) -> set[str]:
    return {email.strip().lower() for email in query.emails or () if email.strip()}


def _select_customers(query: ReportQuery, client: ReportSourceClient) -> list[Customer]:
    if query.customers is not None:
        customers = [model.to_domain() for model in query.customers]
    else:
        try:
            customers = client.list_customers()
        except ReportFetchError as conn_err:
            raise ConnectionError(f"Cannot load the customer directory: {conn_err}") from conn_err

    wanted = _wanted_emails(query)
    if wanted:
        customers = [c for c in customers if c.email and c.email.strip().lower() in wanted]
    return eligible_customers(customers)


def run_batch(query: ReportQuery, *, with_overview: bool = True) -> BatchResult:
    """Validate the range, fan out the fetches and summarise the batch."""
    start, end = query.start_date, query.effective_end_date
    dates = expand_date_range(start, end)

    client = ReportSourceClient()
    customers = _select_customers(query, client)
    logger.info(f"Querying reports for {len(customers)} customers from {start.isoformat()} to {end.isoformat()}")

    outcomes = collect_outcomes(customers, dates, client.fetch_for)
    reports = reports_from_outcomes(outcomes)
    overview = build_overview(reports, get_geocode_resolver()) if with_overview else []
    return BatchResult(
        start_date=start,
        end_date=end,
        requested=len(customers) * len(dates),
        reports=reports,
        overview=overview,
    )


def run_group_report(query: ReportQuery) -> GroupResult:
    """Fetch every user's events for the range in one call, split per day."""
    start, end = query.start_date, query.effective_end_date
    expand_date_range(start, end)

    reports = ReportSourceClient().fetch_group_report(start, end)
    wanted = _wanted_emails(query)
    if wanted:
        reports = [r for r in reports if r.email and r.email.strip().lower() in wanted]
    logger.info(f"Group report for {start.isoformat()} to {end.isoformat()} returned {len(reports)} daily reports")
    return GroupResult(start_date=start, end_date=end, reports=reports)


def fetch_individual(email: str, report_date: date) -> tuple[CustomerReport, str]:
    """Fetch one report and its working duration display string."""
    if not email or not email.strip():
        raise ValueError("Please select both a customer and a date")
    report = ReportSourceClient().fetch_report(email.strip(), report_date)
    return report, format_duration(report.activities, start_label=settings.start_status_label)


def export_batch_csv(query: ReportQuery, storage: Optional[FileStorage] = None) -> tuple[str, bytes]:
    """Run the batch and render it as CSV; a batch without reports is EmptyBatch."""
    result = run_batch(query, with_overview=False)
    if not result.reports:
        raise EmptyBatch(
            f"No reports between {result.start_date.isoformat()} and {result.end_date.isoformat()}"
        )
    filename, content = csv_filename(result.start_date, result.end_date), to_csv(result.reports)
    _persist(filename, content, prefix="csv", storage=storage)
    return filename, content


def export_individual_pdf(
    email: str, report_date: date, storage: Optional[FileStorage] = None
) -> tuple[str, bytes]:
    report, _ = fetch_individual(email, report_date)
    document = build_report_document(
        report,
        email=email,
        resolver=get_geocode_resolver(),
        start_label=settings.start_status_label,
    )
    filename, content = pdf_filename(email, report_date), to_pdf(document)
    _persist(filename, content, prefix="pdf", storage=storage)
    return filename, content


def _persist(filename: str, content: bytes, *, prefix: str, storage: Optional[FileStorage]) -> None:
    if not (settings.persist_exports or storage is not None):
        return
    path = (storage or FileStorage()).save_export(filename, content, prefix=prefix)
    logger.info(f"Saved {prefix.upper()} export to {path}")


def resolve_locations(reports: Sequence[CustomerReport]) -> dict[str, str]:
    """Addresses for every distinct activity location in the reports."""
    resolver = get_geocode_resolver()
    return resolver.resolve_many(activity.location for report in reports for activity in report.activities)
