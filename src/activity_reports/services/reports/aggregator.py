"""Fan-out of report requests across customers and dates."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from typing import Callable, Iterable, Sequence

from ...config import settings
from ...errors import BatchFailed
from ...models.domain import Customer, CustomerReport, FetchOutcome

FetchOne = Callable[[Customer, date], CustomerReport]

logger = logging.getLogger(__name__)


def eligible_customers(customers: Iterable[Customer]) -> list[Customer]:
    """Customers with a name and an email, one per email, in input order."""
    selected: list[Customer] = []
    seen: set[str] = set()
    for customer in customers:
        if not customer.is_selectable:
            continue
        key = customer.email.strip().lower()
        if key in seen:
            logger.warning(f"Ignoring duplicate customer email {customer.email}")
            continue
        seen.add(key)
        selected.append(customer)
    return selected


def _fetch_outcome(fetch_one: FetchOne, customer: Customer, report_date: date) -> FetchOutcome:
    try:
        return FetchOutcome(customer=customer, report_date=report_date, report=fetch_one(customer, report_date))
    except Exception as e:
        return FetchOutcome(customer=customer, report_date=report_date, error=e)


def collect_outcomes(
    customers: Iterable[Customer],
    dates: Sequence[date],
    fetch_one: FetchOne,
    *,
    max_workers: int | None = None,
) -> list[FetchOutcome]:
    """Fetch every customer/date pair and return all outcomes.

    Dates are processed one after another; within a date all customers are
    fetched concurrently and every fetch settles before the next date
    starts. Outcomes within a date are in completion order.
    """
    selected = eligible_customers(customers)
    if not selected or not dates:
        return []

    workers = max(1, min(max_workers or settings.max_parallel_requests, len(selected)))
    outcomes: list[FetchOutcome] = []
    start_time = time.time()

    with ThreadPoolExecutor(max_workers=workers) as executor:
        for report_date in dates:
            futures = [
                executor.submit(_fetch_outcome, fetch_one, customer, report_date)
                for customer in selected
            ]
            failed = 0
            for future in as_completed(futures):
                outcome = future.result()
                if not outcome.ok:
                    failed += 1
                    logger.warning(
                        f"Dropping report for {outcome.customer.email} on {report_date.isoformat()}: {outcome.error}"
                    )
                outcomes.append(outcome)
            logger.info(
                f"Fetched reports for {report_date.isoformat()}: "
                f"{len(selected) - failed}/{len(selected)} succeeded"
            )

    logger.info(
        f"Completed {len(outcomes)} report requests for {len(selected)} customers over "
        f"{len(dates)} dates in {time.time() - start_time:.2f}s"
    )
    return outcomes


def reports_from_outcomes(outcomes: Sequence[FetchOutcome]) -> list[CustomerReport]:
    """Keep the successful reports; raise BatchFailed when nothing succeeded."""
    reports = [outcome.report for outcome in outcomes if outcome.report is not None]
    if outcomes and not reports:
        raise BatchFailed(len(outcomes), outcomes[-1].error)
    if len(reports) < len(outcomes):
        logger.warning(f"Partial batch: {len(reports)}/{len(outcomes)} reports returned")
    return reports


def aggregate(
    customers: Iterable[Customer],
    dates: Sequence[date],
    fetch_one: FetchOne,
    *,
    max_workers: int | None = None,
) -> list[CustomerReport]:
    """Build a report batch for the given customers and dates.

    Failed fetches are dropped without retry. Reports are grouped by date in
    the order given; within a date they follow completion order, so callers
    must match reports to customers by key rather than position.
    """
    outcomes = collect_outcomes(customers, dates, fetch_one, max_workers=max_workers)
    return reports_from_outcomes(outcomes)
