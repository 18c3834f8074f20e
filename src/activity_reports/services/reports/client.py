"""HTTP client for the remote report service."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from datetime import date
from typing import Any

import httpx
from pydantic import ValidationError

from ...config import settings
from ...errors import ReportFetchError
from ...models.domain import Activity, Customer, CustomerReport
from ...schemas.reports import CustomerModel, CustomerReportModel

logger = logging.getLogger(__name__)


class ReportSourceClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.report_service_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("Report service base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.report_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.report_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.report_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        """Create a per-call HTTP client; fan-out threads never share one."""
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 10.0)),
            transport=self._transport,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.request(method, url, **kwargs)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    raise ReportFetchError(
                        f"Report service returned HTTP {e.response.status_code} for {path}"
                    ) from e
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ReportFetchError(f"Report service unreachable at {self.base_url}: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"Report request failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}"
                    )
                    time.sleep(wait_time)
                except httpx.HTTPError as e:
                    raise ReportFetchError(f"Report request to {path} failed: {e}") from e
                except ValueError as e:
                    raise ReportFetchError(f"Report service returned invalid JSON for {path}") from e
        finally:
            client.close()

    def fetch_report(self, email: str, report_date: date) -> CustomerReport:
        """Fetch one customer's report for one day."""
        payload = self._request(
            "GET",
            "/report",
            params={"email": email, "date": report_date.isoformat()},
        )
        if not isinstance(payload, dict):
            raise ReportFetchError(f"Unexpected report payload for {email} on {report_date.isoformat()}")
        try:
            model = CustomerReportModel.model_validate(payload)
        except ValidationError as e:
            raise ReportFetchError(f"Malformed report for {email} on {report_date.isoformat()}: {e}") from e
        return model.to_domain(report_date=report_date, email=email)

    def fetch_for(self, customer: Customer, report_date: date) -> CustomerReport:
        return self.fetch_report(customer.email, report_date)

    def list_customers(self) -> list[Customer]:
        payload = self._request("GET", "/report/customers")
        if not isinstance(payload, list):
            return []
        customers: list[Customer] = []
        for item in payload:
            try:
                customers.append(CustomerModel.model_validate(item).to_domain())
            except ValidationError as e:
                logger.warning(f"Skipping malformed customer record: {e}")
        return customers

    def fetch_group_report(self, start: date, end: date, email: str | None = None) -> list[CustomerReport]:
        """Fetch every user's events for a range and split them into per-day reports."""
        payload = self._request(
            "POST",
            "/report/generate-all-users-report-json",
            json={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        if not isinstance(payload, list):
            raise ReportFetchError("Unexpected group report payload")

        reports: list[CustomerReport] = []
        for user in payload:
            if not isinstance(user, dict):
                continue
            user_email = user.get("email") or ""
            if email and user_email != email:
                continue
            by_date: OrderedDict[str, list[Activity]] = OrderedDict()
            for event in user.get("eventDetails") or []:
                by_date.setdefault(str(event.get("date") or ""), []).append(
                    Activity(
                        time=str(event.get("time") or ""),
                        location=str(event.get("location") or ""),
                        status=str(event.get("status") or ""),
                    )
                )
            for day in sorted(by_date):
                reports.append(
                    CustomerReport(
                        customer_name=user.get("customerName") or "",
                        role=user.get("role"),
                        description=user.get("description"),
                        report_date=day,
                        activities=tuple(by_date[day]),
                        email=user_email or None,
                    )
                )
        return reports


def check_health(base_url: str | None = None) -> bool:
    """Check that the report service answers the customer directory endpoint."""
    base = (base_url or settings.report_service_base_url).rstrip("/")
    if not base:
        return False
    try:
        response = httpx.get(f"{base}/report/customers", timeout=5.0)
        response.raise_for_status()
        return isinstance(response.json(), list)
    except httpx.HTTPError:
        return False
    except ValueError:
        return False
