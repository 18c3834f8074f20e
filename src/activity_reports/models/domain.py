"""Domain models for customers, activity logs and derived values."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(slots=True)
class Customer:
    """A customer whose activity is reported; ``email`` is the fan-out key."""

    id: Optional[int]
    customer_name: str
    email: str
    role: Optional[str] = None

    @property
    def is_selectable(self) -> bool:
        return bool(self.email and self.email.strip() and self.customer_name and self.customer_name.strip())


@dataclass(frozen=True, slots=True)
class Activity:
    time: str
    location: str = ""
    status: str = ""


@dataclass(frozen=True, slots=True)
class CustomerReport:
    """One customer's activity log for one calendar day."""

    customer_name: str
    role: Optional[str]
    description: Optional[str]
    report_date: str
    activities: tuple[Activity, ...] = ()
    email: Optional[str] = field(default=None, compare=False)


@dataclass(slots=True)
class FetchOutcome:
    """Result of a single customer/date fetch, successful or not."""

    customer: Customer
    report_date: date
    report: Optional[CustomerReport] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.report is not None


@dataclass(frozen=True, slots=True)
class GeoAddress:
    coordinate_key: str
    address: str
    resolved_at: datetime


@dataclass(frozen=True, slots=True)
class Elapsed:
    """Elapsed time as whole minutes plus remaining seconds."""

    minutes: int
    seconds: int

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    def __str__(self) -> str:
        return f"{self.minutes} minutes {self.seconds} seconds"


@dataclass(slots=True)
class OverviewRow:
    customer_name: str
    role: str
    description: str
    report_date: str
    activity_count: int
    latest_time: Optional[str]
    latest_location: Optional[str]
    latest_status: Optional[str]


@dataclass(slots=True)
class ReportDocument:
    """Rendered view of one customer's report: summary block plus activity table."""

    title: str
    summary: list[tuple[str, str]]
    activity_rows: list[tuple[str, str, str]]
    description: Optional[str] = None
