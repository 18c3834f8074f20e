"""Report API and report-service payload schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.domain import Activity, Customer, CustomerReport, OverviewRow


class CustomerModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    customer_name: str = Field("", alias="customerName")
    email: str = ""
    role: Optional[str] = None

    @field_validator("customer_name", "email", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    def to_domain(self) -> Customer:
        return Customer(id=self.id, customer_name=self.customer_name, email=self.email, role=self.role)

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerModel":
        return cls(id=customer.id, customer_name=customer.customer_name, email=customer.email, role=customer.role)


class ActivityModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time: str = ""
    location: str = ""
    status: str = ""
    resolved_location: Optional[str] = Field(None, alias="resolvedLocation")

    @field_validator("time", "location", "status", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else str(value)

    def to_domain(self) -> Activity:
        return Activity(time=self.time, location=self.location, status=self.status)


class CustomerReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field("", alias="customerName")
    role: Optional[str] = None
    description: Optional[str] = None
    report_date: Optional[str] = Field(None, alias="reportDate")
    activities: List[ActivityModel] = Field(default_factory=list)
    email: Optional[str] = None

    @field_validator("customer_name", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("activities", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return [] if value is None else value

    def to_domain(self, *, report_date: Optional[date] = None, email: Optional[str] = None) -> CustomerReport:
        fallback_date = report_date.isoformat() if report_date else ""
        return CustomerReport(
            customer_name=self.customer_name,
            role=self.role,
            description=self.description,
            report_date=self.report_date or fallback_date,
            activities=tuple(activity.to_domain() for activity in self.activities),
            email=self.email or email,
        )

    @classmethod
    def from_domain(cls, report: CustomerReport) -> "CustomerReportModel":
        return cls(
            customer_name=report.customer_name,
            role=report.role,
            description=report.description,
            report_date=report.report_date,
            activities=[ActivityModel(time=a.time, location=a.location, status=a.status) for a in report.activities],
            email=report.email,
        )


class ReportQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(..., alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate", description="Defaults to start_date.")
    emails: Optional[List[str]] = Field(
        default=None,
        description="Restrict the query to these customer emails. Defaults to the whole customer directory.",
    )
    customers: Optional[List[CustomerModel]] = Field(
        default=None,
        description="Explicit customer list; skips the directory lookup.",
    )

    @property
    def effective_end_date(self) -> date:
        return self.end_date or self.start_date


class OverviewRowModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., alias="customerName")
    role: str
    description: str
    report_date: str = Field(..., alias="reportDate")
    activity_count: int = Field(..., alias="activityCount")
    latest_time: Optional[str] = Field(None, alias="latestTime")
    latest_location: Optional[str] = Field(None, alias="latestLocation")
    latest_status: Optional[str] = Field(None, alias="latestStatus")

    @classmethod
    def from_domain(cls, row: OverviewRow) -> "OverviewRowModel":
        return cls(
            customer_name=row.customer_name,
            role=row.role,
            description=row.description,
            report_date=row.report_date,
            activity_count=row.activity_count,
            latest_time=row.latest_time,
            latest_location=row.latest_location,
            latest_status=row.latest_status,
        )


class OverviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    requested: int
    returned: int
    reports: List[CustomerReportModel]
    overview: List[OverviewRowModel]


class GroupReportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    period: str
    total_users: int = Field(..., alias="totalUsers")
    total_events: int = Field(..., alias="totalEvents")
    reports: List[CustomerReportModel]


class IndividualReportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    report_date: date = Field(..., alias="reportDate")
    working_duration: str = Field(..., alias="workingDuration")
    total_activities: int = Field(..., alias="totalActivities")
    report: CustomerReportModel


class ReportExportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    run_id: str = Field(..., alias="runId")
    file_name: str = Field(..., alias="fileName")
    file_type: str = Field(..., alias="fileType")
    size_bytes: int = Field(..., alias="sizeBytes")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    description: Optional[str] = None
    download_path: str = Field(..., alias="downloadPath")
