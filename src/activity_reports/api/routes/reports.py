"""Report query and export endpoints."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Path, Query, status
from fastapi.responses import FileResponse, Response

from ...errors import BatchFailed, EmptyBatch, InvalidRange, RangeTooLarge, ReportFetchError
from ...schemas.reports import (
    CustomerReportModel,
    GroupReportResponse,
    IndividualReportResponse,
    OverviewResponse,
    OverviewRowModel,
    ReportExportModel,
    ReportQuery,
)
from ...services.reports import list_export_files, resolve_export_file
from ...services.reports import service as report_service

router = APIRouter(prefix="/reports", tags=["reports"])

RETRY_MESSAGE = "Failed to fetch report. Please try again."
BATCH_RETRY_MESSAGE = "Failed to fetch daily reports. Please try again."


def _raise_for_batch_error(exc: Exception) -> None:
    if isinstance(exc, (InvalidRange, RangeTooLarge)):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if isinstance(exc, EmptyBatch):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, (BatchFailed, ConnectionError)):
        logging.warning(f"Report batch failed: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=BATCH_RETRY_MESSAGE) from exc
    raise exc


@router.get("/individual", response_model=IndividualReportResponse)
def get_individual_report(
    email: str = Query(..., min_length=1, description="Customer email"),
    report_date: date = Query(..., alias="date", description="Report date (YYYY-MM-DD)"),
) -> IndividualReportResponse:
    try:
        report, duration = report_service.fetch_individual(email, report_date)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except ReportFetchError as exc:
        logging.warning(f"Error fetching report for {email} on {report_date}: {exc}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=RETRY_MESSAGE) from exc

    addresses = report_service.resolve_locations([report])
    model = CustomerReportModel.from_domain(report)
    for activity in model.activities:
        activity.resolved_location = addresses.get(activity.location) if activity.location else "No location"

    return IndividualReportResponse(
        email=email,
        report_date=report_date,
        working_duration=duration,
        total_activities=len(report.activities),
        report=model,
    )


@router.post("/overview", response_model=OverviewResponse)
def get_overview(payload: ReportQuery) -> OverviewResponse:
    try:
        result = report_service.run_batch(payload)
    except Exception as exc:
        _raise_for_batch_error(exc)

    return OverviewResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        requested=result.requested,
        returned=len(result.reports),
        reports=[CustomerReportModel.from_domain(report) for report in result.reports],
        overview=[OverviewRowModel.from_domain(row) for row in result.overview],
    )


@router.post("/group", response_model=GroupReportResponse)
def get_group_report(payload: ReportQuery) -> GroupReportResponse:
    """All users' events for the range from the report service's single range call."""
    try:
        result = report_service.run_group_report(payload)
    except Exception as exc:
        _raise_for_batch_error(exc)

    return GroupReportResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        period=result.period,
        total_users=result.total_users,
        total_events=result.total_events,
        reports=[CustomerReportModel.from_domain(report) for report in result.reports],
    )


@router.post("/export/csv", response_class=Response)
def export_csv(payload: ReportQuery) -> Response:
    try:
        filename, content = report_service.export_batch_csv(payload)
    except Exception as exc:
        _raise_for_batch_error(exc)

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/individual/pdf", response_class=Response)
def export_individual_pdf(
    email: str = Query(..., min_length=1, description="Customer email"),
    report_date: date = Query(..., alias="date", description="Report date (YYYY-MM-DD)"),
) -> Response:
    try:
        filename, content = report_service.export_individual_pdf(email, report_date)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except ReportFetchError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=RETRY_MESSAGE) from exc

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/exports", response_model=list[ReportExportModel])
def get_report_exports(
    file_type: str | None = Query(default=None, description="Filter by file type (CSV, PDF)"),
    search: str | None = Query(default=None, description="Case-insensitive search on file name"),
    limit: int | None = Query(default=None, gt=0, description="Maximum number of exports to return"),
) -> list[ReportExportModel]:
    exports = list_export_files(file_type=file_type, search=search, limit=limit)
    return [ReportExportModel.model_validate(item) for item in exports]


@router.get(
    "/exports/{run_id}/{file_name:path}",
    response_class=FileResponse,
    status_code=status.HTTP_200_OK,
)
def download_export_file(
    run_id: str = Path(..., description="Export directory identifier"),
    file_name: str = Path(..., description="File name within the export directory"),
) -> FileResponse:
    try:
        file_path = resolve_export_file(run_id, file_name)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    media_type = "application/pdf" if file_path.suffix.lower() == ".pdf" else "text/csv"
    return FileResponse(
        path=file_path,
        filename=file_path.name,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_path.name}"'},
    )
