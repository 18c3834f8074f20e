"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_report_health_check():
    """Lazy import to avoid startup failures."""
    from ...services.reports.client import check_health as report_health_check
    return report_health_check


@router.get("/health/report-service", status_code=status.HTTP_200_OK)
def health_report_service() -> dict:
    """Check that the remote report service answers."""
    try:
        report_health_check = _get_report_health_check()
        return {"service": "report-service", "healthy": report_health_check()}
    except Exception as e:
        return {"service": "report-service", "healthy": False, "error": str(e)}
