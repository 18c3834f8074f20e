"""Customer directory endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from ...errors import ReportFetchError
from ...schemas.reports import CustomerModel
from ...services.reports import eligible_customers
from ...services.reports import service as report_service

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=List[CustomerModel], status_code=status.HTTP_200_OK)
def list_customers(
    search: str | None = Query(default=None, description="Case-insensitive match on name or email"),
) -> List[CustomerModel]:
    """Customers that can be selected for a report (name and email present)."""
    try:
        customers = report_service.ReportSourceClient().list_customers()
    except ReportFetchError as exc:
        logging.warning(f"Error fetching customers: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to load customers. Please check your connection and try again.",
        ) from exc

    selectable = eligible_customers(customers)
    if search:
        needle = search.lower().strip()
        selectable = [c for c in selectable if needle in c.customer_name.lower() or needle in c.email.lower()]
    return [CustomerModel.from_domain(customer) for customer in selectable]
