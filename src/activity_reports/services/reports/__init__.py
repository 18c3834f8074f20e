"""Report fetching, aggregation and derived metrics."""

from .aggregator import aggregate, collect_outcomes, eligible_customers, reports_from_outcomes
from .client import ReportSourceClient
from .duration import format_duration, working_duration
from .manifest import list_export_files, resolve_export_file
from .overview import build_overview

__all__ = [
    "ReportSourceClient",
    "aggregate",
    "build_overview",
    "collect_outcomes",
    "eligible_customers",
    "format_duration",
    "list_export_files",
    "reports_from_outcomes",
    "resolve_export_file",
    "working_duration",
]
