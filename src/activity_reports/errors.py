"""Exceptions raised by the report pipeline."""

from __future__ import annotations


class ReportError(Exception):
    """Base class for report pipeline errors."""


class InvalidRange(ReportError, ValueError):
    """The requested dates are unparseable or start after end."""


class RangeTooLarge(ReportError, ValueError):
    """The requested range spans more days than allowed."""

    def __init__(self, day_count: int, max_days: int) -> None:
        super().__init__(f"Date range covers {day_count} days; the maximum is {max_days}.")
        self.day_count = day_count
        self.max_days = max_days


class ReportFetchError(ReportError, ConnectionError):
    """A single customer/date report could not be fetched."""


class BatchFailed(ReportError, ConnectionError):
    """No report in the whole batch could be fetched."""

    def __init__(self, attempted: int, last_error: BaseException | None = None) -> None:
        message = f"All {attempted} report requests failed."
        if last_error is not None:
            message += f" Last error: {last_error}"
        super().__init__(message)
        self.attempted = attempted
        self.last_error = last_error


class InsufficientData(ReportError, LookupError):
    """The activity log has no usable start/stop pair."""


class InvalidCoordinate(ReportError, ValueError):
    """A location string is not a valid "lat,lng" pair."""

    def __init__(self, message: str, *, malformed: bool = False) -> None:
        super().__init__(message)
        self.malformed = malformed


class GeocodeUnavailable(ReportError, ConnectionError):
    """The reverse-geocoding service could not be reached or answered badly."""


class EmptyBatch(ReportError, LookupError):
    """An export was requested for a batch without reports."""


class RenderTargetMissing(ReportError, LookupError):
    """The rendered document to export is not available."""
