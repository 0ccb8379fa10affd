"""
ERRORS - Error categories raised by the analytics services

Client-side problems carry a 4xx status code so the HTTP host can report them
as such; everything else is treated as an internal failure (500).
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base class for all analytics errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PeriodKeyError(AnalyticsError, ValueError):
    """A period key does not match the expected format for its interval."""

    def __init__(self, key, interval: str, reason: Optional[str] = None):
        message = f"Malformed {interval} period key: {key!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.key = key
        self.interval = interval


class InvalidRangeError(AnalyticsError, ValueError):
    status_code = 400


class InvalidLimitError(AnalyticsError, ValueError):
    status_code = 400


class ServiceError(AnalyticsError):
    """Unexpected failure while building a service response."""

    def __init__(self, service_name: str):
        super().__init__(f"Failed to retrieve {service_name}")
        self.service_name = service_name


class InvalidQueryError(AnalyticsError, ValueError):
    """Request parameters that do not form a valid TimeRangeQuery."""

    status_code = 400


class SourceDataError(AnalyticsError):
    """A row from an aggregate source that cannot be turned into series data."""
