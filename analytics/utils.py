"""
UTILITIES - Shared functions and decorators

This module provides common utilities used across the analytics services:
1. Structured JSON logging configuration
2. Service error handling decorator
3. Date helpers for UTC calendar arithmetic
4. Constants and configuration defaults
"""

import logging
import json
from functools import wraps
from typing import Callable, Optional, Tuple
from datetime import date, datetime, timedelta, timezone
from fastapi import HTTPException
from pydantic import ValidationError
from analytics.errors import AnalyticsError, ServiceError

class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)

_handler: Optional[logging.Handler] = None

def setup_logging(level: str = "INFO") -> None:
    """Setup structured JSON logging. Safe to call more than once."""
    global _handler
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(JSONFormatter())
        logger.addHandler(_handler)

def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance with consistent formatting."""
    return logging.getLogger(name)

def handle_service_errors(service_name: str) -> Callable:
    """
    Decorator to surface service failures consistently to the HTTP host.

    AnalyticsErrors with a 4xx status_code keep that status, HTTPExceptions
    pass through untouched, anything else is logged and reported as "Failed to retrieve <service_name>".

    Usage:
    @handle_service_errors("report volume statistics")
    def get_report_volume_stats(self, query): ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except HTTPException:
                # Re-raise HTTP exceptions as-is
                raise
            except Exception as e:
                if isinstance(e, AnalyticsError) and e.status_code < 500:
                    raise HTTPException(status_code=e.status_code, detail=str(e))
                logger = get_logger(func.__module__)
                logger.exception(f"Error in {service_name}: {format_error_message(e)}")
                raise HTTPException(status_code=500, detail=str(ServiceError(service_name)))
        return wrapper
    return decorator

# Constants
class Constants:
    """Application constants in one place."""

    # Logging
    DEFAULT_LOG_LEVEL = "INFO"

    # Series ranges
    DEFAULT_INTERVAL = "daily"
    DEFAULT_WINDOW_DAYS = 30

    # Top interacted posts
    DEFAULT_TOP_POSTS_LIMIT = 3
    MAX_TOP_POSTS_LIMIT = 10

# Date helpers
def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()

def default_date_range(window_days: int, today: Optional[date] = None) -> Tuple[date, date]:
    """Range of `window_days` days back from today (UTC), both ends inclusive."""
    end = today or utc_today()
    return end - timedelta(days=window_days), end

def format_error_message(error: Exception) -> str:
    """Format error message for logging."""
    return f"{type(error).__name__}: {str(error)}"

def describe_validation_error(error: ValidationError) -> str:
    """One line per pydantic error: "field: message"."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'query'}: {err['msg']}"
        for err in error.errors()
    )
