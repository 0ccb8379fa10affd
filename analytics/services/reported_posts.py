"""
REPORTED POSTS SERVICE - Distinct reported items per period

Unlike the other services this one accepts loose parameters: a missing start
or end date falls back to the last DEFAULT_WINDOW_DAYS days ending today (UTC).
"""

from datetime import date
from typing import Optional, Union
from pydantic import ValidationError
from analytics.config import DEFAULT_INTERVAL, DEFAULT_WINDOW_DAYS
from analytics.errors import InvalidQueryError
from analytics.schemas import Interval, ReportedPostsResponse, TimeRangeQuery
from analytics.services.period_keys import normalize_rows
from analytics.services.series import series_with_total
from analytics.sources import ReportedPostsSource
from analytics.utils import default_date_range, describe_validation_error, get_logger, handle_service_errors

logger = get_logger(__name__)

DateLike = Union[date, str]


class ReportedPostsService:
    """Service class for reported content metrics."""

    def __init__(self, source: ReportedPostsSource):
        self.source = source

    @handle_service_errors("reported posts metrics")
    def get_reported_metrics(
        self,
        interval: Optional[Union[Interval, str]] = None,
        start_date: Optional[DateLike] = None,
        end_date: Optional[DateLike] = None,
    ) -> ReportedPostsResponse:
        # STEP 1: Resolve the range, filling in the default window
        default_start, default_end = default_date_range(DEFAULT_WINDOW_DAYS)
        try:
            query = TimeRangeQuery(
                start_date=start_date or default_start,
                end_date=end_date or default_end,
                interval=interval or DEFAULT_INTERVAL,
            )
        except ValidationError as e:
            raise InvalidQueryError(describe_validation_error(e))
        logger.debug(f"Reported posts for {query.start_date}..{query.end_date} ({query.interval.value})")

        # STEP 2: Fetch sparse counts and build the dense series
        rows = self.source.get_reported_posts_metrics(query)
        metrics, total = series_with_total(normalize_rows(rows, query.interval, within=query), query)

        return ReportedPostsResponse(metrics=metrics, total=total, aggregated_by_interval=query.interval)
