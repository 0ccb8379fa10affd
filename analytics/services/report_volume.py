"""
REPORT VOLUME SERVICE - Content reports filed per period
"""

from analytics.schemas import SeriesResponse, TimeRangeQuery
from analytics.services.period_keys import normalize_rows
from analytics.services.series import series_with_total
from analytics.sources import ReportAnalyticsSource
from analytics.utils import handle_service_errors


class ReportVolumeService:
    """Service class for report volume statistics."""

    def __init__(self, source: ReportAnalyticsSource):
        self.source = source

    @handle_service_errors("report volume statistics")
    def get_report_volume_stats(self, query: TimeRangeQuery) -> SeriesResponse:
        """
        Reports per period over the query range.

        Input: validated TimeRangeQuery
        Output: dense non-cumulative series and the number of reports in range
        """
        rows = self.source.get_report_volume_data(query)
        series, total = series_with_total(normalize_rows(rows, query.interval, within=query), query)
        return SeriesResponse(series=series, total=total, aggregated_by_interval=query.interval)
