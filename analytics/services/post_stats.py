"""
POST STATS SERVICE - Posts created per period

The post counts source labels its buckets under "label" using the
DD-MM-YYYY / IYYY-"W"IW / MM-YYYY patterns; they are normalized on ingestion.
"""

from analytics.schemas import PostStatsResponse, TimeRangeQuery
from analytics.services.period_keys import normalize_rows
from analytics.services.series import series_with_total
from analytics.sources import PostStatsSource
from analytics.utils import handle_service_errors


class PostStatsService:
    """Service class for post volume statistics."""

    def __init__(self, source: PostStatsSource):
        self.source = source

    @handle_service_errors("post statistics")
    def get_post_stats(self, query: TimeRangeQuery) -> PostStatsResponse:
        rows = self.source.get_post_counts_by_period(query)
        sparse = normalize_rows(rows, query.interval, label_field="label", within=query)
        series, total = series_with_total(sparse, query)

        return PostStatsResponse(
            series=series,
            total=total,
            overall_total=self.source.get_total_posts_count(),
            aggregated_by_interval=query.interval,
        )
