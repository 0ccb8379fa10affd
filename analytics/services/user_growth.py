"""
USER GROWTH SERVICE - Signups per period plus overall user totals

The default view is cumulative: each period shows how many users had signed
up by the end of it. The non-cumulative view shows signups per period.
"""

from analytics.schemas import TimeRangeQuery, UserGrowthResponse
from analytics.services.period_keys import normalize_rows
from analytics.services.series import series_with_total
from analytics.sources import UserAnalyticsSource
from analytics.utils import handle_service_errors


class UserGrowthService:
    """Service class for user growth statistics."""

    def __init__(self, source: UserAnalyticsSource):
        self.source = source

    @handle_service_errors("user growth statistics")
    def get_user_growth_stats(self, query: TimeRangeQuery) -> UserGrowthResponse:
        return self._growth(query, cumulative=True)

    @handle_service_errors("user growth statistics")
    def get_user_growth_stats_non_cumulative(self, query: TimeRangeQuery) -> UserGrowthResponse:
        return self._growth(query, cumulative=False)

    def _growth(self, query: TimeRangeQuery, cumulative: bool) -> UserGrowthResponse:
        total_users = self.source.get_total_users()
        total_active_users = self.source.get_total_active_users()

        rows = self.source.get_user_growth_data(query)
        series, _ = series_with_total(normalize_rows(rows, query.interval, within=query), query, cumulative=cumulative)

        return UserGrowthResponse(
            series=series,
            total_users=total_users,
            total_active_users=total_active_users,
            aggregated_by_interval=query.interval,
        )
