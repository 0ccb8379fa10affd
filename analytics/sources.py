"""
AGGREGATE SOURCES - Contracts for the data the services consume

Sources are supplied by the host application (usually backed by SQL
aggregation queries). Rows are returned sparse: periods without activity are
omitted. Each row is a mapping with a period label under "date" (or "label")
and a count under "count"; labels may use any format that
analytics.services.period_keys understands.
"""

from typing import Any, Dict, List, Mapping, Protocol
from analytics.schemas import TimeRangeQuery

Row = Mapping[str, Any]


class UserAnalyticsSource(Protocol):
    def get_total_users(self) -> int: ...

    def get_total_active_users(self) -> int: ...

    def get_user_growth_data(self, query: TimeRangeQuery) -> List[Row]: ...


class ReportAnalyticsSource(Protocol):
    def get_report_volume_data(self, query: TimeRangeQuery) -> List[Row]: ...


class ReportedPostsSource(Protocol):
    def get_reported_posts_metrics(self, query: TimeRangeQuery) -> List[Row]:
        """Distinct reported items per period."""
        ...


class PostStatsSource(Protocol):
    def get_post_counts_by_period(self, query: TimeRangeQuery) -> List[Row]:
        """Rows labelled under "label" (DD-MM-YYYY, IYYY-"W"IW or MM-YYYY)."""
        ...

    def get_total_posts_count(self) -> int: ...


class TopPostsSource(Protocol):
    def get_top_interacted_posts(self, query: TimeRangeQuery, limit: int) -> List[Dict[str, Any]]:
        """Rows of {"date": label, "posts": [post mappings]} ordered by comment count."""
        ...
