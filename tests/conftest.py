"""
Pytest configuration and fixtures.
"""

import pytest
from analytics.schemas import TimeRangeQuery


class FakeUserSource:
    """In-memory user analytics source."""

    def __init__(self, rows=None, total_users=0, total_active_users=0):
        self.rows = rows or []
        self.total_users = total_users
        self.total_active_users = total_active_users
        self.queries = []

    def get_total_users(self):
        return self.total_users

    def get_total_active_users(self):
        return self.total_active_users

    def get_user_growth_data(self, query):
        self.queries.append(query)
        return self.rows


class FakeReportSource:
    """In-memory source for report volume and reported posts."""

    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.queries = []

    def _rows(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.rows

    def get_report_volume_data(self, query):
        return self._rows(query)

    def get_reported_posts_metrics(self, query):
        return self._rows(query)


class FakePostStatsSource:
    def __init__(self, rows=None, overall_total=0):
        self.rows = rows or []
        self.overall_total = overall_total

    def get_post_counts_by_period(self, query):
        return self.rows

    def get_total_posts_count(self):
        return self.overall_total


class FakeTopPostsSource:
    def __init__(self, rows=None):
        self.rows = rows or []
        self.limits = []

    def get_top_interacted_posts(self, query, limit):
        self.limits.append(limit)
        return self.rows


def make_post(post_id, comment_count, user_id="user-1"):
    """Post mapping as the top posts source returns it (camelCase keys)."""
    return {
        "id": post_id,
        "userId": user_id,
        "content": f"post {post_id}",
        "createdAt": "2023-01-01T08:00:00.000Z",
        "updatedAt": None,
        "fileUrl": None,
        "fileSize": None,
        "mediaType": None,
        "isActive": True,
        "isEdited": False,
        "status": 1,
        "commentCount": comment_count,
    }


@pytest.fixture
def daily_query():
    """Three-day daily range used by the example scenarios."""
    return TimeRangeQuery(start_date="2023-01-01", end_date="2023-01-03", interval="daily")


@pytest.fixture
def monthly_query():
    """First quarter of 2023, monthly."""
    return TimeRangeQuery(start_date="2023-01-01", end_date="2023-03-31", interval="monthly")


@pytest.fixture
def weekly_query():
    """Range spanning the 2022/2023 ISO year boundary."""
    return TimeRangeQuery(start_date="2022-12-28", end_date="2023-01-10", interval="weekly")
