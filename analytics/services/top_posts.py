"""
TOP POSTS SERVICE - Most commented posts per period

For every period in the range, returns up to `limit` posts ranked by the
number of comments they received within that period. Periods without any
comments get an empty list.
"""

from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from analytics.config import TOP_POSTS_DEFAULT_LIMIT, TOP_POSTS_MAX_LIMIT
from analytics.errors import InvalidLimitError, SourceDataError
from analytics.schemas import PeriodPosts, PostDetail, TimeRangeQuery, TopInteractedPostsResponse
from analytics.services.period_keys import normalize_labels
from analytics.services.series import fill_periods
from analytics.sources import TopPostsSource
from analytics.utils import describe_validation_error, handle_service_errors


def _parse_posts(posts: Optional[List[Dict[str, Any]]], key: str) -> List[PostDetail]:
    try:
        return [PostDetail.model_validate(post) for post in posts or []]
    except ValidationError as e:
        raise SourceDataError(f"Invalid post for period {key}: {describe_validation_error(e)}")


class TopPostsService:
    """Service class for the top interacted posts ranking."""

    def __init__(self, source: TopPostsSource):
        self.source = source

    @handle_service_errors("top interacted posts")
    def get_top_interacted_posts(self, query: TimeRangeQuery, limit: Optional[int] = None) -> TopInteractedPostsResponse:
        """
        Rank posts by comment count within each period.

        Input: TimeRangeQuery, limit (1..TOP_POSTS_MAX_LIMIT, default TOP_POSTS_DEFAULT_LIMIT)
        Output: one entry per period with its display label and ranked posts
        """
        # STEP 1: Validate the limit
        if limit is None:
            limit = TOP_POSTS_DEFAULT_LIMIT
        if not 1 <= limit <= TOP_POSTS_MAX_LIMIT:
            raise InvalidLimitError(f"limit must be between 1 and {TOP_POSTS_MAX_LIMIT}")

        # STEP 2: Parse source rows into canonical keys and post models
        rows = list(self.source.get_top_interacted_posts(query, limit))
        keys = normalize_labels((row.get("date") for row in rows), query.interval, within=query)
        pairs = [(key, _parse_posts(row.get("posts"), key)) for key, row in zip(keys, rows)]

        # STEP 3: Gap-fill and rank; sorted() is stable so ties keep source order
        metrics = [
            PeriodPosts(
                date=period.label,
                posts=sorted(posts, key=lambda p: p.comment_count, reverse=True)[:limit],
            )
            for period, posts in fill_periods(pairs, query, list)
        ]

        return TopInteractedPostsResponse(metrics=metrics, aggregated_by_interval=query.interval, limit=limit)
