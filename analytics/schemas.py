"""
PYDANTIC SCHEMAS - Series data model and response envelopes

This file defines the data structures the analytics services exchange:
1. Interval and TimeRangeQuery describing what range to aggregate
2. DataPoint, one bucket of a series
3. PostDetail / PeriodPosts for the top interacted posts ranking
4. Response envelopes returned to the HTTP host

Response envelopes serialise with camelCase field names
(use model_dump(by_alias=True)).
"""

from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from analytics.errors import InvalidRangeError


class Interval(str, Enum):
    """Granularity of a series. The value is what `aggregatedByInterval` reports."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class DataPoint(BaseModel):
    """
    One bucket of a series.

    `date` holds the canonical period key (2023-01-05, 2023-W01, 2023-01)
    until the series is formatted for display.
    """
    date: str
    count: int = Field(..., ge=0)


class TimeRangeQuery(BaseModel):
    """Inclusive calendar date range plus the interval to bucket it by."""
    start_date: date
    end_date: date
    interval: Interval = Interval.DAILY

    @model_validator(mode="after")
    def check_range_order(self):
        if self.start_date > self.end_date:
            raise InvalidRangeError("start_date must be before or equal to end_date")
        return self


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PostDetail(CamelModel):
    """A post plus the number of comments it received within one period."""
    id: str
    user_id: str = Field(..., alias="userId")
    content: Optional[str] = None
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")
    file_url: Optional[str] = Field(None, alias="fileUrl")
    file_size: Optional[int] = Field(None, alias="fileSize")
    media_type: Optional[int] = Field(None, alias="mediaType")
    is_active: bool = Field(True, alias="isActive")
    is_edited: bool = Field(False, alias="isEdited")
    status: int = 0
    comment_count: int = Field(0, ge=0, alias="commentCount")


class PeriodPosts(BaseModel):
    date: str
    posts: List[PostDetail] = Field(default_factory=list)


class UserGrowthResponse(CamelModel):
    series: List[DataPoint]
    total_users: int = Field(..., alias="totalUsers")
    total_active_users: int = Field(..., alias="totalActiveUsers")
    aggregated_by_interval: Interval = Field(..., alias="aggregatedByInterval")


class SeriesResponse(CamelModel):
    """Dense series plus the sum of its per-period counts."""
    series: List[DataPoint]
    total: int
    aggregated_by_interval: Interval = Field(..., alias="aggregatedByInterval")


class ReportedPostsResponse(CamelModel):
    metrics: List[DataPoint]
    total: int
    aggregated_by_interval: Interval = Field(..., alias="aggregatedByInterval")


class PostStatsResponse(CamelModel):
    series: List[DataPoint]
    total: int  # posts created within the range
    overall_total: int = Field(..., alias="overallTotal")  # all posts ever
    aggregated_by_interval: Interval = Field(..., alias="aggregatedByInterval")


class TopInteractedPostsResponse(CamelModel):
    metrics: List[PeriodPosts]
    aggregated_by_interval: Interval = Field(..., alias="aggregatedByInterval")
    limit: int
