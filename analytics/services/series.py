"""
SERIES BUILDER - Dense, labelled time series from sparse aggregates

Aggregate sources only return periods with activity. This module turns those
sparse (period key, count) pairs into a contiguous series covering every
period of a requested range:
1. Enumerate every day, ISO week or calendar month touched by the range
2. Zero-fill periods missing from the sparse input
3. Optionally convert counts into running cumulative totals
4. Format canonical keys into display labels

Canonical period keys:
    daily    2023-01-05
    weekly   2023-W01   (ISO year and ISO week, weeks start on Monday)
    monthly  2023-01

All functions are pure; dates are plain calendar dates (no time of day,
no timezone), so day arithmetic cannot drift across midnight.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, NamedTuple, Tuple, TypeVar, Union
from analytics.errors import PeriodKeyError
from analytics.schemas import DataPoint, Interval, TimeRangeQuery
from analytics.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_KEY_PATTERNS = {
    Interval.DAILY: re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"),
    Interval.WEEKLY: re.compile(r"^(\d{4})-W(\d{2})$"),
    Interval.MONTHLY: re.compile(r"^(\d{4})-(\d{2})$"),
}


class Period(NamedTuple):
    """One bucket of a series: its canonical key and first/last calendar day."""
    key: str
    start: date
    end: date

    @property
    def label(self) -> str:
        """Display label; weekly and monthly buckets show their date span."""
        if self.start == self.end:
            return self.key
        return f"{self.key} ({self.start.isoformat()} to {self.end.isoformat()})"


def _month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def period_for_date(day: date, interval: Union[Interval, str]) -> Period:
    """Return the period of the given interval that contains `day`."""
    interval = Interval(interval)

    if interval == Interval.WEEKLY:
        start = day - timedelta(days=day.weekday())
        iso_year, iso_week, _ = day.isocalendar()
        # the final week of 9999 is cut short at date.max
        end = date.max if date.max - start < timedelta(days=6) else start + timedelta(days=6)
        return Period(f"{iso_year:04d}-W{iso_week:02d}", start, end)

    if interval == Interval.MONTHLY:
        start = day.replace(day=1)
        return Period(f"{start.year:04d}-{start.month:02d}", start, _month_end(start))

    return Period(day.isoformat(), day, day)


def period_for_key(key: str, interval: Union[Interval, str]) -> Period:
    """
    Parse a canonical period key back into its Period.

    Raises PeriodKeyError when the key does not match the canonical format for
    the interval or names a date/week/month that does not exist.
    """
    interval = Interval(interval)
    if not isinstance(key, str):
        raise PeriodKeyError(key, interval.value, "expected a string")

    match = _KEY_PATTERNS[interval].match(key)
    if not match:
        raise PeriodKeyError(key, interval.value)

    parts = [int(group) for group in match.groups()]
    try:
        if interval == Interval.WEEKLY:
            # 2020-W53 exists, 2021-W53 does not
            start = date.fromisocalendar(parts[0], parts[1], 1)
        elif interval == Interval.MONTHLY:
            start = date(parts[0], parts[1], 1)
        else:
            start = date(*parts)
    except ValueError as e:
        raise PeriodKeyError(key, interval.value, str(e))

    return period_for_date(start, interval)


def enumerate_periods(query: TimeRangeQuery) -> List[Period]:
    """
    Every period touched by the inclusive range, in chronological order.

    Weekly and monthly buckets are whole weeks/months: a range starting on a
    Wednesday still yields that week from its Monday.
    """
    periods = []
    current = period_for_date(query.start_date, query.interval).start
    while True:
        period = period_for_date(current, query.interval)
        periods.append(period)
        if period.end >= query.end_date:
            return periods
        current = period.end + timedelta(days=1)


def _index_by_key(pairs: Iterable[Tuple[str, T]], interval: Interval) -> Dict[str, T]:
    """Map canonical key -> value. Later duplicates win."""
    index: Dict[str, T] = {}
    for key, value in pairs:
        period_for_key(key, interval)  # fail fast on malformed keys
        if key in index:
            logger.warning(f"Duplicate {interval.value} period {key} in aggregate data, keeping the last value")
        index[key] = value
    return index


def fill_periods(
    pairs: Iterable[Tuple[str, T]],
    query: TimeRangeQuery,
    default_factory: Callable[[], T],
) -> List[Tuple[Period, T]]:
    """
    Gap-fill arbitrary per-period values.

    Every enumerated period is paired with its value from `pairs`, or with
    default_factory() when absent. Keys outside the range are ignored.
    """
    index = _index_by_key(pairs, query.interval)
    filled = []
    for period in enumerate_periods(query):
        if period.key in index:
            filled.append((period, index.pop(period.key)))
        else:
            filled.append((period, default_factory()))

    if index:
        logger.debug(f"Ignoring periods outside {query.start_date}..{query.end_date}: {sorted(index)}")
    return filled


def accumulate(series: List[DataPoint]) -> List[DataPoint]:
    """Running totals: point i holds the sum of counts 0..i."""
    running = 0
    result = []
    for point in series:
        running += point.count
        result.append(DataPoint(date=point.date, count=running))
    return result


def build_series(sparse: Iterable[DataPoint], query: TimeRangeQuery, cumulative: bool = False) -> List[DataPoint]:
    """
    Dense series over the query range, keyed by canonical period keys.

    Input: sparse data points (any order, canonical keys), the range, and
           whether to emit running totals
    Output: one DataPoint per period, chronological, missing periods count 0
    """
    filled = fill_periods(((point.date, point.count) for point in sparse), query, int)
    series = [DataPoint(date=period.key, count=count) for period, count in filled]
    return accumulate(series) if cumulative else series


def format_series(series: List[DataPoint], interval: Union[Interval, str]) -> List[DataPoint]:
    """Replace canonical keys with display labels."""
    return [
        DataPoint(date=period_for_key(point.date, interval).label, count=point.count)
        for point in series
    ]


def calculate_total(series: Iterable[DataPoint]) -> int:
    """Sum of counts. Pass the non-cumulative series."""
    return sum(point.count for point in series)


def series_with_total(
    sparse: Iterable[DataPoint],
    query: TimeRangeQuery,
    cumulative: bool = False,
) -> Tuple[List[DataPoint], int]:
    """
    Display-ready series plus the range total.

    The total is always the sum of the per-period counts, whether or not the
    returned series is cumulative.
    """
    series = build_series(sparse, query)
    total = calculate_total(series)
    if cumulative:
        series = accumulate(series)
    return format_series(series, query.interval), total
