"""
PERIOD KEY NORMALIZATION - Canonical keys at the ingestion boundary

Aggregate producers label their buckets in different ways (Postgres TO_CHAR
patterns, formatted display strings, raw date objects). Everything is
converted here, once, into the canonical key format the series builder
accepts, so the builder never branches on alternate encodings.

Accepted inputs:
    daily    2023-01-05, 05-01-2023, date/datetime
    weekly   2023-W01, 2023-W1, Week 1-2023, Week 1 2023, date/datetime
    monthly  2023-01, 01-2023, date/datetime
ISO timestamps ("2023-01-05T23:00:00-05:00", "...Z") are accepted for every
interval and bucketed by their UTC date, like aware datetime objects.
Formatted labels ("2023-W01 (2023-01-02 to 2023-01-08)") are accepted for
weekly and monthly. Anything else raises PeriodKeyError.

"Week N YYYY" labels pair the ISO week number with the calendar year of the
week's Monday (TO_CHAR 'IW YYYY' over date_trunc('week', ...)). The ISO week 1
that starts in late December is therefore labelled with the earlier year:
the week of Monday 2024-12-30 (2025-W01) arrives as "Week 1 2024", the same
label as the week of Monday 2024-01-01 (2024-W01). Such labels are resolved
against the requested range; when both weeks fall inside it, repeated labels
are assigned in row order (producers emit rows chronologically) and a single
occurrence is rejected as ambiguous.
"""

import re
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Union
from analytics.errors import PeriodKeyError, SourceDataError
from analytics.schemas import DataPoint, Interval, TimeRangeQuery
from analytics.services.series import Period, period_for_date, period_for_key

_DISPLAY_SPAN = re.compile(r"\s*\(\d{4}-\d{2}-\d{2} to \d{4}-\d{2}-\d{2}\)$")
_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")
_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_ISO_WEEK = re.compile(r"^(\d{4})-W(\d{1,2})$")
_WORD_WEEK = re.compile(r"^Week\s+(\d{1,2})[-\s](\d{4})$", re.IGNORECASE)
_MONTH_YEAR = re.compile(r"^(\d{1,2})-(\d{4})$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")


def _rewrite(label: str, interval: Interval) -> str:
    if interval == Interval.DAILY:
        match = _DAY_MONTH_YEAR.match(label)
        if match:
            day, month, year = match.groups()
            return f"{year}-{int(month):02d}-{int(day):02d}"
        return label

    if interval == Interval.WEEKLY:
        match = _ISO_WEEK.match(label)
        if match:
            year, week = match.groups()
            return f"{year}-W{int(week):02d}"
        return label

    match = _MONTH_YEAR.match(label) or _YEAR_MONTH.match(label)
    if match:
        first, second = match.groups()
        year, month = (second, first) if len(second) == 4 else (first, second)
        return f"{year}-{int(month):02d}"
    return label


def _parse_timestamp(raw: str, interval: Interval) -> datetime:
    text = raw.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise PeriodKeyError(raw, interval.value, "unparseable timestamp")


def _word_week_candidates(raw: str, week: int, year: int) -> List[Period]:
    """ISO weeks numbered `week` whose Monday falls in calendar year `year`."""
    candidates = []
    for iso_year in (year, year + 1):
        try:
            monday = date.fromisocalendar(iso_year, week, 1)
        except ValueError:
            continue
        if monday.year == year:
            candidates.append(period_for_date(monday, Interval.WEEKLY))
    if not candidates:
        raise PeriodKeyError(raw, Interval.WEEKLY.value)
    return candidates


def _resolve_word_week(
    raw: str,
    week: int,
    year: int,
    within: Optional[TimeRangeQuery],
    occurrence: Optional[int],
) -> str:
    candidates = _word_week_candidates(raw, week, year)
    if within is not None:
        in_range = [p for p in candidates if p.end >= within.start_date and p.start <= within.end_date]
        if not in_range:
            # dropped downstream as out of range whichever week it names
            return candidates[0].key
        candidates = in_range

    if len(candidates) == 1:
        return candidates[0].key
    if occurrence is not None and occurrence < len(candidates):
        return candidates[occurrence].key
    raise PeriodKeyError(
        raw, Interval.WEEKLY.value,
        f"ambiguous, could be {candidates[0].key} or {candidates[1].key}",
    )


def normalize_period_key(
    raw: Any,
    interval: Union[Interval, str],
    within: Optional[TimeRangeQuery] = None,
    occurrence: Optional[int] = None,
) -> str:
    """
    Convert a producer's period label into the canonical key.

    Date objects are bucketed into the period containing them; timezone-aware
    datetimes and timestamps with an offset are converted to UTC first.
    `within` and `occurrence` only matter for ambiguous "Week N YYYY" labels.
    """
    interval = Interval(interval)

    if isinstance(raw, str) and _TIMESTAMP.match(raw.strip()):
        raw = _parse_timestamp(raw, interval)
    if isinstance(raw, datetime):
        if raw.tzinfo is not None:
            raw = raw.astimezone(timezone.utc)
        raw = raw.date()
    if isinstance(raw, date):
        return period_for_date(raw, interval).key

    if not isinstance(raw, str):
        raise PeriodKeyError(raw, interval.value, "unsupported label type")

    label = _DISPLAY_SPAN.sub("", raw.strip())
    if interval == Interval.WEEKLY:
        match = _WORD_WEEK.match(label)
        if match:
            week, year = (int(group) for group in match.groups())
            return _resolve_word_week(raw, week, year, within, occurrence)

    try:
        return period_for_key(_rewrite(label, interval), interval).key
    except PeriodKeyError:
        # report what the producer sent, not the intermediate rewrite
        raise PeriodKeyError(raw, interval.value)


def normalize_labels(
    labels: Iterable[Any],
    interval: Union[Interval, str],
    within: Optional[TimeRangeQuery] = None,
) -> List[str]:
    """Normalize a column of labels, numbering repeated labels in row order."""
    labels = list(labels)
    totals = Counter(label for label in labels if isinstance(label, str))
    seen: Counter = Counter()

    keys = []
    for label in labels:
        occurrence = None
        if isinstance(label, str) and totals[label] > 1:
            occurrence = seen[label]
            seen[label] += 1
        keys.append(normalize_period_key(label, interval, within=within, occurrence=occurrence))
    return keys


def normalize_rows(
    rows: Iterable[Mapping[str, Any]],
    interval: Union[Interval, str],
    label_field: str = "date",
    count_field: str = "count",
    within: Optional[TimeRangeQuery] = None,
) -> List[DataPoint]:
    """
    Turn raw aggregate rows into DataPoints with canonical keys.

    Counts often arrive as strings or Decimals from database drivers; they are
    coerced to int and a missing count is treated as 0. Counts that are not
    non-negative integers raise SourceDataError.
    """
    rows = list(rows)
    keys = normalize_labels((row.get(label_field) for row in rows), interval, within=within)

    points = []
    for row, key in zip(rows, keys):
        raw_count = row.get(count_field)
        try:
            points.append(DataPoint(date=key, count=int(raw_count or 0)))
        except (TypeError, ValueError) as e:
            raise SourceDataError(f"Invalid count {raw_count!r} for period {key}: {e}")
    return points
