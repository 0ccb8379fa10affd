"""
Unit tests for period key normalization.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
import pytest
from analytics.errors import PeriodKeyError, SourceDataError
from analytics.schemas import DataPoint, TimeRangeQuery
from analytics.services.period_keys import normalize_labels, normalize_period_key, normalize_rows


class TestNormalizePeriodKey:
    """Test producer label formats map onto canonical keys."""

    @pytest.mark.parametrize("raw,expected", [
        ("2023-01-05", "2023-01-05"),
        ("05-01-2023", "2023-01-05"),
        ("5-1-2023", "2023-01-05"),
        ("2023-01-05T10:30:00.000Z", "2023-01-05"),
        ("2023-01-05 23:59:59", "2023-01-05"),
        ("2023-01-05T23:00:00-05:00", "2023-01-06"),
        ("2023-01-06T01:00:00+05:00", "2023-01-05"),
        (" 2023-01-05 ", "2023-01-05"),
    ])
    def test_daily(self, raw, expected):
        assert normalize_period_key(raw, "daily") == expected

    @pytest.mark.parametrize("raw,expected", [
        ("2025-W19", "2025-W19"),
        ("2025-W9", "2025-W09"),
        ("Week 19-2025", "2025-W19"),
        ("Week 19 2025", "2025-W19"),
        ("week 3-2023", "2023-W03"),
        ("Week 52 2024", "2024-W52"),
        ("Week 01 2025", "2026-W01"),
        ("2025-W19 (2025-05-05 to 2025-05-11)", "2025-W19"),
    ])
    def test_weekly(self, raw, expected):
        assert normalize_period_key(raw, "weekly") == expected

    @pytest.mark.parametrize("raw,expected", [
        ("2023-01", "2023-01"),
        ("2023-1", "2023-01"),
        ("01-2023", "2023-01"),
        ("2023-02 (2023-02-01 to 2023-02-28)", "2023-02"),
    ])
    def test_monthly(self, raw, expected):
        assert normalize_period_key(raw, "monthly") == expected

    def test_date_objects_bucketed(self):
        """Test date objects map to the period containing them."""
        day = date(2023, 1, 1)
        assert normalize_period_key(day, "daily") == "2023-01-01"
        assert normalize_period_key(day, "weekly") == "2022-W52"
        assert normalize_period_key(day, "monthly") == "2023-01"

    def test_aware_datetime_converted_to_utc(self):
        """Test an evening timestamp west of UTC lands on the next UTC day."""
        evening = datetime(2023, 1, 31, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert normalize_period_key(evening, "daily") == "2023-02-01"
        assert normalize_period_key(evening, "monthly") == "2023-02"

    def test_naive_datetime_uses_calendar_date(self):
        assert normalize_period_key(datetime(2023, 3, 4, 23, 59), "daily") == "2023-03-04"

    def test_timestamp_matches_aware_datetime(self):
        """Test an offset timestamp string buckets like the equivalent datetime."""
        moment = datetime(2023, 1, 5, 23, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert normalize_period_key(moment.isoformat(), "daily") == normalize_period_key(moment, "daily")

    @pytest.mark.parametrize("raw,interval", [
        ("yesterday", "daily"),
        ("31-02-2023", "daily"),
        ("Week 54-2023", "weekly"),
        ("W19", "weekly"),
        ("13-2023", "monthly"),
        ("", "monthly"),
        (None, "daily"),
        (20230101, "daily"),
        ("2023-01-05T99:00", "daily"),
    ])
    def test_unrecognised_labels_rejected(self, raw, interval):
        """Test labels that cannot be normalized raise with the original value."""
        with pytest.raises(PeriodKeyError) as excinfo:
            normalize_period_key(raw, interval)
        assert excinfo.value.key == raw


class TestNormalizeRows:
    """Test raw source rows become DataPoints."""

    def test_counts_coerced(self):
        rows = [
            {"date": "Week 1-2023", "count": "4"},
            {"date": "2023-W02", "count": Decimal("2")},
            {"date": "2023-W03", "count": None},
        ]
        assert normalize_rows(rows, "weekly") == [
            DataPoint(date="2023-W01", count=4),
            DataPoint(date="2023-W02", count=2),
            DataPoint(date="2023-W03", count=0),
        ]

    def test_custom_label_field(self):
        rows = [{"label": "02-2023", "count": 7}]
        assert normalize_rows(rows, "monthly", label_field="label") == [DataPoint(date="2023-02", count=7)]

    def test_missing_label_rejected(self):
        with pytest.raises(PeriodKeyError):
            normalize_rows([{"count": 1}], "daily")

    def test_negative_count_rejected(self):
        with pytest.raises(SourceDataError) as excinfo:
            normalize_rows([{"date": "2023-01-01", "count": -3}], "daily")
        assert "-3" in str(excinfo.value)

    def test_non_numeric_count_rejected(self):
        with pytest.raises(SourceDataError):
            normalize_rows([{"date": "2023-01-01", "count": "abc"}], "daily")


class TestWordWeekLabels:
    """Test "Week N YYYY" labels, whose year is the calendar year of the Monday."""

    def test_week_one_starting_in_december_resolved_by_range(self):
        """Test the week of Monday 2024-12-30 arrives labelled with 2024."""
        query = TimeRangeQuery(start_date="2024-12-23", end_date="2025-01-05", interval="weekly")
        assert normalize_period_key("Week 01 2024", "weekly", within=query) == "2025-W01"

    def test_week_one_starting_in_january_resolved_by_range(self):
        query = TimeRangeQuery(start_date="2024-01-01", end_date="2024-01-10", interval="weekly")
        assert normalize_period_key("Week 01 2024", "weekly", within=query) == "2024-W01"

    def test_single_label_naming_two_weeks_rejected(self):
        with pytest.raises(PeriodKeyError) as excinfo:
            normalize_period_key("Week 01 2024", "weekly")
        assert "2024-W01" in str(excinfo.value)
        assert "2025-W01" in str(excinfo.value)

    def test_repeated_label_assigned_in_row_order(self):
        query = TimeRangeQuery(start_date="2024-01-01", end_date="2024-12-31", interval="weekly")
        labels = ["Week 01 2024", "Week 02 2024", "Week 52 2024", "Week 01 2024"]
        assert normalize_labels(labels, "weekly", within=query) == [
            "2024-W01", "2024-W02", "2024-W52", "2025-W01",
        ]

    def test_rows_across_year_end(self):
        query = TimeRangeQuery(start_date="2024-12-23", end_date="2025-01-12", interval="weekly")
        rows = [
            {"date": "Week 52 2024", "count": 1},
            {"date": "Week 01 2024", "count": 7},
            {"date": "Week 02 2025", "count": 2},
        ]
        assert normalize_rows(rows, "weekly", within=query) == [
            DataPoint(date="2024-W52", count=1),
            DataPoint(date="2025-W01", count=7),
            DataPoint(date="2025-W02", count=2),
        ]
