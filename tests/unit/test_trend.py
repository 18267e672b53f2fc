"""
Unit tests for day-of-week trend analysis.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from hostel_triage.analytics.application import TrendService
from hostel_triage.analytics.domain import analyze_trend, observation_for, parse_timestamp
from hostel_triage.complaints.domain import Complaint
from hostel_triage.complaints.infrastructure import InMemoryComplaintRepository

# 2024-01-15 is a Monday
MONDAY = "2024-01-15T09:00:00Z"
TUESDAY = "2024-01-16T09:00:00Z"
WEDNESDAY = "2024-01-17T09:00:00Z"


class TestAnalyzeTrend:
    """Tests for the riskiest-day computation."""

    def test_empty_input_is_monday(self) -> None:
        """Test the fixed default for no data."""
        insight = analyze_trend([])

        assert insight.riskiest_day == "Monday"
        assert insight.observation == "Historical data indicates a surge in reports on Mondays."
        assert insight.sample_size == 0

    def test_most_frequent_day_wins(self) -> None:
        """Test a clear majority."""
        rows = [{"created_at": WEDNESDAY}, {"created_at": MONDAY}, {"created_at": WEDNESDAY}]

        insight = analyze_trend(rows)

        assert insight.riskiest_day == "Wednesday"
        assert insight.day_counts == {"Wednesday": 2, "Monday": 1}

    def test_tie_goes_to_first_seen_day(self) -> None:
        """Test that equal counts resolve by input order, not calendar order."""
        rows = [{"created_at": WEDNESDAY}, {"created_at": TUESDAY}, {"created_at": TUESDAY}, {"created_at": WEDNESDAY}]

        assert analyze_trend(rows).riskiest_day == "Wednesday"
        assert analyze_trend(list(reversed(rows))).riskiest_day == "Wednesday"
        assert analyze_trend(rows[1:3] + rows[:1] + rows[3:]).riskiest_day == "Tuesday"

    def test_reporting_timezone_changes_the_day(self) -> None:
        """Test that late-evening UTC reports fall on the next local day."""
        rows = [{"created_at": "2024-01-15T23:30:00Z"}]

        assert analyze_trend(rows, "UTC").riskiest_day == "Monday"
        assert analyze_trend(rows, "Asia/Kolkata").riskiest_day == "Tuesday"

    def test_accepts_objects_and_camel_case(self, make_complaint: Callable[..., Complaint]) -> None:
        """Test entity attributes, datetimes and createdAt keys."""
        complaint = make_complaint(
            created_at=datetime(2024, 1, 19, 12, 0, tzinfo=timezone.utc),
            deadline_offset=timedelta(days=30),
        )
        rows = [complaint, {"createdAt": "2024-01-19T08:00:00+00:00"}]

        insight = analyze_trend(rows)

        assert insight.riskiest_day == "Friday"
        assert insight.sample_size == 2

    def test_unparsable_entries_are_skipped(self) -> None:
        """Test that bad timestamps are ignored instead of failing the report."""
        rows = [{"created_at": "yesterday"}, {"created_at": None}, {"other": 1}, {"created_at": TUESDAY}]

        insight = analyze_trend(rows)

        assert insight.riskiest_day == "Tuesday"
        assert insight.sample_size == 1

    def test_observation_template(self) -> None:
        """Test the observation wording."""
        assert observation_for("Friday") == "Historical data indicates a surge in reports on Fridays."


class TestParseTimestamp:
    """Tests for timestamp normalisation."""

    def test_zulu_suffix(self) -> None:
        """Test that a trailing Z means UTC."""
        assert parse_timestamp("2024-01-15T09:00:00Z") == datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)

    def test_naive_is_utc(self) -> None:
        """Test that timestamps without offset are read as UTC."""
        assert parse_timestamp("2024-01-15T09:00:00").tzinfo is not None
        assert parse_timestamp(datetime(2024, 1, 15, 9, 0)).utcoffset() == timedelta(0)

    def test_rejects_other_types(self) -> None:
        """Test that numbers are not accepted."""
        with pytest.raises(TypeError):
            parse_timestamp(1705309200)


class TestTrendService:
    """Tests for trend reporting over stored complaints."""

    async def test_uses_most_recent_sample(
        self,
        complaint_repo: InMemoryComplaintRepository,
        make_complaint: Callable[..., Complaint],
    ) -> None:
        """Test that only the newest complaints are considered."""
        # One old Wednesday, then two newer Fridays
        for created_at in (
            datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc),
            datetime(2024, 1, 12, 9, 0, tzinfo=timezone.utc),
            datetime(2024, 1, 19, 9, 0, tzinfo=timezone.utc),
        ):
            await complaint_repo.create(make_complaint(created_at=created_at, deadline_offset=timedelta(days=30)))

        insight = await TrendService(complaint_repo, sample_size=2).predict()

        assert insight.riskiest_day == "Friday"
        assert insight.sample_size == 2

    async def test_empty_repository(self, complaint_repo: InMemoryComplaintRepository) -> None:
        """Test the Monday default through the service."""
        assert (await TrendService(complaint_repo).predict()).riskiest_day == "Monday"
