"""Tests for src/core/rollover.py."""

from datetime import date

import pytest

from tests.conftest import make_snapshot
from src.core.rollover import (
    get_current_year_month,
    get_previous_year_month,
    get_rollover_map_from_snapshots,
)


class TestYearMonth:
    def test_current_from_reference_date(self):
        assert get_current_year_month(date(2026, 3, 15)) == "2026-03"

    def test_current_defaults_to_today(self):
        today = date.today()
        assert get_current_year_month() == f"{today.year:04d}-{today.month:02d}"

    @pytest.mark.parametrize(
        "year_month, expected",
        [("2026-03", "2026-02"), ("2026-01", "2025-12"), ("2026-12", "2026-11")],
    )
    def test_previous(self, year_month, expected):
        assert get_previous_year_month(year_month) == expected

    @pytest.mark.parametrize(
        "year_month, expected",
        [("2026-13", "2026-12"), ("2026-14", "2027-01"), ("2026-25", "2027-12")],
    )
    def test_previous_normalizes_overflow_month(self, year_month, expected):
        assert get_previous_year_month(year_month) == expected

    @pytest.mark.parametrize("value", ["", "garbage", "2026-00", "0000-05", "2026-01-15"])
    def test_previous_unparsable_returned_unchanged(self, value):
        assert get_previous_year_month(value) == value


class TestRolloverMap:
    def test_uses_previous_month_remaining(self):
        snapshots = [
            make_snapshot("2026-01", bucket_summaries=[
                {"bucket_id": "b1", "bucket_name": "Needs", "allocated_cents": 1000, "spent_cents": 900, "remaining_cents": 100},
            ]),
            make_snapshot("2026-02", bucket_summaries=[
                {"bucket_id": "b1", "bucket_name": "Needs", "allocated_cents": 1000, "spent_cents": 1200, "remaining_cents": -200},
                {"bucket_id": "b2", "bucket_name": "Savings", "allocated_cents": 500, "spent_cents": 0, "remaining_cents": 500},
            ]),
        ]
        assert get_rollover_map_from_snapshots(snapshots, "2026-03") == {"b1": -200, "b2": 500}

    def test_empty_without_previous_snapshot(self):
        assert get_rollover_map_from_snapshots([make_snapshot("2025-11")], "2026-03") == {}

    def test_empty_without_snapshots(self):
        assert get_rollover_map_from_snapshots([], "2026-03") == {}
