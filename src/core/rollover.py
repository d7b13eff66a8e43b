"""Calendar-month helpers and bucket carry-over between months."""

from __future__ import annotations

from datetime import date

from src.core.money import Cents
from src.models.schemas import MonthlySnapshot


def get_current_year_month(today: date | None = None) -> str:
    """Return the current (or *today*'s) month as ``YYYY-MM``."""
    today = today or date.today()
    return f"{today.year:04d}-{today.month:02d}"


def get_previous_year_month(year_month: str) -> str:
    """Return the month before *year_month* (``YYYY-MM``).

    Months past 12 roll into the following years first, so ``2026-13`` is
    January 2027 and its previous month is ``2026-12``. Unparsable input, a
    zero year or a zero month is returned unchanged.
    """
    try:
        year_str, month_str = year_month.split("-")
        year, month = int(year_str), int(month_str)
    except ValueError:
        return year_month
    if year < 1 or month < 1:
        return year_month
    index = year * 12 + (month - 1) - 1
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def get_rollover_map_from_snapshots(
    snapshots: list[MonthlySnapshot] | tuple[MonthlySnapshot, ...],
    year_month: str,
) -> dict[str, Cents]:
    """Map bucket id -> amount left over in the month before *year_month*.

    Uses the previous month's snapshot; empty when there is none.
    """
    previous = get_previous_year_month(year_month)
    snapshot = next((s for s in snapshots if s.year_month == previous), None)
    if snapshot is None:
        return {}
    return {b.bucket_id: Cents(b.remaining_cents) for b in snapshot.bucket_summaries}
