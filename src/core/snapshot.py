"""Monthly snapshots and expense trends across them."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from src.core.calc import PlanComputeInput, compute_plan_summary
from src.core.money import divide_money, sum_money
from src.models.results import RollingAverages
from src.models.schemas import BucketSummary, MonthlySnapshot, Trend

# Percentage change between halves that counts as a trend.
TREND_CHANGE_THRESHOLD = 5.0


def create_monthly_snapshot(
    compute_input: PlanComputeInput,
    year_month: str | None = None,
    *,
    snapshot_id: str | None = None,
    created_at: str | None = None,
) -> MonthlySnapshot:
    """Freeze the plan summary for one month.

    Each bucket is recorded as allocated = target, spent = actual and
    remaining = variance.
    """
    summary = compute_plan_summary(compute_input, year_month)

    return MonthlySnapshot(
        id=snapshot_id or str(uuid.uuid4()),
        plan_id=compute_input.plan.id,
        year_month=summary.year_month,
        gross_income_cents=summary.gross_monthly_income,
        net_income_cents=summary.net_monthly_income,
        total_expenses_cents=summary.total_monthly_expenses,
        bucket_summaries=tuple(
            BucketSummary(
                bucket_id=b.bucket_id,
                bucket_name=b.bucket_name,
                allocated_cents=b.target_amount_cents,
                spent_cents=b.actual_amount_cents,
                remaining_cents=b.variance_cents,
            )
            for b in summary.bucket_analysis
        ),
        created_at=created_at or datetime.now(timezone.utc).isoformat(),
    )


def supersede_snapshot(
    snapshots: list[MonthlySnapshot] | tuple[MonthlySnapshot, ...],
    snapshot: MonthlySnapshot,
) -> list[MonthlySnapshot]:
    """Return *snapshots* with any snapshot for the same plan and month replaced by *snapshot*."""
    kept = [
        s for s in snapshots
        if not (s.plan_id == snapshot.plan_id and s.year_month == snapshot.year_month)
    ]
    kept.append(snapshot)
    return sorted(kept, key=lambda s: s.year_month)


def compute_rolling_averages(
    snapshots: list[MonthlySnapshot] | tuple[MonthlySnapshot, ...],
    months: int = 3,
) -> RollingAverages | None:
    """Average total expenses over the *months* most recent snapshots.

    Returns ``None`` when fewer than *months* snapshots exist.
    """
    if months < 1:
        raise ValueError(f"months must be at least 1, got {months}")
    if len(snapshots) < months:
        return None

    recent = sorted(snapshots, key=lambda s: s.year_month, reverse=True)[:months]
    total = sum_money(s.total_expenses_cents for s in recent)

    return RollingAverages(
        months_included=len(recent),
        avg_total_expenses=divide_money(total, len(recent)),
        trend=calculate_trend(recent),
    )


def calculate_trend(
    snapshots: list[MonthlySnapshot] | tuple[MonthlySnapshot, ...],
) -> Trend:
    """Compare the recent half of *snapshots* (most recent first) to the older half.

    A change beyond :data:`TREND_CHANGE_THRESHOLD` percent is a trend; fewer
    than two snapshots, or an older half averaging zero, is ``stable``.
    """
    if len(snapshots) < 2:
        return Trend.STABLE

    mid = len(snapshots) // 2
    recent_half = snapshots[:mid]
    older_half = snapshots[mid:]

    recent_avg = sum(s.total_expenses_cents for s in recent_half) / len(recent_half)
    older_avg = sum(s.total_expenses_cents for s in older_half) / len(older_half)

    if older_avg == 0:
        return Trend.STABLE

    change_percent = (recent_avg - older_avg) / older_avg * 100
    if change_percent > TREND_CHANGE_THRESHOLD:
        return Trend.INCREASING
    if change_percent < -TREND_CHANGE_THRESHOLD:
        return Trend.DECREASING
    return Trend.STABLE
