"""Budget alert rules.

Every rule is evaluated independently; several can fire for the same plan.
Output order: bucket overages (bucket order), deficit, over-allocation,
missing savings bucket.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.core.money import Cents, cents_to_dollars
from src.models.results import BucketAnalysis, BudgetAlert
from src.models.schemas import AlertSeverity, BucketAllocation, BucketStatus, PercentageTarget, Plan

BUCKET_OVERAGE_ERROR_THRESHOLD = 20  # % over target
DEFICIT_ERROR_THRESHOLD = 10  # % of net income
MAX_ALLOCATION_PERCENT = 100

BUCKET_OVER_BUDGET = "BUCKET_OVER_BUDGET"
BUDGET_DEFICIT = "BUDGET_DEFICIT"
ALLOCATIONS_EXCEED_100 = "ALLOCATIONS_EXCEED_100"
NO_SAVINGS_BUCKET = "NO_SAVINGS_BUCKET"


@dataclass(frozen=True)
class AlertContext:
    """Computed plan state the rules inspect."""
    plan: Plan
    buckets: list[BucketAllocation] | tuple[BucketAllocation, ...]
    net_monthly_income: Cents
    total_monthly_expenses: Cents
    surplus_or_deficit: Cents
    bucket_analysis: list[BucketAnalysis] = field(default_factory=list)


def generate_alerts(context: AlertContext) -> list[BudgetAlert]:
    """Run every rule against *context* and return all alerts raised."""
    alerts: list[BudgetAlert] = []
    alerts.extend(check_bucket_overages(context))
    alerts.extend(check_deficit(context))
    alerts.extend(check_total_allocation(context))
    alerts.extend(check_savings_bucket(context))
    return alerts


# --- Rules ---


def check_bucket_overages(context: AlertContext) -> list[BudgetAlert]:
    alerts = []
    for bucket in context.bucket_analysis:
        if bucket.status != BucketStatus.OVER:
            continue
        if bucket.target_percentage > 0:
            over_percent = abs(
                (bucket.actual_percentage - bucket.target_percentage)
                / bucket.target_percentage
                * 100
            )
        else:
            over_percent = 100.0  # any spend against a zero target
        severity = (
            AlertSeverity.ERROR
            if over_percent > BUCKET_OVERAGE_ERROR_THRESHOLD
            else AlertSeverity.WARNING
        )
        alerts.append(BudgetAlert(
            severity=severity,
            code=BUCKET_OVER_BUDGET,
            message=f"{bucket.bucket_name} is {over_percent:.1f}% over budget",
            related_entity_id=bucket.bucket_id,
        ))
    return alerts


def check_deficit(context: AlertContext) -> list[BudgetAlert]:
    if context.surplus_or_deficit >= 0:
        return []
    deficit = abs(context.surplus_or_deficit)
    if context.net_monthly_income > 0:
        deficit_percent = deficit / context.net_monthly_income * 100
    else:
        deficit_percent = 100.0
    severity = (
        AlertSeverity.ERROR
        if deficit_percent > DEFICIT_ERROR_THRESHOLD
        else AlertSeverity.WARNING
    )
    return [BudgetAlert(
        severity=severity,
        code=BUDGET_DEFICIT,
        message=f"Monthly spending exceeds income by ${cents_to_dollars(deficit):,.2f}",
    )]


def check_total_allocation(context: AlertContext) -> list[BudgetAlert]:
    """Flag percentage buckets that together claim more than all of net income.

    Fixed-amount buckets are not part of the sum.
    """
    total = sum(
        (b.target.target_percentage for b in context.buckets if isinstance(b.target, PercentageTarget)),
        0.0,
    )
    if total <= MAX_ALLOCATION_PERCENT:
        return []
    return [BudgetAlert(
        severity=AlertSeverity.ERROR,
        code=ALLOCATIONS_EXCEED_100,
        message=f"Percentage allocations total {total:.1f}%, which exceeds 100%",
    )]


def check_savings_bucket(context: AlertContext) -> list[BudgetAlert]:
    if any("saving" in b.bucket_name.lower() for b in context.bucket_analysis):
        return []
    return [BudgetAlert(
        severity=AlertSeverity.INFO,
        code=NO_SAVINGS_BUCKET,
        message="Consider adding a savings bucket to track savings goals",
    )]
