"""Plan summary engine.

Pure functions that turn a plan, its buckets, tax components and expenses
into a :class:`PlanSummary`. No I/O: callers pass the period explicitly when
they need deterministic output.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.currency import convert_expenses_to_base
from src.core.frequency import normalize_to_monthly
from src.core.money import Cents, add_money, cents, percent_of, subtract_money
from src.core.rollover import get_current_year_month
from src.core.rules import AlertContext, generate_alerts
from src.core.tax import compute_tax
from src.models.results import BucketAnalysis, ExpenseTotals, PlanSummary
from src.models.schemas import (
    DEFAULT_CURRENCY,
    BucketAllocation,
    BucketStatus,
    CurrencyCode,
    ExchangeRates,
    ExpenseCategory,
    ExpenseItem,
    PercentageTarget,
    Plan,
    TaxComponent,
)

# A bucket within this many percent of its target counts as on target.
BUCKET_VARIANCE_THRESHOLD = 5.0


@dataclass(frozen=True)
class PlanComputeInput:
    """Everything the engine needs for one plan."""
    plan: Plan
    buckets: list[BucketAllocation] | tuple[BucketAllocation, ...] = ()
    expenses: list[ExpenseItem] | tuple[ExpenseItem, ...] = ()
    tax_components: list[TaxComponent] | tuple[TaxComponent, ...] = ()
    base_currency: CurrencyCode = DEFAULT_CURRENCY
    exchange_rates: ExchangeRates | None = None


def compute_plan_summary(
    compute_input: PlanComputeInput,
    year_month: str | None = None,
    *,
    variance_threshold: float = BUCKET_VARIANCE_THRESHOLD,
) -> PlanSummary:
    """Compute the monthly financial picture for a plan.

    Normalizes income and expenses to monthly amounts, derives tax and net
    income, analyzes every bucket against its target, and attaches the
    alerts raised by :func:`generate_alerts`. Zero net income yields zero
    percentages and savings rate rather than a division error.
    """
    plan = compute_input.plan
    period = year_month or get_current_year_month()

    # 1. Income
    gross_monthly = normalize_to_monthly(plan.gross_income_cents, plan.income_frequency)

    # 2. Tax
    estimated_tax = compute_tax(gross_monthly, plan, compute_input.tax_components)
    net_monthly = subtract_money(gross_monthly, estimated_tax)

    # 3. Expenses, in the plan's base currency
    expenses = convert_expenses_to_base(
        compute_input.expenses, compute_input.base_currency, compute_input.exchange_rates
    )
    totals = aggregate_expenses(expenses)

    # 4. Buckets
    bucket_analysis = compute_bucket_analysis(
        compute_input.buckets, totals.by_bucket, net_monthly, variance_threshold
    )

    # 5. Bottom line
    surplus_or_deficit = subtract_money(net_monthly, totals.total)
    savings_rate = surplus_or_deficit / net_monthly * 100 if net_monthly > 0 else 0.0

    # 6. Alerts
    alerts = generate_alerts(AlertContext(
        plan=plan,
        buckets=compute_input.buckets,
        net_monthly_income=net_monthly,
        total_monthly_expenses=totals.total,
        surplus_or_deficit=surplus_or_deficit,
        bucket_analysis=bucket_analysis,
    ))

    return PlanSummary(
        plan_id=plan.id,
        year_month=period,
        gross_monthly_income=gross_monthly,
        estimated_tax=estimated_tax,
        net_monthly_income=net_monthly,
        total_monthly_expenses=totals.total,
        expenses_by_category=totals.by_category,
        expenses_by_bucket=totals.by_bucket,
        bucket_analysis=bucket_analysis,
        surplus_or_deficit=surplus_or_deficit,
        savings_rate=savings_rate,
        alerts=alerts,
    )


def aggregate_expenses(
    expenses: list[ExpenseItem] | tuple[ExpenseItem, ...],
) -> ExpenseTotals:
    """Sum monthly-normalized expenses overall, by category and by bucket."""
    total = cents(0)
    by_category: dict[ExpenseCategory, Cents] = {}
    by_bucket: dict[str, Cents] = {}

    for expense in expenses:
        monthly = normalize_to_monthly(expense.amount_cents, expense.frequency)
        total = add_money(total, monthly)
        by_category[expense.category] = add_money(by_category.get(expense.category, cents(0)), monthly)
        by_bucket[expense.bucket_id] = add_money(by_bucket.get(expense.bucket_id, cents(0)), monthly)

    return ExpenseTotals(total=total, by_category=by_category, by_bucket=by_bucket)


def classify_bucket_status(
    variance_percent: float,
    threshold: float = BUCKET_VARIANCE_THRESHOLD,
) -> BucketStatus:
    """Classify how far actual spend sits from target.

    *variance_percent* is ``(target% - actual%) / target% * 100``: positive
    means spend is below target.
    """
    if variance_percent > threshold:
        return BucketStatus.UNDER
    if variance_percent < -threshold:
        return BucketStatus.OVER
    return BucketStatus.ON_TARGET


def compute_bucket_analysis(
    allocations: list[BucketAllocation] | tuple[BucketAllocation, ...],
    actual_by_bucket: dict[str, Cents],
    net_monthly_income: Cents,
    variance_threshold: float = BUCKET_VARIANCE_THRESHOLD,
) -> list[BucketAnalysis]:
    results = []
    for allocation in allocations:
        target = allocation.target
        if isinstance(target, PercentageTarget):
            target_percentage = target.target_percentage
            target_amount = percent_of(net_monthly_income, target_percentage)
        else:
            target_amount = cents(target.target_amount_cents)
            target_percentage = (
                target_amount / net_monthly_income * 100 if net_monthly_income > 0 else 0.0
            )

        actual_amount = actual_by_bucket.get(allocation.id, cents(0))
        variance = subtract_money(target_amount, actual_amount)
        actual_percentage = (
            actual_amount / net_monthly_income * 100 if net_monthly_income > 0 else 0.0
        )

        # Unconfigured (0%) buckets have no meaningful variance.
        if target_percentage > 0:
            variance_percent = (target_percentage - actual_percentage) / target_percentage * 100
        else:
            variance_percent = 0.0

        results.append(BucketAnalysis(
            bucket_id=allocation.id,
            bucket_name=allocation.name,
            target_percentage=target_percentage,
            actual_percentage=actual_percentage,
            target_amount_cents=target_amount,
            actual_amount_cents=actual_amount,
            variance_cents=variance,
            status=classify_bucket_status(variance_percent, variance_threshold),
        ))
    return results
