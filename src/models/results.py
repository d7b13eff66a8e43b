"""Result dataclasses for engine outputs.

These are derived values, never persisted, consumed by formatters and
snapshots. Lightweight frozen dataclasses rather than Pydantic models since
they are built from already-validated records.
"""

from dataclasses import dataclass, field

from src.core.money import Cents
from src.models.schemas import AlertSeverity, BucketStatus, ExpenseCategory, Trend


@dataclass(frozen=True)
class BucketAnalysis:
    """Target vs. actual spend for one bucket."""
    bucket_id: str
    bucket_name: str
    target_percentage: float     # % of net income
    actual_percentage: float     # % of net income
    target_amount_cents: Cents
    actual_amount_cents: Cents
    variance_cents: Cents        # target - actual (negative = overspent)
    status: BucketStatus


@dataclass(frozen=True)
class BudgetAlert:
    """An actionable finding about the plan."""
    severity: AlertSeverity
    code: str
    message: str
    related_entity_id: str | None = None


@dataclass(frozen=True)
class PlanSummary:
    """Monthly financial picture derived from a plan."""
    plan_id: str
    year_month: str
    gross_monthly_income: Cents
    estimated_tax: Cents
    net_monthly_income: Cents
    total_monthly_expenses: Cents
    expenses_by_category: dict[ExpenseCategory, Cents] = field(default_factory=dict)
    expenses_by_bucket: dict[str, Cents] = field(default_factory=dict)
    bucket_analysis: list[BucketAnalysis] = field(default_factory=list)
    surplus_or_deficit: Cents = Cents(0)
    savings_rate: float = 0.0    # % of net income left over
    alerts: list[BudgetAlert] = field(default_factory=list)


@dataclass(frozen=True)
class RollingAverages:
    """Average monthly expenses over the most recent snapshots."""
    months_included: int
    avg_total_expenses: Cents
    trend: Trend


@dataclass(frozen=True)
class ConversionResult:
    """Converted amount, and whether a real exchange rate was applied."""
    amount: Cents
    converted: bool


@dataclass(frozen=True)
class ExpenseTotals:
    """Monthly-normalized expenses: overall and grouped."""
    total: Cents
    by_category: dict[ExpenseCategory, Cents] = field(default_factory=dict)
    by_bucket: dict[str, Cents] = field(default_factory=dict)  # "" = unassigned
