"""Markdown formatters for MCP tool responses.

Pure functions that take engine results and return human-readable Markdown strings.
"""

from __future__ import annotations

from src.core.money import cents_to_dollars
from src.models.results import (
    BucketAnalysis,
    BudgetAlert,
    ConversionResult,
    PlanSummary,
    RollingAverages,
)
from src.models.schemas import (
    AlertSeverity,
    BucketStatus,
    CurrencyCode,
    Frequency,
    MonthlySnapshot,
    Trend,
)

_STATUS_LABELS = {
    BucketStatus.UNDER: "UNDER",
    BucketStatus.ON_TARGET: "OK",
    BucketStatus.OVER: "!!",
}

_SEVERITY_LABELS = {
    AlertSeverity.INFO: "INFO",
    AlertSeverity.WARNING: "WARNING",
    AlertSeverity.ERROR: "ERROR",
}


def _money(amount_cents: int) -> str:
    """Render cents as ``$1,234.56`` (``-$12.00`` when negative)."""
    dollars = cents_to_dollars(amount_cents)
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"


def format_plan_summary(summary: PlanSummary, plan_name: str | None = None) -> str:
    """Headline income, tax, expenses and surplus, then categories, buckets and alerts."""
    title = f"Plan Summary: {plan_name}" if plan_name else "Plan Summary"
    lines = [
        f"## {title} ({summary.year_month})\n",
        f"- **Gross income:** {_money(summary.gross_monthly_income)}/mo",
        f"- **Estimated tax:** {_money(summary.estimated_tax)}/mo",
        f"- **Net income:** {_money(summary.net_monthly_income)}/mo",
        f"- **Expenses:** {_money(summary.total_monthly_expenses)}/mo",
    ]
    label = "Surplus" if summary.surplus_or_deficit >= 0 else "Deficit"
    lines.append(
        f"- **{label}:** {_money(abs(summary.surplus_or_deficit))}/mo "
        f"(savings rate {summary.savings_rate:.1f}%)"
    )

    if summary.expenses_by_category:
        lines.append("\n### Spending by Category")
        ranked = sorted(summary.expenses_by_category.items(), key=lambda kv: kv[1], reverse=True)
        for category, amount in ranked:
            lines.append(f"- {category.value.replace('_', ' ').title()}: {_money(amount)}")

    if summary.bucket_analysis:
        lines.append("")
        lines.append(format_bucket_analysis(summary.bucket_analysis))

    if summary.alerts:
        lines.append("")
        lines.append(format_alerts(summary.alerts))
    return "\n".join(lines)


def format_bucket_analysis(analysis: list[BucketAnalysis]) -> str:
    """One line per bucket: actual vs target with status and amount left."""
    if not analysis:
        return "No buckets configured."
    lines = ["### Buckets"]
    for b in analysis:
        lines.append(
            f"  [{_STATUS_LABELS[b.status]}] {b.bucket_name}: "
            f"{_money(b.actual_amount_cents)} of {_money(b.target_amount_cents)} "
            f"({b.actual_percentage:.1f}% vs {b.target_percentage:.1f}% target) | "
            f"{_money(b.variance_cents)} left"
        )
    return "\n".join(lines)


def format_alerts(alerts: list[BudgetAlert]) -> str:
    """Alerts in rule order, tagged with severity."""
    if not alerts:
        return "No alerts. The plan looks healthy."
    lines = [f"### Alerts ({len(alerts)})"]
    for a in alerts:
        lines.append(f"- [{_SEVERITY_LABELS[a.severity]}] {a.message}")
    return "\n".join(lines)


def format_snapshot(snapshot: MonthlySnapshot, saved: bool) -> str:
    """Snapshot totals and per-bucket balances, marked as saved or preview."""
    heading = "Snapshot saved" if saved else "Snapshot preview (not saved)"
    lines = [
        f"## {heading}: {snapshot.year_month}\n",
        f"- **Gross income:** {_money(snapshot.gross_income_cents)}",
        f"- **Net income:** {_money(snapshot.net_income_cents)}",
        f"- **Total expenses:** {_money(snapshot.total_expenses_cents)}",
    ]
    if snapshot.bucket_summaries:
        lines.append("\n### Buckets")
        for b in snapshot.bucket_summaries:
            lines.append(
                f"- {b.bucket_name}: {_money(b.spent_cents)} spent of "
                f"{_money(b.allocated_cents)} | {_money(b.remaining_cents)} remaining"
            )
    return "\n".join(lines)


def format_rolling_averages(result: RollingAverages | None, months: int, available: int) -> str:
    """Average monthly expenses and trend, or how much history is missing."""
    if result is None:
        return (
            f"Not enough history for a {months}-month average "
            f"({available} snapshot{'s' if available != 1 else ''} stored)."
        )
    arrow = {
        Trend.INCREASING: "rising",
        Trend.DECREASING: "falling",
        Trend.STABLE: "stable",
    }[result.trend]
    return (
        f"## {result.months_included}-Month Rolling Average\n\n"
        f"- **Average expenses:** {_money(result.avg_total_expenses)}/mo\n"
        f"- **Trend:** {arrow}"
    )


def format_rollover(rollover: dict[str, int], bucket_names: dict[str, str], year_month: str) -> str:
    """Amounts each bucket carries into *year_month*."""
    if not rollover:
        return f"No snapshot for the month before {year_month}; nothing carries over."
    lines = [f"## Carry-over into {year_month}\n"]
    for bucket_id, amount in rollover.items():
        name = bucket_names.get(bucket_id, bucket_id)
        lines.append(f"- {name}: {_money(amount)}")
    return "\n".join(lines)


def format_conversion(
    amount_cents: int,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    result: ConversionResult,
) -> str:
    """One-line conversion, or a note that the amount was left unconverted."""
    source = f"{cents_to_dollars(amount_cents):,.2f} {from_currency.value}"
    if not result.converted:
        return (
            f"No exchange rate available for {from_currency.value} -> {to_currency.value}; "
            f"amount left as {source}."
        )
    return f"{source} = {cents_to_dollars(result.amount):,.2f} {to_currency.value}"


def format_normalized_amount(
    amount_cents: int,
    frequency: Frequency,
    monthly_cents: int,
    round_trip_cents: int,
) -> str:
    """Monthly equivalent of a periodic amount, with the converted-back value."""
    return (
        f"{_money(amount_cents)} {frequency.value} = **{_money(monthly_cents)}/mo**\n"
        f"(converted back: {_money(round_trip_cents)} {frequency.value})"
    )
