"""Tests for MCP response formatters."""

from tests.conftest import make_snapshot
from src.mcp.formatters import (
    format_alerts,
    format_bucket_analysis,
    format_conversion,
    format_normalized_amount,
    format_plan_summary,
    format_rolling_averages,
    format_rollover,
    format_snapshot,
)
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
    BucketSummary,
    CurrencyCode,
    ExpenseCategory,
    Frequency,
    Trend,
)


def make_analysis(status=BucketStatus.ON_TARGET, variance=0) -> BucketAnalysis:
    return BucketAnalysis(
        bucket_id="bucket-needs",
        bucket_name="Needs",
        target_percentage=50,
        actual_percentage=25,
        target_amount_cents=200000,
        actual_amount_cents=100000,
        variance_cents=variance,
        status=status,
    )


def make_summary(**overrides) -> PlanSummary:
    values = dict(
        plan_id="plan-1",
        year_month="2026-03",
        gross_monthly_income=500000,
        estimated_tax=100000,
        net_monthly_income=400000,
        total_monthly_expenses=100000,
        surplus_or_deficit=300000,
        savings_rate=75.0,
    )
    values.update(overrides)
    return PlanSummary(**values)


class TestFormatPlanSummary:
    def test_headline_figures(self):
        result = format_plan_summary(make_summary(), "Household")
        assert "Plan Summary: Household (2026-03)" in result
        assert "$5,000.00/mo" in result
        assert "**Net income:** $4,000.00/mo" in result
        assert "**Surplus:** $3,000.00/mo" in result
        assert "75.0%" in result

    def test_deficit_label(self):
        result = format_plan_summary(make_summary(surplus_or_deficit=-25000, savings_rate=-6.25))
        assert "**Deficit:** $250.00/mo" in result

    def test_categories_ranked_by_amount(self):
        summary = make_summary(expenses_by_category={
            ExpenseCategory.DINING: 5000,
            ExpenseCategory.DEBT_PAYMENT: 90000,
        })
        result = format_plan_summary(summary)
        assert result.index("Debt Payment") < result.index("Dining")

    def test_includes_buckets_and_alerts(self):
        summary = make_summary(
            bucket_analysis=[make_analysis()],
            alerts=[BudgetAlert(AlertSeverity.INFO, "NO_SAVINGS_BUCKET", "Add savings")],
        )
        result = format_plan_summary(summary)
        assert "### Buckets" in result
        assert "[INFO] Add savings" in result


class TestFormatBucketAnalysis:
    def test_empty(self):
        assert format_bucket_analysis([]) == "No buckets configured."

    def test_bucket_line(self):
        result = format_bucket_analysis([make_analysis(variance=100000)])
        assert "[OK] Needs: $1,000.00 of $2,000.00" in result
        assert "(25.0% vs 50.0% target)" in result
        assert "$1,000.00 left" in result

    def test_overspent_bucket(self):
        result = format_bucket_analysis([make_analysis(BucketStatus.OVER, variance=-20000)])
        assert "[!!]" in result
        assert "-$200.00 left" in result


class TestFormatAlerts:
    def test_empty(self):
        assert format_alerts([]) == "No alerts. The plan looks healthy."

    def test_lists_alerts(self):
        alerts = [
            BudgetAlert(AlertSeverity.ERROR, "BUDGET_DEFICIT", "Too much spending"),
            BudgetAlert(AlertSeverity.WARNING, "BUCKET_OVER_BUDGET", "Fun is 10.0% over budget", "b1"),
        ]
        result = format_alerts(alerts)
        assert "Alerts (2)" in result
        assert "- [ERROR] Too much spending" in result
        assert "- [WARNING] Fun is 10.0% over budget" in result


class TestFormatSnapshot:
    def test_preview(self):
        result = format_snapshot(make_snapshot("2026-02"), saved=False)
        assert "Snapshot preview (not saved): 2026-02" in result
        assert "$2,000.00" in result

    def test_saved_with_buckets(self):
        snapshot = make_snapshot("2026-02").model_copy(update={"bucket_summaries": (
            BucketSummary(bucket_id="b1", bucket_name="Fun", allocated_cents=40000,
                          spent_cents=50000, remaining_cents=-10000),
        )})
        result = format_snapshot(snapshot, saved=True)
        assert "Snapshot saved: 2026-02" in result
        assert "Fun: $500.00 spent of $400.00 | -$100.00 remaining" in result


class TestFormatRollingAverages:
    def test_not_enough_history(self):
        assert format_rolling_averages(None, 6, 1) == (
            "Not enough history for a 6-month average (1 snapshot stored)."
        )

    def test_plural_snapshots(self):
        assert "(0 snapshots stored)" in format_rolling_averages(None, 3, 0)

    def test_result(self):
        result = format_rolling_averages(RollingAverages(3, 200000, Trend.INCREASING), 3, 5)
        assert "3-Month Rolling Average" in result
        assert "$2,000.00/mo" in result
        assert "rising" in result


class TestFormatRollover:
    def test_empty(self):
        assert "nothing carries over" in format_rollover({}, {}, "2026-03")

    def test_uses_bucket_names(self):
        result = format_rollover({"b1": 5000, "b-gone": -100}, {"b1": "Fun"}, "2026-03")
        assert "Carry-over into 2026-03" in result
        assert "- Fun: $50.00" in result
        assert "- b-gone: -$1.00" in result


class TestFormatConversion:
    def test_converted(self):
        result = format_conversion(10000, CurrencyCode.USD, CurrencyCode.EUR, ConversionResult(9000, True))
        assert result == "100.00 USD = 90.00 EUR"

    def test_missing_rate(self):
        result = format_conversion(10000, CurrencyCode.USD, CurrencyCode.JPY, ConversionResult(10000, False))
        assert result.startswith("No exchange rate available for USD -> JPY")


class TestFormatNormalizedAmount:
    def test_weekly(self):
        result = format_normalized_amount(10000, Frequency.WEEKLY, 43333, 10000)
        assert "$100.00 weekly = **$433.33/mo**" in result
        assert "converted back: $100.00 weekly" in result
