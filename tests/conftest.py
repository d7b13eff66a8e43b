"""Shared test fixtures for budget planner tests."""

from src.models.schemas import (
    BucketAllocation,
    ExchangeRates,
    ExpenseItem,
    MonthlySnapshot,
    Plan,
    TaxComponent,
)

PLAN_ID = "plan-1"


def make_plan(
    gross_income_cents: int = 500000,  # $5,000
    income_frequency: str = "monthly",
    tax_mode: str = "simple",
    tax_effective_rate: float | None = 20,
    name: str = "Test Plan",
) -> Plan:
    return Plan(
        id=PLAN_ID,
        name=name,
        gross_income_cents=gross_income_cents,
        income_frequency=income_frequency,
        tax_mode=tax_mode,
        tax_effective_rate=tax_effective_rate,
        created_at="2026-01-01T00:00:00Z",
        updated_at="2026-01-01T00:00:00Z",
        version=1,
    )


def make_bucket(
    name: str = "Needs",
    mode: str = "percentage",
    target_percentage: float | None = 30,
    target_amount_cents: int | None = None,
    sort_order: int = 0,
    id_: str | None = None,
) -> BucketAllocation:
    data = {
        "id": id_ or f"bucket-{name.lower().replace(' ', '-')}",
        "planId": PLAN_ID,
        "name": name,
        "color": "#FF0000",
        "mode": mode,
        "sortOrder": sort_order,
    }
    if target_percentage is not None:
        data["targetPercentage"] = target_percentage
    if target_amount_cents is not None:
        data["targetAmountCents"] = target_amount_cents
    return BucketAllocation.model_validate(data)


def make_fixed_bucket(name: str = "Rent", amount_cents: int = 150000, **kwargs) -> BucketAllocation:
    return make_bucket(
        name=name, mode="fixed", target_percentage=None, target_amount_cents=amount_cents, **kwargs
    )


def make_expense(
    name: str = "Expense",
    amount_cents: int = 100000,  # $1,000
    frequency: str = "monthly",
    category: str = "housing",
    bucket_id: str = "",
    currency_code: str | None = None,
    id_: str | None = None,
) -> ExpenseItem:
    return ExpenseItem(
        id=id_ or f"exp-{name.lower().replace(' ', '-')}",
        plan_id=PLAN_ID,
        bucket_id=bucket_id,
        name=name,
        amount_cents=amount_cents,
        frequency=frequency,
        category=category,
        is_fixed=True,
        currency_code=currency_code,
    )


def make_tax_component(name: str = "Federal", rate_percent: float = 22, sort_order: int = 0) -> TaxComponent:
    return TaxComponent(
        id=f"tax-{name.lower()}",
        plan_id=PLAN_ID,
        name=name,
        rate_percent=rate_percent,
        sort_order=sort_order,
    )


def make_snapshot(
    year_month: str = "2026-01",
    total_expenses_cents: int = 200000,
    bucket_summaries: list[dict] | None = None,
    plan_id: str = PLAN_ID,
) -> MonthlySnapshot:
    return MonthlySnapshot(
        id=f"snap-{year_month}",
        plan_id=plan_id,
        year_month=year_month,
        gross_income_cents=500000,
        net_income_cents=400000,
        total_expenses_cents=total_expenses_cents,
        bucket_summaries=bucket_summaries or [],
        created_at=f"{year_month}-28T00:00:00Z",
    )


def make_rates(base: str = "USD", **rates: float) -> ExchangeRates:
    return ExchangeRates(
        base_currency=base,
        rates=rates or {"EUR": 0.9, "GBP": 0.8},
        updated_at="2026-01-01T00:00:00Z",
    )
