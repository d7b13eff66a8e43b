"""Quick smoke test against a real plan file.

Run: python -m tests.smoke_test
Requires BUDGET_PLAN_FILE in .env
"""

import os
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv()

from src.core.calc import compute_plan_summary
from src.core.money import cents_to_dollars
from src.core.plan_store import PlanStore, PlanStoreError, compute_input
from src.core.rollover import get_current_year_month, get_rollover_map_from_snapshots
from src.core.snapshot import compute_rolling_averages, create_monthly_snapshot


def main():
    plan_file = os.environ.get("BUDGET_PLAN_FILE", "")
    if not plan_file:
        print("BUDGET_PLAN_FILE not set in .env")
        sys.exit(1)

    store = PlanStore(plan_file)

    try:
        # 1. Load
        print("1. Loading plan file...")
        bundle = store.load()
        print(f"   - {bundle.plan.name} (ID: {bundle.plan.id})")
        print(
            f"   {len(bundle.buckets)} buckets, {len(bundle.expenses)} expenses, "
            f"{len(bundle.snapshots)} snapshots"
        )

        # 2. Summary
        print("\n2. Computing monthly summary...")
        summary = compute_plan_summary(compute_input(bundle))
        print(f"   Net income: ${cents_to_dollars(summary.net_monthly_income):,.2f}")
        print(f"   Expenses:   ${cents_to_dollars(summary.total_monthly_expenses):,.2f}")
        print(f"   Surplus:    ${cents_to_dollars(summary.surplus_or_deficit):,.2f}")
        for b in summary.bucket_analysis:
            print(f"   - {b.bucket_name}: {b.actual_percentage:.1f}% of {b.target_percentage:.1f}% ({b.status.value})")

        # 3. Alerts
        print("\n3. Alerts...")
        for a in summary.alerts:
            print(f"   - [{a.severity.value}] {a.message}")
        if not summary.alerts:
            print("   None")

        # 4. Snapshot preview (not saved)
        print("\n4. Building snapshot preview...")
        snapshot = create_monthly_snapshot(compute_input(bundle))
        print(f"   {snapshot.year_month}: {len(snapshot.bucket_summaries)} bucket summaries")

        # 5. History
        print("\n5. Snapshot history...")
        averages = compute_rolling_averages(list(bundle.snapshots), 3)
        if averages:
            print(f"   3-month average: ${cents_to_dollars(averages.avg_total_expenses):,.2f} ({averages.trend.value})")
        else:
            print("   Fewer than 3 snapshots stored")
        rollover = get_rollover_map_from_snapshots(bundle.snapshots, get_current_year_month())
        print(f"   {len(rollover)} buckets carry over from last month")

        print("\nAll checks passed!")

    except PlanStoreError as e:
        print(f"\nPlan file error: {e.detail}")
        sys.exit(1)
    except ValidationError as e:
        print(f"\nInvalid plan file:\n{e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
