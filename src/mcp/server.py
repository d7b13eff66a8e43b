"""Budget Planner MCP Server.

Exposes the plan calculation engine as MCP tools: monthly summary, bucket
analysis, alerts, snapshots, rolling averages and currency/frequency helpers.
The plan itself is read from a JSON file named by ``BUDGET_PLAN_FILE``.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

# Ensure project root is on sys.path so `src` is importable when loaded
# directly by tools like `mcp dev` (which use importlib, not `python -m`).
_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

load_dotenv()

from src.core.calc import compute_plan_summary
from src.core.currency import convert_cents_tagged
from src.core.frequency import denormalize_from_monthly, normalize_to_monthly
from src.core.money import dollars_to_cents, non_negative_cents
from src.core.plan_store import PlanStore, compute_input
from src.core.rollover import get_current_year_month, get_rollover_map_from_snapshots
from src.core.snapshot import compute_rolling_averages, create_monthly_snapshot
from src.mcp.error_handling import handle_tool_errors
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
from src.models.schemas import (
    ConvertAmountInput,
    NormalizeAmountInput,
    RollingAveragesInput,
    SnapshotInput,
    SummaryInput,
)

logger = logging.getLogger("budget_mcp")


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    plan_file = os.environ.get("BUDGET_PLAN_FILE", "")

    if not plan_file:
        raise RuntimeError(
            "BUDGET_PLAN_FILE environment variable is required. "
            "Point it at the JSON export of your plan."
        )

    store = PlanStore(plan_file)
    logger.info("Serving plan file %s", store.path)

    yield {"store": store}


mcp = FastMCP("budget_mcp", lifespan=app_lifespan)


# --- Helper to get the store from context ---


def _get_store(ctx) -> PlanStore:
    return ctx.request_context.lifespan_context["store"]


_READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": False,
}


# --- Read-Only Tools ---


@mcp.tool(
    name="budget_get_summary",
    annotations={"title": "Monthly Plan Summary", **_READ_ONLY},
)
@handle_tool_errors
async def budget_get_summary(params: SummaryInput, ctx: Context) -> str:
    """Get the monthly picture: income, tax, expenses, buckets, surplus and alerts."""
    bundle = _get_store(ctx).load()
    summary = compute_plan_summary(compute_input(bundle), params.year_month)
    return format_plan_summary(summary, bundle.plan.name)


@mcp.tool(
    name="budget_get_bucket_analysis",
    annotations={"title": "Bucket Analysis", **_READ_ONLY},
)
@handle_tool_errors
async def budget_get_bucket_analysis(params: SummaryInput, ctx: Context) -> str:
    """Compare each bucket's target with actual monthly spending."""
    bundle = _get_store(ctx).load()
    summary = compute_plan_summary(compute_input(bundle), params.year_month)
    return format_bucket_analysis(summary.bucket_analysis)


@mcp.tool(
    name="budget_get_alerts",
    annotations={"title": "Budget Alerts", **_READ_ONLY},
)
@handle_tool_errors
async def budget_get_alerts(params: SummaryInput, ctx: Context) -> str:
    """List overspent buckets, deficits, over-allocation and other budget warnings."""
    bundle = _get_store(ctx).load()
    summary = compute_plan_summary(compute_input(bundle), params.year_month)
    return format_alerts(summary.alerts)


@mcp.tool(
    name="budget_get_rolling_averages",
    annotations={"title": "Rolling Expense Average", **_READ_ONLY},
)
@handle_tool_errors
async def budget_get_rolling_averages(params: RollingAveragesInput, ctx: Context) -> str:
    """Average monthly expenses over recent snapshots and whether they are rising or falling."""
    bundle = _get_store(ctx).load()
    plan_snapshots = [s for s in bundle.snapshots if s.plan_id == bundle.plan.id]
    result = compute_rolling_averages(plan_snapshots, params.months)
    return format_rolling_averages(result, params.months, len(plan_snapshots))


@mcp.tool(
    name="budget_get_rollover",
    annotations={"title": "Bucket Carry-over", **_READ_ONLY},
)
@handle_tool_errors
async def budget_get_rollover(params: SummaryInput, ctx: Context) -> str:
    """Show what each bucket had left at the end of the previous month."""
    bundle = _get_store(ctx).load()
    year_month = params.year_month or get_current_year_month()
    plan_snapshots = [s for s in bundle.snapshots if s.plan_id == bundle.plan.id]
    rollover = get_rollover_map_from_snapshots(plan_snapshots, year_month)
    names = {b.id: b.name for b in bundle.buckets}
    return format_rollover(rollover, names, year_month)


@mcp.tool(
    name="budget_convert_amount",
    annotations={"title": "Convert Currency", **_READ_ONLY},
)
@handle_tool_errors
async def budget_convert_amount(params: ConvertAmountInput, ctx: Context) -> str:
    """Convert an amount between currencies using the plan's exchange rates."""
    bundle = _get_store(ctx).load()
    amount = dollars_to_cents(params.amount)
    result = convert_cents_tagged(amount, params.from_currency, params.to_currency, bundle.exchange_rates)
    return format_conversion(amount, params.from_currency, params.to_currency, result)


@mcp.tool(
    name="budget_normalize_amount",
    annotations={"title": "Monthly Equivalent", **_READ_ONLY},
)
@handle_tool_errors
async def budget_normalize_amount(params: NormalizeAmountInput, ctx: Context) -> str:
    """Convert a weekly, biweekly, quarterly (etc.) amount to its monthly equivalent."""
    amount = non_negative_cents(dollars_to_cents(params.amount))
    monthly = normalize_to_monthly(amount, params.frequency)
    round_trip = denormalize_from_monthly(monthly, params.frequency)
    return format_normalized_amount(amount, params.frequency, monthly, round_trip)


# --- Write Tools ---


@mcp.tool(
    name="budget_create_snapshot",
    annotations={
        "title": "Create Monthly Snapshot",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
@handle_tool_errors
async def budget_create_snapshot(params: SnapshotInput, ctx: Context) -> str:
    """Record this month's summary as a snapshot. Set save=True to store it (replaces the same month)."""
    store = _get_store(ctx)
    bundle = store.load()
    snapshot = create_monthly_snapshot(compute_input(bundle), params.year_month)
    if params.save:
        store.save_snapshot(snapshot)
    return format_snapshot(snapshot, saved=params.save)


# --- Entry point ---

if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("BUDGET_LOG_LEVEL", "INFO").upper())
    mcp.run()
