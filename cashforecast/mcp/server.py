"""Cash Forecast MCP Server - FastMCP implementation for forecast tools."""

import json
import logging
from datetime import date
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from cashforecast.sdk import (
    compute_net_pay_breakdown,
    get_horizon_months,
    load_forecast_profile,
    partition_expenses_by_status,
    recompute_forecast,
)
from cashforecast.sdk.dates import parse_iso_date

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("cash-forecast")


def _resolve_today(today: Optional[str]):
    """Parse an optional YYYY-MM-DD string; None means the current date."""
    if not today:
        return None
    parsed = parse_iso_date(today)
    if parsed is None:
        raise ValueError(f"Invalid date '{today}'. Use YYYY-MM-DD.")
    return parsed


# --- Tools ---

@mcp.tool()
async def get_forecast(
    today: str | None = Field(default=None, description="Horizon start date YYYY-MM-DD (default: current date)"),
    months: int | None = Field(default=None, description="Horizon length in months (default: settings or 12)"),
    row_type: str = Field(default="all", description="Row filter: 'all', 'income' or 'expense'"),
    limit: int = Field(default=200, description="Maximum number of rows to return (default 200)"),
) -> dict[str, Any]:
    """Project the balance ledger from the saved profile. Returns ordered rows with running balance and payday metrics."""
    try:
        profile = load_forecast_profile(require_exists=True)
        result = recompute_forecast(
            profile, today=_resolve_today(today), months=months or get_horizon_months()
        )

        rows = result.rows
        if row_type in ("income", "expense"):
            rows = [r for r in rows if r.type == row_type]

        return {
            "horizon_start": result.horizon_start.isoformat(),
            "horizon_end": result.horizon_end.isoformat(),
            "rows": [r.model_dump(mode="json") for r in rows[:limit]],
            "count": len(rows),
            "payday": result.payday.model_dump(mode="json") if result.payday else None,
        }
    except Exception as e:
        logger.error(f"Error computing forecast: {e}")
        return {"error": str(e), "rows": [], "count": 0}


@mcp.tool()
async def get_payday_metrics(
    today: str | None = Field(default=None, description="Horizon start date YYYY-MM-DD (default: current date)"),
) -> dict[str, Any]:
    """Get safe-to-spend until the next payday.

    Returns the next payday date, the balance on that day, the lowest
    balance before it and how much can be spent while keeping the
    configured minimum buffer. 'payday' is null when no paycheck falls
    in the horizon.
    """
    try:
        profile = load_forecast_profile(require_exists=True)
        result = recompute_forecast(profile, today=_resolve_today(today), months=get_horizon_months())
        return {
            "payday": result.payday.model_dump(mode="json") if result.payday else None,
            "minimum_buffer": profile.user_settings.minimum_buffer,
        }
    except Exception as e:
        logger.error(f"Error computing payday metrics: {e}")
        return {"error": str(e), "payday": None}


@mcp.tool()
async def get_pay_breakdown() -> dict[str, Any]:
    """Get the per-paycheck gross-to-net breakdown. Values that cannot be derived are null."""
    try:
        profile = load_forecast_profile(require_exists=True)
        breakdown = compute_net_pay_breakdown(profile.paycheck_config)
        return {
            "pay_frequency": profile.paycheck_config.pay_frequency,
            "breakdown": breakdown.model_dump(mode="json"),
        }
    except Exception as e:
        logger.error(f"Error computing pay breakdown: {e}")
        return {"error": str(e), "breakdown": None}


@mcp.tool()
async def get_expense_status(
    today: str | None = Field(default=None, description="Reference date YYYY-MM-DD (default: current date)"),
) -> dict[str, Any]:
    """Split expenses into active (payments still due) and finished."""
    try:
        profile = load_forecast_profile(require_exists=True)
        partition = partition_expenses_by_status(profile.expenses, _resolve_today(today) or date.today())
        return {
            "active": [e.model_dump(mode="json") for e in partition.active],
            "finished": [e.model_dump(mode="json") for e in partition.finished],
        }
    except Exception as e:
        logger.error(f"Error getting expense status: {e}")
        return {"error": str(e), "active": [], "finished": []}


# --- Resources (optional, for browsing) ---

@mcp.resource("cashforecast://profile/summary")
async def profile_summary_resource() -> str:
    """Summarize the saved profile: balances, pay frequency and expense count."""
    try:
        profile = load_forecast_profile(require_exists=True)
        return json.dumps({
            "starting_balance": profile.user_settings.starting_balance,
            "minimum_buffer": profile.user_settings.minimum_buffer,
            "pay_frequency": profile.paycheck_config.pay_frequency,
            "next_pay_date": profile.paycheck_config.next_pay_date,
            "expenses": len(profile.expenses),
        }, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
