"""Pay Sheet MCP Server - FastMCP implementation for pay period tools."""

import json
import logging
from datetime import date, datetime
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from paysheet.sdk import (
    InvalidPeriodError,
    get_timezone,
    holidays_for_year,
    matching_rule,
    plan_jobs,
    resolve,
    resolve_period,
    select_period,
)

logger = logging.getLogger(__name__)

mcp = FastMCP("pay-sheet")


# --- Tools ---

@mcp.tool()
async def resolve_pay_period(
    year: int = Field(description="Four-digit year, e.g. 2025"),
    month: int = Field(description="Month 1-12"),
    start_day: int = Field(description="First day of the period: 1 or 16"),
    end_day: int = Field(description="Last day of the period: 15 or the last day of the month"),
) -> dict[str, Any]:
    """Resolve the pay date, timesheet submission time and reminder date for a pay period."""
    try:
        dates = resolve(year, month, start_day, end_day, timezone=get_timezone())
    except InvalidPeriodError as e:
        return {"error": str(e), "dates": None}

    rule = matching_rule(year, month, start_day)
    return {
        "dates": dates.to_dict(),
        "holiday_rule": rule.name if rule else None,
    }


@mcp.tool()
async def current_pay_period(
    day: str | None = Field(default=None, description="Date in YYYY-MM-DD (default: today)"),
) -> dict[str, Any]:
    """Get the pay period containing a date, its resolved dates and the planned jobs."""
    try:
        target = datetime.strptime(day, "%Y-%m-%d").date() if day else date.today()
    except ValueError:
        return {"error": f"Expected YYYY-MM-DD, got {day!r}", "period": None}

    try:
        timezone = get_timezone()
        period = select_period(target)
        dates = resolve_period(period, timezone=timezone)
        jobs = plan_jobs(period, timezone=timezone)
    except Exception as e:
        logger.error(f"Error resolving period for {target}: {e}")
        return {"error": str(e), "period": None}

    return {
        "period": period.to_dict(),
        "dates": dates.to_dict(),
        "jobs": [j.to_dict() for j in jobs],
    }


@mcp.tool()
async def list_holidays(
    year: int = Field(description="Four-digit year, e.g. 2025"),
) -> dict[str, Any]:
    """List the observed British Columbia statutory holidays for a year."""
    try:
        records = holidays_for_year(year)
    except ValueError as e:
        return {"error": str(e), "holidays": []}
    return {"year": year, "holidays": [h.to_dict() for h in records]}


# --- Resources ---

@mcp.resource("paysheet://holidays/{year}")
async def holidays_resource(year: str) -> str:
    """Observed statutory holidays for a year as JSON."""
    try:
        return json.dumps([h.to_dict() for h in holidays_for_year(int(year))], indent=2)
    except ValueError as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
