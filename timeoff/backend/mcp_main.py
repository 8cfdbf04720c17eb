#!/usr/bin/env python3
"""
MCP interface for leave tracking with StreamableHttp transport.
This is a thin wrapper around the leave service, suitable for driving the
tracker from an AI agent.
"""

import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

import config
import db_service
import leave_service
from ledger import LeaveLedger
from planning_service import AdvisorBusyError, PlanningAdvisor, create_planning_advisor_from_env

# Logging (stdlib only)
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
logger = logging.getLogger(__name__)

# Create MCP server instance with JSON responses
mcp = FastMCP("TimeOff", json_response=True)

ledger: Optional[LeaveLedger] = None
advisor: Optional[PlanningAdvisor] = None


def configure(new_ledger: LeaveLedger, new_advisor: PlanningAdvisor = None) -> None:
    """Install the ledger and advisor the tools operate on"""
    global ledger, advisor
    ledger = new_ledger
    advisor = new_advisor or PlanningAdvisor(client=None)


# ==================== HELPER FUNCTIONS ====================

def get_ledger() -> LeaveLedger:
    """Return the configured ledger, loading it from the database on first use"""
    if ledger is None:
        db_service.init_db()
        db_service.ensure_schema()
        configure(LeaveLedger.load(db_service), create_planning_advisor_from_env())
    return ledger


# ==================== MCP TOOLS ====================

@mcp.tool()
def get_public_holidays() -> list:
    """
    Get the configured public holidays, ordered by date.

    Returns:
        List of holidays with id, date and name
    """
    return [h.to_json() for h in leave_service.list_public_holidays(get_ledger())]


@mcp.tool()
def add_public_holiday(date: str, name: str) -> dict:
    """
    Add a public holiday. Existing leave entries keep their day counts.

    Args:
        date: Holiday date in YYYY-MM-DD format
        name: Holiday name

    Returns:
        The created holiday
    """
    try:
        return leave_service.add_public_holiday(get_ledger(), date, name).to_json()
    except ValueError as e:
        return {"error": str(e)}


@mcp.tool()
def remove_public_holiday(holiday_id: str) -> dict:
    """
    Remove a public holiday.

    Args:
        holiday_id: The ID of the holiday to remove

    Returns:
        Confirmation message
    """
    if not leave_service.remove_public_holiday(get_ledger(), holiday_id):
        return {"error": "Holiday not found"}
    return {"message": "Holiday removed successfully"}


@mcp.tool()
def get_my_leaves(order: str = "recent") -> list:
    """
    Get all recorded leave entries.

    Args:
        order: 'recent' for newest first, 'calendar' for by start date

    Returns:
        List of leave entries
    """
    try:
        return [e.to_json() for e in leave_service.list_leave_entries(get_ledger(), order)]
    except ValueError as e:
        return [{"error": str(e)}]


@mcp.tool()
def create_leave_entry(leave_type: str, start_date: str, end_date: str, description: str = "") -> dict:
    """
    Record a new leave entry.

    Args:
        leave_type: 'VACATION' or 'SICK'
        start_date: Start date in YYYY-MM-DD format
        end_date: End date in YYYY-MM-DD format
        description: Optional description

    Returns:
        The created entry
    """
    try:
        entry, preview = leave_service.create_leave_entry(
            get_ledger(), leave_type, start_date, end_date, description
        )
        result = entry.to_json()
        if preview.over_quota:
            result["warning"] = f"Exceeds remaining quota of {preview.remaining} days"
        return result
    except ValueError as e:
        return {"error": str(e)}


@mcp.tool()
def delete_leave_entry(entry_id: str) -> dict:
    """
    Delete a leave entry. Deleting an unknown entry is not an error.

    Args:
        entry_id: The ID of the leave entry to delete

    Returns:
        Confirmation message
    """
    removed = leave_service.delete_leave_entry(get_ledger(), entry_id)
    return {"message": "Leave entry deleted successfully", "deleted": removed}


@mcp.tool()
def get_my_balance() -> dict:
    """
    Get used, total and remaining days per leave type.

    Returns:
        Quota usage keyed by leave type
    """
    summary = leave_service.get_quota_summary(get_ledger())
    return {leave_type: usage.to_json() for leave_type, usage in summary.items()}


@mcp.tool()
def calc_business_days(start_date: str, end_date: str, leave_type: str = "VACATION") -> dict:
    """
    Calculate the business days a leave request would use.

    Args:
        start_date: Start date in YYYY-MM-DD format
        end_date: End date in YYYY-MM-DD format
        leave_type: 'VACATION' or 'SICK', used for the remaining-quota check

    Returns:
        Business days, remaining quota and the holidays in range
    """
    try:
        return leave_service.preview_leave(get_ledger(), leave_type, start_date, end_date).to_json()
    except ValueError as e:
        return {"error": str(e)}


@mcp.tool()
def get_planning_advice() -> dict:
    """
    Ask the planning advisor for bridge-day suggestions for the remaining vacation days.

    Returns:
        Summary and suggestions, or an error when advice is unavailable
    """
    current = get_ledger()
    try:
        advice = advisor.get_smart_leave_planning(
            current.entries, current.remaining_quota(), current.holidays_by_date()
        )
    except AdvisorBusyError as e:
        return {"error": str(e)}
    if advice is None:
        return {"error": "No suggestions available"}
    return advice.to_json()


if __name__ == "__main__":
    # Run with StreamableHttp transport
    get_ledger()
    mcp.run(transport="streamable-http")
