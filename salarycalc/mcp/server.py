"""Salary Calc MCP Server - FastMCP implementation for take-home pay tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from salarycalc.sdk import (
    CalculatorError,
    CalculatorSession,
    DEFAULT_TAX_YEAR,
    build_breakdown,
    get_state_name,
    list_states,
    parse_response,
    resolve_state_code,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("salary-calc")


# --- Tools ---

@mcp.tool()
async def calculate_take_home(
    annual_salary: float = Field(description="Annual gross salary in dollars (e.g., 85000)"),
    state: str = Field(description="State name or 2-letter code (e.g., 'CA' or 'California')"),
    pay_frequency: str = Field(default="biweekly", description="'weekly', 'biweekly' or 'monthly'"),
    filing_status: str = Field(default="single", description="'single' or 'married'"),
    allowances: int = Field(default=0, description="Withholding allowances"),
    pension_percent: float = Field(default=0, description="401(k)/pension contribution percent (5 means 5%)"),
    hsa_contribution: float = Field(default=0, description="Annual HSA contribution in dollars"),
    tax_year: int = Field(default=DEFAULT_TAX_YEAR, description="Tax year"),
) -> dict[str, Any]:
    """Calculate a paycheck breakdown (gross, taxes, deductions, net pay) for a salary.

    Calls the configured tax calculation service. Returns the breakdown plus
    the service's calculation metadata.
    """
    session = CalculatorSession()
    breakdown = session.submit_form(
        annual_salary=annual_salary,
        state=state,
        pay_frequency=pay_frequency,
        filing_status=filing_status,
        allowances=allowances,
        pension_percent=pension_percent,
        hsa_contribution=hsa_contribution,
        tax_year=tax_year,
    )

    if breakdown is None:
        logger.error(f"Error calculating take-home pay: {session.error_message}")
        return {"error": session.error_message, "breakdown": None}

    response = session.response
    return {
        "breakdown": breakdown.model_dump(mode="json"),
        "calculation_id": response.calculation_id,
        "rule_pack_version": response.rule_pack_version,
        "currency": response.currency,
        "explanation": [note.text for note in response.explanation],
    }


@mcp.tool()
async def breakdown_from_response(
    response_json: str = Field(description="Service response body as a JSON string"),
    cadence: str = Field(default="ANNUAL", description="'ANNUAL', 'WEEKLY', 'BIWEEKLY' or 'MONTHLY'"),
) -> dict[str, Any]:
    """Classify a saved calculation service response into a paycheck breakdown.

    Does not call the service. Line items with unrecognized names are dropped.
    """
    try:
        response = parse_response(response_json)
    except CalculatorError as e:
        return {"error": str(e), "breakdown": None}

    breakdown = build_breakdown(response, cadence.upper())
    return {"breakdown": breakdown.model_dump(mode="json")}


@mcp.tool()
async def resolve_state(
    state: str = Field(description="State name or 2-letter code"),
) -> dict[str, Any]:
    """Resolve a US state name or code to its 2-letter code and full name."""
    try:
        code = resolve_state_code(state)
    except CalculatorError as e:
        return {"error": str(e), "code": None}
    return {"code": code, "name": get_state_name(code)}


# --- Resources ---

@mcp.resource("salarycalc://states")
async def list_states_resource() -> str:
    """List supported states as code -> name."""
    return json.dumps({"states": dict(list_states())}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
