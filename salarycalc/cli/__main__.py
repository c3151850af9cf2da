"""Salary Calc CLI - Command-line interface for take-home pay breakdowns."""

import json
from pathlib import Path

import click
import yaml
from rich.console import Console

from salarycalc import __version__
from salarycalc.sdk import (
    CalculatorError,
    DEFAULT_TAX_YEAR,
    SalaryCalculatorClient,
    build_breakdown,
    build_calculation_request,
    get_profile_path,
    get_settings_path,
    get_state_name,
    list_states,
    load_profile,
    parse_response,
    resolve_state_code,
)

from .profile_commands import profile as profile_group
from .settings_commands import settings as settings_group
from .renderers.breakdown_renderer import render_breakdown


PAY_FREQUENCIES = ["weekly", "biweekly", "monthly"]
FILING_STATUSES = ["single", "married"]
CADENCES = ["ANNUAL", "WEEKLY", "BIWEEKLY", "MONTHLY"]


@click.group()
@click.version_option(version=__version__, prog_name="salary-calc")
def cli():
    """Salary Calc - Take-home pay breakdowns.

    Sends salary details to the tax calculation service and shows
    gross pay, taxes, deductions and net pay.

    Configuration is loaded from (in order):

    \b
    1. SALARY_CALC_CONFIG_PATH environment variable
    2. ~/.config/salary-calc/ (XDG default)

    Form defaults (state, filing status, ...) come from profile.yaml;
    see 'salary-calc profile show'.
    """
    pass


cli.add_command(profile_group)
cli.add_command(settings_group)


def _load_form_defaults() -> dict:
    """Load profile.yaml, reporting unreadable config as a CLI error."""
    try:
        return load_profile(require_exists=False)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {get_settings_path()}: {e}")
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {get_profile_path(require_exists=False)}: {e}")


def _pick(value, profile: dict, key: str, default=None):
    """Command-line value, else profile value, else default."""
    if value is not None:
        return value
    return profile.get(key, default)


@cli.command("calculate")
@click.argument("salary")
@click.option("--state", "-s", help="State name or 2-letter code (e.g., CA, 'New York').")
@click.option("--frequency", "-f", type=click.Choice(PAY_FREQUENCIES, case_sensitive=False),
              help="Pay frequency (default: biweekly).")
@click.option("--filing-status", type=click.Choice(FILING_STATUSES, case_sensitive=False),
              help="Filing status (default: single).")
@click.option("--allowances", type=click.IntRange(min=0), help="Withholding allowances.")
@click.option("--pension-percent", help="401(k)/pension contribution percent (e.g., 5 for 5%).")
@click.option("--hsa", help="Annual HSA contribution.")
@click.option("--pretax-fixed", help="Fixed pre-tax deduction amount.")
@click.option("--posttax-fixed", help="Fixed post-tax deduction amount.")
@click.option("--student-loan-plan", help="Student loan plan identifier.")
@click.option("--year", type=int, help=f"Tax year (default: {DEFAULT_TAX_YEAR}).")
@click.option("--api-url", help="Calculation service base URL (overrides settings).")
@click.option("--json", "as_json", is_flag=True, help="Output breakdown as JSON.")
@click.option("--dry-run", is_flag=True, help="Print the request payload without sending it.")
def calculate(salary, state, frequency, filing_status, allowances, pension_percent, hsa,
              pretax_fixed, posttax_fixed, student_loan_plan, year, api_url, as_json, dry_run):
    """Calculate take-home pay for an annual SALARY.

    Options not given on the command line fall back to profile.yaml.

    Examples:
        salary-calc calculate 85000 --state CA
        salary-calc calculate "120,000" -s "New York" -f monthly --pension-percent 5
    """
    profile = _load_form_defaults()

    try:
        request = build_calculation_request(
            annual_salary=salary,
            state=_pick(state, profile, "state"),
            pay_frequency=_pick(frequency, profile, "pay_frequency", "biweekly"),
            filing_status=_pick(filing_status, profile, "filing_status", "single"),
            allowances=_pick(allowances, profile, "allowances", 0),
            pension_percent=_pick(pension_percent, profile, "pension_percent"),
            hsa_contribution=_pick(hsa, profile, "hsa_contribution"),
            pretax_fixed=pretax_fixed,
            posttax_fixed=posttax_fixed,
            student_loan_plan=student_loan_plan,
            tax_year=_pick(year, profile, "tax_year", DEFAULT_TAX_YEAR),
        )
    except CalculatorError as e:
        raise click.ClickException(str(e))

    if dry_run:
        click.echo(json.dumps(request.to_payload(), indent=2))
        return

    client = SalaryCalculatorClient(api_url=api_url)
    try:
        response = client.calculate(request)
    except CalculatorError as e:
        raise click.ClickException(str(e))

    breakdown = build_breakdown(response, request.cadence)

    if as_json:
        click.echo(json.dumps(breakdown.model_dump(mode="json"), indent=2))
        return

    render_breakdown(Console(), breakdown, response)


@cli.command("breakdown")
@click.argument("response_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--cadence", "-c", type=click.Choice(CADENCES, case_sensitive=False), default="ANNUAL",
              show_default=True, help="Cadence of the request that produced the response.")
@click.option("--json", "as_json", is_flag=True, help="Output breakdown as JSON.")
def breakdown_cmd(response_file, cadence, as_json):
    """Classify a saved service response (RESPONSE_FILE, JSON) into a breakdown.

    Useful for inspecting how line items from a rule pack are categorized
    without calling the service.
    """
    try:
        response = parse_response(response_file.read_bytes())
    except CalculatorError as e:
        raise click.ClickException(str(e))

    result = build_breakdown(response, cadence.upper())

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    render_breakdown(Console(), result, response)


@cli.command("states")
@click.argument("query", required=False)
def states(query):
    """List supported states, or resolve QUERY (name or code) to its code."""
    if query:
        try:
            code = resolve_state_code(query)
        except CalculatorError as e:
            raise click.ClickException(str(e))
        click.echo(f"{code}  {get_state_name(code)}")
        return

    for code, name in list_states():
        click.echo(f"{code}  {name}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
