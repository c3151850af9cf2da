"""Profile CLI commands for Salary Calc.

Manages form defaults (profile.yaml) - state, filing status, pay frequency.
"""

import click
import yaml

from salarycalc.sdk import (
    get_profile_path,
    load_profile,
    set_profile_value,
    unset_profile_value,
    validate_profile_key,
    coerce_profile_value,
    resolve_state_code,
    CalculatorError,
    PROFILE_SCHEMA,
)

CHOICES = {
    "filing_status": ("single", "married"),
    "pay_frequency": ("weekly", "biweekly", "monthly"),
}


@click.group()
def profile():
    """Manage form defaults (profile.yaml).

    Values set here are used by 'salary-calc calculate' when the
    matching option is not given on the command line.
    """
    pass


@profile.command("show")
def profile_show():
    """Show profile location and values."""
    path = get_profile_path(require_exists=False)
    click.echo(f"Profile: {path}")

    if not path.exists():
        click.echo("Not found (no defaults configured).")
        click.echo("Create one with: salary-calc profile set state CA")
        return

    try:
        data = load_profile(require_exists=False)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Invalid YAML in {path}: {e}")

    click.echo()
    for key in PROFILE_SCHEMA:
        if key in data:
            click.echo(f"  {key}: {data[key]}")

    unknown = [key for key in data if key not in PROFILE_SCHEMA]
    for key in unknown:
        click.echo(f"  ! {key}: unknown key (ignored)")


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set a profile KEY to VALUE.

    Examples:
        salary-calc profile set state "New York"
        salary-calc profile set pay_frequency monthly
        salary-calc profile set pension_percent 5
    """
    valid, message = validate_profile_key(key)
    if not valid:
        raise click.ClickException(message)

    try:
        typed_value = coerce_profile_value(key, value)
    except ValueError as e:
        raise click.ClickException(str(e))

    if key == "state":
        try:
            typed_value = resolve_state_code(typed_value)
        except CalculatorError as e:
            raise click.ClickException(str(e))
    elif key in CHOICES:
        typed_value = typed_value.lower()
        if typed_value not in CHOICES[key]:
            raise click.ClickException(
                f"Invalid {key} '{value}'. Expected one of: {', '.join(CHOICES[key])}"
            )
    elif key == "allowances" and typed_value < 0:
        raise click.ClickException("allowances cannot be negative")

    path = set_profile_value(key, typed_value)
    click.echo(f"Set {key}: {typed_value}")
    click.echo(f"Saved to: {path}")


@profile.command("unset")
@click.argument("key")
def profile_unset(key):
    """Remove profile KEY."""
    valid, message = validate_profile_key(key)
    if not valid:
        raise click.ClickException(message)

    if unset_profile_value(key):
        click.echo(f"Removed {key}.")
    else:
        click.echo(f"{key} was not set.")
