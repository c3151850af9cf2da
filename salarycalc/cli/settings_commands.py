"""Settings CLI commands for Salary Calc.

Manages settings.json - service URL, timeout, profile path.
"""

import click

from salarycalc.sdk import (
    load_settings,
    set_setting,
    unset_setting,
    get_settings_path,
    get_api_url,
    get_timeout,
    validate_setting_key,
    coerce_setting_value,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - api_url: calculation service base URL
    - timeout: request timeout in seconds
    - profile: path to profile.yaml
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  api_url: {get_api_url()}")
    click.echo(f"  timeout: {get_timeout()}")


@settings.command("set")
@click.argument("key")
@click.argument("value")
def settings_set(key, value):
    """Set a setting KEY to VALUE.

    Examples:
        salary-calc settings set api_url https://tax.example.com
        salary-calc settings set timeout 10
    """
    valid, message = validate_setting_key(key)
    if not valid:
        raise click.ClickException(message)

    try:
        typed_value = coerce_setting_value(key, value)
    except ValueError as e:
        raise click.ClickException(str(e))

    if key == "timeout" and typed_value <= 0:
        raise click.ClickException("timeout must be greater than 0")

    path = set_setting(key, typed_value)
    click.echo(f"Set {key}: {typed_value}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key")
def settings_unset(key):
    """Remove setting KEY, reverting to its default."""
    valid, message = validate_setting_key(key)
    if not valid:
        raise click.ClickException(message)

    if unset_setting(key):
        click.echo(f"Cleared {key} setting.")
    else:
        click.echo(f"{key} was not set.")
