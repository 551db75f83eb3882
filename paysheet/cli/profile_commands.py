"""Profile CLI commands for Pay Sheet.

The profile (profile.yaml) holds who files the timesheet, who receives it,
how mail goes out and which timezone the schedule runs in.
"""

from pathlib import Path

import click
from rich.console import Console

from paysheet.sdk import (
    ConfigNotFoundError,
    PROFILE_TEMPLATE,
    ProfileNotFoundError,
    coerce_profile_value,
    get_config_dir,
    get_profile_path,
    get_profile_value,
    load_settings,
    save_profile,
    set_profile_value,
    set_setting,
    validate_profile,
    validate_profile_key,
)
from paysheet.sdk.config import read_profile_file
from .renderers.profile_renderer import render_validation


@click.group()
def profile():
    """Manage your profile configuration (profile.yaml).

    \b
    employee    name and email of the person filing timesheets
    recipients  to / cc lists for the submitted timesheet
    smtp        outgoing mail server (password read from an env var)
    timesheet   hours_per_day
    timezone    IANA zone the schedule runs in
    """
    pass


@profile.command("show")
def profile_show():
    """Show the active profile, where it lives, and what it is ready for."""
    path = get_profile_path(require_exists=False)
    custom = bool(load_settings().get("profile"))

    click.echo(f"Profile: {path}")
    if not path.exists():
        click.echo("Location: not created")
        click.echo("Run 'pay-sheet profile init' to write a starter profile.")
        return
    click.echo(f"Location: {'custom' if custom else 'central (default)'}")

    try:
        validation = validate_profile()
    except ProfileNotFoundError as e:
        raise click.ClickException(str(e))
    render_validation(Console(), validation)


@profile.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def profile_init(force):
    """Write a starter profile.yaml with placeholder values."""
    path = get_profile_path(require_exists=False)
    if path.exists() and not force:
        raise click.ClickException(
            f"Profile already exists: {path} (use --force to overwrite, "
            f"or 'pay-sheet profile set KEY VALUE' to change one value)"
        )
    click.echo(f"Created: {save_profile(dict(PROFILE_TEMPLATE), path)}")
    click.echo("Replace the placeholders, then check with 'pay-sheet profile show'.")


@profile.command("get")
@click.argument("key")
def profile_get(key):
    """Print one profile value; KEY uses dots, e.g. smtp.host."""
    value = get_profile_value(key)
    if value is None:
        raise click.ClickException(f"'{key}' is not set")
    if isinstance(value, dict):
        raise click.ClickException(f"'{key}' is a section; use 'pay-sheet profile show'")

    click.echo(", ".join(str(v) for v in value) if isinstance(value, list) else value)


@profile.command("set")
@click.argument("key")
@click.argument("value")
def profile_set(key, value):
    """Set one profile value.

    KEY uses dots (smtp.host). recipients.to and recipients.cc take a
    comma-separated VALUE.

    \b
    Examples:
        pay-sheet profile set employee.name "Jane Doe"
        pay-sheet profile set recipients.to payroll@example.com,boss@example.com
        pay-sheet profile set timesheet.hours_per_day 8
    """
    ok, reason = validate_profile_key(key)
    if not ok:
        raise click.ClickException(reason)

    try:
        coerced = coerce_profile_value(key, value)
    except ValueError:
        raise click.ClickException(f"Invalid value for {key}: {value!r}")

    saved = set_profile_value(key, coerced)
    click.echo(f"{key} = {coerced}  ({saved})")
    render_validation(Console(), validate_profile(), show_contents=False)


@profile.command("use")
@click.argument("profile_path", type=click.Path(exists=True, dir_okay=False))
def profile_use(profile_path):
    """Make an external profile.yaml the active profile.

    The file must parse and pass value validation first.

    \b
    Example:
        pay-sheet profile use ~/dotfiles/pay-sheet/profile.yaml
    """
    path = Path(profile_path).expanduser().resolve()

    try:
        data = read_profile_file(path)
    except (ProfileNotFoundError, ConfigNotFoundError) as e:
        raise click.ClickException(str(e))

    validation = validate_profile(profile=data)
    validation.location_path = path
    if validation.errors:
        render_validation(Console(), validation, show_contents=False)
        raise click.ClickException("Profile has validation errors; not activated.")

    click.echo(f"Active profile set to: {path} ({set_setting('profile', str(path))})")
    render_validation(Console(), validation, show_contents=False)


@profile.command("path")
def profile_path_cmd():
    """Print the config directory."""
    click.echo(get_config_dir())
