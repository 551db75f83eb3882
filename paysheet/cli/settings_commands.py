"""Settings CLI commands for Pay Sheet.

settings.json holds per-machine overrides: where timesheets are written,
the schedule timezone, and the path of an external profile.
"""

from pathlib import Path

import click

from paysheet.sdk import (
    get_data_path,
    get_settings_path,
    get_setting,
    get_timezone,
    load_settings,
    save_settings,
    set_setting,
    validate_timezone,
)


def _clear_setting(key: str) -> bool:
    """Remove a key from settings.json. Returns False if it was not set."""
    current = load_settings()
    if key not in current:
        return False
    del current[key]
    save_settings(current)
    return True


def _writable_dir(raw: str) -> Path:
    """Resolve PATH, creating it if needed, and check it accepts files."""
    path = Path(raw).expanduser().resolve()
    if path.exists() and not path.is_dir():
        raise click.ClickException(f"Not a directory: {path}")

    try:
        path.mkdir(parents=True, exist_ok=True)
        probe = path / ".pay-sheet-probe"
        probe.touch()
        probe.unlink()
    except OSError as e:
        raise click.ClickException(f"Cannot write to {path}: {e}")
    return path


@click.group()
def settings():
    """Manage machine settings (settings.json).

    \b
    data_dir  where rendered timesheets and the outbox are written
    timezone  schedule timezone, overrides the profile
    profile   external profile.yaml (set with 'pay-sheet profile use')
    """
    pass


@settings.command("show")
def settings_show():
    """Show stored settings and the values in effect."""
    path = get_settings_path()
    stored = load_settings()

    click.echo(f"Settings: {path}{'' if path.exists() else ' (not created)'}")
    for key, value in stored.items():
        click.echo(f"  {key}: {value}")
    if not stored:
        click.echo("  (nothing stored, defaults apply)")

    click.echo()
    click.echo("In effect:")
    click.echo(f"  data_dir: {get_data_path()}")
    click.echo(f"  timezone: {get_timezone()}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path(file_okay=False))
@click.option("--clear", is_flag=True, help="Forget the custom directory and use the XDG default")
def settings_data_dir(path, clear):
    """Show, set or clear the data directory.

    \b
    Examples:
        pay-sheet settings data-dir ~/Documents/timesheets
        pay-sheet settings data-dir --clear
    """
    if clear:
        verb = "Cleared" if _clear_setting("data_dir") else "No custom data_dir was set;"
        click.echo(f"{verb} using {get_data_path()}")
        return

    if path is None:
        source = "custom" if get_setting("data_dir") else "default"
        click.echo(f"{get_data_path()} ({source})")
        return

    target = _writable_dir(path)
    set_setting("data_dir", str(target))
    click.echo(f"data_dir = {target}  ({get_settings_path()})")


@settings.command("timezone")
@click.argument("name", required=False)
@click.option("--clear", is_flag=True, help="Drop the override and use the profile timezone")
def settings_timezone(name, clear):
    """Show, set or clear the schedule timezone override.

    \b
    Examples:
        pay-sheet settings timezone America/Vancouver
        pay-sheet settings timezone --clear
    """
    if clear:
        _clear_setting("timezone")
    elif name:
        ok, reason = validate_timezone(name)
        if not ok:
            raise click.ClickException(reason)
        set_setting("timezone", name)

    click.echo(f"timezone = {get_timezone()}")
