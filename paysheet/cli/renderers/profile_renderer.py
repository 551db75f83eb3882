"""Rich renderer for profile validation results."""

import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from paysheet.sdk.config import ProfileValidationResult


def render_validation(console: Console, validation: ProfileValidationResult, show_contents: bool = True) -> None:
    """Render errors, feature readiness, missing keys and warnings."""
    if validation.errors:
        console.print()
        console.print("[bold red]Validation errors[/bold red] (profile is invalid):")
        for error in validation.errors:
            console.print(f"  [red]![/red] {error}", highlight=False)
        console.print(f"Profile path: {validation.location_path}", highlight=False)

    table = Table(title="Feature readiness", box=box.SIMPLE_HEAD, title_justify="left")
    table.add_column("", width=1)
    table.add_column("Feature")
    table.add_column("Status")
    for feature, status in validation.features.items():
        mark = "[green]+[/green]" if status["ready"] else "[red]-[/red]"
        table.add_row(mark, feature, status["message"])
    console.print()
    console.print(table)

    missing = sorted({item for status in validation.features.values() for item in status["missing"]})
    if missing:
        console.print("Missing:")
        for item in missing:
            console.print(f"  - {item}", highlight=False)

    if validation.warnings:
        console.print()
        for warning in validation.warnings:
            console.print(f"[yellow]warning:[/yellow] {warning}", highlight=False)

    if show_contents:
        console.print()
        console.rule(str(validation.location_path), style="dim")
        console.print(
            yaml.dump(validation.profile, default_flow_style=False, sort_keys=False),
            highlight=False,
            markup=False,
        )
