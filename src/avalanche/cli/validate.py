"""Validation CLI command."""

from __future__ import annotations

import click
import structlog
from rich.console import Console
from rich.markup import escape

from avalanche.cli.main import Context, pass_context

console = Console()
log = structlog.get_logger(__name__)


@click.command()
@pass_context
def validate(ctx: Context) -> None:
    """
    Resolve every host and report the ones that fail.

    Checks for unknown groups, option conflicts, type errors and
    unresolvable cycles.

    Examples:

        avalanche -i site.py validate
    """
    from avalanche.core.errors import AvalancheError

    errors: list[str] = []

    console.print("[bold]Loading inventory...[/bold]")
    try:
        inventory = ctx.inventory
        console.print(f"  [green]✓[/green] Inventory loaded: {len(inventory)} hosts")
    except click.ClickException as e:
        console.print(f"  [red]✗[/red] {escape(str(e))}")
        raise SystemExit(1)

    console.print("[bold]Resolving hosts...[/bold]")
    for key in inventory:
        try:
            inventory[key].config.to_dict()
        except AvalancheError as e:
            errors.append(f"{key}: {e}")
            console.print(f"  [red]✗[/red] {key}")
            log.warning("host_failed", host=key, error=str(e))
        else:
            console.print(f"  [green]✓[/green] {key}")
            log.debug("host_resolved", host=key)

    # Summary
    console.print("\n[bold]Validation Summary[/bold]")
    console.print(f"  Hosts: {len(inventory)}")
    console.print(f"  Errors: {len(errors)}")

    if errors:
        console.print("\n[red bold]Validation failed[/red bold]")
        for err in errors:
            console.print(f"  [red]•[/red] {escape(err)}")
        raise SystemExit(1)

    console.print("\n[green bold]Validation passed[/green bold]")
