"""Main CLI entry point for avalanche."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from avalanche import __version__

console = Console()

# Default path (can be overridden with -i or AVALANCHE_INVENTORY)
DEFAULT_INVENTORY = "inventory.py"


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.inventory_path: Path | None = None
        self.verbose: bool = False
        self._inventory: Any = None

    @property
    def inventory(self) -> Any:
        """Lazy-load inventory."""
        if self._inventory is None:
            from avalanche.config.loader import load_inventory
            from avalanche.core.errors import AvalancheError

            if self.inventory_path is None:
                raise click.ClickException("No inventory given")
            try:
                self._inventory = load_inventory(self.inventory_path)
            except AvalancheError as e:
                raise click.ClickException(str(e)) from e
        return self._inventory


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.version_option(version=__version__, prog_name="avalanche")
@click.option(
    "-i",
    "--inventory",
    type=click.Path(exists=False, path_type=Path),
    default=DEFAULT_INVENTORY,
    envvar="AVALANCHE_INVENTORY",
    show_envvar=True,
    help="Path to the inventory Python file",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--log-json", is_flag=True, help="Emit logs as JSON lines")
@pass_context
def cli(ctx: Context, inventory: Path, verbose: bool, log_json: bool) -> None:
    """
    Avalanche - per-host configurations from hosts and groups.

    Loads an inventory file and inspects the resolved configuration
    of every host.
    """
    from avalanche.config.logging import configure_logging

    configure_logging(verbose=verbose, log_json=log_json)
    ctx.inventory_path = inventory
    ctx.verbose = verbose


# Import and register subcommands
from avalanche.cli.show import dump, show
from avalanche.cli.validate import validate

cli.add_command(dump)
cli.add_command(show)
cli.add_command(validate)


@cli.command()
@pass_context
def info(ctx: Context) -> None:
    """Show inventory summary."""
    try:
        inventory = ctx.inventory
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    console.print(f"\n[bold]Avalanche v{__version__}[/bold]\n")

    console.print("[bold cyan]Inventory Summary[/bold cyan]")
    console.print(f"  Path: {ctx.inventory_path}")
    console.print(f"  Hosts: {len(inventory)}")
    console.print(f"  Groups: {', '.join(sorted(inventory.group_names)) or '-'}")
    console.print(f"  Default modules: {len(inventory.spec.default_modules)}")
    console.print(f"  Overlays: {len(inventory.spec.overlays)}")


@cli.command()
@pass_context
def hosts(ctx: Context) -> None:
    """List all hosts with their names and groups."""
    from rich.table import Table

    from avalanche.core.errors import AvalancheError

    try:
        inventory = ctx.inventory
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    table = Table(title="Hosts")
    table.add_column("Key", style="cyan")
    table.add_column("Hostname")
    table.add_column("Domain")
    table.add_column("Groups")

    try:
        for key in sorted(inventory):
            networking = inventory[key].config.networking
            table.add_row(
                key,
                networking.hostName,
                networking.domain or "-",
                ", ".join(inventory.declared_groups(key)) or "-",
            )
    except AvalancheError as e:
        console.print(f"[red]Resolution error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    console.print(table)


@cli.command()
@pass_context
def groups(ctx: Context) -> None:
    """List all groups and their members."""
    from rich.table import Table

    from avalanche.core.errors import AvalancheError

    try:
        inventory = ctx.inventory
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if len(inventory.group_names) == 0:
        console.print("[yellow]No groups declared[/yellow]")
        return

    table = Table(title="Groups")
    table.add_column("Group", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Members")

    try:
        for name in sorted(inventory.group_names):
            members = inventory.groups_members[name]
            table.add_row(name, str(len(members)), ", ".join(sorted(members)) or "-")
    except AvalancheError as e:
        console.print(f"[red]Resolution error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    console.print(table)


if __name__ == "__main__":
    cli()
