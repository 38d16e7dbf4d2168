"""Configuration display CLI commands."""

from __future__ import annotations

from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from avalanche.cli.main import Context, pass_context

console = Console()

FORMATS = click.Choice(["yaml", "json"])


def select_path(value: Any, path: str | None) -> Any:
    """Follow a dotted path into a configuration view."""
    if not path:
        return value
    for part in path.split("."):
        value = value[part]
    return value


@click.command()
@click.argument("host")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=FORMATS,
    default="yaml",
    help="Output format",
)
@click.option(
    "--path",
    "-p",
    "option_path",
    help="Only show the option at this dotted path",
)
@pass_context
def show(ctx: Context, host: str, output_format: str, option_path: str | None) -> None:
    """
    Show the resolved configuration of a host.

    Examples:

        # Whole configuration
        avalanche show web01.example.com

        # A single option as JSON
        avalanche show web01.example.com --path services.nginx --format json
    """
    from avalanche.cli.output import render
    from avalanche.core.errors import AvalancheError

    try:
        inventory = ctx.inventory
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if host not in inventory:
        console.print(f"[red]Error:[/red] Host not found: {host}")
        raise SystemExit(1)

    try:
        value = select_path(inventory[host].config, option_path)
        text = render(value, output_format)
    except AvalancheError as e:
        console.print(f"[red]Resolution error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


@click.command()
@click.option(
    "--format",
    "-f",
    "output_format",
    type=FORMATS,
    default="yaml",
    help="Output format",
)
@pass_context
def dump(ctx: Context, output_format: str) -> None:
    """
    Show the resolved configuration of every host.

    Fails without output if any host cannot be resolved.
    """
    from avalanche.cli.output import render
    from avalanche.core.errors import AvalancheError

    try:
        inventory = ctx.inventory
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    try:
        text = render(inventory.evaluate(), output_format)
    except AvalancheError as e:
        console.print(f"[red]Resolution error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)
