"""
CLI: ``conduit config`` — inspect resolved settings.
"""

from __future__ import annotations

import typer
from rich.table import Table

from conduit.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    as_json: bool = typer.Option(False, "--json", help="Print settings as JSON"),
) -> None:
    """Show current configuration (``CONDUIT_*`` env vars and .env)."""
    from conduit.core.settings import get_settings

    settings = get_settings()

    if as_json:
        console.print_json(settings.model_dump_json())
        return

    table = Table(title="conduit settings (CONDUIT_*)")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)
