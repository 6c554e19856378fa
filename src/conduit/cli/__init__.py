"""conduit command-line interface (Typer + rich)."""
