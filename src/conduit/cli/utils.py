"""
CLI utility helpers — consoles, file loading and output formatting.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from conduit.core.serialization import to_json

console = Console()
err_console = Console(stderr=True)


def fail(message: str, *, code: int = 1) -> typer.Exit:
    """Print an error line to stderr and return the Exit to raise."""
    err_console.print(f"[bold red]Error[/bold red]: {escape(message)}", soft_wrap=True)
    return typer.Exit(code=code)


def output_json(payload: Any) -> None:
    """Print ``payload`` as JSON on stdout."""
    console.print_json(to_json(payload))


def require_file(path: Path) -> Path:
    if not path.is_file():
        raise fail(f"File not found: {path}")
    return path
