"""
Root Typer application for the conduit CLI.

Schema files and payloads are YAML or JSON (by file suffix).

Example::

    conduit validate user.yaml payload.json
    conduit validate user.yaml payload.json --date-format "%d/%m/%Y"
    conduit render user.yaml payload.json
    conduit config show --json
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
import yaml

from conduit.cli.config import app as config_app
from conduit.cli.utils import fail, output_json, require_file
from conduit.core.errors import ConduitError, ConfigError, SchemaError
from conduit.core.logging import configure_logging
from conduit.schema.loader import load_document, load_schema
from conduit.schema.schema import Schema

app = typer.Typer(
    name="conduit",
    help="conduit — declarative schemas and railway operations.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from conduit import __version__

        typer.echo(f"conduit-core {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """conduit CLI — validate and render payloads against schema files."""
    configure_logging()


# ── Helpers ──────────────────────────────────────────────────────────────


def _format_options(
    date_format: str | None,
    datetime_format: str | None,
    time_format: str | None,
    decimal_precision: int | None,
    integer_base: int | None,
) -> dict[str, Any]:
    options = {
        "date_format": date_format,
        "datetime_format": datetime_format,
        "time_format": time_format,
        "decimal_precision": decimal_precision,
        "integer_base": integer_base,
    }
    return {k: v for k, v in options.items() if v is not None}


def _load(schema_file: Path, data_file: Path, options: dict[str, Any]) -> tuple[Schema, Any]:
    require_file(schema_file)
    require_file(data_file)
    try:
        schema = load_schema(schema_file, **options)
    except ConfigError as e:
        raise fail(f"Invalid schema {schema_file}: {e.message}") from e
    except (ValueError, yaml.YAMLError) as e:
        raise fail(f"Invalid schema {schema_file}: {e}") from e
    try:
        data = load_document(data_file)
    except (ValueError, yaml.YAMLError) as e:
        raise fail(f"Invalid payload {data_file}: {e}") from e
    return schema, data


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("validate")
def validate(
    schema_file: Path = typer.Argument(..., help="Schema spec file (YAML or JSON)"),
    data_file: Path = typer.Argument(..., help="Payload file (YAML or JSON)"),
    raise_on_error: bool = typer.Option(False, "--raise", help="Stop with the first error instead of reporting it"),
    date_format: str | None = typer.Option(None, "--date-format", help="Format for date attributes"),
    datetime_format: str | None = typer.Option(None, "--datetime-format", help="Format for datetime attributes"),
    time_format: str | None = typer.Option(None, "--time-format", help="Format for time attributes"),
    decimal_precision: int | None = typer.Option(None, "--decimal-precision", min=0, help="Decimal rounding"),
    integer_base: int | None = typer.Option(None, "--integer-base", help="Base for integer strings"),
) -> None:
    """Parse a payload with a schema and print ``{data, error}`` as JSON."""
    options = _format_options(date_format, datetime_format, time_format, decimal_precision, integer_base)
    schema, data = _load(schema_file, data_file, options)

    try:
        outcome = Schema.validate(schema, data, raise_on_error=raise_on_error)
    except SchemaError as e:
        raise fail(e.message) from e

    output_json(outcome)
    if outcome["error"] is not None:
        raise typer.Exit(code=1)


@app.command("render")
def render(
    schema_file: Path = typer.Argument(..., help="Schema spec file (YAML or JSON)"),
    data_file: Path = typer.Argument(..., help="Payload file (YAML or JSON)"),
) -> None:
    """Parse a payload, then render it back into its wire shape."""
    schema, data = _load(schema_file, data_file, {})
    try:
        parsed = schema.parse(data, raise_on_error=True)
        rendered = schema.render(parsed)
    except ConduitError as e:
        raise fail(e.message) from e
    output_json(rendered)


app.add_typer(config_app, name="config", help="Configuration inspection.")
