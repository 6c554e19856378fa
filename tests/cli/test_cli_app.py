"""Tests for conduit.cli — validate, render and config commands."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path

from typer.testing import CliRunner

from conduit import __version__
from conduit.cli.app import app

runner = CliRunner()

SCHEMA = """
    name:
      type: string
    age:
      type: integer
    born:
      type: date
      required: false
    active:
      type: bool
      required: false
      bind_to: is_active
"""


def _write(tmp_dir: Path, filename: str, content: str) -> Path:
    path = tmp_dir / filename
    path.write_text(textwrap.dedent(content))
    return path


# ── validate command ─────────────────────────────────────────────────


class TestValidateCommand:
    """Tests for 'conduit validate'."""

    def test_valid_payload(self, tmp_path):
        schema = _write(tmp_path, "user.yaml", SCHEMA)
        data = _write(tmp_path, "payload.json", json.dumps({"name": "Ada", "age": "36"}))
        result = runner.invoke(app, ["validate", str(schema), str(data)])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload == {"data": {"name": "Ada", "age": 36}, "error": None}

    def test_invalid_payload_reports_error(self, tmp_path):
        schema = _write(tmp_path, "user.yaml", SCHEMA)
        data = _write(tmp_path, "payload.yaml", "name: Ada\n")
        result = runner.invoke(app, ["validate", str(schema), str(data)])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["data"] == {"name": "Ada"}
        assert payload["error"]["error_type"] == "MissingRequiredAttribute"
        assert payload["error"]["message"] == "Missing required attribute AGE"

    def test_raise_stops_on_first_error(self, tmp_path):
        schema = _write(tmp_path, "user.yaml", SCHEMA)
        data = _write(tmp_path, "payload.yaml", "age: old\nname: Ada\n")
        result = runner.invoke(app, ["validate", str(schema), str(data), "--raise"])
        assert result.exit_code == 1
        assert "Failed to cast attribute AGE" in result.output

    def test_format_options(self, tmp_path):
        schema = _write(tmp_path, "user.yaml", SCHEMA)
        data = _write(tmp_path, "payload.yaml", "name: Ada\nage: '24'\nborn: 10/12/1815\n")
        result = runner.invoke(
            app,
            ["validate", str(schema), str(data), "--date-format", "%d/%m/%Y", "--integer-base", "16"],
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["data"] == {"name": "Ada", "age": 36, "born": "1815-12-10"}

    def test_missing_file(self, tmp_path):
        schema = _write(tmp_path, "user.yaml", SCHEMA)
        result = runner.invoke(app, ["validate", str(schema), str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_schema(self, tmp_path):
        schema = _write(tmp_path, "bad.yaml", "age:\n  type: number\n")
        data = _write(tmp_path, "payload.yaml", "age: 1\n")
        result = runner.invoke(app, ["validate", str(schema), str(data)])
        assert result.exit_code == 1
        assert "UNKNOWN type" in result.output


# ── render command ───────────────────────────────────────────────────


class TestRenderCommand:
    def test_render(self, tmp_path):
        schema = _write(tmp_path, "user.yaml", SCHEMA)
        data = _write(tmp_path, "payload.yaml", "name: Ada\nage: '36'\nactive: 'true'\nborn: '1815-12-10'\n")
        result = runner.invoke(app, ["render", str(schema), str(data)])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "name": "Ada",
            "age": 36,
            "born": "1815-12-10",
            "is_active": True,
        }

    def test_render_invalid_payload(self, tmp_path):
        schema = _write(tmp_path, "user.yaml", SCHEMA)
        data = _write(tmp_path, "payload.yaml", "name: Ada\n")
        result = runner.invoke(app, ["render", str(schema), str(data)])
        assert result.exit_code == 1
        assert "Missing required attribute AGE" in result.output


# ── config / version ─────────────────────────────────────────────────


class TestConfigCommand:
    def test_show_json(self, monkeypatch):
        monkeypatch.setenv("CONDUIT_DATE_FORMAT", "%d/%m/%Y")
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        settings = json.loads(result.stdout)
        assert settings["date_format"] == "%d/%m/%Y"
        assert settings["integer_base"] == 10

    def test_show_table(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "date_format" in result.output


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"conduit-core {__version__}" in result.stdout
