"""Schema spec loading — build schemas from YAML or JSON files.

Spec files use the same ``name → options`` mapping as in-code specs, with
``match`` given as a regular expression string and ``any_of`` as a list.
Callables (``assure``, ``transform``) cannot be expressed in a file.

Example (``user.yaml``)::

    name:
      type: string
      match: "^[A-Za-z ]+$"
    age:
      type: integer
      any_of: [18, 19, 20]
    address:
      schema:
        city: {type: string}
        zip: {type: string, required: false}
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from conduit.core.errors import SchemaDefinitionError
from conduit.schema.schema import Schema

_JSON_SUFFIXES = {".json"}


def load_document(path: Path | str) -> Any:
    """Read a YAML or JSON document (by file suffix; YAML otherwise)."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _JSON_SUFFIXES:
        return json.loads(text)
    return yaml.safe_load(text)


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load a schema spec mapping from ``path``."""
    spec = load_document(path)
    if spec is None:
        return {}
    if not isinstance(spec, Mapping):
        raise SchemaDefinitionError(f"Schema spec in {path} MUST be a mapping, got {type(spec).__name__}")
    return dict(spec)


def load_schema(path: Path | str, **options: Any) -> Schema:
    """Build a :class:`Schema` from the spec file at ``path``."""
    options.setdefault("name", Path(path).stem)
    return Schema(load_spec(path), **options)


__all__ = ["load_document", "load_spec", "load_schema"]
