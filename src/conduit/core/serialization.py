"""JSON serialization helpers shared by results and the CLI.

``json_default`` is the ``default=`` hook for :func:`json.dumps`: errors
become their structured dicts, temporal values become ISO strings and
anything else falls back to ``str()``.

Tags:
    conduit-core, core, json, serialization

Doc-Types:
    api-reference
"""

from __future__ import annotations

import json
from typing import Any

from conduit.core.errors import ConduitError


def json_default(value: Any) -> Any:
    """Encode a value :mod:`json` cannot serialize on its own."""
    if isinstance(value, ConduitError):
        return value.to_dict()
    if isinstance(value, BaseException):
        return {"error_type": type(value).__name__, "message": str(value)}
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def to_json(payload: Any, **kwargs: Any) -> str:
    """``json.dumps`` with :func:`json_default` as the fallback encoder."""
    kwargs.setdefault("default", json_default)
    return json.dumps(payload, **kwargs)


__all__ = ["json_default", "to_json"]
