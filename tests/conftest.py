"""
Shared pytest fixtures for conduit tests.

This module provides:
- Settings cache isolation between tests
- Structlog context and configuration cleanup
- Small sample specs reused across schema and operation tests
"""

from __future__ import annotations

from typing import Any

import pytest
import structlog

from conduit.core.logging import clear_context
from conduit.core.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """Every test starts from default settings, unaffected by the host env."""
    for var in (
        "CONDUIT_LOG_LEVEL",
        "CONDUIT_LOG_FORMAT",
        "CONDUIT_SERVICE_NAME",
        "CONDUIT_DATE_FORMAT",
        "CONDUIT_DATETIME_FORMAT",
        "CONDUIT_TIME_FORMAT",
        "CONDUIT_DECIMAL_PRECISION",
        "CONDUIT_INTEGER_BASE",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
    clear_context()
    structlog.reset_defaults()


@pytest.fixture
def user_spec() -> dict[str, Any]:
    """A user record with nested address and an optional tag array."""
    return {
        "name": {"type": "string", "match": r"^[A-Za-z ]+$"},
        "age": {"type": "integer", "assure": lambda v: v >= 0},
        "role": {"type": "string", "any_of": ["admin", "member"], "default": "member"},
        "address": {
            "schema": {
                "city": {"type": "string"},
                "zip": {"type": "string", "required": False},
            }
        },
        "tags": {"type": "symbol", "array": True, "required": False},
    }


@pytest.fixture
def user_payload() -> dict[str, Any]:
    return {
        "name": "Ada Lovelace",
        "age": "36",
        "address": {"city": "London"},
        "tags": ["math", "poetry"],
    }
