"""Shared settings for conduit.

Schema casting needs default format options (date/time formats, decimal
precision, integer base) and the logging layer needs a level and renderer.
``ConduitSettings`` provides these from environment variables so a deployment
can change them without touching declarations.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Type-checked at startup, not at parse time
    - **Environment-driven:** Reads ``CONDUIT_*`` env vars and .env files
    - **Sensible defaults:** Works out of the box for development

Examples:
    >>> from conduit.core.settings import get_settings
    >>> get_settings().date_format
    '%Y-%m-%d'

Tags:
    settings, configuration, pydantic, environment, conduit-core

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"
DEFAULT_TIME_FORMAT = "%H:%M:%S"
DEFAULT_DECIMAL_PRECISION = 2
DEFAULT_INTEGER_BASE = 10


class ConduitSettings(BaseSettings):
    """Settings shared by the schema engine, the pipeline, and the CLI.

    Fields
    ──────
    log_level          : Structlog log level
    log_format         : ``console`` or ``json`` renderer
    service_name       : Value of ``service.name`` in every log line
    date_format        : strptime/strftime format for ``date`` attributes
    datetime_format    : strptime/strftime format for ``datetime`` attributes
    time_format        : strptime/strftime format for ``time`` attributes
    decimal_precision  : Rounding precision for ``decimal`` attributes
    integer_base       : Base used to parse ``integer`` strings
    """

    model_config = SettingsConfigDict(
        env_prefix="CONDUIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    service_name: str = "conduit"

    # ── Schema format defaults ───────────────────────────────────
    date_format: str = DEFAULT_DATE_FORMAT
    datetime_format: str = DEFAULT_DATETIME_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT
    decimal_precision: int = Field(default=DEFAULT_DECIMAL_PRECISION, ge=0)
    integer_base: int = Field(default=DEFAULT_INTEGER_BASE, ge=0, le=36)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @field_validator("integer_base")
    @classmethod
    def _check_base(cls, value: int) -> int:
        # int() accepts base 0 (prefix-detected) or 2..36
        if value == 1:
            raise ValueError("integer_base must be 0 or between 2 and 36")
        return value


_settings_cache: ConduitSettings | None = None


def get_settings(*, _force_reload: bool = False) -> ConduitSettings:
    """Load, validate, and cache a :class:`ConduitSettings` instance."""
    global _settings_cache
    if _settings_cache is None or _force_reload:
        _settings_cache = ConduitSettings()
    return _settings_cache


def clear_settings_cache() -> None:
    """Drop the cached settings so the next ``get_settings()`` re-reads the env."""
    global _settings_cache
    _settings_cache = None


__all__ = [
    "ConduitSettings",
    "get_settings",
    "clear_settings_cache",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_DATETIME_FORMAT",
    "DEFAULT_TIME_FORMAT",
    "DEFAULT_DECIMAL_PRECISION",
    "DEFAULT_INTEGER_BASE",
]
