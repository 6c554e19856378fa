"""Attribute types — the static type table used for casting and checks.

Every declared attribute type resolves, at schema construction, to a
:class:`TypeHandler` holding an instance check, a cast function and an
optional encoder.  Unknown type names fail fast with
:class:`~conduit.core.errors.SchemaDefinitionError`.

ARCHITECTURE
────────────
::

    AttributeType ── string, integer, float, decimal, symbol,
                     time, date, datetime, bool
    FormatOptions ── date/time/datetime formats, decimal precision,
                     integer base (inherited schema → attribute)
    TYPE_HANDLERS ── AttributeType → TypeHandler(check, cast, encode)

Tags:
    conduit-core, schema, types, casting

Doc-Types:
    api-reference
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from conduit.core.errors import SchemaDefinitionError
from conduit.core.settings import ConduitSettings, get_settings


class AttributeType(str, Enum):
    """Supported declared types."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    SYMBOL = "symbol"
    TIME = "time"
    DATE = "date"
    DATETIME = "datetime"
    BOOL = "bool"

    @classmethod
    def resolve(cls, value: AttributeType | str | None, attribute: str | None = None) -> AttributeType | None:
        """Normalise a declared type name; ``None`` means untyped."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise SchemaDefinitionError(
                f"UNKNOWN type for attribute {attribute}: {value}", attribute=attribute
            ) from None


@dataclass(frozen=True)
class FormatOptions:
    """Format options inherited from a schema by its attributes.

    Attributes:
        date_format: strptime/strftime format for ``date``
        datetime_format: strptime/strftime format for ``datetime``
        time_format: strptime/strftime format for ``time``
        decimal_precision: rounding precision for ``decimal``
        integer_base: base used when parsing ``integer`` strings
    """

    date_format: str
    datetime_format: str
    time_format: str
    decimal_precision: int
    integer_base: int

    @classmethod
    def from_settings(cls, settings: ConduitSettings | None = None) -> FormatOptions:
        settings = settings or get_settings()
        return cls(
            date_format=settings.date_format,
            datetime_format=settings.datetime_format,
            time_format=settings.time_format,
            decimal_precision=settings.decimal_precision,
            integer_base=settings.integer_base,
        )

    def merge(self, overrides: Mapping[str, Any]) -> FormatOptions:
        """Return a copy with any non-None format keys in ``overrides`` applied."""
        changes = {k: overrides[k] for k in GENERAL_OPTIONS if overrides.get(k) is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


GENERAL_OPTIONS: tuple[str, ...] = (
    "date_format",
    "datetime_format",
    "time_format",
    "decimal_precision",
    "integer_base",
)


# =============================================================================
# Instance checks
# =============================================================================


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_date(value: Any) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


# =============================================================================
# Casts
# =============================================================================


def _cast_string(value: Any, options: FormatOptions) -> str:
    if isinstance(value, datetime):
        return value.strftime(options.datetime_format)
    if isinstance(value, date):
        return value.strftime(options.date_format)
    if isinstance(value, time):
        return value.strftime(options.time_format)
    return str(value)


def _cast_integer(value: Any, options: FormatOptions) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{value!r} is a boolean, not an integer")
    if isinstance(value, (str, bytes, bytearray)):
        return int(value, options.integer_base)
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} is not an integral number")
    return int(value)


def _cast_float(value: Any, options: FormatOptions) -> float:
    return float(value)


def _cast_decimal(value: Any, options: FormatOptions) -> float:
    return round(float(value), options.decimal_precision)


def _cast_symbol(value: Any, options: FormatOptions) -> str:
    return sys.intern(str(value))


def _cast_time(value: Any, options: FormatOptions) -> time:
    if isinstance(value, datetime):
        return value.time()
    return datetime.strptime(value, options.time_format).time()


def _cast_date(value: Any, options: FormatOptions) -> date:
    if isinstance(value, datetime):
        return value.date()
    return datetime.strptime(value, options.date_format).date()


def _cast_datetime(value: Any, options: FormatOptions) -> datetime:
    if isinstance(value, date):
        return datetime.combine(value, time())
    return datetime.strptime(value, options.datetime_format)


def _cast_bool(value: Any, options: FormatOptions) -> bool:
    if value == "false":
        return False
    if value == "true":
        return True
    return bool(value)


# =============================================================================
# Encoders (typed value -> wire value, used by render)
# =============================================================================


def _encode_time(value: Any, options: FormatOptions) -> Any:
    return value.strftime(options.time_format) if isinstance(value, time) else value


def _encode_date(value: Any, options: FormatOptions) -> Any:
    return value.strftime(options.date_format) if isinstance(value, date) else value


def _encode_datetime(value: Any, options: FormatOptions) -> Any:
    return value.strftime(options.datetime_format) if isinstance(value, datetime) else value


@dataclass(frozen=True)
class TypeHandler:
    """Check/cast/encode functions registered for one :class:`AttributeType`."""

    type: AttributeType
    check: Callable[[Any], bool]
    cast: Callable[[Any, FormatOptions], Any]
    encode: Callable[[Any, FormatOptions], Any] | None = None

    def matches(self, value: Any) -> bool:
        return self.check(value)

    def coerce(self, value: Any, options: FormatOptions) -> Any:
        """Cast ``value`` unless it already has the declared type."""
        if self.check(value):
            return value
        return self.cast(value, options)

    def dump(self, value: Any, options: FormatOptions) -> Any:
        if self.encode is None:
            return value
        return self.encode(value, options)


TYPE_HANDLERS: dict[AttributeType, TypeHandler] = {
    AttributeType.STRING: TypeHandler(AttributeType.STRING, lambda v: isinstance(v, str), _cast_string),
    AttributeType.INTEGER: TypeHandler(AttributeType.INTEGER, _is_integer, _cast_integer),
    AttributeType.FLOAT: TypeHandler(AttributeType.FLOAT, lambda v: isinstance(v, float), _cast_float),
    AttributeType.DECIMAL: TypeHandler(AttributeType.DECIMAL, lambda v: isinstance(v, float), _cast_decimal),
    AttributeType.SYMBOL: TypeHandler(AttributeType.SYMBOL, lambda v: isinstance(v, str), _cast_symbol),
    AttributeType.TIME: TypeHandler(AttributeType.TIME, lambda v: isinstance(v, time), _cast_time, _encode_time),
    AttributeType.DATE: TypeHandler(AttributeType.DATE, _is_date, _cast_date, _encode_date),
    AttributeType.DATETIME: TypeHandler(
        AttributeType.DATETIME, lambda v: isinstance(v, datetime), _cast_datetime, _encode_datetime
    ),
    AttributeType.BOOL: TypeHandler(AttributeType.BOOL, lambda v: isinstance(v, bool), _cast_bool),
}


def get_handler(type_: AttributeType | str, attribute: str | None = None) -> TypeHandler:
    """Look up the handler for ``type_``, failing fast if none is registered."""
    resolved = AttributeType.resolve(type_, attribute)
    handler = TYPE_HANDLERS.get(resolved)
    if handler is None:
        raise SchemaDefinitionError(
            f"UNKNOWN type for attribute {attribute}: {type_}", attribute=attribute
        )
    return handler


__all__ = [
    "AttributeType",
    "FormatOptions",
    "GENERAL_OPTIONS",
    "TypeHandler",
    "TYPE_HANDLERS",
    "get_handler",
]
