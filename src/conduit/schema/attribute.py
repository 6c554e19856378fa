"""Attribute — one named, typed field of a Schema.

An Attribute knows how to pull its raw value out of a container, apply a
default, cast it to the declared type (or hand it to a nested Schema), run
an optional finishing transform and validate the final value.  It also
knows how to render a typed value back into its wire-shaped key/value pair.

Attributes are stateless after construction: the value flows through
``process()`` and ``render()`` as a parameter, so one Schema instance can be
shared by any number of concurrent callers.

ARCHITECTURE
────────────
::

    process(container)
      1. extract        by key (mappings) / by attribute (objects)
                        inline → nested schema assembles from same level
      2. default        substituted when the raw value is None
      3. cast           nested schema parse | TypeHandler.coerce
      4. transform      user-supplied finishing callable
      5. validate       required → type → any_of → match → assure

    render(value)       {bind_to or name: value_map / encoded / nested}

Example::

    age = Attribute("age", type="integer", assure=lambda v: v >= 0)
    age.process({"age": "42"})          # 42
    age.render(42)                       # {"age": 42}

Tags:
    conduit-core, schema, attribute, validation, casting

Doc-Types:
    api-reference
"""

from __future__ import annotations

import re
from collections.abc import Callable, Hashable, Mapping
from datetime import date, time
from typing import TYPE_CHECKING, Any

from conduit.core.errors import (
    InvalidAttributeValue,
    MissingRequiredAttribute,
    SchemaDefinitionError,
    SchemaError,
    TypeCastingError,
    TypeMismatched,
)
from conduit.schema.types import GENERAL_OPTIONS, AttributeType, FormatOptions, TypeHandler, get_handler

if TYPE_CHECKING:
    from conduit.schema.schema import Schema

# Values that can never hold nested attributes
_SCALARS = (str, bytes, bytearray, int, float, bool, list, tuple, set, frozenset, date, time)


def extract_key(container: Any, key: Hashable) -> Any:
    """Read ``key`` from a mapping, or the attribute ``str(key)`` from an object.

    Mappings are looked up by the key as given, then by its ``str()`` form.
    """
    if container is None:
        return None
    if isinstance(container, Mapping):
        for candidate in (key, str(key)):
            if candidate in container:
                return container[candidate]
        return None
    if isinstance(container, _SCALARS):
        return None
    return getattr(container, str(key), None)


def is_record(value: Any) -> bool:
    """True if ``value`` can hold nested attributes (mapping or plain object)."""
    return isinstance(value, Mapping) or not isinstance(value, _SCALARS)


def _identity(value: Any) -> Any:
    return value


class Attribute:
    """A single-value attribute.

    Args:
        name: Attribute name; also the default output key. Mappings are
            read by the name as given, then by its string form
        type: Declared type (see :class:`~conduit.schema.types.AttributeType`)
        required: Whether a None final value is an error
        default: Value substituted when the raw value is None
        any_of: Container of allowed values
        match: Regex (string or compiled) searched in ``str(value)``
        assure: Predicate the final value must satisfy
        bind_to: Output key override used by ``render``
        value_map: Output value translation used by ``render``
        transform: Finishing callable applied after casting
        schema: Nested schema spec (mapping, Schema, or builder callable)
        schema_inline: Nested schema read from / rendered into the parent level
        uplift: Render a nested schema's map into the parent level
        format_options: Format options inherited from the owning schema
        **options: Per-attribute format overrides (date_format, ...)
    """

    is_array = False

    def __init__(
        self,
        name: Hashable,
        *,
        type: AttributeType | str | None = None,
        required: bool = True,
        default: Any = None,
        any_of: Any = None,
        match: str | re.Pattern[str] | None = None,
        assure: Callable[[Any], Any] | None = None,
        bind_to: str | None = None,
        value_map: Mapping[Any, Any] | None = None,
        transform: Callable[[Any], Any] | None = None,
        schema: Any = None,
        schema_inline: Any = None,
        uplift: bool = False,
        format_options: FormatOptions | None = None,
        **options: Any,
    ):
        unknown = set(options) - set(GENERAL_OPTIONS)
        if unknown:
            raise SchemaDefinitionError(
                f"UNKNOWN options for attribute {str(name).upper()}: {', '.join(sorted(unknown))}",
                attribute=str(name).upper(),
            )

        self.key = name
        self.name = str(name)
        self.display_name = self.name.upper()
        self.bind_to = str(bind_to) if bind_to is not None else None
        self.value_map = value_map
        self.type = AttributeType.resolve(type, self.display_name)
        self.required = bool(required)
        self.default = default
        self.uplift = bool(uplift)
        self.format_options = (format_options or FormatOptions.from_settings()).merge(options)

        self._handler: TypeHandler | None = (
            get_handler(self.type, self.display_name) if self.type is not None else None
        )
        self._any_of = self._verify_any_of(any_of)
        self._match = self._verify_match(match)
        self._assurance = self._verify_assurance(assure)
        self._transform = self._verify_transform(transform)

        self.inline = False
        self.schema: Schema | None = None
        if schema is not None and schema_inline is not None:
            raise SchemaDefinitionError(
                f"Attribute {self.display_name} cannot declare both schema and schema_inline",
                attribute=self.display_name,
            )
        if schema_inline is not None:
            self._attach_schema(schema_inline, inline=True)
        elif schema is not None:
            self._attach_schema(schema, inline=False)

        if self.default is not None:
            self.validate(self.default)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def typed(self) -> bool:
        return self.type is not None

    @property
    def optional(self) -> bool:
        return not self.required

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def has_schema(self) -> bool:
        return self.schema is not None

    @property
    def output_key(self) -> str:
        return self.bind_to or self.name

    # =========================================================================
    # Decode
    # =========================================================================

    def process(self, container: Any) -> Any:
        """Extract, default, cast, transform and validate this attribute's value."""
        value = self.extract(container)
        if value is None and self.has_default:
            value = self.default
        if self.has_schema:
            value = self._cast_by_schema(value)
        else:
            value = self._cast_by_value(value)
        value = self._apply_transform(value)
        self.validate(value)
        return value

    def extract(self, container: Any) -> Any:
        if self.inline:
            return self._extract_inline(container)
        return extract_key(container, self.key)

    def _extract_inline(self, container: Any) -> dict[str, Any] | None:
        assert self.schema is not None
        values = {}
        for name, attribute in self.schema.attributes.items():
            value = extract_key(container, attribute.key)
            if value is not None:
                values[name] = value
        return values or None

    def _apply_transform(self, value: Any) -> Any:
        try:
            return self._transform(value)
        except SchemaError:
            raise
        except Exception as e:
            raise InvalidAttributeValue(
                self.display_name, f"transform raised {type(e).__name__} - {e}", value=value, cause=e
            ) from e

    def _cast_by_schema(self, value: Any) -> Any:
        if value is None:
            return None
        return self._parse_nested(value)

    def _parse_nested(self, value: Any) -> dict[str, Any]:
        assert self.schema is not None
        if not is_record(value):
            raise TypeMismatched(self.display_name, "MUST be a mapping")
        return dict(self.schema.parse(value, raise_on_error=True))

    def _cast_by_value(self, value: Any) -> Any:
        if value is None or self._handler is None:
            return value
        return self._cast_one(value)

    def _cast_one(self, value: Any) -> Any:
        assert self._handler is not None
        try:
            return self._handler.coerce(value, self.format_options)
        except Exception as e:
            raise TypeCastingError(self.display_name, f"{type(e).__name__} - {e}", cause=e) from e

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, value: Any) -> None:
        """Validate a final value; raises the first failing check's error."""
        self.validate_required(value)
        self.validate_type(value)
        self.validate_any_of(value)
        self.validate_match(value)
        self.validate_assurance(value)

    def is_valid(self, value: Any) -> bool:
        return (
            not self.is_missing(value)
            and self.type_matched(value)
            and self.any_of(value)
            and self.matched(value)
            and self.assured(value)
        )

    def is_missing(self, value: Any) -> bool:
        return self.required and value is None

    def type_matched(self, value: Any) -> bool:
        return not self.typed or (value is None and self.optional) or self._type_matched(value)

    def any_of(self, value: Any) -> bool:
        return self._any_of is None or value is None or self._in_any_of(value)

    def matched(self, value: Any) -> bool:
        return self._match is None or value is None or self._matched(value)

    def assured(self, value: Any) -> bool:
        if self._assurance is None or value is None:
            return True
        try:
            return self._assured(value)
        except Exception:
            return False

    def validate_required(self, value: Any) -> None:
        if self.is_missing(value):
            raise MissingRequiredAttribute(self.display_name)

    def validate_type(self, value: Any) -> None:
        if not self.type_matched(value):
            raise TypeMismatched(self.display_name, f"MUST be an instance of {self.type.value}", value=value)

    def validate_any_of(self, value: Any) -> None:
        if not self.any_of(value):
            raise InvalidAttributeValue(
                self.display_name, f"{value!r} is NOT one of {self._describe_any_of()}", value=value
            )

    def validate_match(self, value: Any) -> None:
        if not self.matched(value):
            raise InvalidAttributeValue(
                self.display_name, f"{value!r} does NOT match {self._match.pattern!r}", value=value
            )

    def validate_assurance(self, value: Any) -> None:
        if self._assurance is None or value is None:
            return
        try:
            assured = self._assured(value)
        except Exception as e:
            raise InvalidAttributeValue(
                self.display_name, f"assurance raised {type(e).__name__} - {e}", value=value, cause=e
            ) from e
        if not assured:
            raise InvalidAttributeValue(
                self.display_name, f"{value!r} does NOT meet the assurance.", value=value
            )

    def _type_matched(self, value: Any) -> bool:
        return self._handler is not None and self._handler.matches(value)

    def _in_any_of(self, value: Any) -> bool:
        try:
            return value in self._any_of
        except TypeError:
            return False

    def _matched(self, value: Any) -> bool:
        return self._match.search(str(value)) is not None

    def _assured(self, value: Any) -> bool:
        return bool(self._assurance(value))

    def _describe_any_of(self) -> str:
        if isinstance(self._any_of, (list, tuple, set, frozenset)):
            return ", ".join(str(v) for v in self._any_of)
        return repr(self._any_of)

    # =========================================================================
    # Encode
    # =========================================================================

    def render(self, value: Any) -> dict[str, Any]:
        """Render a typed value into its wire-shaped key/value pair(s)."""
        if value is None:
            return {}
        rendered = self._render_value(value)
        if self.has_schema and (self.inline or self.uplift):
            return dict(rendered) if isinstance(rendered, Mapping) else {}
        return {self.output_key: rendered}

    def _render_value(self, value: Any) -> Any:
        if self.has_schema:
            return self._render_nested(value)
        return self._render_scalar(value)

    def _render_nested(self, value: Any) -> Any:
        assert self.schema is not None
        return self.schema.render(value)

    def _render_scalar(self, value: Any) -> Any:
        if self.value_map is not None:
            return self._map_value(value)
        if self._handler is not None:
            return self._handler.dump(value, self.format_options)
        return value

    def _map_value(self, value: Any) -> Any:
        try:
            if value in self.value_map:
                return self.value_map[value]
        except TypeError:
            pass  # unhashable values are never mapped
        return value

    # =========================================================================
    # Construction checks
    # =========================================================================

    def _attach_schema(self, spec: Any, *, inline: bool) -> None:
        from conduit.schema.schema import Schema

        if self.typed:
            raise SchemaDefinitionError(
                f"Attribute {self.display_name} cannot declare both a type and a nested schema",
                attribute=self.display_name,
            )
        self.inline = inline
        if isinstance(spec, Schema):
            self.schema = spec
        else:
            self.schema = Schema(spec, format_options=self.format_options)

    def _verify_any_of(self, any_of: Any) -> Any:
        if any_of is None:
            return None
        if not hasattr(any_of, "__contains__"):
            raise SchemaDefinitionError(
                f"List of values for attribute {self.display_name} MUST support membership tests",
                attribute=self.display_name,
            )
        if hasattr(any_of, "__len__") and len(any_of) == 0:
            return None
        return any_of

    def _verify_match(self, match: Any) -> re.Pattern[str] | None:
        if match is None:
            return None
        if isinstance(match, str):
            try:
                return re.compile(match)
            except re.error as e:
                raise SchemaDefinitionError(
                    f"Matching pattern of attribute {self.display_name} is invalid: {e}",
                    attribute=self.display_name,
                    cause=e,
                ) from e
        if not hasattr(match, "search"):
            raise SchemaDefinitionError(
                f"Matching pattern of attribute {self.display_name} MUST be a regex",
                attribute=self.display_name,
            )
        return match

    def _verify_assurance(self, assure: Any) -> Callable[[Any], Any] | None:
        if assure is not None and not callable(assure):
            raise SchemaDefinitionError(
                f"Assurance of attribute {self.display_name} MUST be callable",
                attribute=self.display_name,
            )
        return assure

    def _verify_transform(self, transform: Any) -> Callable[[Any], Any]:
        if transform is None:
            return _identity
        if not callable(transform):
            raise SchemaDefinitionError(
                f"Transform of attribute {self.display_name} MUST be callable",
                attribute=self.display_name,
            )
        return transform

    def __repr__(self) -> str:
        type_name = self.type.value if self.type else None
        return f"{self.__class__.__name__}(name={self.name!r}, type={type_name!r}, required={self.required})"
