"""Schema — an ordered set of Attributes with a decode/encode contract.

Manifesto:
    Untyped data crosses every boundary of an application: query strings,
    JSON bodies, SQL rows, upstream API payloads.  A Schema describes the
    expected shape once and is then used both to validate/coerce inbound
    data (``parse``) and to produce wire-shaped outbound data (``render``).

ARCHITECTURE
────────────
::

    Schema(spec, **options)
      ├── attributes          name → Attribute | ArrayAttribute (ordered)
      ├── parse(data)         → ParseResult (dict + .error)
      ├── render(data)        → dict
      └── Schema.validate()   → {"data": ..., "error": ...}   one-shot

    SchemaBuilder
      ├── .attribute(name, **opts)
      └── .build()            → Schema

    spec mapping entry:   name → {type, required, default, any_of, match,
                                  assure, bind_to, value_map, transform,
                                  array, schema | schema_inline, uplift,
                                  date_format, ...}

Parse policy:
    Attributes are processed in declaration order.  An attribute whose
    final value is None is omitted.  The first attribute error either
    propagates (``raise_on_error=True``) or stops processing and is
    reported on the returned ParseResult along with the attributes decoded
    before it.

Example::

    schema = Schema({
        "age": {"type": "integer"},
        "address": {"schema": {"city": {"type": "string"}}},
        "tags": {"type": "symbol", "array": True, "required": False},
    })
    result = schema.parse({"age": "42", "address": {"city": "Oslo"}}, raise_on_error=False)
    result             # {"age": 42, "address": {"city": "Oslo"}}
    result.failed      # False

Tags:
    conduit-core, schema, validation, coercion, serialization

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from conduit.core.errors import InvalidSchemaSpec, SchemaDefinitionError, SchemaError
from conduit.core.logging import get_logger
from conduit.schema.array import ArrayAttribute
from conduit.schema.attribute import Attribute, extract_key
from conduit.schema.types import GENERAL_OPTIONS, FormatOptions

logger = get_logger(__name__)


class ParseResult(dict):
    """Decoded mapping returned by :meth:`Schema.parse`.

    Behaves exactly like the decoded ``dict``; additionally reports the
    error (if any) that stopped processing.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, error: SchemaError | None = None):
        super().__init__(data or {})
        self.error = error

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def data(self) -> dict[str, Any]:
        return dict(self)

    def to_dict(self) -> dict[str, Any]:
        return {"data": dict(self), "error": self.error}


class Schema:
    """An ordered, immutable collection of attributes.

    Args:
        spec: Mapping of attribute name → options, or a callable receiving a
            :class:`SchemaBuilder` to declare attributes on
        name: Optional schema name used in logs
        format_options: Inherited format options (nested schemas)
        **options: Schema-level format options (date_format, ...)
    """

    def __init__(
        self,
        spec: Mapping[str, Any] | Callable[[SchemaBuilder], Any] | None = None,
        *,
        name: str | None = None,
        format_options: FormatOptions | None = None,
        **options: Any,
    ):
        unknown = set(options) - set(GENERAL_OPTIONS)
        if unknown:
            raise SchemaDefinitionError(f"UNKNOWN schema options: {', '.join(sorted(unknown))}")
        self.name = name
        self.format_options = (format_options or FormatOptions.from_settings()).merge(options)

        builder = SchemaBuilder(format_options=self.format_options)
        if isinstance(spec, Mapping):
            builder.update(spec)
        elif callable(spec):
            spec(builder)
        elif spec is not None:
            raise InvalidSchemaSpec(spec)
        self._attributes: dict[str, Attribute] = dict(builder._attributes)

    @classmethod
    def builder(cls, **options: Any) -> SchemaBuilder:
        """Start declaring a schema attribute by attribute."""
        name = options.pop("name", None)
        return SchemaBuilder(format_options=FormatOptions.from_settings().merge(options), name=name)

    @classmethod
    def _from_attributes(
        cls, attributes: Mapping[str, Attribute], format_options: FormatOptions, name: str | None
    ) -> Schema:
        schema = cls.__new__(cls)
        schema.name = name
        schema.format_options = format_options
        schema._attributes = dict(attributes)
        return schema

    @property
    def attributes(self) -> Mapping[str, Attribute]:
        return MappingProxyType(self._attributes)

    @property
    def options(self) -> dict[str, Any]:
        return self.format_options.to_dict()

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __getitem__(self, name: str) -> Attribute:
        return self._attributes[name]

    def __iter__(self):
        return iter(self._attributes.values())

    def __len__(self) -> int:
        return len(self._attributes)

    # =========================================================================
    # Decode / encode
    # =========================================================================

    def parse(self, data: Any, raise_on_error: bool = True) -> ParseResult:
        """Validate and coerce ``data`` into a typed mapping.

        Args:
            data: Mapping (or attribute-bearing object) to read from
            raise_on_error: Propagate the first attribute error instead of
                reporting it on the result

        Returns:
            ParseResult with the decoded attributes; on a captured error, the
            attributes decoded before the failing one
        """
        if data is None:
            data = {}
        result = ParseResult()
        for name, attribute in self._attributes.items():
            try:
                value = attribute.process(data)
            except SchemaError as e:
                if raise_on_error:
                    raise
                logger.debug(
                    "schema.parse.failed",
                    schema=self.name,
                    attribute=name,
                    error=e.message,
                    error_type=type(e).__name__,
                )
                result.error = e
                break
            if value is not None:
                result[name] = value
        return result

    def render(self, data: Any) -> dict[str, Any]:
        """Render typed ``data`` into its wire-shaped mapping."""
        rendered: dict[str, Any] = {}
        if data is None:
            return rendered
        for attribute in self._attributes.values():
            rendered.update(attribute.render(extract_key(data, attribute.key)))
        return rendered

    @classmethod
    def validate(
        cls,
        spec: Mapping[str, Any] | Callable[[SchemaBuilder], Any] | Schema,
        data: Any,
        raise_on_error: bool = False,
        **options: Any,
    ) -> dict[str, Any]:
        """One-shot validation: build a throwaway schema and parse ``data``.

        Returns:
            ``{"data": <decoded mapping>, "error": <SchemaError | None>}``
        """
        schema = spec if isinstance(spec, Schema) else cls(spec, **options)
        result = schema.parse(data, raise_on_error=raise_on_error)
        return result.to_dict()

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"Schema({label}attributes={list(self._attributes)})"


class SchemaBuilder:
    """Collects attribute declarations and builds an immutable :class:`Schema`.

    Example::

        builder = Schema.builder(date_format="%d/%m/%Y")
        builder.attribute("born", type="date")
        builder.attribute("address", schema=lambda b: b.attribute("city"))
        schema = builder.build()
    """

    def __init__(self, *, format_options: FormatOptions | None = None, name: str | None = None):
        self.format_options = format_options or FormatOptions.from_settings()
        self.name = name
        self._attributes: dict[str, Attribute] = {}

    def attribute(self, name: str, *, array: bool = False, **options: Any) -> Attribute:
        """Declare an attribute; re-declaring a name replaces it in place."""
        attribute_class = ArrayAttribute if array else Attribute
        attribute = attribute_class(name, format_options=self.format_options, **options)
        self._attributes[attribute.name] = attribute
        return attribute

    def update(self, spec: Mapping[str, Any]) -> SchemaBuilder:
        """Declare every ``name → options`` entry of a spec mapping."""
        for name, options in spec.items():
            if options is None:
                options = {}
            if not isinstance(options, Mapping):
                raise SchemaDefinitionError(
                    f"Options for attribute {str(name).upper()} MUST be a mapping",
                    attribute=str(name).upper(),
                )
            self.attribute(name, **dict(options))
        return self

    def build(self) -> Schema:
        return Schema._from_attributes(self._attributes, self.format_options, self.name)


__all__ = ["Schema", "SchemaBuilder", "ParseResult"]
