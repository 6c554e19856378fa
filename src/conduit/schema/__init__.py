"""Schema engine — declarative validation, coercion, and rendering.

Architecture::

    types.py        AttributeType enum, FormatOptions, static TypeHandler table
    attribute.py    Attribute (single value): extract → default → cast → validate
    array.py        ArrayAttribute: elementwise Attribute semantics
    schema.py       Schema, SchemaBuilder, ParseResult
    loader.py       YAML/JSON spec files → Schema
"""

from conduit.schema.array import ArrayAttribute
from conduit.schema.attribute import Attribute
from conduit.schema.loader import load_schema, load_spec
from conduit.schema.schema import ParseResult, Schema, SchemaBuilder
from conduit.schema.types import GENERAL_OPTIONS, AttributeType, FormatOptions

__all__ = [
    "Attribute",
    "ArrayAttribute",
    "AttributeType",
    "FormatOptions",
    "GENERAL_OPTIONS",
    "ParseResult",
    "Schema",
    "SchemaBuilder",
    "load_schema",
    "load_spec",
]
