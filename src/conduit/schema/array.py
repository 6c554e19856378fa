"""ArrayAttribute — an Attribute whose value is a sequence.

Every elementwise rule of :class:`~conduit.schema.attribute.Attribute`
(cast, type, any_of, match, assure, nested schema) is applied to each
element.  A non-sequence value fails with ``NotArrayError`` before any
element is looked at.

Example::

    tags = ArrayAttribute("tags", type="symbol", any_of=["a", "b"])
    tags.process({"tags": ["a", "b"]})   # ["a", "b"]
    tags.process({"tags": "a"})          # NotArrayError
"""

from __future__ import annotations

from typing import Any

from conduit.core.errors import NotArrayError, SchemaDefinitionError, TypeMismatched
from conduit.schema.attribute import Attribute


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


class ArrayAttribute(Attribute):
    """A multi-value attribute; see :class:`Attribute` for the options."""

    is_array = True

    def __init__(self, name: str, **kwargs: Any):
        if kwargs.get("schema_inline") is not None:
            raise SchemaDefinitionError(
                f"Array attribute {str(name).upper()} cannot declare schema_inline",
                attribute=str(name).upper(),
            )
        super().__init__(name, **kwargs)

    def is_array_value(self, value: Any) -> bool:
        return value is None or is_sequence(value)

    def is_valid(self, value: Any) -> bool:
        return self.is_array_value(value) and super().is_valid(value)

    def validate(self, value: Any) -> None:
        self.validate_array(value)
        super().validate(value)

    def validate_array(self, value: Any) -> None:
        if not self.is_array_value(value):
            raise NotArrayError(self.display_name, value=value)

    def validate_type(self, value: Any) -> None:
        if not self.type_matched(value):
            raise TypeMismatched(self.display_name, f"MUST be an array of {self.type.value}", value=value)

    # Elementwise checks; the whole array is valid only if every element is.

    def _type_matched(self, value: Any) -> bool:
        return all(super(ArrayAttribute, self)._type_matched(e) for e in value)

    def _in_any_of(self, value: Any) -> bool:
        return all(super(ArrayAttribute, self)._in_any_of(e) for e in value)

    def _matched(self, value: Any) -> bool:
        return all(super(ArrayAttribute, self)._matched(e) for e in value)

    def _assured(self, value: Any) -> bool:
        return all(super(ArrayAttribute, self)._assured(e) for e in value)

    # Elementwise casting

    def _cast_by_schema(self, value: Any) -> Any:
        self.validate_array(value)
        if value is None:
            return None
        return [self._parse_nested(e) for e in value]

    def _cast_by_value(self, value: Any) -> Any:
        self.validate_array(value)
        if value is None:
            return None
        if self._handler is None:
            return list(value)
        return [self._cast_one(e) for e in value]

    # Elementwise rendering

    def _render_nested(self, value: Any) -> Any:
        assert self.schema is not None
        return [self.schema.render(e) for e in value]

    def _render_scalar(self, value: Any) -> Any:
        return [super(ArrayAttribute, self)._render_scalar(e) for e in value]

    def render(self, value: Any) -> dict[str, Any]:
        if value is None:
            return {}
        return {self.output_key: self._render_value(value)}
