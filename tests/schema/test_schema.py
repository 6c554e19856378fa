"""Tests for conduit.schema.schema — Schema, SchemaBuilder, ParseResult."""

from datetime import date, time
from types import SimpleNamespace

import pytest

from conduit.core.errors import (
    InvalidAttributeValue,
    InvalidSchemaSpec,
    MissingRequiredAttribute,
    SchemaDefinitionError,
    TypeCastingError,
)
from conduit.schema.array import ArrayAttribute
from conduit.schema.attribute import Attribute
from conduit.schema.schema import ParseResult, Schema, SchemaBuilder


class TestConstruction:
    def test_from_mapping_keeps_declaration_order(self, user_spec):
        schema = Schema(user_spec)
        assert list(schema.attributes) == ["name", "age", "role", "address", "tags"]
        assert isinstance(schema["tags"], ArrayAttribute)
        assert isinstance(schema["age"], Attribute)
        assert "age" in schema
        assert len(schema) == 5

    def test_attributes_are_read_only(self, user_spec):
        schema = Schema(user_spec)
        with pytest.raises(TypeError):
            schema.attributes["extra"] = Attribute("extra")

    def test_empty_schema(self):
        assert Schema().parse({"a": 1}) == {}

    def test_none_options_means_untyped_required(self):
        schema = Schema({"a": None})
        assert schema["a"].required
        assert not schema["a"].typed

    def test_invalid_spec(self):
        with pytest.raises(InvalidSchemaSpec):
            Schema(42)

    def test_options_must_be_mappings(self):
        with pytest.raises(SchemaDefinitionError, match="Options for attribute AGE MUST be a mapping"):
            Schema({"age": "integer"})

    def test_unknown_schema_option(self):
        with pytest.raises(SchemaDefinitionError, match="UNKNOWN schema options"):
            Schema({}, strict=True)

    def test_schema_options_are_inherited(self):
        schema = Schema(
            {"born": {"type": "date"}, "trip": {"schema": {"on": {"type": "date"}}}},
            date_format="%d/%m/%Y",
        )
        assert schema.options["date_format"] == "%d/%m/%Y"
        assert schema.parse({"born": "31/01/2024", "trip": {"on": "01/02/2024"}}) == {
            "born": date(2024, 1, 31),
            "trip": {"on": date(2024, 2, 1)},
        }

    def test_attribute_options_override_schema_options(self):
        schema = Schema({"at": {"type": "time", "time_format": "%H%M"}}, time_format="%H:%M")
        assert schema.parse({"at": "0930"}) == {"at": time(9, 30)}


class TestBuilder:
    def test_builder(self):
        builder = Schema.builder(name="person", integer_base=16)
        builder.attribute("id", type="integer")
        builder.attribute("tags", array=True, required=False)
        schema = builder.build()
        assert isinstance(builder, SchemaBuilder)
        assert schema.name == "person"
        assert schema.parse({"id": "ff"}) == {"id": 255}
        assert isinstance(schema["tags"], ArrayAttribute)

    def test_redeclaring_replaces(self):
        schema = Schema(lambda b: (b.attribute("a", type="string"), b.attribute("a", type="integer")))
        assert schema["a"].type.value == "integer"

    def test_callable_spec(self):
        schema = Schema(lambda b: b.update({"a": {"type": "integer"}}))
        assert schema.parse({"a": "1"}) == {"a": 1}


class TestParse:
    def test_parse(self, user_spec, user_payload):
        result = Schema(user_spec).parse(user_payload)
        assert isinstance(result, ParseResult)
        assert result == {
            "name": "Ada Lovelace",
            "age": 36,
            "role": "member",
            "address": {"city": "London"},
            "tags": ["math", "poetry"],
        }
        assert result.success
        assert result.error is None

    def test_parse_objects(self):
        schema = Schema({"id": {"type": "integer"}, "name": {}})
        assert schema.parse(SimpleNamespace(id="3", name="x")) == {"id": 3, "name": "x"}

    def test_none_values_are_omitted(self):
        schema = Schema({"a": {"required": False}, "b": {"required": False}})
        assert schema.parse({"a": 1, "b": None}) == {"a": 1}

    def test_none_data_is_empty(self):
        assert Schema({"a": {"required": False}}).parse(None) == {}

    def test_first_error_raises_by_default(self, user_spec):
        with pytest.raises(MissingRequiredAttribute, match="NAME"):
            Schema(user_spec).parse({})

    def test_first_error_is_reported(self, user_spec, user_payload):
        user_payload["age"] = "old"
        result = Schema(user_spec).parse(user_payload, raise_on_error=False)
        assert result.failed
        assert isinstance(result.error, TypeCastingError)
        # only the attributes before the failing one are decoded
        assert result == {"name": "Ada Lovelace"}
        assert result.to_dict() == {"data": {"name": "Ada Lovelace"}, "error": result.error}

    def test_user_callable_errors_are_reported(self):
        schema = Schema(
            {
                "name": {"type": "string"},
                "age": {"type": "integer", "assure": lambda v: v.is_adult},
                "score": {"type": "integer", "transform": lambda v: 100 // v},
            }
        )
        result = schema.parse({"name": "Ada", "age": "20", "score": "0"}, raise_on_error=False)
        assert result.failed
        assert isinstance(result.error, InvalidAttributeValue)
        assert "assurance raised AttributeError" in result.error.message
        assert result == {"name": "Ada"}

        schema = Schema({"score": {"type": "integer", "transform": lambda v: 100 // v}})
        result = schema.parse({"score": "0"}, raise_on_error=False)
        assert "transform raised ZeroDivisionError" in result.error.message

    def test_non_string_names(self):
        schema = Schema({1: {"type": "integer"}, "b": {"required": False}})
        assert list(schema.attributes) == ["1", "b"]
        assert schema.parse({1: "5"}) == {"1": 5}
        assert schema.parse({"1": "5"}) == {"1": 5}
        assert schema.render({"1": 5}) == {"1": 5}

    def test_schema_holds_no_parse_state(self, user_spec, user_payload):
        schema = Schema(user_spec)
        failed = schema.parse({}, raise_on_error=False)
        ok = schema.parse(user_payload, raise_on_error=False)
        assert failed.failed
        assert ok.success


class TestRender:
    def test_render(self):
        schema = Schema(
            {
                "born": {"type": "date"},
                "active": {"type": "bool", "value_map": {True: "Y", False: "N"}, "bind_to": "is_active"},
                "missing": {"required": False},
            }
        )
        assert schema.render({"born": date(2024, 1, 31), "active": True}) == {
            "born": "2024-01-31",
            "is_active": "Y",
        }

    def test_render_objects(self):
        schema = Schema({"id": {"type": "integer"}})
        assert schema.render(SimpleNamespace(id=3)) == {"id": 3}

    def test_render_none(self):
        assert Schema({"a": {}}).render(None) == {}

    def test_render_after_parse_round_trips(self, user_spec):
        payload = {
            "name": "Ada",
            "age": 36,
            "role": "admin",
            "address": {"city": "London", "zip": "N1"},
            "tags": ["math"],
        }
        schema = Schema(user_spec)
        assert schema.render(schema.parse(payload)) == payload


class TestValidate:
    def test_one_shot(self):
        outcome = Schema.validate({"age": {"type": "integer"}}, {"age": "4"})
        assert outcome == {"data": {"age": 4}, "error": None}

    def test_reports_error(self):
        outcome = Schema.validate({"age": {"type": "integer"}}, {})
        assert outcome["data"] == {}
        assert isinstance(outcome["error"], MissingRequiredAttribute)

    def test_raise_on_error(self):
        with pytest.raises(MissingRequiredAttribute):
            Schema.validate({"age": {}}, {}, raise_on_error=True)

    def test_accepts_options_and_schemas(self):
        outcome = Schema.validate({"n": {"type": "integer"}}, {"n": "10"}, integer_base=2)
        assert outcome["data"] == {"n": 2}
        schema = Schema({"n": {"type": "integer"}})
        assert Schema.validate(schema, {"n": "10"})["data"] == {"n": 10}
