"""Tests for conduit.core.errors module."""

import pytest

from conduit.core.errors import (
    ConduitError,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    FailedTask,
    InvalidAttributeValue,
    InvalidSchemaSpec,
    MissingRequiredAttribute,
    NotArrayError,
    OperationDefinitionError,
    OperationError,
    SchemaDefinitionError,
    SchemaError,
    TypeCastingError,
    TypeMismatched,
    ValidationError,
    error_chain,
    error_code,
)
from conduit.operation.task import Task, TaskKind


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.schema is None
        assert ctx.attribute is None
        assert ctx.metadata == {}

    def test_to_dict_includes_set_fields(self):
        """to_dict includes only non-None fields, plus metadata."""
        ctx = ErrorContext(operation="Register", step="charge_card", metadata={"attempt": 2})
        assert ctx.to_dict() == {"operation": "Register", "step": "charge_card", "attempt": 2}


class TestConduitError:
    """Test the base error."""

    def test_defaults(self):
        error = ConduitError("Something went wrong")
        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"
        assert error.category == ErrorCategory.INTERNAL
        assert error.cause is None

    def test_with_context_sets_known_fields_and_metadata(self):
        error = ConduitError("boom").with_context(operation="Register", request_id="r-1")
        assert error.context.operation == "Register"
        assert error.context.metadata == {"request_id": "r-1"}

    def test_cause_is_chained(self):
        cause = ValueError("bad")
        error = ConduitError("wrapped", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "bad"

    def test_to_dict(self):
        error = ConduitError("boom", category=ErrorCategory.OPERATION)
        assert error.to_dict() == {
            "error_type": "ConduitError",
            "message": "boom",
            "category": "OPERATION",
        }

    def test_repr(self):
        assert repr(ConduitError("boom")) == "ConduitError('boom', category=INTERNAL)"


class TestSchemaErrors:
    """Schema errors name the failing attribute in a fixed message format."""

    @pytest.mark.parametrize(
        "error, message, constraint",
        [
            (MissingRequiredAttribute("AGE"), "Missing required attribute AGE", "required"),
            (
                TypeMismatched("AGE", "MUST be an instance of integer"),
                "Type MISMATCHED for attribute AGE: MUST be an instance of integer",
                "type",
            ),
            (
                InvalidAttributeValue("ROLE", "'x' is NOT one of a, b"),
                "Invalid value for attribute ROLE: 'x' is NOT one of a, b",
                "value",
            ),
            (
                TypeCastingError("BORN", "ValueError - bad date"),
                "Failed to cast attribute BORN: ValueError - bad date",
                "cast",
            ),
            (NotArrayError("TAGS"), "Value for attribute TAGS MUST be an array", "array"),
        ],
    )
    def test_messages(self, error, message, constraint):
        assert error.message == message
        assert error.constraint == constraint
        assert error.category == ErrorCategory.VALIDATION
        assert isinstance(error, SchemaError)
        assert isinstance(error, ValidationError)

    def test_attribute_recorded_in_context(self):
        error = MissingRequiredAttribute("AGE")
        assert error.field == "AGE"
        assert error.context.attribute == "AGE"
        assert error.to_dict()["context"] == {"attribute": "AGE"}

    def test_value_is_reported(self):
        error = TypeMismatched("AGE", "MUST be an instance of integer", value="x")
        assert error.to_dict()["value"] == "'x'"


class TestDefinitionErrors:
    """Declaration errors are configuration errors, never validation errors."""

    def test_schema_definition_error(self):
        error = SchemaDefinitionError("UNKNOWN type for attribute AGE: number", attribute="AGE")
        assert isinstance(error, ConfigError)
        assert not isinstance(error, SchemaError)
        assert error.category == ErrorCategory.CONFIG
        assert error.context.attribute == "AGE"

    def test_invalid_schema_spec(self):
        error = InvalidSchemaSpec(42)
        assert isinstance(error, SchemaDefinitionError)
        assert "got int" in error.message

    def test_operation_definition_error_is_config(self):
        error = OperationDefinitionError("bad operation")
        assert isinstance(error, OperationError)
        assert error.category == ErrorCategory.CONFIG


class TestFailedTask:
    def test_message_names_kind_and_task(self):
        error = FailedTask(Task(TaskKind.STEP, "charge_card"))
        assert error.message == "Failed to run step task: charge_card"
        assert error.context.step == "charge_card"
        assert error.category == ErrorCategory.OPERATION


class TestUtilities:
    def test_error_code_is_class_name(self):
        assert error_code(MissingRequiredAttribute("AGE")) == "MissingRequiredAttribute"
        assert error_code(KeyError("x")) == "KeyError"
        assert error_code(None) is None

    def test_error_chain(self):
        root = ValueError("root")
        middle = TypeCastingError("AGE", "ValueError - root", cause=root)
        outer = ConduitError("outer", cause=middle)
        assert error_chain(outer) == [outer, middle, root]
