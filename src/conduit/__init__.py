"""
conduit — declarative schemas and railway-oriented operations.

Two cooperating halves:

- ``conduit.schema``     describe a data shape once; ``parse`` untyped input
                         into typed values, ``render`` typed values back out
- ``conduit.operation``  run business logic as an ordered chain of steps with
                         a schema-validated contract and structured Results

Example::

    from conduit import Operation, step

    class Greet(Operation):
        contract = {"name": {"type": "string"}}

        @step
        def greet(self, ctx):
            ctx["greeting"] = f"Hello {ctx.contract['name']}"
            return True

    Greet.run(name="Ada").ok   # True
"""

from conduit.core.errors import (
    ConduitError,
    FailedTask,
    InvalidAttributeValue,
    MissingRequiredAttribute,
    NotArrayError,
    SchemaDefinitionError,
    SchemaError,
    TypeCastingError,
    TypeMismatched,
)
from conduit.operation import (
    Context,
    Operation,
    Result,
    StepOutcome,
    on_failure,
    pass_step,
    result_field,
    step,
)
from conduit.schema import ArrayAttribute, Attribute, AttributeType, ParseResult, Schema, load_schema

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # schema
    "ArrayAttribute",
    "Attribute",
    "AttributeType",
    "ParseResult",
    "Schema",
    "load_schema",
    # operation
    "Context",
    "Operation",
    "Result",
    "StepOutcome",
    "on_failure",
    "pass_step",
    "result_field",
    "step",
    # errors
    "ConduitError",
    "FailedTask",
    "InvalidAttributeValue",
    "MissingRequiredAttribute",
    "NotArrayError",
    "SchemaDefinitionError",
    "SchemaError",
    "TypeCastingError",
    "TypeMismatched",
]
