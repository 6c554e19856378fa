"""
Structured error types for the conduit framework.

Provides a typed error hierarchy with metadata for classification, logging,
and root cause analysis through error chaining.

Every failure that crosses a conduit boundary is a ConduitError. Schema
failures are raised (or captured) close to the attribute that produced them
and carry the attribute's display name; operation failures are captured into
the per-call Context and turned into a Result.

Manifesto:
    - **Typed Error Hierarchy:** One error type per failure kind
    - **Human-readable messages:** Every schema error names its field
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       ConduitError                              │
        │  (category, context, cause)                                     │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                 │
        │  ValidationError        ConfigError         OperationError      │
        │  (VALIDATION)           (CONFIG)            (OPERATION)         │
        │       │                      │                   │              │
        │  SchemaError            SchemaDefinition    FailedTask          │
        │   MissingRequired...     Error              OperationDefinition │
        │   TypeMismatched                             Error              │
        │   InvalidAttributeValue                                         │
        │   TypeCastingError                                              │
        │   NotArrayError                                                 │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = MissingRequiredAttribute("AGE")
    >>> error.message
    'Missing required attribute AGE'
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error_code(error)
    'MissingRequiredAttribute'

Tags:
    error-handling, exception-hierarchy, error-context, conduit-core

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        VALIDATION: Schema, attribute and constraint violations
        CONFIG: Invalid declarations (schemas, operations, settings)
        OPERATION: Pipeline step failures
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    VALIDATION = "VALIDATION"
    CONFIG = "CONFIG"
    OPERATION = "OPERATION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Attributes:
        schema: Name of the schema being processed
        attribute: Name of the attribute that failed
        operation: Name of the operation class
        step: Name of the step within the operation
        metadata: Additional key-value pairs
    """

    schema: str | None = None
    attribute: str | None = None
    operation: str | None = None
    step: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["schema", "attribute", "operation", "step"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ConduitError(Exception):
    """
    Base exception for all conduit errors.

    All ConduitError instances carry:
    - **category:** ErrorCategory enum for classification
    - **context:** ErrorContext with structured metadata
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category`` to provide a sensible default for
    their domain.

    Examples:
        >>> error = ConduitError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(operation="CreateUser").context.operation
        'CreateUser'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ConduitError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ConduitError("Failed").with_context(operation="CreateUser")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            context_dict = self.context.to_dict()
            if context_dict:
                result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ConduitError):
    """
    Data validation error.

    Never retryable - the input must be fixed.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        if self.constraint:
            result["constraint"] = self.constraint
        return result


class SchemaError(ValidationError):
    """Base class for attribute/schema failures raised while parsing."""

    constraint_name: str | None = None

    def __init__(self, message: str, *, field: str | None = None, **kwargs: Any):
        kwargs.setdefault("constraint", self.constraint_name)
        super().__init__(message, field=field, **kwargs)
        if field is not None:
            self.context.attribute = field


class MissingRequiredAttribute(SchemaError):
    """A required attribute is absent (or None) after defaults are applied."""

    constraint_name = "required"

    def __init__(self, name: str, **kwargs: Any):
        super().__init__(f"Missing required attribute {name}", field=name, **kwargs)


class TypeMismatched(SchemaError):
    """The final value is not an instance of the declared type."""

    constraint_name = "type"

    def __init__(self, name: str, reason: str, **kwargs: Any):
        self.reason = reason
        super().__init__(f"Type MISMATCHED for attribute {name}: {reason}", field=name, **kwargs)


class InvalidAttributeValue(SchemaError):
    """The value failed an any_of, match, or assure constraint."""

    constraint_name = "value"

    def __init__(self, name: str, reason: str, **kwargs: Any):
        self.reason = reason
        super().__init__(f"Invalid value for attribute {name}: {reason}", field=name, **kwargs)


class TypeCastingError(SchemaError):
    """The cast function for the declared type raised."""

    constraint_name = "cast"

    def __init__(self, name: str, reason: str, **kwargs: Any):
        self.reason = reason
        super().__init__(f"Failed to cast attribute {name}: {reason}", field=name, **kwargs)


class NotArrayError(SchemaError):
    """An array attribute was given something other than a sequence."""

    constraint_name = "array"

    def __init__(self, name: str, **kwargs: Any):
        super().__init__(f"Value for attribute {name} MUST be an array", field=name, **kwargs)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ConduitError):
    """
    Configuration or declaration error.

    Raised at construction time; never part of a parse result.
    """

    default_category = ErrorCategory.CONFIG


class SchemaDefinitionError(ConfigError):
    """A schema or attribute declaration is invalid."""

    def __init__(self, message: str, *, attribute: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.attribute = attribute
        if attribute is not None:
            self.context.attribute = attribute


class InvalidSchemaSpec(SchemaDefinitionError):
    """The spec handed to Schema is neither a mapping nor a builder."""

    def __init__(self, spec: Any = None):
        self.spec = spec
        super().__init__(
            f"Schema specification MUST be a mapping or a builder callable, got {type(spec).__name__}"
        )


# =============================================================================
# OPERATION ERRORS
# =============================================================================


class OperationError(ConduitError):
    """Operation execution error."""

    default_category = ErrorCategory.OPERATION


class FailedTask(OperationError):
    """A step task returned a controlled false outcome without setting a result."""

    def __init__(self, task: Any):
        self.task = task
        super().__init__(f"Failed to run {task.kind.value} task: {task.name}")
        self.context.step = task.name


class OperationDefinitionError(OperationError):
    """An operation class declaration is invalid."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def error_code(error: BaseException | None) -> str | None:
    """Return the category name a Result reports for ``error``.

    The name is the error's class name without its module path.
    """
    if error is None:
        return None
    return type(error).__name__


def error_chain(error: BaseException) -> list[BaseException]:
    """Return ``error`` followed by its chained causes, outermost first."""
    chain: list[BaseException] = []
    current: BaseException | None = error
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__
    return chain


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ConduitError",
    "ValidationError",
    "SchemaError",
    "MissingRequiredAttribute",
    "TypeMismatched",
    "InvalidAttributeValue",
    "TypeCastingError",
    "NotArrayError",
    "ConfigError",
    "SchemaDefinitionError",
    "InvalidSchemaSpec",
    "OperationError",
    "FailedTask",
    "OperationDefinitionError",
    "error_code",
    "error_chain",
]
