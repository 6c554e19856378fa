"""Conduit Core -- shared primitives for the schema engine and the pipeline.

Architecture::

    errors.py          Structured error hierarchy (ConduitError, SchemaError)
    logging.py         Structured logging (structlog)
    serialization.py   json_default / to_json for results and the CLI
    settings.py        ConduitSettings (pydantic-settings) + get_settings()
"""

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
from conduit.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    ServiceMetadata,
    build_processors,
    configure_logging,
    get_logger,
    unbind_context,
)
from conduit.core.settings import ConduitSettings, clear_settings_cache, get_settings

__all__ = [
    # errors
    "ConduitError",
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "FailedTask",
    "InvalidAttributeValue",
    "InvalidSchemaSpec",
    "MissingRequiredAttribute",
    "NotArrayError",
    "OperationDefinitionError",
    "OperationError",
    "SchemaDefinitionError",
    "SchemaError",
    "TypeCastingError",
    "TypeMismatched",
    "ValidationError",
    "error_chain",
    "error_code",
    # logging
    "LogContext",
    "bind_context",
    "clear_context",
    "ServiceMetadata",
    "build_processors",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # settings
    "ConduitSettings",
    "clear_settings_cache",
    "get_settings",
]
