"""
Conduit Logging - Structured logging for schemas and operations.

This module configures structlog once per process and hands out loggers
that the schema engine and the operation pipeline write events to.

Manifesto:
    Operations run business logic that fails in expected and unexpected
    ways. Every step failure, every compensating task and every completed
    call should leave a structured trace that can be correlated by
    operation name and step.

    - **Structures:** JSON output for log aggregation
    - **Correlates:** operation/step propagation through contextvars
    - **Defaults:** level, renderer and service name come from ConduitSettings

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────┐
        │ configure_logging(settings=None, level=..., ...)           │
        │     ↓  explicit keyword > ConduitSettings (CONDUIT_LOG_*)  │
        │ build_processors(json_format, service, add_timestamp)      │
        │   1. merge_contextvars                                     │
        │   2. add_log_level                                         │
        │   3. TimeStamper (iso, utc)                                │
        │   4. ServiceMetadata(service)                              │
        │   5. JSON: ECS field names, format_exc_info, JSONRenderer  │
        │      console: ConsoleRenderer                              │
        │     ↓                                                      │
        │ events written to stderr; stdout stays free for output     │
        └────────────────────────────────────────────────────────────┘

Examples:
    >>> from conduit.core.logging import configure_logging, get_logger
    >>> configure_logging(level="INFO", json_format=True, service="billing")
    >>> logger = get_logger(__name__)
    >>> logger.info("operation.complete", operation="ChargeCard", code="OK")

Tags:
    logging, structlog, observability, json-logging, conduit-core

Doc-Types:
    - API Reference
    - Observability Guide
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from conduit.core.serialization import json_default

if TYPE_CHECKING:
    from conduit.core.settings import ConduitSettings


class ServiceMetadata:
    """Processor stamping ``service.name`` on every event."""

    def __init__(self, service: str):
        self.service = service

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", self.service)
        return event_dict


def _ecs_field_names(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


def build_processors(
    *,
    json_format: bool,
    service: str,
    add_timestamp: bool = True,
    colors: bool = False,
) -> list[Processor]:
    """Processor chain for one renderer, ending with the renderer itself."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors.append(ServiceMetadata(service))

    if json_format:
        processors += [
            _ecs_field_names,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=json_default),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level}")
    return number


def configure_logging(
    settings: ConduitSettings | None = None,
    *,
    level: str | None = None,
    json_format: bool | None = None,
    service: str | None = None,
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        settings: Source of defaults; the cached ``get_settings()`` if omitted
        level: Log level name, overriding ``settings.log_level``
        json_format: JSON (True) or console (False), overriding
            ``settings.log_format``
        service: ``service.name`` value, overriding ``settings.service_name``
        add_timestamp: Include an ISO (UTC) timestamp in every event
    """
    if settings is None:
        from conduit.core.settings import get_settings

        settings = get_settings()

    level_number = _level_number(level or settings.log_level)
    if json_format is None:
        json_format = settings.log_format == "json"

    structlog.configure(
        processors=build_processors(
            json_format=json_format,
            service=service or settings.service_name,
            add_timestamp=add_timestamp,
            colors=sys.stderr.isatty(),
        ),
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger; ``name`` is bound as the ``logger`` field.

    Args:
        name: Logger name (usually __name__)
    """
    if name is None:
        return structlog.get_logger()
    # ``logger`` clashes with wrap_logger's first parameter, so build the lazy proxy directly.
    return structlog._config.BoundLoggerLazyProxy(None, initial_values={"logger": name}, logger_factory_args=())


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs.

    Example:
        bind_context(operation="CreateUser")
        logger.info("step.start")  # Includes operation
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(operation="CreateUser"):
            logger.info("operation.start")
        # Context cleared here
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "ServiceMetadata",
    "build_processors",
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
