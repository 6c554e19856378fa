"""Operation Result — declarative, memoized outcome of an operation run.

Manifesto:
    Every ``Operation.call`` yields exactly one Result whose shape
    (``code``, ``message``, ``data``, ``error`` plus any fields a subclass
    declares) is computed from the run's Context.  Callers never inspect
    the Context directly; they read the Result, or flatten it with
    ``to_dict()`` into a response body.

ARCHITECTURE
────────────
::

    Result
      ├── code      result_field → class name     ("OK" on Success)
      ├── message   result_field → ""
      ├── data      result_field → {}
      ├── error     result_field → ctx.error
      ├── ok        code == "OK"
      └── to_dict() declared fields (minus data) + data merged on top

    result_field(value)          constant
    result_field(fn)             resolver fn(result, ctx)
    @result_field                decorator form

Field values are resolved once, in declaration order, when the Result is
constructed, then cached for the object's lifetime.  A resolver may read
other fields through ``result.<name>``.

Example::

    class Created(Result):
        code = "CREATED"
        user_id = result_field(lambda result, ctx: ctx["user"].id)

        @result_field
        def message(self, ctx):
            return f"User {self.user_id} created"

Tags:
    conduit-core, operation, result, envelope

Doc-Types:
    api-reference
"""

from __future__ import annotations

import copy
import json
from collections.abc import Callable, Mapping
from typing import Any

from conduit.core.serialization import json_default
from conduit.operation.context import Context

DEFAULT_SUCCESS_CODE = "OK"
DEFAULT_SUCCESS_MESSAGE = "Request is now completed."

_UNSET = object()


class ResultField:
    """Descriptor for a declared, memoized Result field."""

    def __init__(self, value: Any = _UNSET, *, resolver: Callable[[Any, Context], Any] | None = None):
        self.value = None if value is _UNSET else value
        self.resolver = resolver
        self.name: str | None = None
        self.__doc__ = getattr(resolver, "__doc__", None)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        values = instance.__dict__.setdefault("_field_values", {})
        if self.name not in values:
            values[self.name] = self.resolve(instance, instance.context)
        return values[self.name]

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"Result field {self.name!r} is read-only")

    def resolve(self, result: Any, context: Context) -> Any:
        if self.resolver is None:
            return copy.deepcopy(self.value)
        return self.resolver(result, context)


def result_field(value: Any = _UNSET) -> ResultField:
    """Declare a Result field.

    A callable is used as a resolver ``fn(result, ctx)``; anything else is a
    constant.  Wrap callable constants in a lambda.
    """
    if callable(value):
        return ResultField(resolver=value)
    return ResultField(value)


def _collect_fields(cls: type) -> tuple[str, ...]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name, member in vars(klass).items():
            if isinstance(member, ResultField) and name not in names:
                names.append(name)
    return tuple(names)


class Result:
    """Base class for all operation results.

    Subclasses override fields by redeclaring them, either with
    ``result_field(...)`` or, for fields the parent already declares, with a
    plain value or a ``def name(self, ctx)`` method.
    """

    __result_fields__: tuple[str, ...] = ()

    # Exception classes a caller may choose to treat as non-errors
    ignored_errors: tuple[type[BaseException], ...] = ()

    @result_field
    def code(self, ctx: Context) -> Any:
        return type(self).__name__

    message = result_field("")

    @result_field
    def data(self, ctx: Context) -> Any:
        return {}

    @result_field
    def error(self, ctx: Context) -> Any:
        return ctx.error

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        inherited = _collect_fields(cls.__mro__[1])
        for name, member in list(vars(cls).items()):
            if name not in inherited or isinstance(member, ResultField):
                continue
            if isinstance(member, (staticmethod, classmethod, property)):
                continue
            field = result_field(member)
            field.__set_name__(cls, name)
            setattr(cls, name, field)
        cls.__result_fields__ = _collect_fields(cls)

    def __init__(self, context: Context | None = None):
        self.context = context if context is not None else Context()
        self._field_values: dict[str, Any] = {}
        for name in self.__result_fields__:
            getattr(self, name)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return cls.__result_fields__

    @property
    def ok(self) -> bool:
        return self.code == DEFAULT_SUCCESS_CODE

    @property
    def has_data(self) -> bool:
        return self.data is not None and bool(self.data)

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def ignore_error(self, error: Any = _UNSET) -> bool:
        """True if ``error`` (default: this result's error) is an ignored kind."""
        if error is _UNSET:
            error = self.error
        return error is not None and isinstance(error, self.ignored_errors)

    def fields(self) -> dict[str, Any]:
        """All declared field values, in declaration order."""
        return {name: getattr(self, name) for name in self.__result_fields__}

    def to_dict(self) -> dict[str, Any]:
        """Flatten declared fields (except ``data``) and merge ``data`` on top."""
        flat = {
            name: _clone(value)
            for name, value in self.fields().items()
            if name != "data"
        }
        data = self.data
        if isinstance(data, Mapping):
            flat.update({k: _clone(v) for k, v in data.items()})
        elif data is not None:
            flat["data"] = _clone(data)
        return flat

    def to_json(self, **kwargs: Any) -> str:
        kwargs.setdefault("default", json_default)
        return json.dumps(self.to_dict(), **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


Result.__result_fields__ = _collect_fields(Result)


def _clone(value: Any) -> Any:
    # exceptions are shared, not copied: their __init__ signatures vary
    if isinstance(value, BaseException):
        return value
    return copy.deepcopy(value)


__all__ = [
    "DEFAULT_SUCCESS_CODE",
    "DEFAULT_SUCCESS_MESSAGE",
    "Result",
    "ResultField",
    "result_field",
]
