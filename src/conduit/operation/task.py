"""Tasks — step descriptors declared on an Operation class.

ARCHITECTURE
────────────
::

    Task(kind, name, options)
    TaskKind     ── step     must return CONTINUE (or truthy)
                 ── pass     outcome ignored, only exceptions stop the chain
                 ── failure  runs after the chain failed, unconditionally
    StepOutcome  ── CONTINUE | STOP  (tagged step return)

    @step / @pass_step / @on_failure   method decorators

Example::

    class Register(Operation):
        @step
        def create_user(self, ctx):
            ctx["user"] = users.create(**ctx.contract)
            return StepOutcome.CONTINUE

        @pass_step
        def notify(self, ctx):
            mailer.welcome(ctx["user"])

        @on_failure
        def rollback(self, ctx):
            users.delete(ctx.get("user"))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

TASK_ATTRIBUTE = "__operation_task__"


class TaskKind(str, Enum):
    """Kind of operation task."""

    STEP = "step"
    PASS = "pass"
    FAILURE = "failure"


class StepOutcome(str, Enum):
    """Tagged return value of a step action."""

    CONTINUE = "continue"
    STOP = "stop"

    @classmethod
    def of(cls, value: Any) -> StepOutcome:
        """Normalise a step's return value; plain values go by truthiness."""
        if isinstance(value, cls):
            return value
        return cls.CONTINUE if value else cls.STOP


@dataclass(frozen=True)
class Task:
    """An ordered step descriptor.

    Attributes:
        kind: step, pass, or failure
        name: Name of the operation method bound to this task
        options: Free-form options given at declaration
    """

    kind: TaskKind
    name: str
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_step(self) -> bool:
        return self.kind == TaskKind.STEP

    @property
    def is_pass(self) -> bool:
        return self.kind == TaskKind.PASS

    @property
    def is_failure(self) -> bool:
        return self.kind == TaskKind.FAILURE

    @property
    def description(self) -> str:
        """Human phrase for messages, e.g. ``charge_card`` → ``charge card``."""
        return self.name.replace("_", " ")


def _declare(kind: TaskKind, fn: F | None, options: dict[str, Any]) -> Any:
    def decorator(func: F) -> F:
        setattr(func, TASK_ATTRIBUTE, Task(kind, func.__name__, dict(options)))
        return func

    if fn is not None:
        return decorator(fn)
    return decorator


def step(fn: F | None = None, **options: Any) -> Any:
    """Declare a method as a step task (``@step`` or ``@step(**options)``)."""
    return _declare(TaskKind.STEP, fn, options)


def pass_step(fn: F | None = None, **options: Any) -> Any:
    """Declare a method as a pass task whose return value is ignored."""
    return _declare(TaskKind.PASS, fn, options)


def on_failure(fn: F | None = None, **options: Any) -> Any:
    """Declare a method as a failure task run after the chain has failed."""
    return _declare(TaskKind.FAILURE, fn, options)


def declared_task(member: Any) -> Task | None:
    """Return the Task attached to a decorated class member, if any."""
    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    return getattr(member, TASK_ATTRIBUTE, None)


__all__ = [
    "Task",
    "TaskKind",
    "StepOutcome",
    "step",
    "pass_step",
    "on_failure",
    "declared_task",
]
