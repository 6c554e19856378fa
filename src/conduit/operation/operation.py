"""Operation — railway-oriented pipeline of fallible steps.

An Operation declares an ordered list of tasks on its class body.  ``call``
runs them against a fresh Context, short-circuits on the first failure,
runs the compensating failure tasks and always returns exactly one Result.
``call`` never raises.

ARCHITECTURE
────────────
::

    call(params)
      1. Context(params)
      2. step / pass tasks in order
           exception            → ctx.error, ctx.failed_task
           step returns STOP    → failed; ctx.error ||= FailedTask,
                                  an attached ctx.result is kept
           ctx.result not a Result → OperationError
           pass                 → outcome ignored
           stop at first failure
      3. failed? → every failure task, in order
      4. ctx.result ||= Success | Failure
      5. return ctx.result

    contract = {...}            Schema bound to the first step
                                (validate_contract → InvalidContract)

    Success / Failure / InvalidContract   Result classes on the Operation;
    a nested ``class Result`` derives Success and Failure from it.

Example::

    class Register(Operation):
        contract = {
            "email": {"type": "string", "match": r"@"},
            "age": {"type": "integer", "required": True},
        }

        @step
        def create_user(self, ctx):
            ctx["user"] = users.create(**ctx.contract)
            return True

        @on_failure
        def rollback(self, ctx):
            users.discard(ctx.get("user"))

    result = Register().call({"email": "a@b.c", "age": "42"})
    result.ok          # True
    result.to_dict()   # {"code": "OK", "message": "...", "error": None}

Tags:
    conduit-core, operation, pipeline, railway, steps

Doc-Types:
    api-reference
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from conduit.core.errors import (
    ConduitError,
    FailedTask,
    OperationDefinitionError,
    OperationError,
    error_code,
)
from conduit.core.logging import get_logger
from conduit.operation.context import Context
from conduit.operation.result import (
    DEFAULT_SUCCESS_CODE,
    DEFAULT_SUCCESS_MESSAGE,
    Result,
    result_field,
)
from conduit.operation.task import StepOutcome, Task, TaskKind, declared_task
from conduit.schema.schema import Schema

logger = get_logger(__name__)

CONTRACT_STEP = "validate_contract"


def _error_message(error: BaseException | None) -> str:
    if isinstance(error, ConduitError):
        return error.message
    return str(error)


def _result_code(result: Any) -> Any:
    return getattr(result, "code", None)


def failure_message(ctx: Context) -> str:
    """Message for a run that failed on ``ctx.failed_task`` with ``ctx.error``."""
    error = ctx.error
    task = ctx.failed_task
    if task is None:
        return f"Request failed due to unexpected error: {_error_message(error)} ({error_code(error)})"
    return f"Failed to {task.description}: {_error_message(error)} ({error_code(error)})"


class Operation:
    """Base class for operations.

    Subclasses declare tasks with ``@step``, ``@pass_step`` and
    ``@on_failure``; parent tasks are inherited first, in order.
    """

    step_tasks: ClassVar[tuple[Task, ...]] = ()
    fail_tasks: ClassVar[tuple[Task, ...]] = ()
    contract: ClassVar[Schema | None] = None

    Result = Result

    class Success(Result):
        code = DEFAULT_SUCCESS_CODE
        message = DEFAULT_SUCCESS_MESSAGE

    class Failure(Result):
        @result_field
        def code(self, ctx: Context) -> Any:
            return error_code(ctx.error)

        @result_field
        def message(self, ctx: Context) -> Any:
            return failure_message(ctx)

    class InvalidContract(Result):
        @result_field
        def code(self, ctx: Context) -> Any:
            return error_code(ctx.error)

        @result_field
        def message(self, ctx: Context) -> Any:
            return _error_message(ctx.error)

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        steps = list(cls.step_tasks)
        fails = list(cls.fail_tasks)
        declared = {task.name for task in steps + fails}

        for attr, member in vars(cls).items():
            task = declared_task(member)
            if task is None or attr in declared:
                continue
            task = dataclasses.replace(task, name=attr)
            (fails if task.is_failure else steps).append(task)
            declared.add(attr)

        if vars(cls).get("contract") is not None:
            cls.contract = _build_contract(cls, vars(cls)["contract"])
            steps = [task for task in steps if task.name != CONTRACT_STEP]
            steps.insert(0, Task(TaskKind.STEP, CONTRACT_STEP))

        cls.step_tasks = tuple(steps)
        cls.fail_tasks = tuple(fails)
        cls._derive_results()

    @classmethod
    def _derive_results(cls) -> None:
        """Derive Success/Failure from a ``Result`` declared on this class."""
        own = vars(cls)
        if "Result" not in own:
            return
        base = own["Result"]
        if not (isinstance(base, type) and issubclass(base, Result)):
            raise OperationDefinitionError(f"{cls.__name__}.Result MUST subclass Result")
        if "Success" not in own:
            cls.Success = _subclass(
                cls,
                base,
                "Success",
                code=DEFAULT_SUCCESS_CODE,
                message=DEFAULT_SUCCESS_MESSAGE,
            )
        if "Failure" not in own:
            failure_code = f"{cls.__name__}Failure"
            cls.Failure = _subclass(
                cls,
                base,
                "Failure",
                code=failure_code,
                message=result_field(lambda result, ctx: failure_message(ctx)),
            )

    # =========================================================================
    # Entry points
    # =========================================================================

    @classmethod
    def run(cls, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Result:
        """Instantiate the operation and call it once."""
        return cls().call(params, **kwargs)

    def __call__(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Result:
        return self.call(params, **kwargs)

    def call(self, params: Mapping[str, Any] | None = None, **kwargs: Any) -> Result:
        """Run every task against a fresh Context and return its Result."""
        context = self.create_context({**(params or {}), **kwargs})
        name = type(self).__name__

        logger.debug("operation.start", operation=name, step_count=len(self.step_tasks))

        self.run_step_tasks(context)
        if context.failed:
            self.run_fail_tasks(context)
        self.set_default_result(context)

        result = context.result
        logger.debug(
            "operation.complete",
            operation=name,
            code=_result_code(result),
            failed=context.failed,
            failed_task=context.failed_task.name if context.failed_task else None,
        )
        return result

    # =========================================================================
    # Pipeline
    # =========================================================================

    def create_context(self, params: Mapping[str, Any]) -> Context:
        return Context(params=params)

    def run_step_tasks(self, context: Context) -> None:
        for task in self.step_tasks:
            if not self.run_step_task(task, context) or context.failed:
                break

    def run_step_task(self, task: Task, context: Context) -> bool:
        """Run one step/pass task; False means the chain must stop."""
        try:
            outcome = StepOutcome.of(self._action(task)(context))
            stopped = task.is_step and outcome is StepOutcome.STOP
            if stopped and context.result is None and context.error is None:
                raise FailedTask(task)
        except Exception as e:
            context.failed_task = task
            context.error = e
            if isinstance(e, FailedTask):
                logger.info("operation.step.failed", operation=type(self).__name__, step=task.name)
            else:
                logger.exception(
                    "operation.step.exception",
                    operation=type(self).__name__,
                    step=task.name,
                    error=str(e),
                )
            return False

        if context.result is not None and not isinstance(context.result, Result):
            attached = type(context.result).__name__
            context.result = None
            context.failed_task = task
            context.error = OperationError(f"Step {task.name} attached a {attached} instead of a Result")
            logger.warning("operation.step.invalid_result", operation=type(self).__name__, step=task.name)
            return False

        if stopped or context.failed:
            # The step declined to continue with its own error and/or Result
            context.failed_task = task
            if context.error is None:
                context.error = FailedTask(task)
            logger.info(
                "operation.step.stopped",
                operation=type(self).__name__,
                step=task.name,
                code=_result_code(context.result),
                error=error_code(context.error),
            )
            return False
        return True

    def run_fail_tasks(self, context: Context) -> None:
        for task in self.fail_tasks:
            self.run_fail_task(task, context)

    def run_fail_task(self, task: Task, context: Context) -> None:
        try:
            self._action(task)(context)
        except Exception as e:
            logger.exception(
                "operation.failure_task.exception",
                operation=type(self).__name__,
                task=task.name,
                error=str(e),
            )

    def set_default_result(self, context: Context) -> None:
        if isinstance(context.result, Result):
            return
        if context.result is not None:
            attached = type(context.result).__name__
            context.result = None
            context.error = OperationError(f"Operation attached a {attached} instead of a Result")
        result_class = self.result_class(context)
        try:
            context.result = result_class(context)
        except Exception as e:
            logger.exception(
                "operation.result.exception",
                operation=type(self).__name__,
                result=result_class.__name__,
                error=str(e),
            )
            context.error = e
            context.result = Operation.Failure(context)

    def result_class(self, context: Context) -> type[Result]:
        return type(self).Failure if context.failed else type(self).Success

    def _action(self, task: Task) -> Callable[[Context], Any]:
        action = getattr(self, task.name, None)
        if action is None or not callable(action):
            raise OperationDefinitionError(
                f"{type(self).__name__} has no method for {task.kind.value} task: {task.name}"
            )
        return action

    # =========================================================================
    # Built-in steps and helpers
    # =========================================================================

    def validate_contract(self, context: Context) -> StepOutcome:
        """Parse ``context.params`` with the contract schema."""
        contract = type(self).contract
        if contract is None:
            raise OperationDefinitionError(f"{type(self).__name__} declares no contract")
        parsed = contract.parse(context.params, raise_on_error=False)
        if parsed.failed:
            context.error = parsed.error
            context.result = type(self).InvalidContract(context)
            return StepOutcome.STOP
        context.contract = parsed.data
        return StepOutcome.CONTINUE

    def fail_by_task(self, context: Context) -> StepOutcome:
        """Run the ``fail_<task>`` hook (if any) and attach the Failure result."""
        task = context.failed_task
        if task is not None:
            hook = getattr(self, f"fail_{task.name}", None)
            if callable(hook):
                hook(context)
        context.result = type(self).Failure(context)
        return StepOutcome.STOP

    @classmethod
    def describe(cls) -> dict[str, Any]:
        """Declared tasks and contract attributes, for introspection."""
        return {
            "operation": cls.__name__,
            "contract": list(cls.contract.attributes) if cls.contract is not None else [],
            "steps": [{"kind": t.kind.value, "name": t.name} for t in cls.step_tasks],
            "failure_tasks": [t.name for t in cls.fail_tasks],
        }


def _build_contract(cls: type, spec: Any) -> Schema:
    if isinstance(spec, Schema):
        return spec
    if isinstance(spec, Mapping) or callable(spec):
        return Schema(spec, name=f"{cls.__name__}.contract")
    raise OperationDefinitionError(
        f"{cls.__name__}.contract MUST be a Schema, a spec mapping, or a builder callable"
    )


def _subclass(owner: type, base: type[Result], name: str, **fields: Any) -> type[Result]:
    namespace: dict[str, Any] = {
        "__module__": owner.__module__,
        "__qualname__": f"{owner.__qualname__}.{name}",
        **fields,
    }
    return type(name, (base,), namespace)


__all__ = ["Operation", "CONTRACT_STEP", "failure_message"]
