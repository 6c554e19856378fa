"""Operation pipeline — railway-oriented business operations.

Architecture::

    context.py      Context: per-call params + reserved error/failed_task/result
    task.py         Task, TaskKind, StepOutcome, @step / @pass_step / @on_failure
    result.py       Result, result_field (declarative, memoized outcome)
    operation.py    Operation: contract, step chain, failure tasks
"""

from conduit.operation.context import Context
from conduit.operation.operation import CONTRACT_STEP, Operation, failure_message
from conduit.operation.result import (
    DEFAULT_SUCCESS_CODE,
    DEFAULT_SUCCESS_MESSAGE,
    Result,
    ResultField,
    result_field,
)
from conduit.operation.task import StepOutcome, Task, TaskKind, on_failure, pass_step, step

__all__ = [
    "CONTRACT_STEP",
    "Context",
    "DEFAULT_SUCCESS_CODE",
    "DEFAULT_SUCCESS_MESSAGE",
    "Operation",
    "Result",
    "ResultField",
    "StepOutcome",
    "Task",
    "TaskKind",
    "failure_message",
    "on_failure",
    "pass_step",
    "result_field",
    "step",
]
