"""
Operation Context - per-call working memory threaded through steps.

Every ``Operation.call`` creates exactly one Context, seeded with the call's
params.  Steps read and write arbitrary keys; three keys are reserved for the
pipeline itself:

- ``error``        the exception (or validation error) that failed the run
- ``failed_task``  the Task that failed
- ``result``       the Result attached by a step, or the default one

A Context is owned by a single call and never shared across calls.

Example:
    def charge(self, ctx: Context) -> bool:
        amount = ctx.contract["amount"]
        ctx["receipt"] = gateway.charge(amount)
        return True
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from conduit.operation.result import Result
    from conduit.operation.task import Task

RESERVED_KEYS = ("error", "failed_task", "result")


class Context(MutableMapping[str, Any]):
    """Mutable key/value store for one operation run."""

    def __init__(self, params: Mapping[str, Any] | None = None, **values: Any):
        self._data: dict[str, Any] = dict(values)
        self._data["params"] = dict(params) if params is not None else {}
        self.reset()

    # =========================================================================
    # Mapping protocol
    # =========================================================================

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    # =========================================================================
    # Reserved keys
    # =========================================================================

    @property
    def params(self) -> dict[str, Any]:
        return self._data["params"]

    @property
    def error(self) -> BaseException | None:
        return self._data.get("error")

    @error.setter
    def error(self, value: BaseException | None) -> None:
        self._data["error"] = value

    @property
    def failed_task(self) -> Task | None:
        return self._data.get("failed_task")

    @failed_task.setter
    def failed_task(self, value: Task | None) -> None:
        self._data["failed_task"] = value

    @property
    def result(self) -> Result | None:
        return self._data.get("result")

    @result.setter
    def result(self, value: Result | None) -> None:
        self._data["result"] = value

    @property
    def contract(self) -> dict[str, Any] | None:
        """Decoded contract params, once contract validation has run."""
        return self._data.get("contract")

    @contract.setter
    def contract(self, value: dict[str, Any] | None) -> None:
        self._data["contract"] = value

    # =========================================================================
    # State
    # =========================================================================

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def success(self) -> bool:
        return not self.failed

    def reset(self) -> None:
        """Clear the reserved keys; params and step data are kept."""
        for key in RESERVED_KEYS:
            self._data[key] = None

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        failed_task = self.failed_task.name if self.failed_task else None
        return f"Context(keys={list(self._data)}, failed={self.failed}, failed_task={failed_task!r})"
