"""Tests for conduit.operation.context."""

from conduit.operation.context import RESERVED_KEYS, Context
from conduit.operation.task import Task, TaskKind


class TestContext:
    def test_seeded_with_params(self):
        ctx = Context({"age": "4"}, user=None)
        assert ctx.params == {"age": "4"}
        assert ctx["params"] is ctx.params
        assert "user" in ctx

    def test_params_are_copied(self):
        params = {"age": "4"}
        ctx = Context(params)
        ctx.params["age"] = "5"
        assert params == {"age": "4"}

    def test_reserved_keys_start_empty(self):
        ctx = Context()
        for key in RESERVED_KEYS:
            assert ctx[key] is None
        assert ctx.success
        assert not ctx.failed
        assert ctx.contract is None

    def test_failed_follows_error(self):
        ctx = Context()
        ctx.error = ValueError("boom")
        assert ctx.failed
        assert not ctx.success
        assert ctx["error"] is ctx.error

    def test_mutable_mapping(self):
        ctx = Context()
        ctx["user"] = 1
        assert ctx.get("user") == 1
        del ctx["user"]
        assert "user" not in ctx
        assert len(ctx) == len(ctx.to_dict())

    def test_reset_keeps_step_data(self):
        ctx = Context({"a": 1})
        ctx["user"] = 2
        ctx.error = ValueError()
        ctx.failed_task = Task(TaskKind.STEP, "save")
        ctx.result = object()
        ctx.reset()
        assert ctx.error is None
        assert ctx.failed_task is None
        assert ctx.result is None
        assert ctx["user"] == 2
        assert ctx.params == {"a": 1}

    def test_repr(self):
        ctx = Context()
        ctx.failed_task = Task(TaskKind.STEP, "save")
        assert "failed_task='save'" in repr(ctx)
