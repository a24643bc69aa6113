"""Tests for the tracing helpers."""

import contextvars
from datetime import timedelta

import pytest

from intensive import operation, tracing

span: contextvars.ContextVar[str | None] = contextvars.ContextVar("span", default=None)
scratch: contextvars.ContextVar[int] = contextvars.ContextVar("scratch", default=0)


class TestBindContext:
    """Tests for tracing.bind_context()."""

    @pytest.mark.asyncio
    async def test_steps_see_bound_context(self):
        """Steps observe the context captured at bind time, across breaths."""
        seen = []

        def definition(embed):
            for _ in range(3):
                seen.append(span.get())
                yield

        token = span.set("request")
        op = tracing.bind_context(operation(definition))
        span.reset(token)
        span.set("other")

        await op.run(0)

        assert seen == ["request"] * 3
        assert op.stats.breath_count == 3
        assert span.get() == "other"

    def test_sync_run(self):
        seen = []

        def definition(embed):
            seen.append(span.get())
            yield

        ctx = contextvars.Context()
        ctx.run(span.set, "explicit")
        op = tracing.bind_context(operation(definition), ctx)

        op.run_sync()

        assert seen == ["explicit"]

    @pytest.mark.asyncio
    async def test_step_variables_persist_within_run(self):
        """Variables set by steps survive breaths but do not leak out."""
        seen = []

        def definition(embed):
            scratch.set(scratch.get() + 1)
            yield
            seen.append(scratch.get())
            yield

        op = tracing.bind_context(operation(definition))

        await op.run(0)
        await op.run(0)

        assert seen == [1, 1]
        assert scratch.get() == 0

    def test_embedded_children_share_context(self):
        seen = []

        def child(embed):
            seen.append(span.get())
            yield

        def parent(embed):
            yield from embed(operation(child))

        ctx = contextvars.Context()
        ctx.run(span.set, "parent")
        tracing.bind_context(operation(parent), ctx).run_sync()

        assert seen == ["parent"]

    def test_cleanup_runs_in_context(self):
        """Cleanup of aborted steps runs inside the bound context too."""
        seen = []

        def definition(embed):
            try:
                yield
                raise RuntimeError("fail")
            finally:
                seen.append(span.get())

        ctx = contextvars.Context()
        ctx.run(span.set, "bound")
        op = tracing.bind_context(operation(definition), ctx)

        with pytest.raises(RuntimeError):
            op.run_sync()

        assert seen == ["bound"]


class TestTrace:
    """Tests for tracing.trace()."""

    @pytest.mark.asyncio
    async def test_summary(self, make_counting):
        summaries = []
        op = tracing.trace(make_counting(4), "crunch", sink=summaries.append)

        await op.run(0)

        assert len(summaries) == 1
        summary = summaries[0]
        assert summary.name == "crunch"
        assert summary.checkpoint_count == 4
        assert summary.breath_count == 4
        assert summary.late_breath_count <= summary.breath_count
        assert summary.breath_density == 1.0
        assert summary.error is None
        assert summary.max_interval <= summary.runtime

    def test_sync_summary(self, make_counting):
        summaries = []
        op = tracing.trace(make_counting(2), sink=summaries.append)

        op.run_sync()

        summary = summaries[0]
        assert summary.name == op.name
        assert summary.breath_count == 0
        assert summary.late_breath_density is None
        assert summary.max_interval == summary.runtime
        assert summary.avg_breath_interval == summary.runtime

    def test_summary_on_failure(self):
        summaries = []
        boom = RuntimeError("boom")

        def definition(embed):
            yield
            raise boom

        op = tracing.trace(operation(definition), sink=summaries.append)

        with pytest.raises(RuntimeError):
            op.run_sync()

        assert summaries[0].error is boom
        assert summaries[0].checkpoint_count == 1

    @pytest.mark.asyncio
    async def test_counters_reset_per_run(self, make_counting):
        summaries = []
        op = tracing.trace(make_counting(3), sink=summaries.append)

        await op.run(0)
        op.run_sync()

        assert [s.breath_count for s in summaries] == [3, 0]

    def test_empty_densities(self):
        summary = tracing.TraceSummary(
            name="empty",
            checkpoint_count=0,
            breath_count=0,
            late_breath_count=0,
            max_interval=timedelta(0),
            runtime=timedelta(milliseconds=2),
        )

        assert summary.breath_density is None
        assert summary.avg_checkpoint_interval == timedelta(milliseconds=2)
