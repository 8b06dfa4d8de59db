"""Tests for ai_hooks.runtime.engine: registration, dispatch, fail modes."""

from __future__ import annotations

import asyncio
import logging

import pytest

from ai_hooks.config.define import define_config
from ai_hooks.runtime.engine import HookEngine
from ai_hooks.types.config import ConfigValidationError, FailMode, LogLevel
from ai_hooks.types.events import (
    EventType,
    FileWriteEvent,
    Phase,
    ShellAfterEvent,
    ShellBeforeEvent,
)
from ai_hooks.types.hooks import HookResult
from tests.conftest import make_hook


async def _broken(ctx, next):
    raise RuntimeError("handler exploded")


class TestEngineConstruction:
    def test_default_settings(self):
        settings = HookEngine().get_settings()
        assert settings.hook_timeout == 5000
        assert settings.fail_mode is FailMode.OPEN
        assert settings.log_level is LogLevel.WARN
        assert settings.telemetry is False

    def test_settings_overrides(self):
        engine = HookEngine(define_config(settings={"fail_mode": "closed", "hook_timeout": 250}))
        settings = engine.get_settings()
        assert settings.fail_mode is FailMode.CLOSED
        assert settings.hook_timeout == 250

    def test_invalid_settings_raise(self):
        with pytest.raises(ConfigValidationError):
            HookEngine(define_config(settings={"hook_timeout": 0}))
        with pytest.raises(ConfigValidationError):
            HookEngine(define_config(settings={"bogus": 1}))

    def test_presets_registered_before_local_hooks(self, recorder):
        preset = define_config(hooks=[make_hook("preset", recorder.passthrough("preset"))])
        config = define_config(
            hooks=[make_hook("local", recorder.passthrough("local"))],
            extends=[preset],
        )
        engine = HookEngine(config)
        assert [h.id for h in engine.get_hooks(EventType.SHELL_BEFORE)] == ["preset", "local"]

    def test_get_settings_returns_copy(self):
        engine = HookEngine()
        assert engine.get_settings() is not engine.get_settings()
        assert engine.get_settings() == engine.get_settings()


class TestRegistration:
    def test_register_into_each_event_bucket(self, recorder):
        engine = HookEngine()
        hook = make_hook(
            "multi", recorder.passthrough("multi"),
            events=("file:write", "file:edit"),
        )
        engine.register(hook)
        assert engine.get_hooks("file:write") == [hook]
        assert engine.get_hooks(EventType.FILE_EDIT) == [hook]
        assert engine.get_hooks(EventType.SHELL_BEFORE) == []

    def test_get_hooks_deduplicates(self, recorder):
        engine = HookEngine()
        engine.register_all([
            make_hook("multi", recorder.passthrough("multi"), events=("file:write", "file:edit")),
            make_hook("shell", recorder.passthrough("shell")),
        ])
        assert [h.id for h in engine.get_hooks()] == ["multi", "shell"]

    def test_get_hooks_returns_copy(self, recorder):
        engine = HookEngine()
        engine.register(make_hook("a", recorder.passthrough("a")))
        engine.get_hooks(EventType.SHELL_BEFORE).clear()
        assert len(engine.get_hooks(EventType.SHELL_BEFORE)) == 1

    def test_unregister_removes_from_all_buckets(self, recorder):
        engine = HookEngine()
        engine.register(make_hook(
            "multi", recorder.passthrough("multi"), events=("file:write", "file:edit"),
        ))
        engine.register(make_hook("other", recorder.passthrough("other"), events=("file:edit",)))

        assert engine.unregister("multi") is True
        assert engine.get_hooks(EventType.FILE_WRITE) == []
        assert [h.id for h in engine.get_hooks(EventType.FILE_EDIT)] == ["other"]
        assert all(h.id != "multi" for h in engine.get_hooks())

    def test_unregister_unknown_returns_false(self):
        assert HookEngine().unregister("missing") is False

    def test_duplicate_id_warns_and_still_registers(self, recorder, caplog):
        engine = HookEngine()
        engine.register(make_hook("dup", recorder.passthrough("dup-1")))
        with caplog.at_level(logging.WARNING, logger="ai_hooks.runtime.engine"):
            engine.register(make_hook("dup", recorder.passthrough("dup-2")))
        assert "registered more than once" in caplog.text
        assert len(engine.get_hooks(EventType.SHELL_BEFORE)) == 2

    def test_phase_counts(self, recorder):
        engine = HookEngine()
        engine.register(make_hook("b1", recorder.passthrough("b1")))
        engine.register(make_hook("b2", recorder.passthrough("b2"), events=("file:write",)))
        engine.register(make_hook(
            "a1", recorder.passthrough("a1"), events=("shell:after",), phase="after",
        ))
        assert engine.phase_counts == {Phase.BEFORE: 2, Phase.AFTER: 1}


class TestEmit:
    @pytest.mark.asyncio
    async def test_no_hooks_returns_empty(self, tool, shell_event):
        assert await HookEngine().emit(shell_event, tool) == []

    @pytest.mark.asyncio
    async def test_priority_order(self, recorder, tool, shell_event):
        engine = HookEngine()
        engine.register(make_hook("C", recorder.passthrough("C"), priority=300))
        engine.register(make_hook("A", recorder.passthrough("A"), priority=10))
        engine.register(make_hook("B", recorder.passthrough("B"), priority=50))
        await engine.emit(shell_event, tool)
        assert recorder.calls == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_only_matching_phase_runs(self, recorder, tool, shell_event):
        engine = HookEngine()
        engine.register(make_hook("before", recorder.passthrough("before")))
        engine.register(make_hook(
            "wrong-phase", recorder.passthrough("wrong-phase"), phase="after",
        ))
        await engine.emit(shell_event, tool)
        assert recorder.calls == ["before"]

    @pytest.mark.asyncio
    async def test_disabled_and_filtered_hooks_do_not_run(self, recorder, tool, shell_event):
        engine = HookEngine()
        engine.register(make_hook("off", recorder.passthrough("off"), enabled=False))
        engine.register(make_hook("skip", recorder.passthrough("skip"), filter=lambda c: False))
        engine.register(make_hook("run", recorder.passthrough("run")))
        await engine.emit(shell_event, tool)
        assert recorder.calls == ["run"]

    @pytest.mark.asyncio
    async def test_context_carries_tool_and_cwd(self, tool, shell_event, tmp_path):
        seen = {}

        async def inspect_ctx(ctx, next):
            seen["tool"] = ctx.tool
            seen["cwd"] = ctx.cwd
            seen["event"] = ctx.event
            await next()

        engine = HookEngine(define_config(
            hooks=[make_hook("inspect", inspect_ctx)],
            settings={"cwd": str(tmp_path)},
        ))
        await engine.emit(shell_event, tool)
        assert seen == {"tool": tool, "cwd": str(tmp_path), "event": shell_event}

    @pytest.mark.asyncio
    async def test_fresh_context_per_emission(self, tool, shell_event):
        counts: list[int] = []

        async def counter(ctx, next):
            ctx.state["n"] = ctx.state.get("n", 0) + 1
            counts.append(ctx.state["n"])
            await next()

        engine = HookEngine(define_config(hooks=[make_hook("count", counter)]))
        await engine.emit(shell_event, tool)
        await engine.emit(shell_event, tool)
        assert counts == [1, 1]

    @pytest.mark.asyncio
    async def test_after_event_results_are_observations(self, tool):
        async def observe(ctx, next):
            ctx.results.append(HookResult.observe(exit_code=ctx.event.exit_code))
            await next()

        engine = HookEngine(define_config(hooks=[
            make_hook("obs", observe, events=("shell:after",), phase="after"),
        ]))
        results = await engine.emit(ShellAfterEvent(command="ls", exit_code=3), tool)
        assert results == [HookResult(data={"exit_code": 3})]

    @pytest.mark.asyncio
    async def test_timeout_is_recorded_and_chain_continues(self, recorder, tool, shell_event):
        async def slow(ctx, next):
            await asyncio.sleep(10)

        engine = HookEngine(define_config(
            hooks=[
                make_hook("slow", slow, priority=1),
                make_hook("fast", recorder.passthrough("fast"), priority=2),
            ],
            settings={"hook_timeout": 50},
        ))
        results = await engine.emit(shell_event, tool)
        assert results == [HookResult(blocked=False, reason="slow timed out after 50ms")]
        assert recorder.calls == ["fast"]


class TestFailModes:
    @pytest.mark.asyncio
    async def test_fail_open_returns_empty(self, tool, shell_event, caplog):
        engine = HookEngine(define_config(hooks=[make_hook("broken", _broken)]))
        with caplog.at_level(logging.ERROR, logger="ai_hooks.runtime.engine"):
            results = await engine.emit(shell_event, tool)
        assert results == []
        assert "handler exploded" in caplog.text

    @pytest.mark.asyncio
    async def test_fail_closed_blocks(self, tool, shell_event):
        engine = HookEngine(define_config(
            hooks=[make_hook("broken", _broken)],
            settings={"fail_mode": "closed"},
        ))
        results = await engine.emit(shell_event, tool)
        assert len(results) == 1
        assert results[0].blocked is True
        assert "fail-closed" in results[0].reason
        assert "handler exploded" in results[0].reason

    @pytest.mark.asyncio
    async def test_fail_closed_is_blocked(self, tool, shell_event):
        engine = HookEngine(define_config(
            hooks=[make_hook("broken", _broken)],
            settings={"fail_mode": "closed"},
        ))
        verdict = await engine.is_blocked(shell_event, tool)
        assert verdict.blocked is True

    @pytest.mark.asyncio
    async def test_filter_error_uses_fail_mode(self, recorder, tool, shell_event):
        def bad_filter(ctx):
            raise ValueError("bad filter")

        engine = HookEngine(define_config(
            hooks=[make_hook("f", recorder.passthrough("f"), filter=bad_filter)],
            settings={"fail_mode": "closed"},
        ))
        results = await engine.emit(shell_event, tool)
        assert results[0].blocked is True
        assert "bad filter" in results[0].reason

    @pytest.mark.asyncio
    async def test_silent_log_level_suppresses_logging(self, tool, shell_event, caplog):
        engine = HookEngine(define_config(
            hooks=[make_hook("broken", _broken)],
            settings={"log_level": "silent"},
        ))
        with caplog.at_level(logging.DEBUG, logger="ai_hooks.runtime.engine"):
            assert await engine.emit(shell_event, tool) == []
        assert caplog.text == ""


class TestIsBlocked:
    @pytest.mark.asyncio
    async def test_returns_first_block(self, tool):
        async def first(ctx, next):
            ctx.block("first reason")
            await next()

        engine = HookEngine(define_config(hooks=[
            make_hook("first", first, events=("file:write",)),
        ]))
        verdict = await engine.is_blocked(FileWriteEvent(path="a.txt", content="x"), tool)
        assert verdict == HookResult(blocked=True, reason="first reason")

    @pytest.mark.asyncio
    async def test_not_blocked(self, recorder, tool, shell_event):
        engine = HookEngine(define_config(hooks=[make_hook("ok", recorder.passthrough("ok"))]))
        verdict = await engine.is_blocked(shell_event, tool)
        assert verdict == HookResult(blocked=False)
        assert recorder.calls == ["ok"]

    @pytest.mark.asyncio
    async def test_after_event_never_blocked_and_runs_nothing(self, recorder, tool):
        async def blocker(ctx, next):
            recorder.calls.append("after")
            ctx.block("too late")

        engine = HookEngine(define_config(hooks=[
            make_hook("after", blocker, events=("shell:after",), phase="after"),
        ]))
        verdict = await engine.is_blocked(ShellAfterEvent(command="ls"), tool)
        assert verdict.blocked is False
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_timeout_alone_does_not_block(self, tool, shell_event):
        async def slow(ctx, next):
            await asyncio.sleep(10)

        engine = HookEngine(define_config(
            hooks=[make_hook("slow", slow)],
            settings={"hook_timeout": 20},
        ))
        verdict = await engine.is_blocked(shell_event, tool)
        assert verdict.blocked is False
