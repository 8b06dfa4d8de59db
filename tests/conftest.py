"""Shared fixtures and hook factories for ai-hooks tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pytest

from ai_hooks.types.events import EventType, Phase, ShellBeforeEvent
from ai_hooks.types.hooks import HookContext, HookDefinition, HookFilter, ToolInfo


class Recorder:
    """Collects the ids of hooks in the order they ran."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def passthrough(self, hook_id: str):
        """Handler that records itself and continues the chain."""

        async def handler(ctx: HookContext, next) -> None:
            self.calls.append(hook_id)
            await next()

        return handler

    def stopper(self, hook_id: str):
        """Handler that records itself and ends the chain without blocking."""

        async def handler(ctx: HookContext, next) -> None:
            self.calls.append(hook_id)

        return handler


def make_hook(
    hook_id: str,
    handler: Any,
    *,
    events: Sequence[EventType | str] = (EventType.SHELL_BEFORE,),
    phase: Phase | str = Phase.BEFORE,
    priority: int = 100,
    enabled: bool = True,
    filter: HookFilter | None = None,
) -> HookDefinition:
    return HookDefinition(
        id=hook_id,
        events=tuple(events),
        phase=phase,
        handler=handler,
        priority=priority,
        enabled=enabled,
        filter=filter,
    )


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def tool() -> ToolInfo:
    return ToolInfo(name="test-tool", version="1.0")


@pytest.fixture
def shell_event() -> ShellBeforeEvent:
    return ShellBeforeEvent(command="ls -la", cwd="/tmp")


@pytest.fixture
def ctx(shell_event: ShellBeforeEvent, tool: ToolInfo) -> HookContext:
    return HookContext(event=shell_event, tool=tool, cwd="/tmp")
