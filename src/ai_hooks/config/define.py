"""Helpers for writing ai-hooks config files.

Example ``ai_hooks_config.py``::

    from ai_hooks import builtin_preset, define_config, hook

    async def log_shell(ctx, next):
        print("Running:", ctx.event.command)
        await next()

    config = define_config(
        extends=[builtin_preset()],
        hooks=[
            hook("before", ["shell:before"], log_shell)
                .id("log-shell")
                .priority(10)
                .build(),
        ],
        settings={"fail_mode": "closed"},
    )
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ai_hooks.types.config import HooksConfig, Settings
from ai_hooks.types.events import EventType, Phase
from ai_hooks.types.hooks import (
    DEFAULT_PRIORITY,
    HookDefinition,
    HookFilter,
    HookHandler,
)


def define_config(
    hooks: Sequence[HookDefinition] = (),
    *,
    extends: Sequence[HooksConfig] = (),
    settings: Mapping[str, Any] | Settings | None = None,
    adapters: Sequence[str] = (),
) -> HooksConfig:
    """Build a HooksConfig. Intended as the ``config`` of a config file."""
    return HooksConfig(
        hooks=list(hooks),
        extends=list(extends),
        settings=settings,
        adapters=list(adapters),
    )


def _coerce_events(events: Sequence[EventType | str]) -> tuple[EventType, ...]:
    if isinstance(events, (str, EventType)):
        events = [events]
    return tuple(e if isinstance(e, EventType) else EventType(e) for e in events)


class HookBuilder:
    """Fluent builder returned by :func:`hook`."""

    def __init__(
        self,
        phase: Phase | str,
        events: Sequence[EventType | str],
        handler: HookHandler,
    ) -> None:
        self._phase = Phase(phase)
        self._events = _coerce_events(events)
        self._handler = handler
        joined = [e.value for e in self._events]
        self._id = f"hook-{'-'.join(joined)}-{int(time.time() * 1000)}"
        self._name = f"Hook for {', '.join(joined)}"
        self._description: str | None = None
        self._priority = DEFAULT_PRIORITY
        self._filter: HookFilter | None = None
        self._enabled = True

    def id(self, hook_id: str) -> HookBuilder:
        self._id = hook_id
        return self

    def name(self, name: str) -> HookBuilder:
        self._name = name
        return self

    def description(self, description: str) -> HookBuilder:
        self._description = description
        return self

    def priority(self, priority: int) -> HookBuilder:
        self._priority = priority
        return self

    def filter(self, predicate: HookFilter) -> HookBuilder:
        self._filter = predicate
        return self

    def enabled(self, enabled: bool) -> HookBuilder:
        self._enabled = enabled
        return self

    def build(self) -> HookDefinition:
        return HookDefinition(
            id=self._id,
            name=self._name,
            description=self._description,
            events=self._events,
            phase=self._phase,
            handler=self._handler,
            priority=self._priority,
            filter=self._filter,
            enabled=self._enabled,
        )


def hook(
    phase: Phase | str,
    events: Sequence[EventType | str],
    handler: HookHandler,
) -> HookBuilder:
    """Start building a hook for ``events`` in ``phase``."""
    return HookBuilder(phase, events, handler)


def on(
    phase: Phase | str,
    *events: EventType | str,
    id: str | None = None,
    name: str | None = None,
    priority: int = DEFAULT_PRIORITY,
    filter: HookFilter | None = None,
    enabled: bool = True,
) -> Callable[[HookHandler], HookDefinition]:
    """Decorator form of :func:`hook`; the function's docstring becomes the description.

    Example:
        @on("before", "file:write", priority=5)
        async def no_lockfiles(ctx, next):
            if ctx.event.path.endswith(".lock"):
                ctx.block("Lockfiles are managed by the package manager")
                return
            await next()
    """

    def decorator(handler: HookHandler) -> HookDefinition:
        builder = hook(phase, events, handler)
        builder.id(id or handler.__name__.replace("_", "-"))
        builder.name(name or handler.__name__)
        if handler.__doc__:
            builder.description(handler.__doc__.strip().splitlines()[0])
        builder.priority(priority).enabled(enabled)
        if filter is not None:
            builder.filter(filter)
        return builder.build()

    return decorator
