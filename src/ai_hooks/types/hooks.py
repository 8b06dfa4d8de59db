"""Hook definition, result, and context types."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from ai_hooks.types.events import EventType, HookEvent, Phase

DEFAULT_PRIORITY = 100


@dataclass(frozen=True, slots=True)
class ToolInfo:
    """The AI tool that emitted an event."""

    name: str
    version: str = ""


@dataclass(frozen=True, slots=True)
class HookResult:
    """What a hook records about an event.

    ``blocked=True`` vetoes a "before" event. ``data`` carries arbitrary
    observations (audit records, annotations) back to the caller.
    """

    blocked: bool = False
    reason: str | None = None
    data: dict[str, Any] | None = None

    @classmethod
    def block(cls, reason: str) -> HookResult:
        return cls(blocked=True, reason=reason)

    @classmethod
    def observe(cls, **data: Any) -> HookResult:
        return cls(data=data)


@dataclass(slots=True)
class HookContext:
    """Per-emission context shared by every hook in one chain.

    Built fresh by the engine for each emitted event and discarded once the
    chain finishes. ``state`` is a scratch map for hooks to talk to each
    other within the same emission.
    """

    event: HookEvent
    tool: ToolInfo
    cwd: str = ""
    state: dict[str, Any] = field(default_factory=dict)
    results: list[HookResult] = field(default_factory=list)
    started_at: float = field(default_factory=time.time)

    @property
    def is_blocked(self) -> bool:
        return any(r.blocked for r in self.results)

    def block(self, reason: str) -> None:
        """Record a blocking result. Later hooks in the chain will not run."""
        self.results.append(HookResult.block(reason))


NextFn = Callable[[], Awaitable[None]]

# Handlers are either ``async def handler(ctx, next)`` that ``await next()``,
# or plain functions that continue the chain with ``return next()``.
HookHandler = Callable[[HookContext, NextFn], Awaitable[None] | None]

HookFilter = Callable[[HookContext], bool]


@dataclass(frozen=True, slots=True)
class HookDefinition:
    """A registered unit of logic bound to event kinds and a phase."""

    id: str
    events: tuple[EventType, ...]
    phase: Phase
    handler: HookHandler
    name: str = ""
    description: str | None = None
    priority: int = DEFAULT_PRIORITY  # Lower runs first
    enabled: bool = True
    filter: HookFilter | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Hook id must be a non-empty string")
        if isinstance(self.events, (str, EventType)):
            raise ValueError(f"Hook {self.id!r}: events must be a sequence of event types")

        events = tuple(
            e if isinstance(e, EventType) else EventType(e) for e in self.events
        )
        if not events:
            raise ValueError(f"Hook {self.id!r} must listen to at least one event")
        object.__setattr__(self, "events", events)

        if not isinstance(self.phase, Phase):
            object.__setattr__(self, "phase", Phase(self.phase))
        if not callable(self.handler):
            raise ValueError(f"Hook {self.id!r}: handler must be callable")
        if not self.name:
            object.__setattr__(self, "name", self.id)
