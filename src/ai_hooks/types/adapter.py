"""Adapter contract: how a tool-specific integration plugs into ai-hooks."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

from ai_hooks.types.events import EventType, HookEvent
from ai_hooks.types.hooks import HookDefinition, HookResult

ConfigFormat = Literal["json", "toml", "yaml", "jsonc", "py", "sh"]


@dataclass(frozen=True, slots=True)
class AdapterCapabilities:
    """What a tool integration can do."""

    before_hooks: bool  # Native pre-execution hooks (can block)
    after_hooks: bool  # Native post-execution hooks (observe)
    mcp: bool = False  # Supports MCP servers as a fallback channel
    config_file: bool = True  # Emits native config files
    supported_events: tuple[EventType, ...] = ()
    blockable_events: tuple[EventType, ...] = ()


@dataclass(frozen=True, slots=True)
class GeneratedConfig:
    """One native config artifact, written relative to the project root."""

    path: str
    content: str
    format: ConfigFormat = "json"
    gitignore: bool = False


@dataclass(frozen=True, slots=True)
class Verdict:
    """How a native hook process should exit for a set of results."""

    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""


@runtime_checkable
class Adapter(Protocol):
    """Translates the universal event model into one tool's hook mechanism."""

    id: str
    name: str
    version: str
    capabilities: AdapterCapabilities

    def detect(self) -> bool: ...

    def generate(self, hooks: Sequence[HookDefinition]) -> list[GeneratedConfig]: ...

    def install(self, configs: Sequence[GeneratedConfig]) -> None: ...

    def uninstall(self) -> None: ...

    def map_event(self, event_type: EventType) -> list[str]: ...

    def map_native_event(self, native_event: str) -> list[EventType]: ...

    def translate(self, payload: dict[str, Any]) -> HookEvent | None: ...

    def render_verdict(self, results: Sequence[HookResult]) -> Verdict: ...
