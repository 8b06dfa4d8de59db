"""Shared data types: events, hooks, settings, adapters."""

from ai_hooks.types.adapter import Adapter, AdapterCapabilities, GeneratedConfig, Verdict
from ai_hooks.types.config import (
    AiHooksError,
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    FailMode,
    HooksConfig,
    LogLevel,
    Settings,
)
from ai_hooks.types.events import (
    AfterEvent,
    BeforeEvent,
    EventType,
    HookEvent,
    Phase,
    event_from_dict,
    event_to_dict,
    is_before_event,
    phase_of,
)
from ai_hooks.types.hooks import (
    DEFAULT_PRIORITY,
    HookContext,
    HookDefinition,
    HookHandler,
    HookResult,
    NextFn,
    ToolInfo,
)

__all__ = [
    "DEFAULT_PRIORITY",
    "Adapter",
    "AdapterCapabilities",
    "AfterEvent",
    "AiHooksError",
    "BeforeEvent",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "EventType",
    "FailMode",
    "GeneratedConfig",
    "HookContext",
    "HookDefinition",
    "HookEvent",
    "HookHandler",
    "HookResult",
    "HooksConfig",
    "LogLevel",
    "NextFn",
    "Phase",
    "Settings",
    "ToolInfo",
    "Verdict",
    "event_from_dict",
    "event_to_dict",
    "is_before_event",
    "phase_of",
]
