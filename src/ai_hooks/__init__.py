"""ai-hooks: universal lifecycle hooks for AI coding tools.

Usage:
    import ai_hooks

    async def no_force_push(ctx, next):
        if "push --force" in ctx.event.command:
            ctx.block("Force pushes are not allowed")
            return
        await next()

    engine = ai_hooks.HookEngine(ai_hooks.define_config(
        extends=[ai_hooks.builtin_preset()],
        hooks=[ai_hooks.hook("before", ["shell:before"], no_force_push).id("no-force-push").build()],
    ))
    verdict = await engine.is_blocked(
        ai_hooks.ShellBeforeEvent(command="git push --force"),
        ai_hooks.ToolInfo(name="claude-code"),
    )
"""

from ai_hooks.config.define import define_config, hook, on
from ai_hooks.config.loader import load_config
from ai_hooks.hooks.builtin import BUILTIN_HOOKS, builtin_preset
from ai_hooks.runtime.chain import HookTimeoutError, execute_chain
from ai_hooks.runtime.engine import HookEngine
from ai_hooks.types.config import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    FailMode,
    HooksConfig,
    LogLevel,
    Settings,
)
from ai_hooks.types.events import (
    EventType,
    FileDeleteEvent,
    FileEditEvent,
    FileReadEvent,
    FileWriteEvent,
    HookEvent,
    McpCallEvent,
    McpResultEvent,
    NotificationEvent,
    Phase,
    PromptResponseEvent,
    PromptSubmitEvent,
    SessionEndEvent,
    SessionStartEvent,
    ShellAfterEvent,
    ShellBeforeEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from ai_hooks.types.hooks import HookContext, HookDefinition, HookResult, ToolInfo

__version__ = "0.1.0"

__all__ = [
    # Engine
    "HookEngine",
    "HookTimeoutError",
    "execute_chain",
    # Config
    "BUILTIN_HOOKS",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "FailMode",
    "HooksConfig",
    "LogLevel",
    "Settings",
    "builtin_preset",
    "define_config",
    "hook",
    "load_config",
    "on",
    # Hook types
    "HookContext",
    "HookDefinition",
    "HookResult",
    "ToolInfo",
    # Events
    "EventType",
    "FileDeleteEvent",
    "FileEditEvent",
    "FileReadEvent",
    "FileWriteEvent",
    "HookEvent",
    "McpCallEvent",
    "McpResultEvent",
    "NotificationEvent",
    "Phase",
    "PromptResponseEvent",
    "PromptSubmitEvent",
    "SessionEndEvent",
    "SessionStartEvent",
    "ShellAfterEvent",
    "ShellBeforeEvent",
    "ToolCallEvent",
    "ToolResultEvent",
]
