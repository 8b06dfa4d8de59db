"""Universal event taxonomy shared by every tool adapter.

Each adapter translates these events to and from its tool's native hook
names. The set of kinds is closed: adding one means adding an ``EventType``
member, its dataclass, and a branch in :func:`phase_of`.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar


class EventType(Enum):
    """Lifecycle moments a hook can subscribe to."""

    SESSION_START = "session:start"
    SESSION_END = "session:end"
    PROMPT_SUBMIT = "prompt:submit"
    PROMPT_RESPONSE = "prompt:response"
    TOOL_BEFORE = "tool:before"
    TOOL_AFTER = "tool:after"
    FILE_READ = "file:read"
    FILE_WRITE = "file:write"
    FILE_EDIT = "file:edit"
    FILE_DELETE = "file:delete"
    SHELL_BEFORE = "shell:before"
    SHELL_AFTER = "shell:after"
    MCP_BEFORE = "mcp:before"
    MCP_AFTER = "mcp:after"
    NOTIFICATION = "notification"


class Phase(Enum):
    """Whether a hook runs before an action (blockable) or after it."""

    BEFORE = "before"
    AFTER = "after"


def phase_of(event_type: EventType) -> Phase:
    """Return the phase an event kind belongs to."""
    match event_type:
        case (
            EventType.SESSION_START
            | EventType.PROMPT_SUBMIT
            | EventType.TOOL_BEFORE
            | EventType.FILE_WRITE
            | EventType.FILE_EDIT
            | EventType.FILE_DELETE
            | EventType.SHELL_BEFORE
            | EventType.MCP_BEFORE
        ):
            return Phase.BEFORE
        case (
            EventType.SESSION_END
            | EventType.PROMPT_RESPONSE
            | EventType.TOOL_AFTER
            | EventType.FILE_READ
            | EventType.SHELL_AFTER
            | EventType.MCP_AFTER
            | EventType.NOTIFICATION
        ):
            return Phase.AFTER
    raise ValueError(f"Unknown event type: {event_type!r}")


# ── Lifecycle ────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionStartEvent:
    type: ClassVar[EventType] = EventType.SESSION_START

    tool: str
    version: str = ""
    working_directory: str = ""
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class SessionEndEvent:
    type: ClassVar[EventType] = EventType.SESSION_END

    tool: str
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


# ── User input ───────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True, kw_only=True)
class PromptSubmitEvent:
    type: ClassVar[EventType] = EventType.PROMPT_SUBMIT

    prompt: str
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class PromptResponseEvent:
    type: ClassVar[EventType] = EventType.PROMPT_RESPONSE

    response: str
    model: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


# ── Tool use ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True, kw_only=True)
class ToolCallEvent:
    type: ClassVar[EventType] = EventType.TOOL_BEFORE

    tool_name: str
    input: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class ToolResultEvent:
    type: ClassVar[EventType] = EventType.TOOL_AFTER

    tool_name: str
    input: dict[str, Any] = field(default_factory=dict)
    output: Any = None
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


# ── File operations ──────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True, kw_only=True)
class FileReadEvent:
    type: ClassVar[EventType] = EventType.FILE_READ

    path: str
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class FileWriteEvent:
    type: ClassVar[EventType] = EventType.FILE_WRITE

    path: str
    content: str = ""
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class FileEditEvent:
    type: ClassVar[EventType] = EventType.FILE_EDIT

    path: str
    old_content: str = ""
    new_content: str = ""
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class FileDeleteEvent:
    type: ClassVar[EventType] = EventType.FILE_DELETE

    path: str
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


# ── Shell commands ───────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True, kw_only=True)
class ShellBeforeEvent:
    type: ClassVar[EventType] = EventType.SHELL_BEFORE

    command: str
    cwd: str = ""
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class ShellAfterEvent:
    type: ClassVar[EventType] = EventType.SHELL_AFTER

    command: str
    cwd: str = ""
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


# ── MCP ──────────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True, kw_only=True)
class McpCallEvent:
    type: ClassVar[EventType] = EventType.MCP_BEFORE

    server: str
    method: str
    params: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class McpResultEvent:
    type: ClassVar[EventType] = EventType.MCP_AFTER

    server: str
    method: str
    params: dict[str, Any] = field(default_factory=dict)
    result: Any = None
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)


# ── Notifications ────────────────────────────────────────────────────────────


NOTIFICATION_LEVELS = frozenset({"info", "warn", "error"})


@dataclass(frozen=True, slots=True, kw_only=True)
class NotificationEvent:
    type: ClassVar[EventType] = EventType.NOTIFICATION

    message: str
    level: str = "info"
    timestamp: float = field(default_factory=time.time)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.level not in NOTIFICATION_LEVELS:
            raise ValueError(f"Invalid notification level: {self.level!r}")


BeforeEvent = (
    SessionStartEvent
    | PromptSubmitEvent
    | ToolCallEvent
    | FileWriteEvent
    | FileEditEvent
    | FileDeleteEvent
    | ShellBeforeEvent
    | McpCallEvent
)

AfterEvent = (
    SessionEndEvent
    | PromptResponseEvent
    | ToolResultEvent
    | FileReadEvent
    | ShellAfterEvent
    | McpResultEvent
    | NotificationEvent
)

HookEvent = BeforeEvent | AfterEvent

EVENT_CLASSES: dict[EventType, type] = {
    cls.type: cls
    for cls in (
        SessionStartEvent,
        SessionEndEvent,
        PromptSubmitEvent,
        PromptResponseEvent,
        ToolCallEvent,
        ToolResultEvent,
        FileReadEvent,
        FileWriteEvent,
        FileEditEvent,
        FileDeleteEvent,
        ShellBeforeEvent,
        ShellAfterEvent,
        McpCallEvent,
        McpResultEvent,
        NotificationEvent,
    )
}


def is_before_event(event: HookEvent) -> bool:
    """True if the event can be vetoed by "before" hooks."""
    return phase_of(event.type) is Phase.BEFORE


def event_to_dict(event: HookEvent) -> dict[str, Any]:
    """Serialize an event to a JSON-friendly dict tagged with its kind."""
    return {"type": event.type.value, **asdict(event)}


def event_from_dict(data: dict[str, Any]) -> HookEvent:
    """Build an event from a dict produced by :func:`event_to_dict`.

    Raises ValueError for an unknown ``type`` or unexpected keys.
    """
    raw = dict(data)
    type_value = raw.pop("type", None)
    try:
        event_type = EventType(type_value)
    except ValueError:
        raise ValueError(f"Unknown event type: {type_value!r}") from None

    cls = EVENT_CLASSES[event_type]
    allowed = {f.name for f in fields(cls)}
    unexpected = sorted(set(raw) - allowed)
    if unexpected:
        raise ValueError(
            f"Unexpected fields for {event_type.value}: {', '.join(unexpected)}"
        )
    try:
        return cls(**raw)
    except TypeError as exc:
        raise ValueError(f"Invalid {event_type.value} event: {exc}") from exc
