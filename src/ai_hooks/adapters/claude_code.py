"""Claude Code adapter.

Claude Code runs a shell command for each native hook event and passes the
event as JSON on stdin. The generated runner feeds that payload through the
engine; exit code 2 (reason on stderr) vetoes the action.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from ai_hooks.adapters.base import BaseAdapter
from ai_hooks.types.adapter import AdapterCapabilities, GeneratedConfig
from ai_hooks.types.events import (
    EventType,
    FileEditEvent,
    FileReadEvent,
    FileWriteEvent,
    HookEvent,
    McpCallEvent,
    McpResultEvent,
    NotificationEvent,
    PromptSubmitEvent,
    SessionStartEvent,
    ShellAfterEvent,
    ShellBeforeEvent,
    ToolCallEvent,
    ToolResultEvent,
)
from ai_hooks.types.hooks import HookDefinition

logger = logging.getLogger(__name__)

RUNNER_PATH = ".claude/hooks/ai-hooks-runner.py"
SETTINGS_PATH = ".claude/settings.json"
DESCRIPTION_PREFIX = "ai-hooks: "
NATIVE_TIMEOUT_SEC = 10

EVENT_MAP: dict[EventType, list[str]] = {
    EventType.SESSION_START: ["SessionStart"],
    EventType.SESSION_END: [],
    EventType.PROMPT_SUBMIT: ["UserPromptSubmit"],
    EventType.PROMPT_RESPONSE: ["PostToolUse"],
    EventType.TOOL_BEFORE: ["PreToolUse"],
    EventType.TOOL_AFTER: ["PostToolUse"],
    EventType.FILE_READ: ["PreToolUse"],
    EventType.FILE_WRITE: ["PreToolUse"],
    EventType.FILE_EDIT: ["PreToolUse"],
    EventType.FILE_DELETE: ["PreToolUse"],
    EventType.SHELL_BEFORE: ["PreToolUse"],
    EventType.SHELL_AFTER: ["PostToolUse"],
    EventType.MCP_BEFORE: ["PreToolUse"],
    EventType.MCP_AFTER: ["PostToolUse"],
    EventType.NOTIFICATION: ["Notification"],
}

NATIVE_EVENT_MAP: dict[str, list[EventType]] = {
    "SessionStart": [EventType.SESSION_START],
    "UserPromptSubmit": [EventType.PROMPT_SUBMIT],
    "PreToolUse": [
        EventType.TOOL_BEFORE,
        EventType.FILE_WRITE,
        EventType.FILE_EDIT,
        EventType.FILE_DELETE,
        EventType.SHELL_BEFORE,
        EventType.MCP_BEFORE,
    ],
    "PostToolUse": [EventType.TOOL_AFTER, EventType.SHELL_AFTER, EventType.MCP_AFTER],
    "Notification": [EventType.NOTIFICATION],
}

RUNNER_TEMPLATE = '''\
#!/usr/bin/env python3
# Generated by ai-hooks. DO NOT EDIT.
# Regenerate with: ai-hooks generate --tools claude-code
import sys

from ai_hooks.adapters.runner import main

sys.exit(main("claude-code"))
'''


class ClaudeCodeAdapter(BaseAdapter):
    id = "claude-code"
    name = "Claude Code"
    version = "1.0"
    capabilities = AdapterCapabilities(
        before_hooks=True,
        after_hooks=True,
        mcp=True,
        config_file=True,
        supported_events=(
            EventType.SESSION_START,
            EventType.PROMPT_SUBMIT,
            EventType.TOOL_BEFORE,
            EventType.TOOL_AFTER,
            EventType.FILE_READ,
            EventType.FILE_WRITE,
            EventType.FILE_EDIT,
            EventType.FILE_DELETE,
            EventType.SHELL_BEFORE,
            EventType.SHELL_AFTER,
            EventType.MCP_BEFORE,
            EventType.MCP_AFTER,
            EventType.NOTIFICATION,
        ),
        blockable_events=(
            EventType.PROMPT_SUBMIT,
            EventType.TOOL_BEFORE,
            EventType.FILE_WRITE,
            EventType.FILE_EDIT,
            EventType.FILE_DELETE,
            EventType.SHELL_BEFORE,
            EventType.MCP_BEFORE,
        ),
    )

    def detect(self) -> bool:
        return self.command_exists("claude") or self.file_exists(".claude")

    def map_event(self, event_type: EventType) -> list[str]:
        return list(EVENT_MAP.get(event_type, []))

    def map_native_event(self, native_event: str) -> list[EventType]:
        return list(NATIVE_EVENT_MAP.get(native_event, []))

    def managed_paths(self) -> list[str]:
        return [RUNNER_PATH]

    # ── Generation ───────────────────────────────────────────────────────

    def generate(self, hooks: Sequence[HookDefinition]) -> list[GeneratedConfig]:
        native_events: list[str] = []
        for hook in hooks:
            for event_type in hook.events:
                for native in self.map_event(event_type):
                    if native not in native_events:
                        native_events.append(native)

        return [
            GeneratedConfig(path=RUNNER_PATH, content=RUNNER_TEMPLATE, format="py"),
            GeneratedConfig(
                path=SETTINGS_PATH,
                content=json.dumps(self._merge_settings(native_events), indent=2) + "\n",
                format="json",
            ),
        ]

    def _merge_settings(self, native_events: list[str]) -> dict[str, Any]:
        """Merge our entries into any existing settings.json.

        Entries we generated before (described ``ai-hooks: ...``) are
        replaced; everything else the user has is preserved.
        """
        existing = self.read_json_file(SETTINGS_PATH)
        settings: dict[str, Any] = existing if isinstance(existing, dict) else {}
        hooks_config: dict[str, list[Any]] = {}

        for native, entries in (settings.get("hooks") or {}).items():
            kept = [e for e in entries if not _is_ours(e)]
            if kept:
                hooks_config[native] = kept

        for native in native_events:
            hooks_config.setdefault(native, []).append({
                "hooks": [{
                    "type": "command",
                    "command": f"python3 {RUNNER_PATH}",
                    "timeout": NATIVE_TIMEOUT_SEC,
                    "description": f"{DESCRIPTION_PREFIX}{native}",
                }],
            })

        settings["hooks"] = hooks_config
        return settings

    def uninstall(self) -> None:
        super().uninstall()
        existing = self.read_json_file(SETTINGS_PATH)
        if not isinstance(existing, dict) or "hooks" not in existing:
            return
        existing["hooks"] = {
            native: kept
            for native, entries in existing["hooks"].items()
            if (kept := [e for e in entries if not _is_ours(e)])
        }
        self.write_json_file(SETTINGS_PATH, existing)

    # ── Runtime translation ──────────────────────────────────────────────

    def translate(self, payload: dict[str, Any]) -> HookEvent | None:
        native = payload.get("hook_event_name", "")
        metadata = {
            k: payload[k] for k in ("session_id", "transcript_path") if k in payload
        }
        cwd = payload.get("cwd", "")
        tool_input = payload.get("tool_input") or {}
        if not isinstance(tool_input, dict):
            logger.warning("Ignoring %s payload: tool_input is not an object", native)
            return None

        match native:
            case "SessionStart":
                return SessionStartEvent(
                    tool=self.id, version=self.version,
                    working_directory=cwd, metadata=metadata,
                )
            case "UserPromptSubmit":
                return PromptSubmitEvent(prompt=payload.get("prompt", ""), metadata=metadata)
            case "Notification":
                return NotificationEvent(message=payload.get("message", ""), metadata=metadata)
            case "PreToolUse":
                return self._resolve_pre_tool_use(payload, tool_input, cwd, metadata)
            case "PostToolUse":
                return self._resolve_post_tool_use(payload, tool_input, cwd, metadata)
        return None

    @staticmethod
    def _resolve_pre_tool_use(
        payload: dict[str, Any], tool_input: dict[str, Any], cwd: str, metadata: dict[str, Any],
    ) -> HookEvent:
        tool_name = payload.get("tool_name", "")

        match tool_name:
            case "Bash":
                return ShellBeforeEvent(
                    command=tool_input.get("command", ""), cwd=cwd, metadata=metadata,
                )
            case "Write":
                return FileWriteEvent(
                    path=tool_input.get("file_path", ""),
                    content=tool_input.get("content", ""),
                    metadata=metadata,
                )
            case "Edit":
                return FileEditEvent(
                    path=tool_input.get("file_path", ""),
                    old_content=tool_input.get("old_string", ""),
                    new_content=tool_input.get("new_string", ""),
                    metadata=metadata,
                )
            case "MultiEdit":
                edits = [e for e in tool_input.get("edits") or () if isinstance(e, dict)]
                return FileEditEvent(
                    path=tool_input.get("file_path", ""),
                    old_content="\n".join(e.get("old_string", "") for e in edits),
                    new_content="\n".join(e.get("new_string", "") for e in edits),
                    metadata=metadata,
                )
            case "Read":
                return FileReadEvent(path=tool_input.get("file_path", ""), metadata=metadata)

        if server_method := _split_mcp_tool(tool_name):
            server, method = server_method
            return McpCallEvent(server=server, method=method, params=tool_input, metadata=metadata)
        return ToolCallEvent(tool_name=tool_name, input=tool_input, metadata=metadata)

    @staticmethod
    def _resolve_post_tool_use(
        payload: dict[str, Any], tool_input: dict[str, Any], cwd: str, metadata: dict[str, Any],
    ) -> HookEvent:
        tool_name = payload.get("tool_name", "")
        response = payload.get("tool_response")

        if tool_name == "Bash":
            output = response if isinstance(response, dict) else {}
            return ShellAfterEvent(
                command=tool_input.get("command", ""),
                cwd=cwd,
                exit_code=_coerce_exit_code(output.get("exit_code")),
                stdout=output.get("stdout", ""),
                stderr=output.get("stderr", ""),
                metadata=metadata,
            )
        if server_method := _split_mcp_tool(tool_name):
            server, method = server_method
            return McpResultEvent(
                server=server, method=method, params=tool_input,
                result=response, metadata=metadata,
            )
        return ToolResultEvent(
            tool_name=tool_name, input=tool_input, output=response, metadata=metadata,
        )


def _is_ours(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    return any(
        str(h.get("description", "")).startswith(DESCRIPTION_PREFIX)
        for h in entry.get("hooks", [])
        if isinstance(h, dict)
    )


def _coerce_exit_code(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        logger.warning("Non-numeric exit_code in Bash tool_response: %r", value)
        return -1


def _split_mcp_tool(tool_name: str) -> tuple[str, str] | None:
    """``mcp__server__method`` -> ("server", "method")."""
    if not tool_name.startswith("mcp__"):
        return None
    parts = tool_name.split("__", 2)
    if len(parts) != 3 or not parts[1] or not parts[2]:
        return None
    return parts[1], parts[2]
