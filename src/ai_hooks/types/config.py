"""Configuration types for ai-hooks."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ai_hooks.types.hooks import HookDefinition


class AiHooksError(Exception):
    """Base class for ai-hooks errors."""


class ConfigError(AiHooksError):
    """Raised for any configuration problem."""


class ConfigNotFoundError(ConfigError):
    """No config file could be located."""

    def __init__(self, search_path: str) -> None:
        super().__init__(
            f"No ai-hooks config found. Searched in: {search_path}\n"
            "Create an ai_hooks_config.py file or run: ai-hooks init"
        )
        self.search_path = search_path


class ConfigValidationError(ConfigError):
    """A config file or settings override is malformed."""


class FailMode(Enum):
    """What the engine does when a hook raises."""

    OPEN = "open"  # Log and allow
    CLOSED = "closed"  # Treat as a block


class LogLevel(Enum):
    """Engine log verbosity."""

    SILENT = "silent"
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    @property
    def logging_level(self) -> int:
        """Equivalent stdlib logging level (SILENT is above CRITICAL)."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    LogLevel.SILENT: logging.CRITICAL + 10,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}

DEFAULT_HOOK_TIMEOUT_MS = 5000


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved engine settings. Immutable once built."""

    cwd: str = field(default_factory=os.getcwd)
    log_level: LogLevel = LogLevel.WARN
    hook_timeout: int = DEFAULT_HOOK_TIMEOUT_MS  # milliseconds
    fail_mode: FailMode = FailMode.OPEN
    telemetry: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "cwd", str(self.cwd))
        object.__setattr__(self, "log_level", _coerce_enum(LogLevel, self.log_level, "log_level"))
        object.__setattr__(self, "fail_mode", _coerce_enum(FailMode, self.fail_mode, "fail_mode"))

        timeout = self.hook_timeout
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
            raise ConfigValidationError(
                f"hook_timeout must be a positive integer (ms), got {timeout!r}"
            )
        if not isinstance(self.telemetry, bool):
            raise ConfigValidationError(f"telemetry must be a boolean, got {self.telemetry!r}")

    def merged(self, overrides: Mapping[str, Any] | None) -> Settings:
        """Return a copy with ``overrides`` applied.

        Unknown keys raise ConfigValidationError.
        """
        if not overrides:
            return replace(self)
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigValidationError(f"Unknown settings: {', '.join(unknown)}")
        return replace(self, **dict(overrides))

    def to_dict(self) -> dict[str, Any]:
        return {
            "cwd": self.cwd,
            "log_level": self.log_level.value,
            "hook_timeout": self.hook_timeout,
            "fail_mode": self.fail_mode.value,
            "telemetry": self.telemetry,
        }


def _coerce_enum(enum_cls: type[Enum], value: Any, name: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigValidationError(
            f"Invalid {name}: {value!r} (expected one of: {choices})"
        ) from None


@dataclass(slots=True)
class HooksConfig:
    """Top-level configuration: local hooks, presets, and settings overrides.

    A preset is itself a HooksConfig; only its ``hooks`` are used when it
    appears in another config's ``extends``.
    """

    hooks: Sequence[HookDefinition] = field(default_factory=list)
    extends: Sequence[HooksConfig] = field(default_factory=list)
    settings: Mapping[str, Any] | Settings | None = None
    adapters: Sequence[str] = field(default_factory=list)

    def all_hooks(self) -> list[HookDefinition]:
        """Preset hooks in ``extends`` order, followed by local hooks."""
        merged: list[HookDefinition] = []
        for preset in self.extends:
            merged.extend(preset.hooks)
        merged.extend(self.hooks)
        return merged

    def settings_overrides(self) -> dict[str, Any]:
        if self.settings is None:
            return {}
        if isinstance(self.settings, Settings):
            return self.settings.to_dict()
        return dict(self.settings)
