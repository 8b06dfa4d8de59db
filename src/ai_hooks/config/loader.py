"""Config discovery and loading (Python config file, TOML, env vars)."""

from __future__ import annotations

import importlib.util
import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ai_hooks.types.config import (
    ConfigNotFoundError,
    ConfigValidationError,
    HooksConfig,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("ai_hooks_config.py", ".ai-hooks/config.py")
SETTINGS_TOML = ".ai-hooks/config.toml"

ENV_SETTINGS = {
    "AI_HOOKS_LOG_LEVEL": "log_level",
    "AI_HOOKS_HOOK_TIMEOUT": "hook_timeout",
    "AI_HOOKS_FAIL_MODE": "fail_mode",
    "AI_HOOKS_TELEMETRY": "telemetry",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def find_config_file(cwd: str | Path | None = None) -> Path | None:
    """Return the first config file found in ``cwd`` (default: current dir)."""
    base = Path(cwd) if cwd else Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    return None


def load_config(
    config_path: str | Path | None = None,
    cwd: str | Path | None = None,
) -> HooksConfig:
    """Load a config file and resolve presets and settings layers.

    The returned config has ``extends`` flattened into ``hooks`` (preset
    hooks first) and ``settings`` layered as: TOML file < config file <
    environment. ``cwd`` defaults to the project directory searched.
    """
    base = Path(cwd) if cwd else Path.cwd()
    resolved = Path(config_path) if config_path else find_config_file(base)
    if resolved is None:
        raise ConfigNotFoundError(str(base))
    if not resolved.is_file():
        raise ConfigNotFoundError(str(resolved))

    config = _import_config(resolved)

    settings: dict[str, Any] = {}
    settings.update(load_toml_settings(base))
    settings.update(config.settings_overrides())
    settings.setdefault("cwd", str(base))
    settings.update(load_env_settings(base))

    return HooksConfig(
        hooks=config.all_hooks(),
        extends=[],
        settings=settings,
        adapters=list(config.adapters),
    )


def _import_config(path: Path) -> HooksConfig:
    """Execute a Python config file and return its ``config`` object."""
    module_name = f"_ai_hooks_config_{abs(hash(str(path.resolve())))}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ConfigValidationError(f"Cannot import config file: {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ConfigValidationError(f"Error executing {path}: {exc}") from exc
    finally:
        sys.modules.pop(module_name, None)

    config = getattr(module, "config", None)
    if not isinstance(config, HooksConfig):
        raise ConfigValidationError(
            f"{path} must define `config = define_config(...)`. "
            "Did you forget to use define_config()?"
        )
    return config


def load_toml_settings(cwd: str | Path | None = None) -> dict[str, Any]:
    """Read the ``[settings]`` table from .ai-hooks/config.toml if present."""
    base = Path(cwd) if cwd else Path.cwd()
    toml_path = base / SETTINGS_TOML
    if not toml_path.exists():
        return {}
    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigValidationError(f"Failed to parse {toml_path}: {exc}") from exc

    settings = data.get("settings", {})
    if not isinstance(settings, dict):
        raise ConfigValidationError(f"[settings] in {toml_path} must be a table")
    return settings


def load_env_settings(cwd: str | Path | None = None) -> dict[str, Any]:
    """Settings overrides from AI_HOOKS_* environment variables.

    A ``.env`` file in ``cwd`` is loaded first; it never overrides
    variables already set in the environment.
    """
    base = Path(cwd) if cwd else Path.cwd()
    env_file = base / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)

    overrides: dict[str, Any] = {}
    for var, key in ENV_SETTINGS.items():
        raw = os.environ.get(var)
        if raw is None:
            continue
        if key == "hook_timeout":
            try:
                overrides[key] = int(raw)
            except ValueError:
                raise ConfigValidationError(f"{var} must be an integer, got {raw!r}") from None
        elif key == "telemetry":
            value = raw.strip().lower()
            if value not in _TRUE | _FALSE:
                raise ConfigValidationError(f"{var} must be a boolean, got {raw!r}")
            overrides[key] = value in _TRUE
        else:
            overrides[key] = raw.strip().lower()
    if overrides:
        logger.debug("Settings from environment: %s", overrides)
    return overrides


CONFIG_TEMPLATE = '''\
"""ai-hooks configuration."""

from ai_hooks import builtin_preset, define_config, hook

config = define_config(
    # Start with the built-in security hooks
    extends=[builtin_preset()],
    hooks=[
        # Add your own hooks here:
        #
        # hook("before", ["shell:before"], log_shell).id("log-shell").build(),
    ],
    settings={
        "log_level": "warn",
        "hook_timeout": 5000,
        "fail_mode": "open",
    },
)
'''
