"""Config authoring helpers and config-file loading."""

from ai_hooks.config.define import HookBuilder, define_config, hook, on
from ai_hooks.config.loader import (
    CONFIG_TEMPLATE,
    find_config_file,
    load_config,
    load_env_settings,
    load_toml_settings,
)

__all__ = [
    "CONFIG_TEMPLATE",
    "HookBuilder",
    "define_config",
    "find_config_file",
    "hook",
    "load_config",
    "load_env_settings",
    "load_toml_settings",
    "on",
]
