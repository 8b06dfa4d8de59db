"""Ready-made hook definitions."""

from ai_hooks.hooks.builtin import (
    BUILTIN_HOOKS,
    audit_shell_commands,
    block_dangerous_commands,
    builtin_preset,
    protect_sensitive_files,
    scan_secrets,
)

__all__ = [
    "BUILTIN_HOOKS",
    "audit_shell_commands",
    "block_dangerous_commands",
    "builtin_preset",
    "protect_sensitive_files",
    "scan_secrets",
]
