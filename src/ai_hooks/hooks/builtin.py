"""Built-in hooks: dangerous commands, secret scanning, sensitive files, audit."""

from __future__ import annotations

import re

from ai_hooks.config.define import define_config, hook
from ai_hooks.types.config import HooksConfig
from ai_hooks.types.events import FileWriteEvent
from ai_hooks.types.hooks import HookContext, HookDefinition, HookResult, NextFn

DANGEROUS_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"rm\s+(-[a-zA-Z]*f[a-zA-Z]*\s+)?/\s*$"), "rm -rf /"),
    (re.compile(r"rm\s+-[a-zA-Z]*f[a-zA-Z]*\s+~/?\s*$"), "rm -rf ~"),
    (re.compile(r"mkfs\."), "filesystem format"),
    (re.compile(r"dd\s+.*of=/dev/[sh]d"), "disk overwrite"),
    (re.compile(r":\(\)\s*\{\s*:\|:&\s*\}\s*;:"), "fork bomb"),
    (re.compile(r">\s*/dev/[sh]d"), "device overwrite"),
    (re.compile(r"chmod\s+(-R\s+)?777\s+/"), "chmod 777 /"),
    (re.compile(r"DROP\s+DATABASE", re.IGNORECASE), "DROP DATABASE"),
    (re.compile(r"DROP\s+TABLE", re.IGNORECASE), "DROP TABLE"),
    (re.compile(r"TRUNCATE\s+TABLE", re.IGNORECASE), "TRUNCATE TABLE"),
)

SECRET_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"(?:api[_-]?key|apikey)\s*[:=]\s*['\"][a-zA-Z0-9]{20,}['\"]", re.IGNORECASE),
        "API key",
    ),
    (
        re.compile(r"(?:secret|token|password|passwd|pwd)\s*[:=]\s*['\"][^'\"]{8,}['\"]", re.IGNORECASE),
        "Secret/token/password",
    ),
    (re.compile(r"-----BEGIN (?:RSA |EC |DSA )?PRIVATE KEY-----"), "Private key"),
    (re.compile(r"ghp_[a-zA-Z0-9]{36}"), "GitHub personal access token"),
    (re.compile(r"sk-[a-zA-Z0-9]{20,}"), "OpenAI/Stripe secret key"),
    (re.compile(r"AKIA[0-9A-Z]{16}"), "AWS access key ID"),
    (re.compile(r"xox[bpors]-[a-zA-Z0-9-]{10,}"), "Slack token"),
)

SENSITIVE_FILES = (
    ".env",
    ".env.local",
    ".env.production",
    "credentials.json",
    "service-account.json",
    "id_rsa",
    "id_ed25519",
    ".npmrc",
    ".pypirc",
)


async def _block_dangerous_commands(ctx: HookContext, next: NextFn) -> None:
    command = ctx.event.command
    for pattern, description in DANGEROUS_PATTERNS:
        if pattern.search(command):
            ctx.block(f"Blocked dangerous command: {description}")
            return
    await next()


async def _scan_secrets(ctx: HookContext, next: NextFn) -> None:
    event = ctx.event
    content = event.content if isinstance(event, FileWriteEvent) else event.new_content
    for pattern, description in SECRET_PATTERNS:
        if pattern.search(content):
            ctx.block(
                f"Potential secret detected: {description}. Use environment variables instead."
            )
            return
    await next()


async def _protect_sensitive_files(ctx: HookContext, next: NextFn) -> None:
    path = ctx.event.path
    if path.endswith(SENSITIVE_FILES):
        ctx.block(
            f"Cannot write to sensitive file: {path}. This file should be managed manually."
        )
        return
    await next()


async def _audit_shell_commands(ctx: HookContext, next: NextFn) -> None:
    event = ctx.event
    ctx.results.append(HookResult.observe(audit={
        "type": "shell",
        "command": event.command,
        "exit_code": event.exit_code,
        "duration": event.duration,
        "timestamp": event.timestamp,
        "tool": ctx.tool.name,
    }))
    await next()


block_dangerous_commands = (
    hook("before", ["shell:before"], _block_dangerous_commands)
    .id("ai-hooks:block-dangerous-commands")
    .name("Block Dangerous Commands")
    .description("Prevents destructive shell commands like rm -rf /, drop database, etc.")
    .priority(1)
    .build()
)

scan_secrets = (
    hook("before", ["file:write", "file:edit"], _scan_secrets)
    .id("ai-hooks:scan-secrets")
    .name("Scan for Secrets")
    .description("Prevents hardcoded API keys, tokens, and credentials in file writes.")
    .priority(2)
    .build()
)

protect_sensitive_files = (
    hook("before", ["file:write"], _protect_sensitive_files)
    .id("ai-hooks:protect-sensitive-files")
    .name("Protect Sensitive Files")
    .description("Prevents AI tools from overwriting .env, credentials, and other sensitive files.")
    .priority(3)
    .build()
)

audit_shell_commands = (
    hook("after", ["shell:after"], _audit_shell_commands)
    .id("ai-hooks:audit-shell")
    .name("Audit Shell Commands")
    .description("Records all shell command executions for audit trail.")
    .priority(999)
    .build()
)

BUILTIN_HOOKS: tuple[HookDefinition, ...] = (
    block_dangerous_commands,
    scan_secrets,
    protect_sensitive_files,
    audit_shell_commands,
)


def builtin_preset() -> HooksConfig:
    """All built-in hooks as a preset for ``extends``."""
    return define_config(hooks=BUILTIN_HOOKS)
