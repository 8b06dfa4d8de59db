"""Native hook runner: one process execution per emitted event.

The tool invokes the generated runner with the native payload on stdin.
The runner loads the project config, feeds the translated event through a
process-local engine, and exits with the adapter's verdict.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import IO, Any

from ai_hooks.adapters.registry import AdapterRegistry, create_default_registry
from ai_hooks.config.loader import load_config
from ai_hooks.runtime.engine import HookEngine
from ai_hooks.types.adapter import Adapter, Verdict
from ai_hooks.types.config import ConfigError, ConfigNotFoundError, HooksConfig
from ai_hooks.types.events import event_to_dict
from ai_hooks.types.hooks import ToolInfo

logger = logging.getLogger(__name__)


async def run_native(
    adapter: Adapter, payload: dict[str, Any], config: HooksConfig,
) -> Verdict:
    """Translate ``payload``, emit it, and render the adapter's verdict."""
    event = adapter.translate(payload)
    if event is None:
        logger.debug("No universal event for %s payload", adapter.id)
        return Verdict()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Emitting %s", json.dumps(event_to_dict(event), default=str))
    engine = HookEngine(config)
    results = await engine.emit(event, ToolInfo(name=adapter.id, version=adapter.version))
    return adapter.render_verdict(results)


def main(
    adapter_id: str,
    *,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
    stderr: IO[str] | None = None,
    config_path: str | Path | None = None,
    cwd: str | Path | None = None,
    registry: AdapterRegistry | None = None,
) -> int:
    """Entry point for generated runner scripts. Returns the exit code.

    Anything that prevents the hooks from being evaluated at all (unknown
    adapter, no config, unreadable payload) exits 0 so the tool proceeds.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    registry = registry or create_default_registry(cwd)

    adapter = registry.get(adapter_id)
    if adapter is None:
        print(f"ai-hooks: unknown adapter {adapter_id!r}", file=stderr)
        return 0

    try:
        payload = json.loads(stdin.read() or "{}")
    except json.JSONDecodeError as exc:
        print(f"ai-hooks: invalid hook payload: {exc}", file=stderr)
        return 0
    if not isinstance(payload, dict):
        print("ai-hooks: hook payload must be a JSON object", file=stderr)
        return 0

    try:
        config = load_config(config_path, cwd or payload.get("cwd") or None)
    except ConfigNotFoundError:
        logger.debug("No ai-hooks config found; nothing to enforce")
        return 0
    except ConfigError as exc:
        print(f"ai-hooks: {exc}", file=stderr)
        return 1

    verdict = asyncio.run(run_native(adapter, payload, config))
    if verdict.stdout:
        stdout.write(verdict.stdout)
    if verdict.stderr:
        print(verdict.stderr, file=stderr)
    return verdict.exit_code
