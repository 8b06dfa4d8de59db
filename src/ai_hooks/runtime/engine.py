"""The ai-hooks runtime engine.

Owns the registration table (event kind -> hooks), builds one context per
emitted event, and runs the matching chain. Adapters feed events in; the
engine hands back results the adapter acts on. This is the only place the
fail-open / fail-closed policy is applied.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable

from ai_hooks.observability import metrics
from ai_hooks.runtime.chain import HookTimeoutError, execute_chain
from ai_hooks.types.config import FailMode, HooksConfig, LogLevel, Settings
from ai_hooks.types.events import EventType, HookEvent, Phase, is_before_event, phase_of
from ai_hooks.types.hooks import HookContext, HookDefinition, HookResult, ToolInfo

logger = logging.getLogger(__name__)


class HookEngine:
    """Registers hooks and dispatches events through them.

    Usage:
        engine = HookEngine(define_config(hooks=[...], extends=[builtin_preset()]))
        verdict = await engine.is_blocked(ShellBeforeEvent(command="ls"), tool)
    """

    def __init__(self, config: HooksConfig | None = None) -> None:
        self._hooks: dict[EventType, list[HookDefinition]] = {}
        self._settings = Settings().merged(
            config.settings_overrides() if config else None,
        )

        if config is not None:
            # Presets first, in order, so local hooks win equal-priority ties
            for preset in config.extends:
                self.register_all(preset.hooks)
            self.register_all(config.hooks)

    # ── Registration ─────────────────────────────────────────────────────

    def register(self, hook: HookDefinition) -> None:
        """Add a hook to the bucket of every event kind it listens to."""
        if any(h.id == hook.id for h in self.get_hooks()):
            self._log(LogLevel.WARN, "Hook id %r registered more than once", hook.id)
        for event_type in hook.events:
            self._hooks.setdefault(event_type, []).append(hook)
        self._log(
            LogLevel.DEBUG, "Registered hook %s for %s",
            hook.id, ", ".join(e.value for e in hook.events),
        )

    def register_all(self, hooks: Iterable[HookDefinition]) -> None:
        for hook in hooks:
            self.register(hook)

    def unregister(self, hook_id: str) -> bool:
        """Remove a hook from every bucket. Returns True if it was present."""
        removed = False
        for event_type in list(self._hooks):
            bucket = self._hooks[event_type]
            kept = [h for h in bucket if h.id != hook_id]
            if len(kept) == len(bucket):
                continue
            removed = True
            if kept:
                self._hooks[event_type] = kept
            else:
                del self._hooks[event_type]
        return removed

    # ── Dispatch ─────────────────────────────────────────────────────────

    async def emit(self, event: HookEvent, tool: ToolInfo) -> list[HookResult]:
        """Run the hook chain for ``event`` and return its results.

        For "before" events the results may contain blocks; for "after"
        events they are observations only. Never raises for handler
        failures: those are resolved by the configured fail mode.
        """
        event_type = event.type
        phase = phase_of(event_type)
        candidates = [h for h in self._hooks.get(event_type, ()) if h.phase is phase]
        if not candidates:
            return []

        ctx = HookContext(
            event=event,
            tool=tool,
            cwd=self._settings.cwd,
        )

        try:
            results = await execute_chain(
                candidates, ctx, self._settings.hook_timeout,
                on_timeout=self._on_timeout,
            )
        except Exception as exc:
            return self._handle_failure(event_type, exc)

        if self._settings.telemetry:
            metrics.record_emission(
                event_type.value,
                hooks=len(candidates),
                blocked=ctx.is_blocked,
                latency_ms=(time.time() - ctx.started_at) * 1000,
            )
        return results

    async def is_blocked(self, event: HookEvent, tool: ToolInfo) -> HookResult:
        """Return a blocked verdict for a "before" event.

        "After" events are never blockable; no hook runs for them here.
        """
        if not is_before_event(event):
            return HookResult(blocked=False)

        results = await self.emit(event, tool)
        for result in results:
            if result.blocked:
                return HookResult(blocked=True, reason=result.reason)
        return HookResult(blocked=False)

    # ── Introspection ────────────────────────────────────────────────────

    def get_hooks(self, event_type: EventType | str | None = None) -> list[HookDefinition]:
        """Hooks for one event kind, or every distinct hook (first-seen order)."""
        if event_type is not None:
            return list(self._hooks.get(EventType(event_type), ()))

        seen: set[str] = set()
        distinct: list[HookDefinition] = []
        for bucket in self._hooks.values():
            for hook in bucket:
                if hook.id not in seen:
                    seen.add(hook.id)
                    distinct.append(hook)
        return distinct

    def get_settings(self) -> Settings:
        return self._settings.merged(None)

    @property
    def phase_counts(self) -> dict[Phase, int]:
        counts = {Phase.BEFORE: 0, Phase.AFTER: 0}
        for hook in self.get_hooks():
            counts[hook.phase] += 1
        return counts

    # ── Internals ────────────────────────────────────────────────────────

    def _handle_failure(self, event_type: EventType, exc: Exception) -> list[HookResult]:
        fail_mode = self._settings.fail_mode
        if self._settings.telemetry:
            metrics.record_error(event_type.value, fail_mode=fail_mode.value)

        if fail_mode is FailMode.OPEN:
            self._log(
                LogLevel.ERROR, "Hook chain error for %s (fail-open): %s",
                event_type.value, exc, exc_info=exc,
            )
            return []

        self._log(
            LogLevel.WARN, "Hook chain error for %s (fail-closed): %s",
            event_type.value, exc,
        )
        return [
            HookResult(
                blocked=True,
                reason=f"Hook chain error (fail-closed): {type(exc).__name__}: {exc}",
            ),
        ]

    def _on_timeout(self, error: HookTimeoutError) -> None:
        self._log(LogLevel.WARN, "Hook %s", error)
        if self._settings.telemetry:
            metrics.record_timeout(error.hook_id)

    def _log(self, level: LogLevel, msg: str, *args: object, **kwargs: object) -> None:
        """Log through the module logger, honoring ``settings.log_level``."""
        threshold = self._settings.log_level.logging_level
        if level.logging_level < threshold:
            return
        logger.log(level.logging_level, msg, *args, **kwargs)
