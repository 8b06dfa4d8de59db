"""Hook chain executor.

Runs one priority-ordered chain of hooks against one context. Each hook
receives ``next``; awaiting it runs the rest of the chain, and returning
without it ends the chain early. Once any result in ``ctx.results`` is a
block, no further hook is invoked, even if the blocking hook still calls
``next``.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Sequence

from ai_hooks.types.hooks import HookContext, HookDefinition, HookResult


class HookTimeoutError(Exception):
    """A hook did not settle within the per-hook timeout."""

    def __init__(self, hook_id: str, timeout_ms: int) -> None:
        super().__init__(f"{hook_id} timed out after {timeout_ms}ms")
        self.hook_id = hook_id
        self.timeout_ms = timeout_ms


TimeoutCallback = Callable[[HookTimeoutError], None]


def select_hooks(hooks: Sequence[HookDefinition], ctx: HookContext) -> list[HookDefinition]:
    """Drop disabled and filtered-out hooks, then stable-sort by priority."""
    selected = [
        h for h in hooks
        if h.enabled and (h.filter is None or h.filter(ctx))
    ]
    selected.sort(key=lambda h: h.priority)
    return selected


async def execute_chain(
    hooks: Sequence[HookDefinition],
    ctx: HookContext,
    timeout_ms: int,
    *,
    on_timeout: TimeoutCallback | None = None,
) -> list[HookResult]:
    """Execute ``hooks`` in priority order and return ``ctx.results``.

    A hook that exceeds ``timeout_ms`` gets a non-blocking "timed out"
    result and the chain moves on. Time spent in downstream hooks reached
    through ``next`` does not count against the caller's budget. Any other
    exception raised by a handler or filter propagates.
    """
    chain = select_hooks(hooks, ctx)
    budget = timeout_ms / 1000

    async def invoke(index: int) -> None:
        if index >= len(chain) or ctx.is_blocked:
            return

        hook = chain[index]
        loop = asyncio.get_running_loop()
        deadline: asyncio.Timeout | None = None
        active = False
        continued = False

        async def next_() -> None:
            nonlocal continued
            if continued or not active:
                return
            if deadline.expired():
                # Let the pending cancellation surface as this hook's timeout.
                await asyncio.sleep(0)
                return
            continued = True
            remaining = deadline.when() - loop.time()
            deadline.reschedule(None)
            try:
                await invoke(index + 1)
            finally:
                deadline.reschedule(loop.time() + max(remaining, 0.0))

        try:
            async with asyncio.timeout(budget) as deadline:
                active = True
                try:
                    await _run_handler(hook, ctx, next_)
                finally:
                    active = False
        except TimeoutError:
            if deadline is None or not deadline.expired():
                raise
            error = HookTimeoutError(hook.id, timeout_ms)
            ctx.results.append(HookResult(blocked=False, reason=str(error)))
            if on_timeout is not None:
                on_timeout(error)
            if not continued:
                continued = True
                await invoke(index + 1)

    await invoke(0)
    return ctx.results


async def _run_handler(hook: HookDefinition, ctx: HookContext, next_) -> None:
    outcome = hook.handler(ctx, next_)
    if inspect.isawaitable(outcome):
        await outcome
