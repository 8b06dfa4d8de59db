"""Adapter registry.

The hosting process builds one registry (usually via
:func:`create_default_registry`) and passes it to whatever needs it. There
is no module-level instance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ai_hooks.types.adapter import Adapter

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[], Adapter]


class AdapterRegistry:
    """Adapters by id, instantiated eagerly or lazily from factories."""

    def __init__(self) -> None:
        self._adapters: dict[str, Adapter] = {}
        self._factories: dict[str, AdapterFactory] = {}

    def register(self, adapter: Adapter) -> None:
        self._adapters[adapter.id] = adapter

    def register_factory(self, adapter_id: str, factory: AdapterFactory) -> None:
        """Register a factory; the adapter is built on first :meth:`get`."""
        self._factories[adapter_id] = factory

    def get(self, adapter_id: str) -> Adapter | None:
        existing = self._adapters.get(adapter_id)
        if existing is not None:
            return existing

        factory = self._factories.get(adapter_id)
        if factory is None:
            return None
        adapter = factory()
        self._adapters[adapter_id] = adapter
        return adapter

    def list(self) -> list[str]:
        """All known adapter ids, instances first, in registration order."""
        return list(dict.fromkeys([*self._adapters, *self._factories]))

    def detect_all(self) -> list[Adapter]:
        """Adapters whose tool is present. Detection errors skip the adapter."""
        detected: list[Adapter] = []
        for adapter_id in self.list():
            adapter = self.get(adapter_id)
            if adapter is None:
                continue
            try:
                if adapter.detect():
                    detected.append(adapter)
            except Exception as exc:
                logger.warning("Detection failed for %s: %s", adapter_id, exc)
        return detected

    def clear(self) -> None:
        self._adapters.clear()
        self._factories.clear()


def create_default_registry(root: str | Path | None = None) -> AdapterRegistry:
    """A fresh registry with the built-in adapters, rooted at ``root``."""
    from ai_hooks.adapters.claude_code import ClaudeCodeAdapter

    registry = AdapterRegistry()
    registry.register_factory(ClaudeCodeAdapter.id, lambda: ClaudeCodeAdapter(root))
    return registry
