"""BaseAdapter ABC with shared file helpers."""

from __future__ import annotations

import json
import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ai_hooks.types.adapter import AdapterCapabilities, GeneratedConfig, Verdict
from ai_hooks.types.events import EventType, HookEvent
from ai_hooks.types.hooks import HookDefinition, HookResult

logger = logging.getLogger(__name__)


class BaseAdapter(ABC):
    """Base class for tool adapters.

    Subclasses declare identity and capabilities and implement detection,
    config generation, and event mapping. Files are read and written
    relative to ``root`` (the project directory).
    """

    id: str
    name: str
    version: str
    capabilities: AdapterCapabilities

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root) if root else Path.cwd()

    @property
    def root(self) -> Path:
        return self._root

    @abstractmethod
    def detect(self) -> bool:
        """True if the target tool looks installed or configured here."""
        ...

    @abstractmethod
    def generate(self, hooks: Sequence[HookDefinition]) -> list[GeneratedConfig]:
        """Produce the tool's native config files for ``hooks``."""
        ...

    @abstractmethod
    def map_event(self, event_type: EventType) -> list[str]:
        ...

    @abstractmethod
    def map_native_event(self, native_event: str) -> list[EventType]:
        ...

    @abstractmethod
    def translate(self, payload: dict[str, Any]) -> HookEvent | None:
        """Turn a native hook payload into a universal event (None if unmapped)."""
        ...

    def render_verdict(self, results: Sequence[HookResult]) -> Verdict:
        """Default verdict: exit 2 with the reason on stderr when blocked."""
        for result in results:
            if result.blocked:
                return Verdict(exit_code=2, stderr=result.reason or "Blocked by ai-hooks")
        return Verdict()

    def managed_paths(self) -> list[str]:
        """Relative paths this adapter owns outright (removed on uninstall)."""
        return []

    def install(self, configs: Sequence[GeneratedConfig]) -> None:
        """Write generated configs to disk."""
        for config in configs:
            full_path = self._root / config.path
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(config.content, encoding="utf-8")
            logger.debug("Wrote %s", full_path)

    def uninstall(self) -> None:
        for path in self.managed_paths():
            self.remove_file(path)

    # ── Utility methods ──────────────────────────────────────────────────

    def file_exists(self, path: str) -> bool:
        return (self._root / path).exists()

    def read_json_file(self, path: str) -> Any | None:
        full_path = self._root / path
        if not full_path.exists():
            return None
        try:
            return json.loads(full_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring unparseable JSON in %s: %s", full_path, exc)
            return None

    def write_json_file(self, path: str, data: Any) -> None:
        full_path = self._root / path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    def remove_file(self, path: str) -> None:
        full_path = self._root / path
        if full_path.exists():
            full_path.unlink()
            logger.debug("Removed %s", full_path)

    @staticmethod
    def command_exists(command: str) -> bool:
        return shutil.which(command) is not None
