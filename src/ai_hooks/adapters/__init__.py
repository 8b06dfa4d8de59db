"""Tool adapters and the adapter registry."""

from ai_hooks.adapters.base import BaseAdapter
from ai_hooks.adapters.claude_code import ClaudeCodeAdapter
from ai_hooks.adapters.registry import AdapterRegistry, create_default_registry

__all__ = ["AdapterRegistry", "BaseAdapter", "ClaudeCodeAdapter", "create_default_registry"]
