"""Hook dispatch runtime: chain executor and engine."""

from ai_hooks.runtime.chain import HookTimeoutError, execute_chain, select_hooks
from ai_hooks.runtime.engine import HookEngine

__all__ = ["HookEngine", "HookTimeoutError", "execute_chain", "select_hooks"]
