"""Optional telemetry for hook emissions."""

from ai_hooks.observability.metrics import record_emission, record_error, record_timeout

__all__ = ["record_emission", "record_error", "record_timeout"]
