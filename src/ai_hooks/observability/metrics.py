"""Emission metrics: counters and histograms, with no-op fallback."""

from __future__ import annotations

from typing import Any

try:
    from opentelemetry import metrics

    _HAS_OTEL = True
except ImportError:
    _HAS_OTEL = False

# Lazily-created instruments
_meter: Any = None
_emission_counter: Any = None
_block_counter: Any = None
_error_counter: Any = None
_timeout_counter: Any = None
_chain_latency_histogram: Any = None


def _ensure_instruments() -> None:
    """Create meter and instruments on first use."""
    global _meter, _emission_counter, _block_counter, _error_counter
    global _timeout_counter, _chain_latency_histogram

    if not _HAS_OTEL or _meter is not None:
        return

    _meter = metrics.get_meter("ai_hooks")
    _emission_counter = _meter.create_counter(
        "ai_hooks.emissions",
        description="Events emitted with at least one matching hook",
    )
    _block_counter = _meter.create_counter(
        "ai_hooks.blocks",
        description="Emissions that ended with a blocking result",
    )
    _error_counter = _meter.create_counter(
        "ai_hooks.errors",
        description="Hook chains that raised and were handled by the fail mode",
    )
    _timeout_counter = _meter.create_counter(
        "ai_hooks.timeouts",
        description="Hook invocations that exceeded the per-hook timeout",
    )
    _chain_latency_histogram = _meter.create_histogram(
        "ai_hooks.chain_latency",
        description="Wall-clock time to run one hook chain",
        unit="ms",
    )


def record_emission(
    event_type: str, *, hooks: int, blocked: bool, latency_ms: float,
) -> None:
    """Record one completed emission."""
    if not _HAS_OTEL:
        return
    _ensure_instruments()
    attrs = {"event": event_type}
    _emission_counter.add(1, {**attrs, "hooks": hooks})
    if blocked:
        _block_counter.add(1, attrs)
    _chain_latency_histogram.record(latency_ms, attrs)


def record_error(event_type: str, *, fail_mode: str) -> None:
    """Record a hook chain failure."""
    if not _HAS_OTEL:
        return
    _ensure_instruments()
    _error_counter.add(1, {"event": event_type, "fail_mode": fail_mode})


def record_timeout(hook_id: str) -> None:
    """Record a single hook timing out."""
    if not _HAS_OTEL:
        return
    _ensure_instruments()
    _timeout_counter.add(1, {"hook": hook_id})


def reset_instruments() -> None:
    """Reset module-level instruments for test isolation."""
    global _meter, _emission_counter, _block_counter, _error_counter
    global _timeout_counter, _chain_latency_histogram
    _meter = None
    _emission_counter = None
    _block_counter = None
    _error_counter = None
    _timeout_counter = None
    _chain_latency_histogram = None
