"""Minimal in-process counters for generator activity.

Counters are process-wide and keyed by dotted names, e.g. ``ulid.generated`` or
``ulid.monotonic.stall``. Production can scrape ``get_counters()`` or replace
this module with a real backend.
"""

from __future__ import annotations

import threading
from collections import defaultdict

_counters: dict[str, int] = defaultdict(int)
_lock = threading.Lock()


def inc_counter(name: str, value: int = 1) -> None:
    with _lock:
        _counters[name] += int(value)


def get_counter(name: str) -> int:
    return _counters.get(name, 0)


def reset_counters() -> None:
    with _lock:
        _counters.clear()


def get_counters() -> dict[str, int]:
    """Return a shallow copy of all counters for diagnostics."""
    with _lock:
        return dict(_counters)


def record_error(kind: str) -> None:
    """Record a generator failure under ``ulid.errors.<kind>``."""
    inc_counter(f"ulid.errors.{kind}")
