"""Reference resolver for the ``{now, prng}`` dependency pair on CPython.

The generator core never probes its host; it receives a ``Dependencies`` pair.
This adapter is the default way to obtain one and can be swapped for any other
callable pair honouring the same contract:

- ``now() -> int``: non-negative integer milliseconds since the UNIX epoch
- ``prng(min, max) -> int``: uniform integer in the inclusive range ``[min, max]``
"""

from __future__ import annotations

import os
import random
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from Ulidkit.base32 import ULIDError

log = structlog.get_logger()

_MS_RESOLUTION = 1e-3


class MissingSecureRandomness(ULIDError):
    """Raised when no OS entropy source is available and insecure fallback is not allowed."""

    pass


class MissingPrecisionClock(ULIDError):
    """Raised when the wall clock is coarser than 1ms and imprecision is not allowed."""

    pass


@dataclass(frozen=True)
class Dependencies:
    now: Callable[[], int]
    prng: Callable[[int, int], int]


def _has_secure_randomness() -> bool:
    try:
        os.urandom(1)
    except NotImplementedError:
        return False
    return True


def _has_precise_clock() -> bool:
    return time.get_clock_info("time").resolution <= _MS_RESOLUTION


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def _now_ms_imprecise() -> int:
    return int(time.time() * 1000)


def resolve_prng(allow_insecure: bool = False) -> Callable[[int, int], int]:
    if _has_secure_randomness():
        return secrets.SystemRandom().randint
    if not allow_insecure:
        raise MissingSecureRandomness(
            "No secure randomness source available; pass allow_insecure=True to use random.Random"
        )
    log.warning("ulid.environment.insecure_prng", fallback="random.Random")
    return random.Random().randint


def resolve_clock(allow_imprecise: bool = False) -> Callable[[], int]:
    if _has_precise_clock():
        return now_ms
    if not allow_imprecise:
        raise MissingPrecisionClock(
            "Wall clock resolution is coarser than 1ms; pass allow_imprecise=True to accept it"
        )
    log.warning(
        "ulid.environment.imprecise_clock",
        resolution=time.get_clock_info("time").resolution,
    )
    return _now_ms_imprecise


def resolve_dependencies(
    allow_insecure: bool = False, allow_imprecise: bool = False
) -> Dependencies:
    """Pick the best ``now``/``prng`` pair the host offers."""
    deps = Dependencies(now=resolve_clock(allow_imprecise), prng=resolve_prng(allow_insecure))
    log.debug(
        "ulid.environment.resolved",
        now=getattr(deps.now, "__name__", repr(deps.now)),
        prng=getattr(deps.prng, "__qualname__", repr(deps.prng)),
    )
    return deps
