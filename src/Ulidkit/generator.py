"""ULID generators.

``factory(options)`` returns a callable generator. Non-monotonic generators are
stateless and safe to share. Monotonic generators keep the last timestamp and
random tail so that identifiers minted within the same (or an earlier)
millisecond still sort strictly after the previous one:

- ADVANCE: time moved forward, draw a fresh random tail
- STALL: time equal or regressed, reuse the last time and increment the tail
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, InstanceOf, field_validator

from Ulidkit.base32 import (
    InvalidTimestamp,
    SequenceExhausted,
    encode_random,
    encode_time,
    increment,
    validate_time,
)
from Ulidkit.config import Settings, load_settings
from Ulidkit.environment import Dependencies, resolve_dependencies
from Ulidkit.metrics import inc_counter, record_error

log = structlog.get_logger()


class GeneratorOptions(BaseModel):
    """Generator configuration, resolved once at construction.

    - monotonic: guarantee strictly increasing output within a millisecond
    - dependencies: explicit ``{now, prng}`` pair; resolved from the host when omitted
    - allow_insecure / allow_imprecise: tolerate weak host dependencies during resolution
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    monotonic: bool = False
    dependencies: InstanceOf[Dependencies] | None = None
    allow_insecure: bool = False
    allow_imprecise: bool = False

    @field_validator("dependencies", mode="before")
    @classmethod
    def _coerce_dependencies(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            missing = sorted({"now", "prng"} - set(v))
            if missing:
                raise ValueError(f"dependencies missing {', '.join(missing)}")
            v = Dependencies(now=v["now"], prng=v["prng"])
        if isinstance(v, Dependencies):
            for name in ("now", "prng"):
                if not callable(getattr(v, name)):
                    raise ValueError(f"dependencies.{name} must be callable")
        return v

    @classmethod
    def from_settings(cls, settings: Settings) -> GeneratorOptions:
        return cls(
            monotonic=settings.ulid_monotonic,
            allow_insecure=settings.ulid_allow_insecure,
            allow_imprecise=settings.ulid_allow_imprecise,
        )


class ULIDGenerator:
    """Stateless generator: ``encode_time(time) + encode_random(prng)`` per call."""

    def __init__(self, dependencies: Dependencies):
        self._deps = dependencies

    @property
    def dependencies(self) -> Dependencies:
        return self._deps

    def _resolve_time(self, time: int | float | None) -> int:
        if time is None:
            time = self._deps.now()
        try:
            return validate_time(time)
        except InvalidTimestamp as exc:
            log.warning("ulid.generator.invalid_timestamp", time=repr(time), reason=exc.reason)
            record_error("invalid_timestamp")
            raise

    def __call__(self, time: int | float | None = None) -> str:
        effective = self._resolve_time(time)
        out = encode_time(effective) + encode_random(self._deps.prng)
        inc_counter("ulid.generated")
        return out


@dataclass
class MonotonicState:
    last_time: int = 0
    last_random: str | None = None


class MonotonicULIDGenerator(ULIDGenerator):
    """Generator whose successive outputs are strictly increasing.

    Each call is a read-modify-write of ``MonotonicState`` under the instance lock.
    Raises SequenceExhausted when the 80-bit tail cannot be incremented further
    within one millisecond; the state is left unchanged in that case.
    """

    def __init__(self, dependencies: Dependencies):
        super().__init__(dependencies)
        self._state = MonotonicState()
        self._lock = threading.Lock()

    @property
    def state(self) -> MonotonicState:
        with self._lock:
            return MonotonicState(self._state.last_time, self._state.last_random)

    def __call__(self, time: int | float | None = None) -> str:
        effective = self._resolve_time(time)
        with self._lock:
            st = self._state
            step: Literal["advance", "stall"]
            if effective <= st.last_time and st.last_random is not None:
                try:
                    st.last_random = increment(st.last_random)
                except SequenceExhausted:
                    log.warning("ulid.monotonic.exhausted", last_time=st.last_time)
                    record_error("sequence_exhausted")
                    raise
                step = "stall"
            else:
                random_part = encode_random(self._deps.prng)
                st.last_time = effective
                st.last_random = random_part
                step = "advance"
            last_time = st.last_time
            out = encode_time(last_time) + st.last_random
        inc_counter(f"ulid.monotonic.{step}")
        inc_counter("ulid.generated")
        if step == "stall":
            log.debug("ulid.monotonic.stall", requested=effective, last_time=last_time)
        return out


def factory(options: GeneratorOptions | Mapping[str, Any] | None = None) -> ULIDGenerator:
    """Build a generator from options (a GeneratorOptions, a mapping of its fields, or None)."""
    if options is None:
        options = GeneratorOptions()
    elif not isinstance(options, GeneratorOptions):
        options = GeneratorOptions.model_validate(options)

    deps = options.dependencies
    if deps is None:
        deps = resolve_dependencies(
            allow_insecure=options.allow_insecure,
            allow_imprecise=options.allow_imprecise,
        )
    cls = MonotonicULIDGenerator if options.monotonic else ULIDGenerator
    log.debug("ulid.generator.created", monotonic=options.monotonic)
    return cls(deps)


def factory_from_settings(settings: Settings | None = None) -> ULIDGenerator:
    """Build a generator using the ``ulid_*`` fields of Settings (env / .env / config.toml)."""
    settings = settings or load_settings()
    return factory(GeneratorOptions.from_settings(settings))


def ulid(time: int | float | None = None, relax_checks: bool = False) -> str:
    """One-shot ULID from a throwaway non-monotonic generator."""
    gen = factory(
        GeneratorOptions(allow_insecure=relax_checks, allow_imprecise=relax_checks)
    )
    return gen(time)
