import time

import pytest

from Ulidkit import environment
from Ulidkit.environment import (
    Dependencies,
    MissingPrecisionClock,
    MissingSecureRandomness,
    resolve_dependencies,
)


def test_resolves_host_dependencies():
    deps = resolve_dependencies()
    assert isinstance(deps, Dependencies)
    before = time.time_ns() // 1_000_000
    now = deps.now()
    after = time.time_ns() // 1_000_000
    assert isinstance(now, int)
    assert before <= now <= after
    draws = {deps.prng(0, 31) for _ in range(500)}
    assert draws <= set(range(32))
    assert len(draws) > 1


def test_missing_secure_randomness_raises(monkeypatch):
    monkeypatch.setattr(environment, "_has_secure_randomness", lambda: False)
    with pytest.raises(MissingSecureRandomness):
        resolve_dependencies()


def test_insecure_fallback_when_allowed(monkeypatch):
    monkeypatch.setattr(environment, "_has_secure_randomness", lambda: False)
    deps = resolve_dependencies(allow_insecure=True)
    assert 0 <= deps.prng(0, 31) <= 31


def test_missing_precision_clock_raises(monkeypatch):
    monkeypatch.setattr(environment, "_has_precise_clock", lambda: False)
    with pytest.raises(MissingPrecisionClock):
        resolve_dependencies()


def test_imprecise_clock_when_allowed(monkeypatch):
    monkeypatch.setattr(environment, "_has_precise_clock", lambda: False)
    deps = resolve_dependencies(allow_imprecise=True)
    assert deps.now is not environment.now_ms
    assert abs(deps.now() - environment.now_ms()) < 1000


def test_secure_randomness_probe_handles_missing_urandom(monkeypatch):
    def _no_entropy(n):
        raise NotImplementedError

    monkeypatch.setattr(environment.os, "urandom", _no_entropy)
    assert environment._has_secure_randomness() is False
