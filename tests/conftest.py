# tests/conftest.py

import random
from collections.abc import Iterator

import pytest

from Ulidkit.environment import Dependencies
from Ulidkit.metrics import reset_counters


@pytest.fixture(autouse=True)
def _reset_metrics() -> Iterator[None]:
    reset_counters()
    yield None
    reset_counters()


@pytest.fixture
def seeded_deps() -> Dependencies:
    """Clock frozen at 1000ms with a seeded prng."""
    return Dependencies(now=lambda: 1000, prng=random.Random(42).randint)


@pytest.fixture
def constant_prng():
    """Factory for a prng that always returns the same digit."""

    def _make(digit: int):
        def _prng(lo: int, hi: int) -> int:
            return digit

        return _prng

    return _make
