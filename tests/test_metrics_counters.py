import random

from Ulidkit import metrics
from Ulidkit.environment import Dependencies
from Ulidkit.generator import GeneratorOptions, factory


def test_counters_track_generation():
    deps = Dependencies(now=lambda: 1000, prng=random.Random(9).randint)
    gen = factory(GeneratorOptions(monotonic=True, dependencies=deps))
    gen()
    gen()
    gen(2000)

    counters = metrics.get_counters()
    assert counters["ulid.generated"] == 3
    assert counters["ulid.monotonic.advance"] == 2
    assert counters["ulid.monotonic.stall"] == 1


def test_reset_counters():
    metrics.inc_counter("example", 5)
    metrics.record_error("invalid_timestamp")
    assert metrics.get_counter("example") == 5
    assert metrics.get_counter("ulid.errors.invalid_timestamp") == 1

    metrics.reset_counters()
    assert metrics.get_counter("example") == 0
    assert metrics.get_counters() == {}
