"""ULID generation: base32 codec plus plain and monotonic generators."""

# ruff: noqa: N999

from .base32 import (
    ALPHABET,
    InvalidTimestamp,
    NotBase32,
    SequenceExhausted,
    ULIDError,
    decode_time,
    encode_random,
    encode_time,
    increment,
)
from .environment import (
    Dependencies,
    MissingPrecisionClock,
    MissingSecureRandomness,
    resolve_dependencies,
)
from .generator import (
    GeneratorOptions,
    MonotonicULIDGenerator,
    ULIDGenerator,
    factory,
    factory_from_settings,
    ulid,
)

__all__ = [
    "ALPHABET",
    "Dependencies",
    "GeneratorOptions",
    "InvalidTimestamp",
    "MissingPrecisionClock",
    "MissingSecureRandomness",
    "MonotonicULIDGenerator",
    "NotBase32",
    "SequenceExhausted",
    "ULIDError",
    "ULIDGenerator",
    "decode_time",
    "encode_random",
    "encode_time",
    "factory",
    "factory_from_settings",
    "increment",
    "resolve_dependencies",
    "ulid",
]
