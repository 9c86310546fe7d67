"""ULID base32 codec (Crockford alphabet).

ULID layout:
- 48-bit timestamp (ms since UNIX epoch) -> 10 characters
- 80-bit randomness -> 16 characters
- Alphabet: 0123456789ABCDEFGHJKMNPQRSTVWXYZ (no I, L, O, U)

The codec is pure; randomness is drawn from a caller-supplied ``prng(min, max)``.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Final

ALPHABET: Final[str] = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ENCODING_LEN: Final[int] = len(ALPHABET)
TIME_LEN: Final[int] = 10
RANDOM_LEN: Final[int] = 16
ULID_LEN: Final[int] = TIME_LEN + RANDOM_LEN
TIME_MAX: Final[int] = 2**48 - 1

_DIGITS: Final[dict[str, int]] = {ch: i for i, ch in enumerate(ALPHABET)}


class ULIDError(ValueError):
    """Base class for ULID encoding and generation failures."""

    pass


class InvalidTimestamp(ULIDError):
    """Raised when a timestamp cannot be encoded in 48 bits.

    ``reason`` is one of ``not_a_number``, ``not_integral``, ``negative``, ``too_large``.
    """

    def __init__(self, time: object, reason: str):
        self.time = time
        self.reason = reason
        super().__init__(f"Cannot encode time {time!r}: {reason.replace('_', ' ')}")


class NotBase32(ULIDError):
    """Raised when a string holds characters outside the ULID alphabet."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Not a base32 ULID string: {value!r}")


class SequenceExhausted(ULIDError):
    """Raised when incrementing a string whose digits are all at the maximum."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Cannot increment {value!r}: carry overflowed the leftmost digit")


def validate_time(time: int | float) -> int:
    """Return ``time`` as an int or raise InvalidTimestamp."""
    if isinstance(time, bool) or not isinstance(time, (int, float)):
        raise InvalidTimestamp(time, "not_a_number")
    if isinstance(time, float):
        if math.isnan(time):
            raise InvalidTimestamp(time, "not_a_number")
        if math.isinf(time):
            raise InvalidTimestamp(time, "too_large" if time > 0 else "negative")
        if not time.is_integer():
            raise InvalidTimestamp(time, "not_integral")
        time = int(time)
    if time < 0:
        raise InvalidTimestamp(time, "negative")
    if time > TIME_MAX:
        raise InvalidTimestamp(time, "too_large")
    return time


def encode_time(time: int | float) -> str:
    """Encode a millisecond timestamp as exactly 10 base32 characters."""
    value = validate_time(time)
    chars: list[str] = []
    for _ in range(TIME_LEN):
        value, rem = divmod(value, ENCODING_LEN)
        chars.append(ALPHABET[rem])
    chars.reverse()
    return "".join(chars)


def encode_random(prng: Callable[[int, int], int]) -> str:
    """Draw 16 base32 digits from ``prng(0, 31)``."""
    chars: list[str] = []
    for _ in range(RANDOM_LEN):
        digit = prng(0, ENCODING_LEN - 1)
        if not 0 <= digit < ENCODING_LEN:
            raise ValueError(f"prng returned {digit!r}, outside [0, {ENCODING_LEN - 1}]")
        chars.append(ALPHABET[digit])
    return "".join(chars)


def _to_digits(value: str) -> list[int]:
    if not value:
        raise NotBase32(value)
    try:
        return [_DIGITS[ch] for ch in value]
    except KeyError:
        raise NotBase32(value) from None


def increment(value: str) -> str:
    """Return the lexicographically next base32 string of the same length.

    Raises:
        NotBase32: if ``value`` is empty or contains a non-alphabet character
        SequenceExhausted: if every digit is already at the maximum
    """
    digits = _to_digits(value)
    pos = len(digits) - 1
    while pos >= 0:
        if digits[pos] < ENCODING_LEN - 1:
            digits[pos] += 1
            return "".join(ALPHABET[d] for d in digits)
        # Carry into the next more significant digit
        digits[pos] = 0
        pos -= 1
    raise SequenceExhausted(value)


def decode_time(value: str) -> int:
    """Decode a 10-character time encoding or a full ULID back to milliseconds."""
    if len(value) not in (TIME_LEN, ULID_LEN):
        raise NotBase32(value)
    time = 0
    for digit in _to_digits(value[:TIME_LEN]):
        time = time * ENCODING_LEN + digit
    if time > TIME_MAX:
        raise InvalidTimestamp(time, "too_large")
    return time

