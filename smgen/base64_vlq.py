"""Base64 variable-length quantities as used by the Source Map v3 format.

A single base64 digit holds 6 bits. The first digit of a value carries the
sign in its least significant bit, four value bits, and a continuation bit;
subsequent digits carry five value bits and the continuation bit:

    Continuation
    |    Sign
    |    |
    V    V
    101011
"""

from __future__ import annotations

from typing import Final, Iterable

from smgen.errors import VLQDecodeError, VLQEncodeError


BASE64_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

VLQ_BASE_SHIFT: Final[int] = 5
VLQ_BASE: Final[int] = 1 << VLQ_BASE_SHIFT  # 100000
VLQ_BASE_MASK: Final[int] = VLQ_BASE - 1  # 011111
VLQ_CONTINUATION_BIT: Final[int] = VLQ_BASE  # 100000

_CHAR_TO_INT: Final[dict[str, int]] = {char: index for index, char in enumerate(BASE64_ALPHABET)}


def base64_encode(digit: int) -> str:
    """Encode an integer in the range 0..63 as a single base64 digit."""
    if 0 <= digit < len(BASE64_ALPHABET):
        return BASE64_ALPHABET[digit]
    raise VLQEncodeError(
        code="VLQ001",
        message=f"Must be between 0 and 63: {digit}",
        hint="Only 6-bit digits can be mapped to the base64 alphabet.",
    )


def base64_decode(char: str) -> int:
    """Decode a single base64 digit into an integer in the range 0..63."""
    digit = _CHAR_TO_INT.get(char)
    if digit is None:
        raise VLQDecodeError(
            code="VLQ002",
            message=f"Not a valid base 64 digit: {char!r}",
            hint="VLQ segments only contain A-Z, a-z, 0-9, '+' and '/'.",
        )
    return digit


def to_vlq_signed(value: int) -> int:
    """Move the sign of ``value`` into the least significant bit.

    1 becomes 2 (10 binary), -1 becomes 3 (11 binary),
    2 becomes 4 (100 binary), -2 becomes 5 (101 binary).
    """
    if value < 0:
        return ((-value) << 1) + 1
    return value << 1


def from_vlq_signed(value: int) -> int:
    """Inverse of :func:`to_vlq_signed`."""
    shifted = value >> 1
    return -shifted if value & 1 else shifted


def encode(value: int) -> str:
    """Return the base64 VLQ encoding of ``value``."""
    encoded: list[str] = []
    vlq = to_vlq_signed(value)

    while True:
        digit = vlq & VLQ_BASE_MASK
        vlq >>= VLQ_BASE_SHIFT
        if vlq > 0:
            # More digits follow, mark the continuation bit.
            digit |= VLQ_CONTINUATION_BIT
        encoded.append(base64_encode(digit))
        if vlq == 0:
            break

    return "".join(encoded)


def encode_segment(values: Iterable[int]) -> str:
    """Encode several values back to back, as one mapping segment."""
    return "".join(encode(value) for value in values)


def decode(encoded: str) -> list[int]:
    """Decode every VLQ value found in ``encoded``."""
    values: list[int] = []
    shift = 0
    accumulator = 0

    for char in encoded:
        digit = base64_decode(char)
        accumulator += (digit & VLQ_BASE_MASK) << shift
        if digit & VLQ_CONTINUATION_BIT:
            shift += VLQ_BASE_SHIFT
            continue
        values.append(from_vlq_signed(accumulator))
        shift = 0
        accumulator = 0

    if shift:
        raise VLQDecodeError(
            code="VLQ002",
            message=f"Unexpected end of VLQ segment {encoded!r}.",
            hint="The last digit still has its continuation bit set.",
        )
    return values
