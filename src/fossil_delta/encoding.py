"""
Base-64 integer encoding for the Fossil delta format.

Every number in a delta (the output size, record counts, copy offsets and
the checksum) is written as a run of digit characters. The run ends at the
first character outside the alphabet, which is always the delimiter of the
record the number belongs to.

Reference: https://fossil-scm.org/home/doc/trunk/www/delta_format.wiki
"""

from __future__ import annotations

from .constants import DIGIT_BITS, DIGIT_MASK, DIGITS

# Var-Int Encoding
#
# Each digit carries 6 bits. Digits are produced least significant first and
# written most significant first, so the text reads like an ordinary number.
#
# Alphabet (digit value -> character):
#   0 .. 9    -> "0" .. "9"
#   10 .. 35  -> "A" .. "Z"
#   36        -> "_"
#   37 .. 62  -> "a" .. "z"
#   63        -> "~"
#
# Example: encoding 1000
#
#   1000 = 15 * 64 + 40
#   Digit values, most significant first: [15, 40]
#   Characters: "F" (15), "d" (40)
#
#   Encoded: b"Fd"
#
# Example: decoding b"Fd,"
#
#   "F" -> 15, value = 15
#   "d" -> 40, value = 15 * 64 + 40 = 1000
#   "," -> not a digit, stop after 2 bytes.

_DIGIT_VALUES: list[int] = [-1] * 256
"""Reverse lookup from byte value to digit value, -1 for non-digits."""

for _value, _char in enumerate(DIGITS):
    _DIGIT_VALUES[_char] = _value


def encode_int(value: int) -> bytes:
    """Encode a non-negative integer as base-64 digit characters.

    Args:
        value: Non-negative integer to encode.

    Returns:
        The digits, most significant first. Zero encodes as b"0".

    Raises:
        ValueError: If value is negative.
    """
    if value < 0:
        raise ValueError(f"Var-int value must be non-negative, got {value}")
    if value == 0:
        return DIGITS[:1]

    digits = bytearray()
    while value > 0:
        digits.append(DIGITS[value & DIGIT_MASK])
        value >>= DIGIT_BITS

    digits.reverse()
    return bytes(digits)


def decode_int(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a base-64 integer starting at the given offset.

    Reading stops at the first byte that is not a digit, or at the end of
    the data. That byte is left unconsumed.

    Args:
        data: Byte sequence containing the integer.
        offset: Position in data where the integer starts.

    Returns:
        Tuple of (decoded_value, bytes_consumed). An empty run of digits
        decodes to (0, 0).
    """
    value = 0
    pos = offset
    end = len(data)

    while pos < end:
        digit = _DIGIT_VALUES[data[pos]]
        if digit < 0:
            break
        value = (value << DIGIT_BITS) + digit
        pos += 1

    return value, pos - offset


def digit_count(value: int) -> int:
    """Number of digits encode_int() produces for a non-negative integer.

    The encoder uses this to price a copy record without building it.
    """
    count = 1
    threshold = 1 << DIGIT_BITS
    while value >= threshold:
        count += 1
        threshold <<= DIGIT_BITS
    return count
