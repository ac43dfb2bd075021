"""
32-bit checksum embedded at the end of every delta.

The checksum is the sum, modulo 2^32, of the buffer read as big-endian
32-bit words. A trailing partial word is zero padded on the right.

The loop below keeps four byte lanes, one per position within a word, and
folds them together once at the end. Both ends of a delta must agree on this
layout exactly.
"""

from __future__ import annotations

from .constants import U32_MASK


def checksum(data: bytes) -> int:
    """Compute the delta checksum of a buffer.

    Args:
        data: Buffer to checksum.

    Returns:
        Unsigned 32-bit checksum.

    Example:
        checksum(b"abcd") == 0x61626364
        checksum(b"abc")  == 0x61626300
    """
    sum0 = sum1 = sum2 = sum3 = 0
    n = len(data)
    pos = 0

    # Full 16-byte chunks: four bytes per lane.
    while n - pos >= 16:
        sum0 += data[pos] + data[pos + 4] + data[pos + 8] + data[pos + 12]
        sum1 += data[pos + 1] + data[pos + 5] + data[pos + 9] + data[pos + 13]
        sum2 += data[pos + 2] + data[pos + 6] + data[pos + 10] + data[pos + 14]
        sum3 += data[pos + 3] + data[pos + 7] + data[pos + 11] + data[pos + 15]
        pos += 16

    # Remaining full words: one byte per lane.
    while n - pos >= 4:
        sum0 += data[pos]
        sum1 += data[pos + 1]
        sum2 += data[pos + 2]
        sum3 += data[pos + 3]
        pos += 4

    # Fold the lanes into a single big-endian word sum.
    sum3 += (sum2 << 8) + (sum1 << 16) + (sum0 << 24)

    # Partial word: bytes land in the high positions.
    tail = n - pos
    if tail == 3:
        sum3 += data[pos + 2] << 8
    if tail >= 2:
        sum3 += data[pos + 1] << 16
    if tail >= 1:
        sum3 += data[pos] << 24

    return sum3 & U32_MASK
