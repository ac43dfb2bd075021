"""
Delta decoder.

This module rebuilds a TARGET buffer from its SOURCE and a delta.


HOW APPLICATION WORKS
---------------------
The delta is read strictly left to right, in a single pass:

  1. The header: the declared output size, then a newline.
  2. Records, each starting with a count and an operator character:

      COUNT "@" OFFSET ","   Copy COUNT bytes of the source from OFFSET.
      COUNT ":" BYTES        Append the next COUNT bytes of the delta.
      COUNT ";"              COUNT is the checksum of the output. Stop.

Literal bytes are opaque once their count is known. They may contain any
value, delimiters and newlines included, and are never scanned for records.


Example:
-------
Source: b"hello world"
Delta:  b"C\\n5@0,1:!6@5,..."

Step 1: Read size "C" = 12.
Step 2: Copy 5 bytes from offset 0     -> b"hello"
Step 3: Insert 1 byte                  -> b"hello!"
Step 4: Copy 6 bytes from offset 5     -> b"hello! world"
Step 5: Checksum record: verify the checksum and the size. Done.


FAILURE IS ALL OR NOTHING
-------------------------
Any inconsistency raises a DeltaError subclass. No partial output is ever
returned: a delta either reproduces exactly the buffer it was made for, or
it is rejected.


Reference: https://fossil-scm.org/home/doc/trunk/www/delta_format.wiki
"""

from __future__ import annotations

import logging

from .checksum import checksum
from .constants import CHECKSUM_OP, COPY_END, COPY_OP, HEADER_END, INSERT_OP
from .encoding import decode_int
from .exceptions import (
    ChecksumMismatchError,
    CopyOutOfBoundsError,
    MalformedHeaderError,
    OutputSizeExceededError,
    SizeMismatchError,
    TruncatedDeltaError,
    UnknownOperatorError,
    UnterminatedDeltaError,
)

logger = logging.getLogger(__name__)


def apply(source: bytes, delta: bytes) -> bytes:
    """Apply a delta to its source buffer.

    Args:
        source: Buffer the delta was created against.
        delta: Delta produced by create().

    Returns:
        The reconstructed target.

    Raises:
        MalformedHeaderError: The size is not followed by a newline.
        UnknownOperatorError: A record has an invalid operator.
        CopyOutOfBoundsError: A copy reads past the end of the source.
        OutputSizeExceededError: The output would outgrow the declared size.
        TruncatedDeltaError: An insert runs past the end of the delta.
        ChecksumMismatchError: The output does not match the checksum.
        SizeMismatchError: The output is shorter than the declared size.
        UnterminatedDeltaError: The delta has no checksum record.
    """
    trace = logger.isEnabledFor(logging.DEBUG)
    end = len(delta)

    # Step 1: Read the declared output size.
    limit, pos = _read_header(delta)

    output = bytearray()
    total = 0

    # Step 2: Execute records until the checksum record.
    while pos < end:
        count, consumed = decode_int(delta, pos)
        pos += consumed

        if pos >= end:
            break

        operator = delta[pos]
        pos += 1

        if operator == COPY_OP:
            # COPY: count "@" offset ","
            offset, consumed = decode_int(delta, pos)
            pos += consumed

            if pos >= end:
                break
            if delta[pos] != COPY_END:
                raise UnknownOperatorError(delta[pos], pos, expected=",")
            pos += 1

            if offset + count > len(source):
                raise CopyOutOfBoundsError(offset, count, len(source))
            if total + count > limit:
                raise OutputSizeExceededError(total + count, limit)

            if trace:
                logger.debug("COPY %d from %d", count, offset)

            output += source[offset : offset + count]
            total += count

        elif operator == INSERT_OP:
            # INSERT: count ":" raw bytes
            if total + count > limit:
                raise OutputSizeExceededError(total + count, limit)
            if count > end - pos:
                raise TruncatedDeltaError(count, end - pos)

            if trace:
                logger.debug("INSERT %d", count)

            output += delta[pos : pos + count]
            pos += count
            total += count

        elif operator == CHECKSUM_OP:
            # CHECKSUM: the only way out of a valid delta.
            actual = checksum(output)
            if count != actual:
                raise ChecksumMismatchError(count, actual)
            if total != limit:
                raise SizeMismatchError(total, limit)

            return bytes(output)

        else:
            raise UnknownOperatorError(operator, pos - 1)

    raise UnterminatedDeltaError()


def output_size(delta: bytes) -> int:
    """Read the size of the output a delta produces, without applying it.

    Args:
        delta: Delta produced by create().

    Returns:
        The declared output size.

    Raises:
        MalformedHeaderError: The size is not followed by a newline.
    """
    size, _ = _read_header(delta)
    return size


def _read_header(delta: bytes) -> tuple[int, int]:
    """Parse the size line of a delta.

    Returns:
        Tuple of (declared_size, position_after_newline).
    """
    size, pos = decode_int(delta, 0)
    if pos >= len(delta) or delta[pos] != HEADER_END:
        raise MalformedHeaderError(pos)
    return size, pos + 1
