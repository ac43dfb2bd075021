"""
Constants for the Fossil delta format.

Reference: https://fossil-scm.org/home/doc/trunk/www/delta_format.wiki
"""

from __future__ import annotations

# ===========================================================================
# Hashing Constants
# ===========================================================================
#
# The encoder samples the source in fixed-size blocks and slides a window of
# the same size over the target. Both sides hash exactly NHASH bytes.

NHASH: int = 16
"""Size of a hash window and of a source landmark block, in bytes.

Must be a power of two: the rolling hash wraps its window index with a mask.
"""

U16_MASK: int = 0xFFFF
"""Mask emulating unsigned 16-bit wraparound of the rolling hash accumulators."""

U32_MASK: int = 0xFFFFFFFF
"""Mask emulating unsigned 32-bit wraparound of hashes and checksums."""

NO_BLOCK: int = U32_MASK
"""Sentinel terminating a collision chain in the block index."""

MAX_CANDIDATES: int = 250
"""Default number of source blocks examined per hash lookup.

Highly repetitive sources put many blocks in the same bucket. Capping the
walk keeps encoding close to linear time on such inputs.
"""

# ===========================================================================
# Var-Int Alphabet
# ===========================================================================
#
# Integers are written in base 64, most significant digit first, using one
# printable character per 6-bit digit.

DIGITS: bytes = b"0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz~"
"""The 64 digit characters, indexed by digit value."""

DIGIT_BITS: int = 6
"""Bits carried by one digit."""

DIGIT_MASK: int = (1 << DIGIT_BITS) - 1
"""Mask extracting the lowest digit of an integer."""

# ===========================================================================
# Record Delimiters
# ===========================================================================
#
#   size "\n"            header, declared output length
#   count ":" bytes      insert literal bytes
#   count "@" offset "," copy from source
#   checksum ";"         terminal record

HEADER_END: int = ord("\n")
"""Terminates the declared output size."""

INSERT_OP: int = ord(":")
"""Follows the byte count of an insert record."""

COPY_OP: int = ord("@")
"""Separates the count and source offset of a copy record."""

COPY_END: int = ord(",")
"""Terminates a copy record."""

CHECKSUM_OP: int = ord(";")
"""Terminates the checksum record, and the delta."""
