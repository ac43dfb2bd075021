"""
Delta encoder.

This module builds a delta that turns a SOURCE buffer into a TARGET buffer.


WHAT IS A DELTA?
----------------
A delta is a recipe for producing the target, written against the source.
It mixes two kinds of instructions:

  "Copy N bytes from source offset M."
  "Insert these N literal bytes."

When the target is a new revision of the source, most of it can be copied,
and the delta is a small fraction of the target's size.


HOW MATCHES ARE FOUND
---------------------
The source is cut into 16-byte landmark blocks, each filed in a hash table
(see block_index.py).

A 16-byte window then slides over the target. At every position:

  1. Look up the window's rolling hash in the table.
  2. For each source block in that bucket, extend the match forward and
     backward byte by byte (the hash only says the bytes MIGHT match).
  3. Keep the longest match that is cheaper to copy than to quote.

When a match is kept, the target bytes skipped before it become an insert,
the match becomes a copy, and scanning restarts right after it.


Example:
-------
Source: 64 x "A"
Target: 32 x "A", "B", 32 x "A" (65 bytes)

    b"11\\n"       declared size 65
    b"W@W,"        copy 32 bytes from source offset 32
    b"1:B"         insert 1 literal byte
    b"W@W,"        copy 32 bytes from source offset 32
    b"1M51GG;"     checksum


WHEN IS A COPY WORTH IT?
------------------------
A copy record costs the digits of its count and offset plus the digits of
the insert that precedes it, plus three delimiter characters. A match is
only used when it is at least that long. Otherwise quoting the bytes is no
larger, and the target is left to a literal insert.


Reference: https://fossil-scm.org/home/doc/trunk/www/delta_encoder_algorithm.wiki
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from .block_index import BlockIndex
from .checksum import checksum
from .config import DeltaConfig
from .constants import CHECKSUM_OP, COPY_END, COPY_OP, HEADER_END, INSERT_OP, NHASH
from .encoding import digit_count, encode_int
from .rolling_hash import RollingHash

logger = logging.getLogger(__name__)


class Match(NamedTuple):
    """A copy candidate anchored at one window position."""

    count: int
    """Number of bytes the copy produces."""

    offset: int
    """Source offset of the first copied byte."""

    literal_size: int
    """Target bytes between the scan base and the start of the copy."""


def create(source: bytes, target: bytes, config: DeltaConfig | None = None) -> bytes:
    """Compute the delta that rebuilds `target` from `source`.

    Args:
        source: Buffer the delta is written against.
        target: Buffer the delta reproduces.
        config: Encoder settings. Defaults to DeltaConfig().

    Returns:
        The delta. Never fails: when nothing matches, the delta quotes the
        whole target.

    Output format:
        [size] "\\n" [insert | copy]* [checksum] ";"
    """
    if config is None:
        config = DeltaConfig()

    trace = logger.isEnabledFor(logging.DEBUG)
    len_out = len(target)

    # Step 1: Declare the output size.
    #
    # A reader learns the target size from the first line alone.
    delta = bytearray(encode_int(len_out))
    delta.append(HEADER_END)

    # Step 2: Small sources cannot hold a single landmark block.
    #
    # Nothing could ever be copied, so quote the target in one record.
    if len(source) <= NHASH:
        if len_out > 0:
            _emit_insert(delta, target)
        _emit_checksum(delta, target)
        return bytes(delta)

    # Step 3: Index the source.
    index = BlockIndex.build(source)

    # Step 4: Scan the target.
    #
    # Everything before target[base] has been written to the delta.
    # The window starts at target[base + i].
    base = 0
    while base + NHASH < len_out:
        rolling = RollingHash.from_window(target, base)
        i = 0

        while True:
            if trace:
                logger.debug(
                    "LOOKING: %4d [%r]", base + i, target[base + i : base + i + NHASH]
                )

            best = _find_best_match(
                source, target, index, rolling.hash32(), base, i, config.max_candidates, trace
            )

            if best is not None:
                # Quote the unmatched bytes in front of the match, then copy.
                if best.literal_size > 0:
                    _emit_insert(delta, target[base : base + best.literal_size])
                    base += best.literal_size
                    if trace:
                        logger.debug("insert %d", best.literal_size)

                _emit_copy(delta, best.count, best.offset)
                base += best.count
                if trace:
                    logger.debug("copy %d bytes from %d", best.count, best.offset)
                break

            # No match here. If the window cannot slide further, quote the rest.
            if base + i + NHASH >= len_out:
                _emit_insert(delta, target[base:])
                if trace:
                    logger.debug("insert %d", len_out - base)
                base = len_out
                break

            # Slide the window one byte and look again.
            rolling.advance(target[base + i + NHASH])
            i += 1

    # Step 5: Quote whatever the scan left over at the end.
    if base < len_out:
        _emit_insert(delta, target[base:])
        if trace:
            logger.debug("insert %d", len_out - base)

    # Step 6: Seal the delta with the target checksum.
    _emit_checksum(delta, target)
    return bytes(delta)


def _find_best_match(
    source: bytes,
    target: bytes,
    index: BlockIndex,
    hash_value: int,
    base: int,
    i: int,
    max_candidates: int,
    trace: bool,
) -> Match | None:
    """Pick the longest worthwhile copy for the window at `target[base + i]`.

    Args:
        source: Source buffer.
        target: Target buffer.
        index: Landmark index of the source.
        hash_value: Rolling hash of the current window.
        base: Start of the not-yet-encoded target region.
        i: Window offset relative to `base`.
        max_candidates: Cap on source blocks examined.
        trace: Whether to log each candidate.

    Returns:
        The best match, or None when no candidate pays for its copy record.

    Ties keep the first candidate found. A match never reaches back before
    `target[base]`, since those bytes are already encoded.
    """
    best: Match | None = None
    best_count = 0

    for block in index.candidates(hash_value, max_candidates):
        src_pos = block * NHASH
        out_pos = base + i

        # Bytes matching from the anchor onwards, anchor included.
        forward = _match_forward(source, src_pos, target, out_pos)

        # Bytes matching immediately before the anchor.
        backward = _match_backward(source, src_pos, target, out_pos, i)

        count = forward + backward
        offset = src_pos - backward
        literal_size = i - backward

        if trace:
            logger.debug(
                "MATCH %d bytes at %d: [%r] litsz=%d",
                count,
                offset,
                source[offset : offset + NHASH],
                literal_size,
            )

        # Encoded size of the insert header and the copy record.
        cost = digit_count(literal_size) + digit_count(count) + digit_count(offset) + 3

        if count >= cost and count > best_count:
            best = Match(count=count, offset=offset, literal_size=literal_size)
            best_count = count
            if trace:
                logger.debug("... BEST SO FAR")

    return best


def _match_forward(source: bytes, src_pos: int, target: bytes, out_pos: int) -> int:
    """Count equal bytes from `source[src_pos]` and `target[out_pos]` onwards.

    Stops at the first difference or at the end of either buffer.
    """
    length = 0
    limit = min(len(source) - src_pos, len(target) - out_pos)

    while length < limit and source[src_pos + length] == target[out_pos + length]:
        length += 1

    return length


def _match_backward(
    source: bytes, src_pos: int, target: bytes, out_pos: int, max_back: int
) -> int:
    """Count equal bytes immediately before `source[src_pos]` and `target[out_pos]`.

    Looks back at most `max_back` bytes, and never as far as `source[0]`.
    The latter bound matches the Fossil encoder, so both produce identical
    deltas.
    """
    k = 1
    while k < src_pos and k <= max_back:
        if source[src_pos - k] != target[out_pos - k]:
            break
        k += 1

    return k - 1


def _emit_insert(delta: bytearray, literal: bytes) -> None:
    """Append an insert record: count ":" raw bytes."""
    delta.extend(encode_int(len(literal)))
    delta.append(INSERT_OP)
    delta.extend(literal)


def _emit_copy(delta: bytearray, count: int, offset: int) -> None:
    """Append a copy record: count "@" offset ","."""
    delta.extend(encode_int(count))
    delta.append(COPY_OP)
    delta.extend(encode_int(offset))
    delta.append(COPY_END)


def _emit_checksum(delta: bytearray, target: bytes) -> None:
    """Append the terminal checksum record: checksum ";"."""
    delta.extend(encode_int(checksum(target)))
    delta.append(CHECKSUM_OP)
