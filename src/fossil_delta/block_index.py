"""
Hash index of the source buffer's landmark blocks.

The source is cut into non-overlapping NHASH-byte blocks. Each block is
hashed with the rolling hash and filed under `hash % bucket_count`.

Two parallel arrays form the table:

    landmark[bucket]  -> most recently inserted block in that bucket
    collide[block]    -> previous block in the same bucket

Following `collide` from `landmark[bucket]` visits every block of a bucket,
newest first, until the NO_BLOCK sentinel.

Example:
-------
Blocks 0, 3 and 5 land in bucket 2, inserted in that order:

    landmark[2] = 5
    collide[5]  = 3
    collide[3]  = 0
    collide[0]  = NO_BLOCK

    candidates -> 5, 3, 0
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .constants import MAX_CANDIDATES, NHASH, NO_BLOCK
from .rolling_hash import RollingHash


@dataclass(frozen=True, slots=True)
class BlockIndex:
    """Landmark table over one source buffer, immutable once built."""

    landmark: list[int]
    """Bucket -> newest block index filed under it, or NO_BLOCK."""

    collide: list[int]
    """Block index -> next older block in the same bucket, or NO_BLOCK."""

    @property
    def bucket_count(self) -> int:
        """Number of buckets, equal to the number of whole blocks in the source."""
        return len(self.landmark)

    @classmethod
    def build(cls, source: bytes) -> BlockIndex:
        """Index the landmark blocks of a source longer than NHASH bytes.

        Blocks start at 0, NHASH, 2*NHASH, ... strictly before
        `len(source) - NHASH`. A final block ending exactly at the end of the
        source is not indexed, which keeps deltas identical to the ones the
        Fossil encoder produces.

        Raises:
            ValueError: If the source is too short to hold a block.
        """
        if len(source) <= NHASH:
            raise ValueError(f"Source of {len(source)} bytes is too short to index")

        bucket_count = len(source) // NHASH
        landmark = [NO_BLOCK] * bucket_count
        collide = [NO_BLOCK] * bucket_count

        for offset in range(0, len(source) - NHASH, NHASH):
            block = offset // NHASH
            bucket = RollingHash.from_window(source, offset).hash32() % bucket_count

            # Push the block onto the front of its bucket's chain.
            collide[block] = landmark[bucket]
            landmark[bucket] = block

        return cls(landmark=landmark, collide=collide)

    def candidates(self, hash_value: int, limit: int = MAX_CANDIDATES) -> Iterator[int]:
        """Yield block indices filed under `hash_value`, newest first.

        At most `limit` blocks are yielded.
        """
        block = self.landmark[hash_value % self.bucket_count]
        remaining = limit

        while block != NO_BLOCK and remaining > 0:
            yield block
            remaining -= 1
            block = self.collide[block]
