"""Tests for the source landmark index."""

from __future__ import annotations

import pytest

from fossil_delta.block_index import BlockIndex
from fossil_delta.constants import NHASH, NO_BLOCK
from fossil_delta.rolling_hash import RollingHash


class TestBuild:
    """Tests for BlockIndex.build()."""

    def test_bucket_count(self) -> None:
        """One bucket per whole block of the source."""
        assert BlockIndex.build(b"x" * 17).bucket_count == 1
        assert BlockIndex.build(b"x" * 64).bucket_count == 4
        assert BlockIndex.build(b"x" * 100).bucket_count == 6

    def test_smallest_source(self) -> None:
        """A 17-byte source indexes its single block."""
        index = BlockIndex.build(bytes(range(17)))
        assert index.landmark == [0]
        assert index.collide == [NO_BLOCK]

    def test_collision_chain(self) -> None:
        """Equal blocks share a bucket, newest first."""
        index = BlockIndex.build(b"A" * 64)
        h = RollingHash.from_window(b"A" * NHASH).hash32()
        assert list(index.candidates(h)) == [2, 1, 0]

    def test_final_flush_block_not_indexed(self) -> None:
        """A block ending exactly at the end of the source is skipped."""
        index = BlockIndex.build(b"A" * 64)
        assert 3 not in index.landmark
        assert index.collide[3] == NO_BLOCK

    def test_short_source_raises(self) -> None:
        """Sources of NHASH bytes or fewer have nothing to index."""
        with pytest.raises(ValueError, match="too short"):
            BlockIndex.build(b"A" * NHASH)


class TestCandidates:
    """Tests for candidate enumeration."""

    def test_empty_bucket(self) -> None:
        """A bucket with no blocks yields nothing."""
        index = BlockIndex.build(b"A" * 64)
        # All blocks hash to bucket 0, so bucket 1 is empty.
        assert list(index.candidates(1)) == []

    def test_limit_caps_walk(self) -> None:
        """At most `limit` candidates are yielded."""
        index = BlockIndex.build(b"A" * 64)
        h = RollingHash.from_window(b"A" * NHASH).hash32()
        assert list(index.candidates(h, limit=2)) == [2, 1]
        assert list(index.candidates(h, limit=0)) == []

    def test_default_limit(self) -> None:
        """The walk stops after 250 blocks on highly repetitive sources."""
        index = BlockIndex.build(b"z" * (NHASH * 400))
        h = RollingHash.from_window(b"z" * NHASH).hash32()
        assert len(list(index.candidates(h))) == 250

    def test_distinct_blocks_found(self) -> None:
        """Every indexed block is reachable from its own hash."""
        source = bytes(range(256)) * 2
        index = BlockIndex.build(source)
        for offset in range(0, len(source) - NHASH, NHASH):
            h = RollingHash.from_window(source, offset).hash32()
            assert offset // NHASH in index.candidates(h)
