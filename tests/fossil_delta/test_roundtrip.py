"""Property tests for create() and apply()."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from fossil_delta import DeltaConfig, apply, create, parse_delta
from fossil_delta.program import Copy


@st.composite
def revisions(draw: st.DrawFn) -> tuple[bytes, bytes]:
    """A source buffer and a target derived from it by a few edits."""
    source = draw(st.binary(min_size=0, max_size=2000))
    target = bytearray(source)

    for _ in range(draw(st.integers(min_value=0, max_value=5))):
        start = draw(st.integers(min_value=0, max_value=len(target)))
        end = draw(st.integers(min_value=start, max_value=min(len(target), start + 64)))
        replacement = draw(st.binary(max_size=32))
        target[start:end] = replacement

    return source, bytes(target)


@given(st.binary(max_size=300), st.binary(max_size=300))
@settings(max_examples=200)
def test_roundtrip_arbitrary_buffers(source: bytes, target: bytes) -> None:
    """apply(source, create(source, target)) == target for any buffers."""
    assert apply(source, create(source, target)) == target


@given(revisions())
@settings(max_examples=150)
def test_roundtrip_revisions(pair: tuple[bytes, bytes]) -> None:
    """Edited revisions round-trip, whatever the edits."""
    source, target = pair
    assert apply(source, create(source, target)) == target


@given(revisions(), st.integers(min_value=1, max_value=4))
@settings(max_examples=50)
def test_roundtrip_with_small_cap(pair: tuple[bytes, bytes], max_candidates: int) -> None:
    """Capping the candidate search never breaks a delta."""
    source, target = pair
    delta = create(source, target, DeltaConfig(max_candidates=max_candidates))
    assert apply(source, delta) == target


@given(revisions())
@settings(max_examples=50)
def test_deterministic(pair: tuple[bytes, bytes]) -> None:
    """create() is a pure function of its inputs."""
    source, target = pair
    assert create(source, target) == create(source, target)


@given(st.binary(max_size=16), st.binary(max_size=200))
def test_small_source_never_copies(source: bytes, target: bytes) -> None:
    """Sources of 16 bytes or fewer produce literal-only deltas."""
    program = parse_delta(create(source, target))
    assert not any(isinstance(op, Copy) for op in program.operations)
    assert program.inserted_bytes == len(target)


@given(revisions())
@settings(max_examples=50)
def test_parsed_program_is_consistent(pair: tuple[bytes, bytes]) -> None:
    """Every delta parses, re-encodes identically, and copies within the source."""
    source, target = pair
    delta = create(source, target)
    program = parse_delta(delta)

    assert program.size == len(target)
    assert program.encode() == delta
    for op in program.operations:
        if isinstance(op, Copy):
            assert op.offset + op.count <= len(source)
