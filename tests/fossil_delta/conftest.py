"""
Shared pytest fixtures for fossil_delta tests.

Import these fixtures automatically via pytest discovery.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def source_text() -> bytes:
    """A few kilobytes of line-oriented text, like a source file."""
    lines = [f"line {n:04d}: the quick brown fox jumps over the lazy dog\n" for n in range(80)]
    return "".join(lines).encode()


@pytest.fixture
def revised_text(source_text: bytes) -> bytes:
    """`source_text` with an edit in the middle and text appended at the end."""
    middle = len(source_text) // 2
    return (
        source_text[:middle]
        + b"*** an inserted paragraph that did not exist before ***\n"
        + source_text[middle + 200 :]
        + b"trailing addition\n"
    )
