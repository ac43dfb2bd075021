"""Pure Python Fossil delta library.

A delta describes a TARGET buffer as a mix of byte ranges copied from a
SOURCE buffer and literal bytes. When the target is a revision of the source,
the delta is typically a small fraction of the target's size.

Usage::

    from fossil_delta import apply, create

    # Encode a new revision against the previous one
    delta = create(old, new)

    # Rebuild the new revision from the previous one
    assert apply(old, delta) == new

Deltas are compatible with the Fossil SCM delta format:
https://fossil-scm.org/home/doc/trunk/www/delta_format.wiki
"""

from __future__ import annotations

from .apply import apply, output_size
from .checksum import checksum
from .config import DeltaConfig
from .create import create
from .exceptions import (
    ChecksumMismatchError,
    CopyOutOfBoundsError,
    DeltaError,
    MalformedHeaderError,
    OutputSizeExceededError,
    SizeMismatchError,
    TruncatedDeltaError,
    UnknownOperatorError,
    UnterminatedDeltaError,
)
from .program import Checksum, Copy, DeltaProgram, Insert, parse_delta

__all__ = [
    # Core API
    "create",
    "apply",
    # Inspection
    "output_size",
    "parse_delta",
    "checksum",
    "DeltaProgram",
    "Insert",
    "Copy",
    "Checksum",
    # Configuration
    "DeltaConfig",
    # Exceptions
    "DeltaError",
    "MalformedHeaderError",
    "UnknownOperatorError",
    "CopyOutOfBoundsError",
    "OutputSizeExceededError",
    "SizeMismatchError",
    "ChecksumMismatchError",
    "TruncatedDeltaError",
    "UnterminatedDeltaError",
]
