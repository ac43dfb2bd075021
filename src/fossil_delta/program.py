"""
Parsed form of a delta.

A delta is a program: an ordered list of insert and copy operations closed by
a single checksum. `parse_delta` turns the wire text into that program so it
can be inspected (sizes, operation mix) without a source buffer, and
`DeltaProgram.encode` writes it back out.

Parsing checks everything that can be checked without the source. Copy
bounds and the checksum itself need the source and are left to apply().
"""

from __future__ import annotations

from typing import Self, cast

from pydantic import Field, model_validator

from .base import StrictBaseModel
from .constants import (
    CHECKSUM_OP,
    COPY_END,
    COPY_OP,
    HEADER_END,
    INSERT_OP,
)
from .encoding import decode_int, encode_int
from .exceptions import (
    MalformedHeaderError,
    OutputSizeExceededError,
    SizeMismatchError,
    TruncatedDeltaError,
    UnknownOperatorError,
    UnterminatedDeltaError,
)


class Insert(StrictBaseModel):
    """Append literal bytes to the output."""

    data: bytes

    @property
    def length(self) -> int:
        """Output bytes produced."""
        return len(self.data)


class Copy(StrictBaseModel):
    """Append `source[offset : offset + count]` to the output."""

    count: int = Field(ge=0)
    offset: int = Field(ge=0)

    @property
    def length(self) -> int:
        """Output bytes produced."""
        return self.count


class Checksum(StrictBaseModel):
    """Terminal record: checksum of the complete output."""

    value: int = Field(ge=0)


Operation = Insert | Copy | Checksum


class DeltaProgram(StrictBaseModel):
    """A delta as an ordered sequence of operations."""

    size: int = Field(ge=0)
    """Declared length of the reconstructed output."""

    operations: tuple[Operation, ...]
    """Insert and copy operations, closed by exactly one checksum."""

    @model_validator(mode="after")
    def check_structure(self) -> Self:
        """Enforce a single trailing checksum and a consistent size."""
        if not self.operations or not isinstance(self.operations[-1], Checksum):
            raise ValueError("Delta program must end with a checksum")
        if any(isinstance(op, Checksum) for op in self.operations[:-1]):
            raise ValueError("Delta program must contain exactly one checksum")

        produced = self.inserted_bytes + self.copied_bytes
        if produced != self.size:
            raise ValueError(f"Operations produce {produced} bytes, declared size is {self.size}")
        return self

    @property
    def checksum(self) -> int:
        """The recorded output checksum."""
        # check_structure guarantees a trailing checksum.
        return cast(Checksum, self.operations[-1]).value

    @property
    def inserted_bytes(self) -> int:
        """Output bytes produced by insert operations."""
        return sum(op.length for op in self.operations if isinstance(op, Insert))

    @property
    def copied_bytes(self) -> int:
        """Output bytes produced by copy operations."""
        return sum(op.length for op in self.operations if isinstance(op, Copy))

    def encode(self) -> bytes:
        """Serialize the program in the delta wire format."""
        out = bytearray(encode_int(self.size))
        out.append(HEADER_END)

        for op in self.operations:
            if isinstance(op, Insert):
                out += encode_int(len(op.data))
                out.append(INSERT_OP)
                out += op.data
            elif isinstance(op, Copy):
                out += encode_int(op.count)
                out.append(COPY_OP)
                out += encode_int(op.offset)
                out.append(COPY_END)
            else:
                out += encode_int(op.value)
                out.append(CHECKSUM_OP)

        return bytes(out)


def parse_delta(delta: bytes) -> DeltaProgram:
    """Parse a delta into its operations.

    Args:
        delta: Delta produced by create().

    Returns:
        The parsed program.

    Raises:
        MalformedHeaderError: The size is not followed by a newline.
        UnknownOperatorError: A record has an invalid operator.
        OutputSizeExceededError: The records outgrow the declared size.
        TruncatedDeltaError: An insert runs past the end of the delta.
        SizeMismatchError: The records fall short of the declared size.
        UnterminatedDeltaError: The delta has no checksum record.
    """
    end = len(delta)

    size, pos = decode_int(delta, 0)
    if pos >= end or delta[pos] != HEADER_END:
        raise MalformedHeaderError(pos)
    pos += 1

    operations: list[Operation] = []
    total = 0

    while pos < end:
        count, consumed = decode_int(delta, pos)
        pos += consumed
        if pos >= end:
            break

        operator = delta[pos]
        pos += 1

        if operator == COPY_OP:
            offset, consumed = decode_int(delta, pos)
            pos += consumed
            if pos >= end:
                break
            if delta[pos] != COPY_END:
                raise UnknownOperatorError(delta[pos], pos, expected=",")
            pos += 1

            if total + count > size:
                raise OutputSizeExceededError(total + count, size)
            operations.append(Copy(count=count, offset=offset))
            total += count

        elif operator == INSERT_OP:
            if total + count > size:
                raise OutputSizeExceededError(total + count, size)
            if count > end - pos:
                raise TruncatedDeltaError(count, end - pos)
            operations.append(Insert(data=bytes(delta[pos : pos + count])))
            pos += count
            total += count

        elif operator == CHECKSUM_OP:
            if total != size:
                raise SizeMismatchError(total, size)
            operations.append(Checksum(value=count))
            return DeltaProgram(size=size, operations=tuple(operations))

        else:
            raise UnknownOperatorError(operator, pos - 1)

    raise UnterminatedDeltaError()
