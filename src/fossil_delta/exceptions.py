"""Exception hierarchy for delta application."""

from __future__ import annotations


class DeltaError(Exception):
    """
    Base exception for all delta decoding failures.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class MalformedHeaderError(DeltaError):
    """
    Raised when the declared output size is not terminated by a newline.

    Attributes:
        position: Offset in the delta where the newline was expected.
    """

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f'Size integer not terminated by "\\n" (at delta offset {position})')


class UnknownOperatorError(DeltaError):
    """
    Raised when a record operator is not one the grammar allows.

    Attributes:
        operator: The byte found in the operator slot.
        position: Offset of that byte in the delta.
        expected: The operator characters that would have been accepted.
    """

    def __init__(self, operator: int, position: int, *, expected: str = "@:;") -> None:
        self.operator = operator
        self.position = position
        self.expected = expected

        super().__init__(
            f"Unknown delta operator {chr(operator)!r} at delta offset {position}, "
            f"expected one of {expected!r}"
        )


class CopyOutOfBoundsError(DeltaError):
    """
    Raised when a copy record reads past the end of the source.

    Attributes:
        offset: Source offset of the copy.
        count: Number of bytes to copy.
        source_length: Length of the source buffer.
    """

    def __init__(self, offset: int, count: int, source_length: int) -> None:
        self.offset = offset
        self.count = count
        self.source_length = source_length

        super().__init__(
            f"Copy of {count} bytes from offset {offset} extends past end of "
            f"source ({source_length} bytes)"
        )


class OutputSizeExceededError(DeltaError):
    """
    Raised when a record would grow the output past its declared size.

    Attributes:
        total: Output size the record would produce.
        limit: Declared output size.
    """

    def __init__(self, total: int, limit: int) -> None:
        self.total = total
        self.limit = limit
        super().__init__(f"Output of {total} bytes exceeds declared size {limit}")


class SizeMismatchError(DeltaError):
    """
    Raised when the checksum record is reached before or after the declared size.

    Attributes:
        total: Output size actually produced.
        limit: Declared output size.
    """

    def __init__(self, total: int, limit: int) -> None:
        self.total = total
        self.limit = limit
        super().__init__(f"Generated size {total} does not match declared size {limit}")


class ChecksumMismatchError(DeltaError):
    """
    Raised when the output does not hash to the checksum recorded in the delta.

    Attributes:
        expected: Checksum recorded in the delta.
        actual: Checksum of the produced output.
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Bad checksum: delta records {expected}, output has {actual}")


class TruncatedDeltaError(DeltaError):
    """
    Raised when an insert record declares more bytes than the delta holds.

    Attributes:
        count: Declared literal length.
        remaining: Bytes left in the delta after the operator.
    """

    def __init__(self, count: int, remaining: int) -> None:
        self.count = count
        self.remaining = remaining
        super().__init__(f"Insert count {count} exceeds remaining delta size {remaining}")


class UnterminatedDeltaError(DeltaError):
    """Raised when the delta ends before its checksum record."""

    def __init__(self) -> None:
        super().__init__("Unterminated delta: no checksum record")
