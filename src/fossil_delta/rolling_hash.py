"""
Rolling hash over a sliding NHASH-byte window.

The encoder evaluates a hash at every position of the target. Recomputing
it from scratch would cost NHASH operations per position; the rolling hash
updates in constant time as the window slides by one byte.

Two 16-bit accumulators are kept:

    a = sum(window[k])                  mod 2^16
    b = sum((NHASH - k) * window[k])    mod 2^16

Sliding drops the oldest byte and admits a new one:

    a' = a - outgoing + incoming
    b' = b - NHASH * outgoing + a'

Note that b' uses the updated a'. Both accumulators wrap at 16 bits, and
deltas produced by other implementations only line up if this arithmetic
is reproduced exactly.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import NHASH, U16_MASK


@dataclass(slots=True)
class RollingHash:
    """Hash state for one window position, mutated in place by advance()."""

    a: int
    """Unweighted byte sum, mod 2^16."""

    b: int
    """Position-weighted byte sum, mod 2^16."""

    index: int
    """Slot in `window` holding the oldest byte."""

    window: list[int]
    """The NHASH bytes currently hashed, as a ring buffer."""

    @classmethod
    def from_window(cls, data: bytes, offset: int = 0) -> RollingHash:
        """Initialize the hash from the NHASH bytes at `data[offset:]`.

        Raises:
            ValueError: If fewer than NHASH bytes are available.
        """
        window = list(data[offset : offset + NHASH])
        if len(window) != NHASH:
            raise ValueError(
                f"Hash window needs {NHASH} bytes, got {len(window)} at offset {offset}"
            )

        a = 0
        b = 0
        for k, byte in enumerate(window):
            a += byte
            b += (NHASH - k) * byte

        return cls(a=a & U16_MASK, b=b & U16_MASK, index=0, window=window)

    def advance(self, incoming: int) -> None:
        """Slide the window one byte forward, admitting `incoming`."""
        outgoing = self.window[self.index]
        self.window[self.index] = incoming
        self.index = (self.index + 1) & (NHASH - 1)

        # Order matters: b is updated with the new value of a.
        self.a = (self.a - outgoing + incoming) & U16_MASK
        self.b = (self.b - NHASH * outgoing + self.a) & U16_MASK

    def hash32(self) -> int:
        """Combine both accumulators into an unsigned 32-bit hash."""
        return (self.a & U16_MASK) | ((self.b & U16_MASK) << 16)
