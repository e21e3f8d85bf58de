"""Capacity rounding for DynamicString buffers.

Buffers grow to the next power of two, never below two machine words
(``2 * sizeof(size_t)``). Reallocation is lazy: a buffer is only grown when
its current capacity cannot hold the requested length plus the terminator,
and is never shrunk by a resize.
"""

from __future__ import annotations

import struct

# sizeof(size_t) on this host
WORD_SIZE: int = struct.calcsize("N")

BASELINE_CAPACITY: int = 2 * WORD_SIZE


def round_up(n: int) -> int:
    """Round n up to the next power of two, floored to BASELINE_CAPACITY.

    Examples:
        >>> round_up(1) == BASELINE_CAPACITY
        True
        >>> round_up(BASELINE_CAPACITY + 1) == 2 * BASELINE_CAPACITY
        True
    """
    p2 = BASELINE_CAPACITY
    while p2 < n:
        p2 *= 2
    return p2


def is_valid_capacity(capacity: int, length: int) -> bool:
    """Check that capacity is a legal allocation size for length bytes.

    A legal capacity is a power of two, at least the baseline, with room for
    length content bytes and the terminator.
    """
    if capacity < BASELINE_CAPACITY or capacity & (capacity - 1):
        return False
    return capacity >= round_up(length + 1)


__all__ = ["BASELINE_CAPACITY", "WORD_SIZE", "is_valid_capacity", "round_up"]
