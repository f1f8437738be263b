"""Forward byte-pattern search used for every offset discovery in a save."""

from __future__ import annotations

from typing import Optional


def find_pattern(
    haystack: bytes, needle: bytes, start: int = 0, end: Optional[int] = None
) -> Optional[int]:
    """Return the lowest offset of ``needle`` in ``haystack[start:end]``.

    The returned offset is absolute (relative to ``haystack``, not ``start``).
    The scan walks forward candidate by candidate: it jumps to the next
    occurrence of the needle's first byte and compares the rest byte for
    byte.  Returns ``None`` when the needle does not fit anywhere in the
    window.
    """
    if not needle:
        raise ValueError("needle must be at least one byte")
    if start < 0:
        raise ValueError(f"start offset must be non-negative (got {start})")

    limit = len(haystack) if end is None else min(end, len(haystack))
    width = len(needle)
    first = needle[0]
    pos = start

    while pos + width <= limit:
        pos = haystack.find(first, pos, limit - width + 1)
        if pos == -1:
            return None
        if haystack[pos : pos + width] == needle:
            return pos
        pos += 1
    return None


def find_zero_run(
    haystack: bytes, length: int, start: int = 0, end: Optional[int] = None
) -> Optional[int]:
    """Return the offset of the first run of ``length`` zero bytes."""
    return find_pattern(haystack, bytes(length), start, end)
