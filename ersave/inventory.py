"""Locate and decode the inventory record table inside a character slot.

Layout (verified against base and expansion-era saves):

  Base saves:       B0 AD 01 00 01 FF FF FF  [8 bytes]  records...
  Expansion saves:  B0 AD 01 00 01           [3 bytes]  records...

  Record widths:    16 bytes (base), 8 bytes (expansion)
    [id:u32 LE] [rest unused here]

  The table ends at the first run of 50 zero bytes; the 6 bytes ahead of
  that run still belong to the last record.

The expansion marker is a prefix of the base marker, so the base marker
must be tried first: once a slot matches one marker, every record in the
slot uses that layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import List, Optional

from .scan import find_pattern, find_zero_run

logger = logging.getLogger(__name__)


STANDARD_MARKER = b"\xB0\xAD\x01\x00\x01\xFF\xFF\xFF"
EXPANSION_MARKER = b"\xB0\xAD\x01\x00\x01"
TERMINATOR_RUN = 50
TERMINATOR_TAIL = 6
ITEM_ID_SIZE = 4


class Layout(Enum):
    """Record layout, selected by which marker matched."""

    STANDARD = ("standard", STANDARD_MARKER, 8, 16)
    EXPANSION = ("expansion", EXPANSION_MARKER, 3, 8)

    def __init__(self, label: str, marker: bytes, skip: int, record_width: int) -> None:
        self.label = label
        self.marker = marker
        self.skip = skip
        self.record_width = record_width

    @property
    def start_offset(self) -> int:
        """Distance from the marker offset to the first identifier byte."""
        return len(self.marker) + self.skip


# Search order matters: EXPANSION_MARKER also matches every STANDARD_MARKER.
MARKER_ORDER = (Layout.STANDARD, Layout.EXPANSION)


@dataclass(frozen=True)
class InventoryRange:
    start: int  # absolute offset of the first identifier byte
    end: int  # absolute offset one past the last record byte
    layout: Layout

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_expansion(self) -> bool:
        return self.layout is Layout.EXPANSION


def locate_inventory(
    data: bytes, start: int = 0, end: Optional[int] = None
) -> Optional[InventoryRange]:
    """Find the inventory table inside ``data[start:end]``.

    Returns ``None`` when neither marker occurs (usually an empty slot) or
    when no terminator run follows the marker.
    """
    limit = len(data) if end is None else min(end, len(data))

    for layout in MARKER_ORDER:
        marker_at = find_pattern(data, layout.marker, start, limit)
        if marker_at is not None:
            break
    else:
        logger.debug("no inventory marker in 0x%X..0x%X", start, limit)
        return None

    table_start = marker_at + layout.start_offset
    terminator_at = find_zero_run(data, TERMINATOR_RUN, table_start, limit)
    if terminator_at is None:
        logger.debug(
            "%s marker at 0x%X has no terminator before 0x%X",
            layout.label,
            marker_at,
            limit,
        )
        return None

    logger.debug(
        "%s marker at 0x%X, table 0x%X..0x%X",
        layout.label,
        marker_at,
        table_start,
        terminator_at + TERMINATOR_TAIL,
    )
    return InventoryRange(
        start=table_start, end=terminator_at + TERMINATOR_TAIL, layout=layout
    )


def item_id_from_record(record: bytes) -> str:
    """Return the canonical identifier of a record: its first 4 bytes, big-endian hex."""
    if len(record) < ITEM_ID_SIZE:
        raise ValueError(
            f"record too short for an item id ({len(record)} bytes, need {ITEM_ID_SIZE})"
        )
    return bytes(reversed(record[:ITEM_ID_SIZE])).hex().upper()


def record_from_item_id(item_id: str) -> bytes:
    """Inverse of :func:`item_id_from_record`: the 4 little-endian id bytes."""
    raw = bytes.fromhex(item_id)
    if len(raw) != ITEM_ID_SIZE:
        raise ValueError(f"item id must be 8 hex digits (got {item_id!r})")
    return bytes(reversed(raw))


def iter_records(data: bytes, inventory: InventoryRange):
    """Yield each record of the table in file order.

    A trailing partial record is yielded only when it still holds a full,
    non-zero identifier.  Shorter scraps and all-zero scraps are part of
    the terminator run.
    """
    width = inventory.layout.record_width
    for offset in range(inventory.start, inventory.end, width):
        record = data[offset : min(offset + width, inventory.end)]
        if len(record) < width:
            if len(record) < ITEM_ID_SIZE or not any(record[:ITEM_ID_SIZE]):
                break
        yield record


def decode_inventory(data: bytes, inventory: InventoryRange) -> List[str]:
    """Decode every record of ``inventory`` into its item identifier."""
    return [item_id_from_record(record) for record in iter_records(data, inventory)]
