"""Save container layout: signature, character slot windows and names.

Offsets are fixed for the PC ``.sl2`` save.  The file is a ``BND4``
archive holding ten character slots of 0x280000 bytes each, laid out with
a 0x10-byte gap (the per-slot checksum) between consecutive windows.
Character names live in a separate summary block after the last slot.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)


MAGIC = b"BND4"
SLOT_COUNT = 10

# (start, end) pairs, end exclusive.
SLOT_RANGES: Tuple[Tuple[int, int], ...] = (
    (0x00000310, 0x00280310),
    (0x00280320, 0x00500320),
    (0x00500330, 0x00780330),
    (0x00780340, 0x00A00340),
    (0x00A00350, 0x00C80350),
    (0x00C80360, 0x00F00360),
    (0x00F00370, 0x01180370),
    (0x01180380, 0x01400380),
    (0x01400390, 0x01680390),
    (0x016803A0, 0x019003A0),
)

NAME_OFFSETS: Tuple[int, ...] = (
    0x1901D0E,
    0x1901F5A,
    0x19021A6,
    0x19023F2,
    0x190263E,
    0x190288A,
    0x1902AD6,
    0x1902D22,
    0x1902F6E,
    0x19031BA,
)
NAME_LENGTH = 32  # 16 UTF-16LE code units

MIN_SAVE_SIZE = max(NAME_OFFSETS) + NAME_LENGTH


class SaveFormatError(ValueError):
    """The buffer is not a structurally valid save file."""


@dataclass(frozen=True)
class SlotWindow:
    """A non-owning view of one character slot inside the save buffer.

    ``raw`` is the whole save; ``start``/``end`` bound the slot.  Searches
    pass the bounds to ``bytes.find`` instead of slicing, so no slot-sized
    copy is ever made.
    """

    index: int
    raw: bytes
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def to_bytes(self) -> bytes:
        return self.raw[self.start : self.end]


def is_save_file(data: bytes) -> bool:
    return data[: len(MAGIC)] == MAGIC


def check_signature(data: bytes) -> None:
    if not is_save_file(data):
        raise SaveFormatError(f"bad magic: {bytes(data[:4]).hex()}")


def check_slot_index(slot_index: int) -> None:
    if not 0 <= slot_index < SLOT_COUNT:
        raise SaveFormatError(f"Slot index out of range: {slot_index}")


def slot_window(data: bytes, slot_index: int) -> SlotWindow:
    check_slot_index(slot_index)
    start, end = SLOT_RANGES[slot_index]
    if end > len(data):
        raise SaveFormatError(
            f"file too short for slot {slot_index} "
            f"({len(data)} bytes, need 0x{end:X})"
        )
    return SlotWindow(index=slot_index, raw=data, start=start, end=end)


def slot_windows(data: bytes) -> List[SlotWindow]:
    """Split the save into its ten character slots, in slot order."""
    return [slot_window(data, idx) for idx in range(SLOT_COUNT)]


def decode_name(data: bytes, slot_index: int) -> str:
    """Decode the character name of ``slot_index``.

    Names are stored as UTF-16LE padded with NULs.  Undecodable code units
    are replaced rather than raising; an empty string means the slot is
    unused.
    """
    check_slot_index(slot_index)
    offset = NAME_OFFSETS[slot_index]
    if offset + NAME_LENGTH > len(data):
        raise SaveFormatError(
            f"file too short for slot {slot_index} name "
            f"({len(data)} bytes, need 0x{offset + NAME_LENGTH:X})"
        )
    field = bytes(data[offset : offset + NAME_LENGTH])
    return field.decode("utf-16-le", errors="replace").rstrip("\x00")


def character_names(data: bytes) -> List[str]:
    return [decode_name(data, idx) for idx in range(SLOT_COUNT)]


@dataclass(frozen=True)
class SaveFile:
    """A validated save buffer.  ``raw`` is the caller's buffer, not a copy."""

    raw: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "SaveFile":
        check_signature(data)
        if len(data) < MIN_SAVE_SIZE:
            raise SaveFormatError(
                f"file too short ({len(data)} bytes); minimum is 0x{MIN_SAVE_SIZE:X}"
            )
        logger.debug("validated save buffer of %d bytes", len(data))
        return cls(raw=data)

    @property
    def slots(self) -> List[SlotWindow]:
        return slot_windows(self.raw)

    def slot(self, slot_index: int) -> SlotWindow:
        return slot_window(self.raw, slot_index)

    def name(self, slot_index: int) -> str:
        return decode_name(self.raw, slot_index)

    @property
    def names(self) -> List[str]:
        return character_names(self.raw)
