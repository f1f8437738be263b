"""Decode entry points returning explicit success/failure values.

Nothing here raises for bad input bytes.  Callers check ``result.ok``
before reading payload fields.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Literal, Union

from .inventory import decode_inventory, locate_inventory
from .save_file import SaveFile, SaveFormatError, is_save_file

logger = logging.getLogger(__name__)


INVALID_FORMAT = "Invalid save file format"
NO_INVENTORY = "Could not find inventory data in slot"


@dataclass(frozen=True)
class DecodeFailure:
    error: str
    ok: Literal[False] = False


@dataclass(frozen=True)
class DecodeSuccess:
    slot_index: int
    character_name: str
    identifiers: List[str]
    is_expansion: bool
    ok: Literal[True] = True

    @property
    def total_items(self) -> int:
        return len(self.identifiers)


@dataclass(frozen=True)
class SlotNamesSuccess:
    names: List[str]
    ok: Literal[True] = True


DecodeResult = Union[DecodeSuccess, DecodeFailure]
SlotNamesResult = Union[SlotNamesSuccess, DecodeFailure]


def parse_inventory(data: bytes, slot_index: int) -> DecodeResult:
    """Decode the item identifiers held by one character slot."""
    if not is_save_file(data):
        return DecodeFailure(error=INVALID_FORMAT)

    try:
        save = SaveFile.from_bytes(data)
        name = save.name(slot_index)
        window = save.slot(slot_index)
    except SaveFormatError as err:
        return DecodeFailure(error=str(err))

    inventory = locate_inventory(save.raw, window.start, window.end)
    if inventory is None:
        return DecodeFailure(error=NO_INVENTORY)

    identifiers = decode_inventory(save.raw, inventory)
    logger.info(
        "slot %d (%r): %d items, %s layout",
        slot_index,
        name,
        len(identifiers),
        inventory.layout.label,
    )
    return DecodeSuccess(
        slot_index=slot_index,
        character_name=name,
        identifiers=identifiers,
        is_expansion=inventory.is_expansion,
    )


def read_slot_names(data: bytes) -> SlotNamesResult:
    """Return the ten character names without touching the inventories."""
    if not is_save_file(data):
        return DecodeFailure(error=INVALID_FORMAT)
    try:
        names = SaveFile.from_bytes(data).names
    except SaveFormatError as err:
        return DecodeFailure(error=str(err))
    return SlotNamesSuccess(names=names)
