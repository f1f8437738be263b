"""Synthetic save files built in memory.

A real save is ~26 MB of mostly zeros; the builders below start from a
zero-filled buffer of that size and write only the fields the decoder
reads: the signature, the character names and one inventory table per
populated slot.
"""

from pathlib import Path
import sys
from typing import Dict, Iterable, Optional

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ersave.inventory import EXPANSION_MARKER, STANDARD_MARKER  # noqa: E402
from ersave.save_file import (  # noqa: E402
    MAGIC,
    MIN_SAVE_SIZE,
    NAME_LENGTH,
    NAME_OFFSETS,
    SLOT_RANGES,
)

TABLE_OFFSET = 0x1000  # where tables are written inside a slot


def le_id(item_id: str) -> bytes:
    return bytes.fromhex(item_id)[::-1]


def standard_table(item_ids: Iterable[str]) -> bytes:
    """Base-game table: marker, 8 metadata bytes, 16-byte records."""
    records = b"".join(le_id(i) + bytes(12) for i in item_ids)
    return STANDARD_MARKER + b"\x10\x00\x00\x00\x01\x00\x00\x00" + records


def expansion_table(item_ids: Iterable[str]) -> bytes:
    """Expansion-era table: short marker, 3 metadata bytes, 8-byte records."""
    records = b"".join(le_id(i) + bytes(4) for i in item_ids)
    return EXPANSION_MARKER + b"\x00\x01\x00" + records


def build_save(
    names: Optional[Dict[int, str]] = None,
    tables: Optional[Dict[int, bytes]] = None,
    size: int = MIN_SAVE_SIZE,
) -> bytes:
    buf = bytearray(size)
    buf[: len(MAGIC)] = MAGIC
    for slot, name in (names or {}).items():
        encoded = name.encode("utf-16-le")[:NAME_LENGTH]
        offset = NAME_OFFSETS[slot]
        buf[offset : offset + len(encoded)] = encoded
    for slot, table in (tables or {}).items():
        offset = SLOT_RANGES[slot][0] + TABLE_OFFSET
        buf[offset : offset + len(table)] = table
    return bytes(buf)


@pytest.fixture
def make_save():
    return build_save


@pytest.fixture
def make_standard_table():
    return standard_table


@pytest.fixture
def make_expansion_table():
    return expansion_table


@pytest.fixture
def sample_catalog() -> dict:
    return {
        "Limgrave": {
            "Church of Elleh": {
                "00F42400": {
                    "name": "Dagger",
                    "type": "merchant",
                    "hint": "Sold by <b>Kalé</b>",
                },
                "40000BC0": {"name": "Crimson Crystal Tear", "type": "chest"},
            },
            "Stormhill": {
                "10000000": {"name": "Knight Helm", "type": "foe", "multiple": True},
            },
        },
        "Liurnia of the Lakes": {
            "Academy Gate Town": {
                "00F42400": {"name": "Dagger", "type": "foe"},
                "90000000": {"name": "Jellyfish Ashes"},
            },
        },
    }
