from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ersave.inventory import (  # noqa: E402
    EXPANSION_MARKER,
    STANDARD_MARKER,
    InventoryRange,
    Layout,
    decode_inventory,
    item_id_from_record,
    locate_inventory,
    record_from_item_id,
)


IDS = ["DEADBEEF", "00F42400", "10000000", "400007F0", "90000000"]


def test_markers_and_layout_constants() -> None:
    assert STANDARD_MARKER == bytes([0xB0, 0xAD, 0x01, 0x00, 0x01, 0xFF, 0xFF, 0xFF])
    assert EXPANSION_MARKER == STANDARD_MARKER[:5]
    assert Layout.STANDARD.record_width == 16
    assert Layout.EXPANSION.record_width == 8
    assert Layout.STANDARD.start_offset == 16
    assert Layout.EXPANSION.start_offset == 8


def test_single_standard_record() -> None:
    raw = STANDARD_MARKER + bytes(8) + b"\xEF\xBE\xAD\xDE" + bytes(12) + bytes(50)
    found = locate_inventory(raw)
    assert found is not None
    assert found.layout is Layout.STANDARD
    assert found.start == 16
    assert decode_inventory(raw, found) == ["DEADBEEF"]


@pytest.mark.parametrize("count", [1, 2, 5, 40])
def test_standard_table_yields_one_id_per_record(make_standard_table, count: int) -> None:
    ids = [IDS[i % len(IDS)] for i in range(count)]
    raw = b"\x55" * 32 + make_standard_table(ids) + bytes(64)
    found = locate_inventory(raw)
    assert found is not None
    assert found.layout is Layout.STANDARD
    assert found.start == 32 + 16
    assert not found.is_expansion
    assert decode_inventory(raw, found) == ids


@pytest.mark.parametrize("count", [1, 2, 5, 40])
def test_expansion_table_yields_one_id_per_record(make_expansion_table, count: int) -> None:
    ids = [IDS[i % len(IDS)] for i in range(count)]
    raw = b"\x55" * 32 + make_expansion_table(ids) + bytes(64)
    found = locate_inventory(raw)
    assert found is not None
    assert found.layout is Layout.EXPANSION
    assert found.start == 32 + 8
    assert found.is_expansion
    assert decode_inventory(raw, found) == ids


def test_standard_marker_takes_priority_over_expansion_prefix() -> None:
    # An expansion-looking marker earlier in the buffer must not win.
    raw = (
        EXPANSION_MARKER
        + b"\x00\x00\x00"
        + b"\x11" * 16
        + STANDARD_MARKER
        + bytes(8)
        + b"\x01\x02\x03\x04"
        + bytes(62)
    )
    found = locate_inventory(raw)
    assert found is not None
    assert found.layout is Layout.STANDARD
    assert decode_inventory(raw, found) == ["04030201"]


def test_duplicate_ids_are_kept(make_expansion_table) -> None:
    ids = ["40000BC0", "40000BC0", "DEADBEEF"]
    raw = make_expansion_table(ids) + bytes(64)
    found = locate_inventory(raw)
    assert decode_inventory(raw, found) == ids


def test_no_marker_reports_not_found() -> None:
    assert locate_inventory(bytes(1024)) is None
    assert locate_inventory(b"\xB0\xAD\x01\x00" + bytes(100)) is None


def test_missing_terminator_reports_not_found() -> None:
    raw = STANDARD_MARKER + bytes(8) + b"\x01" * 200
    assert locate_inventory(raw) is None


def test_terminator_must_fall_inside_window() -> None:
    raw = STANDARD_MARKER + bytes(8) + b"\x01" * 32 + bytes(50)
    assert locate_inventory(raw, 0, len(raw) - 1) is None
    assert locate_inventory(raw, 0, len(raw)) is not None


def test_locate_respects_window_start() -> None:
    raw = STANDARD_MARKER + bytes(8) + b"\x01" * 16 + bytes(60)
    assert locate_inventory(raw, start=1) is None


def test_end_includes_six_byte_tail() -> None:
    raw = STANDARD_MARKER + bytes(8) + b"\x01" * 20 + bytes(50)
    found = locate_inventory(raw)
    assert found == InventoryRange(start=16, end=16 + 20 + 6, layout=Layout.STANDARD)
    assert len(found) == 26


def test_trailing_scrap_shorter_than_id_is_dropped() -> None:
    inventory = InventoryRange(start=0, end=18, layout=Layout.STANDARD)
    raw = b"\x01\x00\x00\x00" + bytes(12) + b"\x02\x00"
    assert decode_inventory(raw, inventory) == ["00000001"]


@pytest.mark.parametrize(
    "record,expected",
    [
        (b"\xEF\xBE\xAD\xDE", "DEADBEEF"),
        (b"\x00\x24\xF4\x00" + bytes(12), "00F42400"),
        (b"\x0a\x0b\x0c\x0d\xFF\xFF\xFF\xFF", "0D0C0B0A"),
    ],
)
def test_item_id_from_record(record: bytes, expected: str) -> None:
    assert item_id_from_record(record) == expected


def test_item_id_byte_order_round_trip() -> None:
    for raw in (b"\x00\x00\x00\x00", b"\x12\x34\x56\x78", b"\xFF\x00\xFF\x01"):
        assert record_from_item_id(item_id_from_record(raw)) == raw


def test_item_id_rejects_short_record() -> None:
    with pytest.raises(ValueError):
        item_id_from_record(b"\x01\x02\x03")
    with pytest.raises(ValueError):
        record_from_item_id("ABCD")


@pytest.mark.parametrize(
    "layout,filler",
    [
        (Layout.STANDARD, b"\x01\x00\x00\x00" + b"\xFF" * 8),
        (Layout.EXPANSION, b"\x01\x00\x00\x01"),
    ],
)
def test_records_with_nonzero_filler_yield_one_id_each(layout: Layout, filler: bytes) -> None:
    ids = ["DEADBEEF", "00F42400", "10000000"]
    records = b"".join(bytes.fromhex(i)[::-1] + filler for i in ids)
    metadata = bytes(layout.skip) if layout is Layout.STANDARD else b"\x00\x01\x00"
    raw = layout.marker + metadata + records + bytes(64)
    found = locate_inventory(raw)
    assert found is not None
    assert found.layout is layout
    # The zero run starts right after the last record; the six tail bytes
    # are terminator zeros, not another item.
    assert len(found) == len(records) + 6
    assert decode_inventory(raw, found) == ids


def test_partial_record_with_zero_id_is_dropped() -> None:
    inventory = InventoryRange(start=0, end=22, layout=Layout.STANDARD)
    raw = b"\xEF\xBE\xAD\xDE" + b"\xFF" * 12 + bytes(6)
    assert decode_inventory(raw, inventory) == ["DEADBEEF"]
