"""Cross-reference decoded item ids against the location catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Tuple, Union

from .catalog import (
    Catalog,
    entry_farmable,
    entry_hint,
    entry_name,
    entry_type,
    iter_entries,
)
from .parser import DecodeFailure, parse_inventory

logger = logging.getLogger(__name__)


WIKI_BASE_URL = "https://eldenring.wiki.fextralife.com/"
OTHER_CATEGORY = "Other"

# Checked top to bottom; the first inclusive range containing the id wins.
# Bell Bearings, Crystal Tears and Cookbooks nest inside Key Items or
# Magic, and Key Items nests inside Magic, so the narrow ranges go first.
CATEGORY_RANGES: Tuple[Tuple[str, int, int], ...] = (
    ("Weapons", 0x00F42400, 0x017D7840),
    ("Armor", 0x10000000, 0x14000000),
    ("Talismans", 0x20000000, 0x24000000),
    ("Bell Bearings", 0x400007F0, 0x40000850),
    ("Cookbooks", 0x40002400, 0x40002500),
    ("Crystal Tears", 0x40000BC0, 0x40000BF0),
    ("Key Items", 0x40000000, 0x40001000),
    ("Magic", 0x40000000, 0x48000000),
    ("Ashes of War", 0x80000000, 0x88000000),
    ("Spirit Ashes", 0x90000000, 0x98000000),
)

# Display order.
CATEGORIES = (
    "Weapons",
    "Armor",
    "Talismans",
    "Magic",
    "Ashes of War",
    "Spirit Ashes",
    "Bell Bearings",
    "Cookbooks",
    "Crystal Tears",
    "Key Items",
    OTHER_CATEGORY,
)

STATUS_ALL = "all"
STATUS_OWNED = "owned"
STATUS_MISSING = "missing"
VALID_STATUSES = {STATUS_ALL, STATUS_OWNED, STATUS_MISSING}

_UPGRADE_SUFFIX = re.compile(r" \+\d+$")


def classify_item(item_id: str) -> str:
    """Return the category of ``item_id`` ("Other" when nothing matches)."""
    try:
        value = int(item_id, 16)
    except (TypeError, ValueError):
        return OTHER_CATEGORY
    for name, low, high in CATEGORY_RANGES:
        if low <= value <= high:
            return name
    return OTHER_CATEGORY


def wiki_url(name: str) -> str:
    page = _UPGRADE_SUFFIX.sub("", name).replace(" ", "+")
    return WIKI_BASE_URL + page


def percentage(owned: int, total: int) -> int:
    """Completion percent rounded half up; 0 for an empty group."""
    if total <= 0:
        return 0
    return (owned * 200 + total) // (total * 2)


@dataclass(frozen=True)
class EnrichedItem:
    id: str
    name: str
    region: str
    subregion: str
    type: str
    hint: str
    farmable: bool
    owned: bool
    wiki_url: str

    @property
    def category(self) -> str:
        return classify_item(self.id)


@dataclass(frozen=True)
class Stats:
    total: int = 0
    owned: int = 0
    missing: int = 0
    percentage: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "owned": self.owned,
            "missing": self.missing,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class StatsSnapshot:
    overall: Stats
    categories: Dict[str, Stats] = field(default_factory=dict)
    regions: Dict[str, Stats] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.overall.total

    @property
    def owned(self) -> int:
        return self.overall.owned

    @property
    def missing(self) -> int:
        return self.overall.missing

    @property
    def percentage(self) -> int:
        return self.overall.percentage


class _Tally:
    __slots__ = ("total", "owned")

    def __init__(self) -> None:
        self.total = 0
        self.owned = 0

    def add(self, owned: bool) -> None:
        self.total += 1
        if owned:
            self.owned += 1

    def freeze(self) -> Stats:
        return Stats(
            total=self.total,
            owned=self.owned,
            missing=self.total - self.owned,
            percentage=percentage(self.owned, self.total),
        )


def _freeze_all(tallies: Dict[str, _Tally]) -> Dict[str, Stats]:
    return {key: tally.freeze() for key, tally in tallies.items()}


def summarize(items: Iterable[EnrichedItem]) -> StatsSnapshot:
    """Global, per-category and per-region counts in one pass over ``items``."""
    overall = _Tally()
    categories: Dict[str, _Tally] = {}
    regions: Dict[str, _Tally] = {}
    for item in items:
        overall.add(item.owned)
        categories.setdefault(item.category, _Tally()).add(item.owned)
        regions.setdefault(item.region, _Tally()).add(item.owned)
    return StatsSnapshot(
        overall=overall.freeze(),
        categories=_freeze_all(categories),
        regions=_freeze_all(regions),
    )


def region_stats(items: Iterable[EnrichedItem]) -> Dict[str, Stats]:
    """Per-region counts only, for re-labelling a filtered view."""
    regions: Dict[str, _Tally] = {}
    for item in items:
        regions.setdefault(item.region, _Tally()).add(item.owned)
    return _freeze_all(regions)


@dataclass(frozen=True)
class CrossReference:
    items: List[EnrichedItem]
    stats: StatsSnapshot


def enrich(identifiers: Iterable[str], catalog: Catalog) -> List[EnrichedItem]:
    """One item per catalog entry, in catalog order, flagged by ownership.

    Ownership is presence-based: repeated ids in ``identifiers`` count once,
    and an id listed under several locations marks every one of them.
    """
    owned_ids = set(identifiers)
    items: List[EnrichedItem] = []
    for region, subregion, item_id, entry in iter_entries(catalog):
        name = entry_name(entry)
        items.append(
            EnrichedItem(
                id=item_id,
                name=name,
                region=region,
                subregion=subregion,
                type=entry_type(entry),
                hint=entry_hint(entry),
                farmable=entry_farmable(entry),
                owned=item_id in owned_ids,
                wiki_url=wiki_url(name),
            )
        )
    return items


def cross_reference(identifiers: Iterable[str], catalog: Catalog) -> CrossReference:
    items = enrich(identifiers, catalog)
    stats = summarize(items)
    logger.info(
        "cross-referenced %d catalog entries: %d owned, %d missing (%d%%)",
        stats.total,
        stats.owned,
        stats.missing,
        stats.percentage,
    )
    return CrossReference(items=items, stats=stats)


@dataclass(frozen=True)
class FilterCriteria:
    status: str = STATUS_ALL
    region: Optional[str] = None
    category: Optional[str] = None
    search: str = ""

    def __post_init__(self) -> None:
        if self.status not in VALID_STATUSES:
            valid = ", ".join(sorted(VALID_STATUSES))
            raise ValueError(f"status must be one of: {valid}")

    def matches(self, item: EnrichedItem) -> bool:
        if self.status == STATUS_OWNED and not item.owned:
            return False
        if self.status == STATUS_MISSING and item.owned:
            return False
        if self.region and item.region != self.region:
            return False
        if self.category and classify_item(item.id) != self.category:
            return False
        if self.search and self.search.lower() not in item.name.lower():
            return False
        return True


def filter_items(
    items: Sequence[EnrichedItem], criteria: Optional[FilterCriteria] = None
) -> List[EnrichedItem]:
    """Return the items matching every set criterion, order preserved."""
    if criteria is None:
        return list(items)
    return [item for item in items if criteria.matches(item)]


def group_by_region(
    items: Iterable[EnrichedItem],
) -> Dict[str, Dict[str, List[EnrichedItem]]]:
    grouped: Dict[str, Dict[str, List[EnrichedItem]]] = {}
    for item in items:
        grouped.setdefault(item.region, {}).setdefault(item.subregion, []).append(item)
    return grouped


@dataclass(frozen=True)
class TrackSuccess:
    slot_index: int
    character_name: str
    is_expansion: bool
    identifiers: List[str]
    items: List[EnrichedItem]
    stats: StatsSnapshot
    ok: Literal[True] = True


TrackResult = Union[TrackSuccess, DecodeFailure]


def track_save(data: bytes, slot_index: int, catalog: Catalog) -> TrackResult:
    """Decode one slot and cross-reference it against ``catalog``."""
    decoded = parse_inventory(data, slot_index)
    if not decoded.ok:
        return decoded
    result = cross_reference(decoded.identifiers, catalog)
    return TrackSuccess(
        slot_index=decoded.slot_index,
        character_name=decoded.character_name,
        is_expansion=decoded.is_expansion,
        identifiers=decoded.identifiers,
        items=result.items,
        stats=result.stats,
    )
