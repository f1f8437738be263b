#!/usr/bin/env python3
"""Report which catalogued collectibles a character already owns.

Decodes the inventory of one save slot, cross-references it with the
location catalog and prints completion per category and per region,
followed by the (optionally filtered) item list grouped by region.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys
from typing import Dict, List, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ersave.catalog import CatalogCache, CatalogError  # noqa: E402
from ersave.save_file import SLOT_COUNT  # noqa: E402
from ersave.tracker import (  # noqa: E402
    CATEGORIES,
    EnrichedItem,
    FilterCriteria,
    Stats,
    TrackSuccess,
    filter_items,
    group_by_region,
    region_stats,
    track_save,
)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cross-reference a save slot's inventory with the item catalog",
    )
    parser.add_argument("save", type=Path, help="Path to the .sl2 save file")
    parser.add_argument(
        "--slot",
        type=int,
        default=0,
        choices=range(SLOT_COUNT),
        metavar=f"0-{SLOT_COUNT - 1}",
        help="Character slot to decode (default: 0)",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        required=True,
        help="Base game location catalog (JSON)",
    )
    parser.add_argument(
        "--expansion-catalog",
        type=Path,
        default=None,
        help="Expansion location catalog (JSON), merged over the base catalog",
    )
    parser.add_argument(
        "--no-expansion",
        action="store_true",
        help="Ignore --expansion-catalog and track base game items only",
    )
    parser.add_argument(
        "--status",
        choices=("all", "owned", "missing"),
        default="all",
        help="Only list owned or missing items",
    )
    parser.add_argument("--region", default=None, help="Only list this region")
    parser.add_argument(
        "--category", choices=CATEGORIES, default=None, help="Only list this category"
    )
    parser.add_argument(
        "--search", default="", help="Only list items whose name contains this text"
    )
    parser.add_argument(
        "--json", action="store_true", help="Emit a JSON document instead of text"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log decoding details"
    )
    return parser


def _fmt_stats(stats: Stats) -> str:
    return f"{stats.owned}/{stats.total}  {stats.percentage}%"


def _item_dict(item: EnrichedItem) -> Dict[str, object]:
    return {
        "id": item.id,
        "name": item.name,
        "region": item.region,
        "subregion": item.subregion,
        "category": item.category,
        "type": item.type,
        "hint": item.hint,
        "farmable": item.farmable,
        "owned": item.owned,
        "wiki_url": item.wiki_url,
    }


def _json_report(result: TrackSuccess, items: List[EnrichedItem]) -> str:
    payload = {
        "character": result.character_name,
        "slot": result.slot_index,
        "expansion_save": result.is_expansion,
        "inventory_size": len(result.identifiers),
        "stats": {
            **result.stats.overall.as_dict(),
            "categories": {
                name: stats.as_dict() for name, stats in result.stats.categories.items()
            },
            "regions": {
                name: stats.as_dict() for name, stats in result.stats.regions.items()
            },
        },
        "items": [_item_dict(item) for item in items],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _print_text_report(result: TrackSuccess, items: List[EnrichedItem]) -> None:
    variant = "expansion" if result.is_expansion else "base"
    print(f"Character: {result.character_name or '(unnamed)'}  (slot {result.slot_index})")
    print(f"Save format: {variant}; {len(result.identifiers)} inventory records")
    print(f"Completion: {_fmt_stats(result.stats.overall)}")

    print()
    print("Categories:")
    for name, stats in result.stats.categories.items():
        print(f"  {name:<15} {_fmt_stats(stats)}")

    visible_regions = region_stats(items)
    for region, subregions in group_by_region(items).items():
        print()
        print(f"{region}  ({_fmt_stats(visible_regions[region])})")
        for subregion, sub_items in subregions.items():
            owned = sum(1 for item in sub_items if item.owned)
            print(f"  {subregion}  ({owned}/{len(sub_items)})")
            for item in sub_items:
                mark = "x" if item.owned else " "
                farm = "  [farmable]" if item.farmable else ""
                print(f"    [{mark}] {item.name}  ({item.type}){farm}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    cache = CatalogCache()
    expansion_path = None if args.no_expansion else args.expansion_catalog
    try:
        catalog = cache.merged(args.catalog, expansion_path)
    except (OSError, CatalogError) as err:
        print(f"error: cannot load catalog: {err}", file=sys.stderr)
        return 2

    try:
        data = args.save.read_bytes()
    except OSError as err:
        print(f"error: cannot read save file: {err}", file=sys.stderr)
        return 2

    result = track_save(data, args.slot, catalog)
    if not result.ok:
        print(f"error: {result.error}", file=sys.stderr)
        return 1

    criteria = FilterCriteria(
        status=args.status,
        region=args.region,
        category=args.category,
        search=args.search,
    )
    items = filter_items(result.items, criteria)

    if args.json:
        print(_json_report(result, items))
    else:
        _print_text_report(result, items)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
