"""Location catalog: region -> subregion -> item id -> entry.

Catalog files are plain JSON objects.  Python dicts keep insertion order,
and that order is what the tracker reports items in, so nothing here
sorts or re-keys.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


Entry = Dict[str, object]
Subregion = Dict[str, Entry]
Region = Dict[str, Subregion]
Catalog = Dict[str, Region]


class CatalogError(ValueError):
    """The catalog JSON does not have the region/subregion/item shape."""


def _require_dict(value: object, *, where: str) -> dict:
    if not isinstance(value, dict):
        raise CatalogError(f"{where} must be an object")
    return value


def parse_catalog(payload: object, *, where: str = "catalog") -> Catalog:
    """Check the nesting of a decoded catalog and return it unchanged."""
    regions = _require_dict(payload, where=where)
    for region, subregions in regions.items():
        rwhere = f"{where}[{region!r}]"
        for subregion, items in _require_dict(subregions, where=rwhere).items():
            swhere = f"{rwhere}[{subregion!r}]"
            for item_id, entry in _require_dict(items, where=swhere).items():
                ewhere = f"{swhere}[{item_id!r}]"
                entry_obj = _require_dict(entry, where=ewhere)
                if not isinstance(entry_obj.get("name"), str):
                    raise CatalogError(f"{ewhere}.name must be a string")
    return regions


def load_catalog(path: Path | str) -> Catalog:
    catalog_path = Path(path).expanduser()
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        raise CatalogError(f"{catalog_path}: invalid JSON: {err}") from err
    catalog = parse_catalog(payload, where=catalog_path.name)
    logger.info("loaded %d regions from %s", len(catalog), catalog_path)
    return catalog


def merge_catalogs(base: Catalog, expansion: Optional[Catalog] = None) -> Catalog:
    """Combine the base and expansion partitions.

    Regions are replaced wholesale on key collision: the expansion's copy
    wins and keeps the base region's position.
    """
    merged: Catalog = dict(base)
    if expansion:
        merged.update(expansion)
    return merged


def iter_entries(catalog: Catalog):
    """Yield ``(region, subregion, item_id, entry)`` in catalog order."""
    for region, subregions in catalog.items():
        for subregion, items in subregions.items():
            for item_id, entry in items.items():
                yield region, subregion, item_id, entry


def entry_name(entry: Entry) -> str:
    return str(entry.get("name", ""))


def entry_type(entry: Entry) -> str:
    return str(entry.get("type") or "unknown")


def entry_hint(entry: Entry) -> str:
    return str(entry.get("hint") or "")


def entry_farmable(entry: Entry) -> bool:
    return bool(entry.get("multiple", False))


class CatalogCache:
    """Caller-owned cache of parsed catalog files, keyed by resolved path."""

    def __init__(self) -> None:
        self._catalogs: Dict[Path, Catalog] = {}

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self._key(path) in self._catalogs

    def __len__(self) -> int:
        return len(self._catalogs)

    @staticmethod
    def _key(path: Path | str) -> Path:
        return Path(path).expanduser().resolve()

    def load(self, path: Path | str) -> Catalog:
        key = self._key(path)
        if key not in self._catalogs:
            self._catalogs[key] = load_catalog(key)
        return self._catalogs[key]

    def merged(
        self, base_path: Path | str, expansion_path: Path | str | None = None
    ) -> Catalog:
        base = self.load(base_path)
        expansion = self.load(expansion_path) if expansion_path is not None else None
        return merge_catalogs(base, expansion)

    def invalidate(self, path: Path | str | None = None) -> None:
        """Forget one cached file, or every file when ``path`` is omitted."""
        if path is None:
            self._catalogs.clear()
        else:
            self._catalogs.pop(self._key(path), None)

    def paths(self) -> Tuple[Path, ...]:
        return tuple(self._catalogs)
