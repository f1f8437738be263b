"""Decode save-file inventories and track collectible completion."""

from .catalog import (  # noqa: F401
    Catalog,
    CatalogCache,
    CatalogError,
    iter_entries,
    load_catalog,
    merge_catalogs,
    parse_catalog,
)
from .inventory import (  # noqa: F401
    EXPANSION_MARKER,
    STANDARD_MARKER,
    TERMINATOR_RUN,
    InventoryRange,
    Layout,
    decode_inventory,
    item_id_from_record,
    locate_inventory,
    record_from_item_id,
)
from .parser import (  # noqa: F401
    DecodeFailure,
    DecodeSuccess,
    SlotNamesSuccess,
    parse_inventory,
    read_slot_names,
)
from .save_file import (  # noqa: F401
    MAGIC,
    MIN_SAVE_SIZE,
    NAME_LENGTH,
    NAME_OFFSETS,
    SLOT_COUNT,
    SLOT_RANGES,
    SaveFile,
    SaveFormatError,
    SlotWindow,
    character_names,
    decode_name,
    is_save_file,
    slot_windows,
)
from .scan import find_pattern, find_zero_run  # noqa: F401
from .tracker import (  # noqa: F401
    CATEGORIES,
    CATEGORY_RANGES,
    CrossReference,
    EnrichedItem,
    FilterCriteria,
    Stats,
    StatsSnapshot,
    TrackSuccess,
    classify_item,
    cross_reference,
    filter_items,
    group_by_region,
    region_stats,
    summarize,
    track_save,
    wiki_url,
)
