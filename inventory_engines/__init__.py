"""
Pure calculation engines for the inventory ledger.

Engines take domain records and return values.  They never touch the
database, the clock or configuration; callers pass those in.
"""

from inventory_engines.classifier import (
    Classified,
    classify,
    filter_by_status,
    infer_kind,
    merge_timeline,
    record_from_row,
    record_timestamp,
    records_from_rows,
)
from inventory_engines.measurement import (
    AreaUnit,
    Slab,
    sale_item_from_slabs,
    slab_area,
    target_progress,
    total_area,
)
from inventory_engines.periods import (
    ActivityEntry,
    Summary,
    start_of_range,
    summarize,
)
from inventory_engines.stock import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    StockLevelPoint,
    current_stock,
    low_stock_count,
    running_stock,
    stock_as_of,
    stock_levels,
    stock_value,
)

__all__ = [
    "ActivityEntry",
    "AreaUnit",
    "Classified",
    "DEFAULT_LOW_STOCK_THRESHOLD",
    "Slab",
    "StockLevelPoint",
    "Summary",
    "classify",
    "current_stock",
    "filter_by_status",
    "infer_kind",
    "low_stock_count",
    "merge_timeline",
    "record_from_row",
    "record_timestamp",
    "records_from_rows",
    "running_stock",
    "sale_item_from_slabs",
    "slab_area",
    "start_of_range",
    "stock_as_of",
    "stock_levels",
    "stock_value",
    "summarize",
    "target_progress",
    "total_area",
]
