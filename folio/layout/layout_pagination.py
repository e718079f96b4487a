"""Public pagination helpers."""

from __future__ import annotations

from .layout_flatten import FlatItem, flatten_list, flatten_list_box, flatten_table_rows
from .layout_flow import box_page_map, paginate
from .layout_headings import aggregate_headings
from .layout_settings import PaginationOptions, resolve_options
from .layout_split import find_split
from .layout_types import EventLog, OversizeOverflow, PaginationResult, SplitChosen
from .layout_validate import validate_boxes

__all__ = [
    "EventLog",
    "FlatItem",
    "OversizeOverflow",
    "PaginationOptions",
    "PaginationResult",
    "SplitChosen",
    "aggregate_headings",
    "box_page_map",
    "find_split",
    "flatten_list",
    "flatten_list_box",
    "flatten_table_rows",
    "paginate",
    "resolve_options",
    "validate_boxes",
]
