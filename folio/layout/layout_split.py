"""Split-point resolvers, one per box kind."""

from __future__ import annotations

import math
from typing import Callable, Dict

from ..models import BoxKind, MeasuredBox
from .layout_constants import EPSILON
from .layout_settings import PaginationOptions
from .layout_split_support import (
    _carried_allowance,
    _child_split,
    _debug,
    _fitting_count,
    _line_split,
    _unit_costs,
)
from .layout_types import SplitPoint


def _lines_in(*, available: float, line_height: float) -> int:
    """Return how many whole lines fit into ``available``.

    Args:
        available: Space to fill.
        line_height: Height of one line.
    Returns:
        Whole line count (never negative).
    """

    if available <= 0:
        return 0
    return max(0, math.floor((available + EPSILON) / line_height))


def find_prose_split(
    box: MeasuredBox,
    available: float,
    options: PaginationOptions,
    *,
    fresh_page: bool = False,
) -> SplitPoint | None:
    """Split a paragraph between lines, honoring orphans and widows.

    Args:
        box: Prose box.
        available: Space left on the page for this box.
        options: Pagination options.
        fresh_page: True when the page is empty; disables the
            anti-fragmentation guard.
    Returns:
        SplitPoint or None when no valid split exists.

    Example:
        >>> box = MeasuredBox(BoxKind.PROSE, 200, line_height=20, line_count=10)
        >>> find_prose_split(box, 120, PaginationOptions(1000, 500)).index
        6
    """

    line_count, line_height = box.line_count, box.line_height
    if not line_count or not line_height:
        return None
    orphans, widows = options.orphan_lines, options.widow_lines
    if line_count < orphans + widows:
        return None
    if not fresh_page:
        min_fragment = max(
            options.min_content_lines * line_height,
            options.prose_min_fragment_ratio * box.height,
        )
        if available + EPSILON < min_fragment:
            _debug(
                msg="[prose] skip split: available=%.2f < min_fragment=%.2f"
                % (available, min_fragment)
            )
            return None
    lines = min(_lines_in(available=available, line_height=line_height), line_count)
    if lines < orphans:
        return None
    if line_count - lines < widows:
        lines = line_count - widows
        if lines < orphans:
            return None
    return _line_split(box=box, index=lines)


def find_line_split(
    box: MeasuredBox,
    available: float,
    options: PaginationOptions,
    *,
    fresh_page: bool = False,
) -> SplitPoint | None:
    """Split a code block anywhere between lines.

    A marker allowance is reserved at the bottom of the first part and the
    top of the continuation. A continuation split again keeps its own top
    marker, so middle parts carry both.

    Args:
        box: Line-based box.
        available: Space left on the page for this box.
        options: Pagination options.
        fresh_page: Unused; line splits have no anti-fragmentation guard.
    Returns:
        SplitPoint or None when no valid split exists.
    """

    line_count, line_height = box.line_count, box.line_height
    if not line_count or not line_height or line_count < 2:
        return None
    padding = options.marker_height
    lead = _carried_allowance(box=box)
    lines = _lines_in(available=available - padding - lead, line_height=line_height)
    if lines < 1 or line_count - lines < 1:
        return None
    return _line_split(box=box, index=lines, padding=padding, lead=lead)


def find_container_split(
    box: MeasuredBox,
    available: float,
    options: PaginationOptions,
    *,
    fresh_page: bool = False,
) -> SplitPoint | None:
    """Split a container before the first child that overflows.

    Args:
        box: Container box.
        available: Space left on the page for this box.
        options: Pagination options.
        fresh_page: Unused for containers.
    Returns:
        SplitPoint, or None when all children fit or the first does not.
    """

    if len(box.children) < 2:
        return None
    costs = _unit_costs(box=box)
    fitted = _fitting_count(costs=costs, available=available)
    if fitted == len(costs) or fitted < 1:
        return None
    return _child_split(box=box, costs=costs, index=fitted)


def _balanced_index(*, fitted: int, total: int, minimum: int) -> int | None:
    """Return the latest split index leaving ``minimum`` units on both sides.

    Args:
        fitted: Units that fit on the current page.
        total: Units in the box.
        minimum: Minimum units per side.
    Returns:
        Split index, or None when no index satisfies both sides.
    """

    if fitted >= total:
        return None
    index = fitted
    if total - index < minimum:
        index = total - minimum
    if index < minimum or index < 1:
        return None
    return index


def find_sequence_split(
    box: MeasuredBox,
    available: float,
    options: PaginationOptions,
    *,
    fresh_page: bool = False,
) -> SplitPoint | None:
    """Split a list-like sequence keeping a minimum of items on each side.

    Args:
        box: Sequence box (possibly a flattened nested list).
        available: Space left on the page for this box.
        options: Pagination options.
        fresh_page: Unused for sequences.
    Returns:
        SplitPoint or None when no valid split exists.
    """

    minimum = options.min_items_for_split
    if len(box.children) < 2 * minimum:
        return None
    costs = _unit_costs(box=box)
    fitted = _fitting_count(costs=costs, available=available)
    index = _balanced_index(fitted=fitted, total=len(costs), minimum=minimum)
    if index is None:
        return None
    return _child_split(box=box, costs=costs, index=index)


def find_table_split(
    box: MeasuredBox,
    available: float,
    options: PaginationOptions,
    *,
    fresh_page: bool = False,
) -> SplitPoint | None:
    """Split a table between rows; the header counts against every page.

    Args:
        box: Table box whose children are body rows.
        available: Space left on the page for this box.
        options: Pagination options.
        fresh_page: Unused for tables.
    Returns:
        SplitPoint or None when no valid split exists.

    Example:
        >>> rows = tuple(MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 20) for _ in range(10))
        >>> table = MeasuredBox(BoxKind.TABLE, 230, children=rows, thead_height=30)
        >>> split = find_table_split(table, 200, PaginationOptions(1000, 500))
        >>> (split.index, split.height_after)
        (8, 70.0)
    """

    minimum = options.min_rows_for_split
    header = box.thead_height or 0.0
    costs = _unit_costs(box=box)
    fitted = _fitting_count(costs=costs, available=available - header)
    index = _balanced_index(fitted=fitted, total=len(costs), minimum=minimum)
    if index is None:
        return None
    return _child_split(box=box, costs=costs, index=index, header=header)


def _never_split(
    box: MeasuredBox,
    available: float,
    options: PaginationOptions,
    *,
    fresh_page: bool = False,
) -> SplitPoint | None:
    """Atomic boxes, semantic pairs and heading groups never split."""

    return None


Resolver = Callable[..., "SplitPoint | None"]

RESOLVERS: Dict[BoxKind, Resolver] = {
    BoxKind.ATOMIC: _never_split,
    BoxKind.SEMANTIC_PAIR: _never_split,
    BoxKind.HEADING_GROUP: _never_split,
    BoxKind.PROSE: find_prose_split,
    BoxKind.LINE_BASED: find_line_split,
    BoxKind.CONTAINER: find_container_split,
    BoxKind.SEMANTIC_SEQUENCE: find_sequence_split,
    BoxKind.TABLE: find_table_split,
}


def find_split(
    box: MeasuredBox,
    available: float,
    options: PaginationOptions,
    *,
    fresh_page: bool = False,
) -> SplitPoint | None:
    """Dispatch to the resolver for ``box.kind``.

    Args:
        box: Box that overflows the page.
        available: Space left on the page for this box.
        options: Pagination options.
        fresh_page: True when nothing else is on the page yet.
    Returns:
        SplitPoint, or None when the box should not be split here.
    """

    resolver = RESOLVERS[box.kind]
    return resolver(box, available, options, fresh_page=fresh_page)
