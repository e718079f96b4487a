"""Flatten nested lists and table row groups into linear sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..models import BoxKind, MeasuredBox, children_height
from .layout_settings import PaginationOptions


@dataclass(frozen=True, slots=True)
class FlatItem:
    """A list item placed at its true nesting depth.

    Args:
        box: Original item box.
        depth: Nesting level, 0 for items of the root list.
        content_height: Item height without its nested sub-lists.
        nested_list_overhead: Padding and margins of the sub-lists this item opens.
        leading_overhead: Overhead of every ancestor sub-list that must be
            reopened when this item starts a continuation page.
    """

    box: MeasuredBox
    depth: int
    content_height: float
    nested_list_overhead: float
    leading_overhead: float

    def as_box(self) -> MeasuredBox:
        """Return the item as a leaf box annotated with depth and overheads."""

        return MeasuredBox(
            kind=self.box.kind,
            height=self.content_height,
            margin_top=self.box.margin_top,
            margin_bottom=self.box.margin_bottom,
            can_split=False,
            depth=self.depth,
            leading_overhead=self.leading_overhead,
            nested_list_overhead=self.nested_list_overhead,
            ref=self.box.ref,
        )


def _sub_lists(*, item: MeasuredBox) -> List[MeasuredBox]:
    """Return the nested list boxes carried by a list item.

    Args:
        item: List item box.
    Returns:
        Child boxes that are themselves lists.
    """

    return [
        child
        for child in item.children
        if child.kind is BoxKind.SEMANTIC_SEQUENCE and child.children
    ]


def _list_overhead(*, sub_list: MeasuredBox) -> float:
    """Return the height a list box adds on top of its items.

    Args:
        sub_list: List box.
    Returns:
        Non-negative overhead (padding plus margins).
    """

    return max(0.0, sub_list.outer_height - children_height(sub_list.children))


def flatten_list(root: MeasuredBox) -> List[FlatItem]:
    """Walk a nested list depth-first and emit one FlatItem per item.

    Args:
        root: List box whose children are items; items carry nested lists
            as children.
    Returns:
        FlatItems in reading order.

    Example:
        >>> inner = MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 56, children=(
        ...     MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 20),
        ...     MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 20)))
        >>> outer = MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 96, children=(inner,))
        >>> root = MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 96, children=(outer,))
        >>> [(item.depth, item.leading_overhead) for item in flatten_list(root)]
        [(0, 0.0), (1, 16.0), (1, 16.0)]
    """

    items: List[FlatItem] = []
    _walk(list_box=root, depth=0, inherited=0.0, out=items)
    return items


def _walk(
    *, list_box: MeasuredBox, depth: int, inherited: float, out: List[FlatItem]
) -> None:
    """Append FlatItems for ``list_box`` and its descendants.

    Args:
        list_box: Current list.
        depth: Depth of the list's items.
        inherited: Reopening overhead of all ancestor sub-lists.
        out: Accumulator.
    Returns:
        None.
    """

    for item in list_box.children:
        sub_lists = _sub_lists(item=item)
        overhead = sum(_list_overhead(sub_list=sub) for sub in sub_lists)
        content = max(0.0, item.height - children_height(sub_lists))
        out.append(
            FlatItem(
                box=item,
                depth=depth,
                content_height=content,
                nested_list_overhead=overhead,
                leading_overhead=inherited,
            )
        )
        for sub in sub_lists:
            _walk(
                list_box=sub,
                depth=depth + 1,
                inherited=inherited + _list_overhead(sub_list=sub),
                out=out,
            )


def flatten_list_box(
    root: MeasuredBox,
    *,
    options: PaginationOptions,
    keep_together: bool = False,
) -> MeasuredBox:
    """Return ``root`` as a single-level sequence of annotated items.

    Args:
        root: Nested list box.
        options: Pagination options (for the minimum split size).
        keep_together: Whether the list must not break.
    Returns:
        SEMANTIC_SEQUENCE box whose children are the flattened items.
    """

    flat = [item.as_box() for item in flatten_list(root)]
    return root.evolve(
        kind=BoxKind.SEMANTIC_SEQUENCE,
        children=tuple(flat),
        can_split=not keep_together and len(flat) >= 2 * options.min_items_for_split,
    )


def flatten_table_rows(root: MeasuredBox) -> List[MeasuredBox]:
    """Return the body rows of a table with row groups expanded.

    Args:
        root: Table box whose children are rows or row groups.
    Returns:
        Rows in order; the header is not part of the result.
    """

    rows: List[MeasuredBox] = []
    for child in root.children:
        if child.kind in (BoxKind.CONTAINER, BoxKind.TABLE) and child.children:
            rows.extend(flatten_table_rows(child))
        else:
            rows.append(child)
    return rows


def flatten_table_box(
    root: MeasuredBox,
    *,
    options: PaginationOptions,
    keep_together: bool = False,
) -> MeasuredBox:
    """Return ``root`` with a flat row list and its header height passed through.

    Args:
        root: Table box.
        options: Pagination options (for the minimum split size).
        keep_together: Whether the table must not break.
    Returns:
        TABLE box with flat rows.
    """

    rows: Sequence[MeasuredBox] = flatten_table_rows(root)
    return root.evolve(
        children=tuple(rows),
        thead_height=root.thead_height or 0.0,
        can_split=not keep_together and len(rows) >= 2 * options.min_rows_for_split,
    )
