"""Heading-group aggregation and the keep-with-next heading rule."""

from __future__ import annotations

from typing import List, Sequence

from ..models import BoxKind, MeasuredBox
from .layout_constants import EPSILON
from .layout_settings import PaginationOptions


def aggregate_headings(boxes: Sequence[MeasuredBox]) -> List[MeasuredBox]:
    """Merge each run of consecutive headings into one heading-group box.

    A lone heading becomes a group of one. Groups already produced by this
    function are absorbed flat, so running it twice changes nothing.

    Args:
        boxes: Boxes in reading order.
    Returns:
        New list where every heading run is a single unsplittable box.

    Example:
        >>> h2 = MeasuredBox(BoxKind.HEADING_GROUP, 20, heading_level=2)
        >>> h3 = MeasuredBox(BoxKind.HEADING_GROUP, 16, heading_level=3)
        >>> [box.height for box in aggregate_headings([h2, h3])]
        [36.0]
    """

    result: List[MeasuredBox] = []
    run: List[MeasuredBox] = []
    for box in boxes:
        if box.kind is BoxKind.HEADING_GROUP:
            run.extend(_members(box=box))
            continue
        if run:
            result.append(_group(members=run))
            run = []
        result.append(box)
    if run:
        result.append(_group(members=run))
    return result


def _members(*, box: MeasuredBox) -> List[MeasuredBox]:
    """Return the individual headings a heading box stands for.

    Args:
        box: A heading or an already aggregated heading group.
    Returns:
        List of member headings.
    """

    if box.children:
        return list(box.children)
    return [box]


def _group(*, members: Sequence[MeasuredBox]) -> MeasuredBox:
    """Build the synthetic group box for a heading run.

    Adjacent vertical margins collapse: between two members only the larger
    of the bottom and top margins counts.

    Args:
        members: Headings in order (at least one).
    Returns:
        Heading-group MeasuredBox.
    """

    first, last = members[0], members[-1]
    height = 0.0
    prev_after = 0.0
    for idx, member in enumerate(members):
        if idx > 0:
            height += max(prev_after, member.margin_top)
        height += member.height
        prev_after = member.margin_bottom
    return MeasuredBox(
        kind=BoxKind.HEADING_GROUP,
        height=height,
        margin_top=first.margin_top,
        margin_bottom=last.margin_bottom,
        children=tuple(members),
        can_split=False,
        force_break_before=first.force_break_before,
        heading_level=first.heading_level,
        ref=first.ref,
    )


def heading_min_content(*, next_box: MeasuredBox, options: PaginationOptions) -> float:
    """Return the space the box after a heading needs on the heading's page.

    An unsplittable follower must fit whole; a splittable one needs at least
    ``min_content_lines`` lines or a fixed share of its height, whichever is
    larger.

    Args:
        next_box: Box following the heading.
        options: Pagination options.
    Returns:
        Required height below the heading.
    """

    if not next_box.can_split:
        return next_box.outer_height
    line_height = next_box.line_height or options.fallback_line_height
    by_lines = options.min_content_lines * line_height
    by_ratio = next_box.height * options.heading_min_content_ratio
    return next_box.margin_top + max(by_lines, by_ratio)


def heading_keeps_with_next(
    *,
    heading: MeasuredBox,
    next_box: MeasuredBox | None,
    remaining: float,
    options: PaginationOptions,
) -> bool:
    """Return True when the heading may stay on the current page.

    Args:
        heading: Heading-group box about to be placed.
        next_box: Following box, or None at the end of the document.
        remaining: Space left on the current page.
        options: Pagination options.
    Returns:
        False when the heading should move to the next page.
    """

    if next_box is None:
        return True
    space_after_heading = remaining - heading.outer_height
    needed = heading_min_content(next_box=next_box, options=options)
    return needed <= space_after_heading + EPSILON
