"""Support helpers for split-point resolution."""

from __future__ import annotations

from typing import List

from ..models import MeasuredBox
from .layout_constants import DEBUG_PAGINATION, EPSILON
from .layout_types import SplitPoint, SplitUnit


def _debug(*, msg: str) -> None:
    """Print pagination debug output when enabled.

    Args:
        msg: Message to print.
    Returns:
        None.
    """

    if DEBUG_PAGINATION:
        print(msg)


def _unit_costs(*, box: MeasuredBox) -> List[float]:
    """Return the height each child adds when laid out after its predecessor.

    The first child pays the box's own leading overhead (non-zero only for
    continuations). Later children pay the previous item's sub-list overhead
    whenever the depth increases across the boundary.

    Args:
        box: Container, sequence or table box.
    Returns:
        One cost per child.
    """

    costs: List[float] = []
    prev: MeasuredBox | None = None
    for child in box.children:
        cost = child.outer_height
        if prev is None:
            cost += box.leading_overhead
        elif child.depth > prev.depth:
            cost += prev.nested_list_overhead
        costs.append(cost)
        prev = child
    return costs


def _fitting_count(*, costs: List[float], available: float) -> int:
    """Return how many leading costs fit within ``available``.

    Args:
        costs: Per-child costs.
        available: Space to fill.
    Returns:
        Number of children that fit.
    """

    used = 0.0
    for idx, cost in enumerate(costs):
        if used + cost > available + EPSILON:
            return idx
        used += cost
    return len(costs)


def _child_split(
    *, box: MeasuredBox, costs: List[float], index: int, header: float = 0.0
) -> SplitPoint:
    """Return the SplitPoint for splitting ``box`` before child ``index``.

    Args:
        box: Box being split.
        costs: Per-child costs from _unit_costs.
        index: First child moved to the next page.
        header: Height repeated on both sides (table header).
    Returns:
        SplitPoint with exact heights.
    """

    first_after = box.children[index]
    before = header + sum(costs[:index])
    after = (
        header
        + first_after.leading_overhead
        + first_after.outer_height
        + sum(costs[index + 1 :])
    )
    return SplitPoint(
        unit=SplitUnit.CHILD,
        index=index,
        height_before=before,
        height_after=after,
    )


def _carried_allowance(*, box: MeasuredBox) -> float:
    """Return the height ``box`` carries beyond its lines.

    A line-based continuation already holds the top marker of its page.

    Args:
        box: Prose or line-based box.
    Returns:
        Non-negative allowance, 0 for a box that starts at its first line.
    """

    extra = box.height - (box.line_count or 0) * (box.line_height or 0.0)
    return extra if extra > EPSILON else 0.0


def _line_split(
    *, box: MeasuredBox, index: int, padding: float = 0.0, lead: float = 0.0
) -> SplitPoint:
    """Return the SplitPoint for splitting ``box`` before line ``index``.

    Args:
        box: Prose or line-based box.
        index: First line moved to the next page.
        padding: Marker allowance added to each side.
        lead: Allowance already carried at the top of ``box``.
    Returns:
        SplitPoint with exact heights.
    """

    line_height = box.line_height or 0.0
    remaining_lines = (box.line_count or 0) - index
    return SplitPoint(
        unit=SplitUnit.LINE,
        index=index,
        height_before=index * line_height + padding + lead,
        height_after=remaining_lines * line_height + padding,
    )


def remainder_box(*, box: MeasuredBox, split: SplitPoint) -> MeasuredBox:
    """Return the part of ``box`` that continues on the next page.

    The original box is left untouched; child remainders reference a slice of
    the same child objects.

    Args:
        box: Box that was split.
        split: Split applied to it.
    Returns:
        New MeasuredBox for the continuation.
    """

    if split.unit is SplitUnit.LINE:
        return box.evolve(
            height=split.height_after,
            margin_top=0.0,
            line_count=(box.line_count or 0) - split.index,
            force_break_before=False,
        )
    first_after = box.children[split.index]
    return box.evolve(
        height=split.height_after,
        margin_top=0.0,
        children=box.children[split.index :],
        leading_overhead=first_after.leading_overhead,
        force_break_before=False,
    )
