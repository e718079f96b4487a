"""
Typed containers for measured content boxes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Tuple


class BoxKind(str, Enum):
    """Semantic type decided once by the classifier."""

    ATOMIC = "atomic"
    PROSE = "prose"
    LINE_BASED = "line-based"
    CONTAINER = "container"
    SEMANTIC_PAIR = "semantic-pair"
    SEMANTIC_SEQUENCE = "semantic-sequence"
    HEADING_GROUP = "heading-group"
    TABLE = "table"


NEVER_SPLIT = frozenset(
    {BoxKind.ATOMIC, BoxKind.SEMANTIC_PAIR, BoxKind.HEADING_GROUP}
)
LINE_KINDS = frozenset({BoxKind.PROSE, BoxKind.LINE_BASED})
CHILD_KINDS = frozenset(
    {BoxKind.CONTAINER, BoxKind.SEMANTIC_SEQUENCE, BoxKind.TABLE}
)


@dataclass(frozen=True, slots=True)
class MeasuredBox:
    """One measured content unit.

    Attributes:
        kind: Semantic type of the box.
        height: Content height, margins excluded.
        margin_top: Space above the box.
        margin_bottom: Space below the box.
        line_height: Height of one line (prose and line-based only).
        line_count: Number of wrapped lines (prose and line-based only).
        children: Child boxes for containers, sequences, tables and heading groups.
        can_split: Whether the box may be fragmented across pages.
        force_break_before: Whether the box must start a new page.
        heading_level: Level 1-6 for headings.
        thead_height: Header block height repeated on table continuations.
        depth: Nesting level inside a flattened list.
        leading_overhead: Height charged when the box opens a continuation page.
        nested_list_overhead: Padding of the sub-list this item opens.
        ref: Opaque caller reference used in warnings and rendering.
    """

    kind: BoxKind
    height: float
    margin_top: float = 0.0
    margin_bottom: float = 0.0
    line_height: float | None = None
    line_count: int | None = None
    children: Tuple["MeasuredBox", ...] = field(default_factory=tuple)
    can_split: bool = False
    force_break_before: bool = False
    heading_level: int | None = None
    thead_height: float | None = None
    depth: int = 0
    leading_overhead: float = 0.0
    nested_list_overhead: float = 0.0
    ref: str | None = None

    @property
    def outer_height(self) -> float:
        """Return the height including both margins."""

        return self.height + self.margin_top + self.margin_bottom

    @property
    def unit_count(self) -> int:
        """Return the number of split units (lines or children).

        Example:
            >>> MeasuredBox(BoxKind.PROSE, 40, line_height=20, line_count=2).unit_count
            2
        """

        if self.kind in LINE_KINDS:
            return self.line_count or 0
        return len(self.children)

    def evolve(self, **changes: object) -> "MeasuredBox":
        """Return a copy with ``changes`` applied; the original is untouched."""

        return replace(self, **changes)


def children_height(children: Iterable[MeasuredBox]) -> float:
    """Sum outer heights of ``children``.

    Example:
        >>> children_height([MeasuredBox(BoxKind.ATOMIC, 10, margin_top=2)])
        12.0
    """

    return float(sum(child.outer_height for child in children))


def walk_boxes(boxes: Iterable[MeasuredBox]) -> List[MeasuredBox]:
    """Return boxes and all their descendants in document order."""

    result: List[MeasuredBox] = []
    for box in boxes:
        result.append(box)
        result.extend(walk_boxes(box.children))
    return result
