"""Data structures for page planning and pagination diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Protocol, Sequence, Union

from ..models import MeasuredBox
from .layout_settings import PaginationOptions


class SplitUnit(str, Enum):
    """Unit a box is split by."""

    LINE = "line"
    CHILD = "child"


@dataclass(frozen=True, slots=True)
class SplitPoint:
    """Where a resolver chose to split a box.

    Args:
        unit: Lines for prose/line-based, children otherwise.
        index: First unit that moves to the next page.
        height_before: Height kept on the current page.
        height_after: Height carried to the next page.
    """

    unit: SplitUnit
    index: int
    height_before: float
    height_after: float


@dataclass(frozen=True, slots=True)
class SplitRange:
    """Half-open unit range ``[start, end)`` of a box shown by a fragment."""

    unit: SplitUnit
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class Fragment:
    """One placed unit on a page.

    Args:
        box: Source box, shared by reference.
        box_index: Index of the box in the paginated sequence.
        is_partial: True when only part of the box is on this page.
        split_range: Lines or children shown; None for a full placement.
        height: Vertical space consumed on the page, margins included.
    """

    box: MeasuredBox
    box_index: int
    is_partial: bool
    split_range: SplitRange | None
    height: float


@dataclass(slots=True)
class Page:
    """Fragments placed on a single page."""

    index: int
    fragments: List[Fragment] = field(default_factory=list)
    consumed_height: float = 0.0
    is_oversized: bool = False

    @property
    def is_empty(self) -> bool:
        """Return True when nothing has been placed yet."""

        return not self.fragments


@dataclass(frozen=True, slots=True)
class OversizeOverflow:
    """A box that could not fit even alone on an empty page.

    Args:
        box_index: Index of the box in the paginated sequence.
        box_ref: Caller reference of the box.
        page_index: Page the box was forced onto.
        excess_height: Height beyond the content area.
        strategy: Oversize strategy the renderer should apply.
    """

    box_index: int
    box_ref: str | None
    page_index: int
    excess_height: float
    strategy: str


@dataclass(frozen=True, slots=True)
class SplitChosen:
    """A split a resolver chose and the engine applied."""

    box_index: int
    page_index: int
    unit: SplitUnit
    index: int
    height_before: float
    height_after: float


DiagnosticEvent = Union[OversizeOverflow, SplitChosen]


class DiagnosticRecorder(Protocol):
    """Protocol for opt-in pagination diagnostics."""

    def record(self, event: DiagnosticEvent) -> object:
        """Receive one diagnostic event."""


class ProgressTracker(Protocol):
    """Protocol for progress updates (tqdm-compatible)."""

    def update(self, n: int | float = 1) -> object:
        """Advance the progress tracker by ``n``."""


@dataclass(slots=True)
class EventLog:
    """List-backed DiagnosticRecorder."""

    events: List[DiagnosticEvent] = field(default_factory=list)

    def record(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def of_type(self, kind: type) -> List[DiagnosticEvent]:
        """Return recorded events of the given class."""

        return [event for event in self.events if isinstance(event, kind)]


@dataclass(slots=True)
class PaginationResult:
    """Output of one pagination pass.

    Args:
        pages: Pages in order.
        warnings: Oversize placements.
        options: Options the pass ran with.
        boxes: The sequence fragments index into (after heading aggregation).
    """

    pages: List[Page]
    warnings: List[OversizeOverflow]
    options: PaginationOptions
    boxes: Sequence[MeasuredBox]

    @property
    def total_pages(self) -> int:
        return len(self.pages)
