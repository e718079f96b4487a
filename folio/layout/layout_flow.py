"""Greedy page-filling loop over a measured box sequence."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..models import LINE_KINDS, BoxKind, MeasuredBox
from .layout_constants import EPSILON
from .layout_headings import aggregate_headings, heading_keeps_with_next
from .layout_settings import PaginationOptions
from .layout_split import find_split
from .layout_split_support import _debug, remainder_box
from .layout_types import (
    DiagnosticEvent,
    DiagnosticRecorder,
    Fragment,
    OversizeOverflow,
    Page,
    PaginationResult,
    ProgressTracker,
    SplitChosen,
    SplitPoint,
    SplitRange,
    SplitUnit,
)
from .layout_validate import validate_boxes


class Paginator:
    """Fill pages with boxes in order, splitting where resolvers allow.

    One instance owns the page under construction for a single pass; completed
    pages are never touched again.
    """

    def __init__(
        self,
        *,
        boxes: Sequence[MeasuredBox],
        options: PaginationOptions,
        recorder: DiagnosticRecorder | None = None,
    ) -> None:
        """Create a paginator for an aggregated, validated box sequence."""

        self.boxes = boxes
        self.options = options
        self.recorder = recorder
        self.pages: List[Page] = []
        self.warnings: List[OversizeOverflow] = []
        self.page = Page(index=0)
        self.remaining = options.content_height

    def run(self, *, progress: ProgressTracker | None = None) -> List[Page]:
        """Place every box and return the finished pages.

        Args:
            progress: Optional tracker advanced once per box.
        Returns:
            Pages in order.
        """

        for idx, box in enumerate(self.boxes):
            next_box = self.boxes[idx + 1] if idx + 1 < len(self.boxes) else None
            self._place(box=box, box_index=idx, next_box=next_box)
            if progress is not None:
                progress.update(1)
        if not self.page.is_empty:
            self.pages.append(self.page)
        return self.pages

    def _advance(self) -> None:
        """Finalize the current page and open an empty one."""

        _debug(
            msg="[advance] page=%d fragments=%d consumed=%.2f"
            % (self.page.index, len(self.page.fragments), self.page.consumed_height)
        )
        self.pages.append(self.page)
        self.page = Page(index=len(self.pages))
        self.remaining = self.options.content_height

    def _append(
        self,
        *,
        box: MeasuredBox,
        box_index: int,
        split_range: SplitRange | None,
        height: float,
    ) -> None:
        """Append a fragment and charge its height to the page.

        Args:
            box: Original box.
            box_index: Index of the box in the sequence.
            split_range: Units shown, or None for a full placement.
            height: Space the fragment consumes.
        Returns:
            None.
        """

        self.page.fragments.append(
            Fragment(
                box=box,
                box_index=box_index,
                is_partial=split_range is not None,
                split_range=split_range,
                height=height,
            )
        )
        self.page.consumed_height += height
        self.remaining -= height

    def _emit(self, *, event: DiagnosticEvent) -> None:
        """Forward an event to the recorder when one is attached."""

        if self.recorder is not None:
            self.recorder.record(event)

    def _place(
        self, *, box: MeasuredBox, box_index: int, next_box: MeasuredBox | None
    ) -> None:
        """Place one box, splitting it across pages as needed.

        Args:
            box: Box to place.
            box_index: Index of the box in the sequence.
            next_box: Following box, used by the heading rule.
        Returns:
            None.
        """

        if box.force_break_before and not self.page.is_empty:
            self._advance()
        if box.kind is BoxKind.HEADING_GROUP and not self.page.is_empty:
            if not heading_keeps_with_next(
                heading=box,
                next_box=next_box,
                remaining=self.remaining,
                options=self.options,
            ):
                _debug(msg="[heading] box=%d moves to next page" % box_index)
                self._advance()

        view = box
        offset = 0
        while True:
            total = view.outer_height
            if total <= self.remaining + EPSILON:
                self._append(
                    box=box,
                    box_index=box_index,
                    split_range=_tail_range(box=box, offset=offset),
                    height=total,
                )
                return
            split = self._try_split(view=view)
            if split is not None:
                self._apply_split(
                    box=box, box_index=box_index, view=view, offset=offset, split=split
                )
                view = remainder_box(box=view, split=split)
                offset += split.index
                continue
            if not self.page.is_empty:
                self._advance()
                continue
            self._place_oversized(
                box=box, box_index=box_index, view=view, offset=offset
            )
            return

    def _try_split(self, *, view: MeasuredBox) -> SplitPoint | None:
        """Ask the resolver for a split of ``view`` in the remaining space.

        Args:
            view: Box, or the continuation of a box, that overflows.
        Returns:
            SplitPoint or None.
        """

        if not view.can_split:
            return None
        return find_split(
            view,
            self.remaining - view.margin_top,
            self.options,
            fresh_page=self.page.is_empty,
        )

    def _apply_split(
        self,
        *,
        box: MeasuredBox,
        box_index: int,
        view: MeasuredBox,
        offset: int,
        split: SplitPoint,
    ) -> None:
        """Place the part before ``split`` and move to a new page.

        Args:
            box: Original box.
            box_index: Index of the box in the sequence.
            view: Part of the box being split.
            offset: Units of ``box`` already placed on earlier pages.
            split: Split chosen by the resolver.
        Returns:
            None.
        """

        _debug(
            msg="[split] box=%d unit=%s index=%d before=%.2f after=%.2f"
            % (
                box_index,
                split.unit.value,
                offset + split.index,
                split.height_before,
                split.height_after,
            )
        )
        self._emit(
            event=SplitChosen(
                box_index=box_index,
                page_index=self.page.index,
                unit=split.unit,
                index=offset + split.index,
                height_before=split.height_before,
                height_after=split.height_after,
            )
        )
        self._append(
            box=box,
            box_index=box_index,
            split_range=SplitRange(
                unit=split.unit, start=offset, end=offset + split.index
            ),
            height=split.height_before + view.margin_top,
        )
        self._advance()

    def _place_oversized(
        self, *, box: MeasuredBox, box_index: int, view: MeasuredBox, offset: int
    ) -> None:
        """Force a box that cannot fit an empty page onto it and warn.

        Args:
            box: Original box.
            box_index: Index of the box in the sequence.
            view: Part of the box still to place.
            offset: Units already placed on earlier pages.
        Returns:
            None.
        """

        total = view.outer_height
        warning = OversizeOverflow(
            box_index=box_index,
            box_ref=box.ref,
            page_index=self.page.index,
            excess_height=total - self.options.content_height,
            strategy=self.options.oversize_strategy,
        )
        _debug(
            msg="[oversize] box=%d excess=%.2f" % (box_index, warning.excess_height)
        )
        self.warnings.append(warning)
        self._emit(event=warning)
        self._append(
            box=box,
            box_index=box_index,
            split_range=_tail_range(box=box, offset=offset),
            height=total,
        )
        self.page.is_oversized = True
        self.remaining = 0.0


def _tail_range(*, box: MeasuredBox, offset: int) -> SplitRange | None:
    """Return the range from ``offset`` to the end, or None for the whole box.

    Args:
        box: Original box.
        offset: Units already placed on earlier pages.
    Returns:
        SplitRange for a continuation, None for a full placement.
    """

    if offset == 0:
        return None
    unit = SplitUnit.LINE if box.kind in LINE_KINDS else SplitUnit.CHILD
    return SplitRange(unit=unit, start=offset, end=box.unit_count)


def paginate(
    boxes: Sequence[MeasuredBox],
    options: PaginationOptions,
    *,
    recorder: DiagnosticRecorder | None = None,
    progress: ProgressTracker | None = None,
) -> PaginationResult:
    """Partition measured boxes into pages.

    The input is validated, consecutive headings are aggregated, and a single
    greedy pass fills the pages. The result depends only on the inputs.

    Args:
        boxes: Measured boxes in reading order.
        options: Resolved pagination options.
        recorder: Optional sink for SplitChosen / OversizeOverflow events.
        progress: Optional tracker advanced once per placed box.
    Returns:
        PaginationResult; fragments index into ``result.boxes``.

    Example:
        >>> from folio.models import BoxKind, MeasuredBox
        >>> result = paginate([MeasuredBox(BoxKind.ATOMIC, 10)], PaginationOptions(100, 100))
        >>> result.total_pages
        1
    """

    validate_boxes(boxes)
    sequence = aggregate_headings(boxes)
    paginator = Paginator(boxes=sequence, options=options, recorder=recorder)
    pages = paginator.run(progress=progress)
    return PaginationResult(
        pages=pages,
        warnings=paginator.warnings,
        options=options,
        boxes=sequence,
    )


def box_page_map(*, pages: Sequence[Page]) -> Dict[int, int]:
    """Map each box index to the first page index it appears on.

    Args:
        pages: Pages in order.
    Returns:
        Mapping of box index to page index.
    """

    mapping: Dict[int, int] = {}
    for page in pages:
        for fragment in page.fragments:
            mapping.setdefault(fragment.box_index, page.index)
    return mapping
