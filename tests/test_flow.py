from __future__ import annotations

from collections import defaultdict
from typing import Dict, List

import pytest

from folio.errors import InvalidInputError
from folio.layout.layout_constants import EPSILON
from folio.layout.layout_flatten import flatten_list_box
from folio.layout.layout_flow import box_page_map, paginate
from folio.layout.layout_settings import PaginationOptions
from folio.layout.layout_types import (
    EventLog,
    Fragment,
    OversizeOverflow,
    PaginationResult,
    SplitChosen,
    SplitUnit,
)
from folio.models import BoxKind, MeasuredBox

from helpers import atomic, code, heading, prose, rows


def _fragments_by_box(result: PaginationResult) -> Dict[int, List[Fragment]]:
    grouped: Dict[int, List[Fragment]] = defaultdict(list)
    for page in result.pages:
        for fragment in page.fragments:
            grouped[fragment.box_index].append(fragment)
    return grouped


def _assert_conserved(result: PaginationResult) -> None:
    grouped = _fragments_by_box(result)
    assert sorted(grouped) == list(range(len(result.boxes)))
    for idx, fragments in grouped.items():
        box = result.boxes[idx]
        if len(fragments) == 1 and not fragments[0].is_partial:
            continue
        cursor = 0
        for fragment in fragments:
            assert fragment.split_range is not None
            assert fragment.split_range.start == cursor
            cursor = fragment.split_range.end
        assert cursor == box.unit_count


def _mixed_document() -> List[MeasuredBox]:
    table = MeasuredBox(
        BoxKind.TABLE, 30 + 400, children=rows(20), thead_height=30, can_split=True
    )
    return [
        heading(30, level=1, margin_bottom=6),
        prose(12, margin_bottom=8),
        heading(20, margin_top=10),
        heading(16, level=3),
        prose(40),
        atomic(180),
        code(60, margin_top=4, margin_bottom=4),
        table,
        MeasuredBox(
            BoxKind.CONTAINER,
            300,
            children=(prose(5), atomic(100), prose(5)),
            can_split=True,
        ),
        MeasuredBox(BoxKind.SEMANTIC_PAIR, 90),
        prose(3),
    ]


def test_every_unit_is_placed_exactly_once() -> None:
    result = paginate(_mixed_document(), PaginationOptions(400, 300))

    _assert_conserved(result)


def test_pages_never_overflow_unless_flagged() -> None:
    result = paginate(_mixed_document(), PaginationOptions(400, 300))

    for page in result.pages:
        total = sum(fragment.height for fragment in page.fragments)
        assert total == pytest.approx(page.consumed_height)
        if not page.is_oversized:
            assert page.consumed_height <= 400 + EPSILON


def test_never_split_boxes_stay_whole() -> None:
    result = paginate(_mixed_document(), PaginationOptions(400, 300))

    for idx, fragments in _fragments_by_box(result).items():
        if result.boxes[idx].kind in (BoxKind.ATOMIC, BoxKind.SEMANTIC_PAIR, BoxKind.HEADING_GROUP):
            assert len(fragments) == 1
            assert not fragments[0].is_partial


def test_pagination_is_deterministic() -> None:
    opts = PaginationOptions(400, 300)

    assert paginate(_mixed_document(), opts) == paginate(_mixed_document(), opts)


def test_long_paragraph_spans_several_pages() -> None:
    result = paginate([prose(100, line_height=10)], PaginationOptions(300, 300))

    ranges = [
        (frag.split_range.start, frag.split_range.end)
        for page in result.pages
        for frag in page.fragments
    ]
    assert ranges == [(0, 30), (30, 60), (60, 90), (90, 100)]
    assert all(frag.split_range.unit is SplitUnit.LINE for page in result.pages for frag in page.fragments)
    assert not result.warnings


def test_oversized_atomic_is_forced_onto_an_empty_page() -> None:
    log = EventLog()

    result = paginate([atomic(1400, ref="img-1")], PaginationOptions(1000, 500), recorder=log)

    assert result.total_pages == 1
    fragment = result.pages[0].fragments[0]
    assert not fragment.is_partial
    assert fragment.height == 1400
    assert result.pages[0].is_oversized
    assert result.warnings == [
        OversizeOverflow(
            box_index=0,
            box_ref="img-1",
            page_index=0,
            excess_height=400,
            strategy="scale",
        )
    ]
    assert log.of_type(OversizeOverflow) == result.warnings
    assert log.of_type(SplitChosen) == []


def test_oversized_box_moves_to_fresh_page_first() -> None:
    result = paginate([atomic(50), atomic(1400)], PaginationOptions(1000, 500))

    assert result.total_pages == 2
    assert result.warnings[0].page_index == 1


def test_box_after_oversize_starts_new_page() -> None:
    result = paginate([atomic(1400), atomic(10)], PaginationOptions(1000, 500))

    assert result.total_pages == 2


def test_force_break_starts_a_page_but_never_a_blank_one() -> None:
    result = paginate(
        [atomic(10, force_break_before=True), atomic(10), atomic(10, force_break_before=True)],
        PaginationOptions(1000, 500),
    )

    assert [len(page.fragments) for page in result.pages] == [2, 1]


def test_table_continuation_counts_header(options: PaginationOptions) -> None:
    table = MeasuredBox(
        BoxKind.TABLE, 230, children=rows(10), thead_height=30, can_split=True
    )
    log = EventLog()

    result = paginate([atomic(800), table], options, recorder=log)

    split = log.of_type(SplitChosen)[0]
    assert (split.index, split.height_after) == (8, 70)
    assert result.pages[1].fragments[0].height == pytest.approx(70)
    assert result.pages[1].fragments[0].split_range.start == 8


def test_nested_list_reopens_sub_list_on_continuation(options: PaginationOptions) -> None:
    inner_items = tuple(MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 20) for _ in range(3))
    inner = MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 76, children=inner_items)
    outer_item = MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 116, children=(inner,))
    root = MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, 116, children=(outer_item,))
    flat = flatten_list_box(root, options=options)

    result = paginate([atomic(920), flat], options)

    first, second = result.pages[0].fragments[1], result.pages[1].fragments[0]
    assert first.height == pytest.approx(76)
    assert second.split_range.start == 2
    assert second.height == pytest.approx(56)


def test_split_events_are_recorded_in_order(options: PaginationOptions) -> None:
    log = EventLog()

    paginate([prose(151, line_height=20)], options, recorder=log)

    splits = log.of_type(SplitChosen)
    assert [event.page_index for event in splits] == [0, 1, 2]
    assert [event.index for event in splits] == [50, 100, 149]


def test_box_page_map_reports_first_page() -> None:
    result = paginate([atomic(600), prose(30), atomic(10)], PaginationOptions(1000, 500))

    assert box_page_map(pages=result.pages) == {0: 0, 1: 0, 2: 1}


def test_progress_advances_once_per_box(options: PaginationOptions) -> None:
    class Counter:
        def __init__(self) -> None:
            self.count = 0

        def update(self, n: int = 1) -> None:
            self.count += n

    counter = Counter()
    paginate([heading(10), heading(10), prose(5), atomic(5)], options, progress=counter)

    assert counter.count == 3


def test_invalid_boxes_fail_fast(options: PaginationOptions) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        paginate([atomic(10), atomic(-1)], options)

    assert excinfo.value.path == "boxes[1].height"


def test_long_code_block_carries_markers_on_middle_pages() -> None:
    result = paginate([code(100)], PaginationOptions(300, 300))

    fragments = [frag for page in result.pages for frag in page.fragments]
    ranges = [(frag.split_range.start, frag.split_range.end) for frag in fragments]
    assert ranges == [(0, 29), (29, 57), (57, 85), (85, 100)]
    assert [frag.height for frag in fragments] == pytest.approx([298, 296, 296, 158])
    assert all(page.consumed_height <= 300 + EPSILON for page in result.pages)
    assert not result.warnings
