from __future__ import annotations

import pytest

from folio.layout.layout_flatten import (
    flatten_list,
    flatten_list_box,
    flatten_table_box,
    flatten_table_rows,
)
from folio.layout.layout_settings import PaginationOptions
from folio.models import BoxKind, MeasuredBox

from helpers import rows


def _item(height: float, *sub_lists: MeasuredBox) -> MeasuredBox:
    return MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, height, children=tuple(sub_lists))


def _list(*items: MeasuredBox, padding: float = 8.0) -> MeasuredBox:
    height = sum(item.outer_height for item in items) + 2 * padding
    return MeasuredBox(BoxKind.SEMANTIC_SEQUENCE, height, children=tuple(items))


def _nested() -> MeasuredBox:
    inner = _list(_item(20), _item(20), _item(20))
    return _list(_item(40 + inner.outer_height, inner), _item(30))


def test_flatten_records_depth_and_overheads() -> None:
    flat = flatten_list(_nested())

    assert [item.depth for item in flat] == [0, 1, 1, 1, 0]
    assert flat[0].content_height == pytest.approx(40)
    assert flat[0].nested_list_overhead == pytest.approx(16)
    assert [item.leading_overhead for item in flat] == [0, 16, 16, 16, 0]
    assert flat[-1].content_height == pytest.approx(30)


def test_deep_nesting_accumulates_leading_overhead() -> None:
    deepest = _list(_item(10), _item(10), padding=2)
    middle = _list(_item(10 + deepest.outer_height, deepest), padding=3)
    root = _list(_item(10 + middle.outer_height, middle))

    flat = flatten_list(root)

    assert [item.depth for item in flat] == [0, 1, 2, 2]
    assert [item.leading_overhead for item in flat] == [0, 6, 10, 10]


def test_flatten_list_box_is_single_level(options: PaginationOptions) -> None:
    box = flatten_list_box(_nested(), options=options)

    assert box.kind is BoxKind.SEMANTIC_SEQUENCE
    assert len(box.children) == 5
    assert all(not child.children for child in box.children)
    assert box.can_split


def test_flatten_list_box_respects_keep_together(options: PaginationOptions) -> None:
    assert not flatten_list_box(_nested(), options=options, keep_together=True).can_split


def test_short_list_is_not_splittable(options: PaginationOptions) -> None:
    assert not flatten_list_box(_list(_item(20), _item(20)), options=options).can_split


def test_table_row_groups_are_expanded(options: PaginationOptions) -> None:
    body = MeasuredBox(BoxKind.CONTAINER, 60, children=rows(3))
    table = MeasuredBox(
        BoxKind.TABLE, 110, children=(body, *rows(2)), thead_height=10
    )

    assert len(flatten_table_rows(table)) == 5
    flat = flatten_table_box(table, options=options)
    assert len(flat.children) == 5
    assert flat.thead_height == 10
    assert flat.can_split


def test_table_without_header_gets_zero_header(options: PaginationOptions) -> None:
    table = MeasuredBox(BoxKind.TABLE, 40, children=rows(2))

    flat = flatten_table_box(table, options=options)

    assert flat.thead_height == 0.0
    assert not flat.can_split


def test_sibling_sub_lists_only_reopen_their_own_padding() -> None:
    first = _list(_item(20), _item(20))
    second = _list(_item(20), _item(20))
    owner = _item(40 + first.outer_height + second.outer_height, first, second)

    flat = flatten_list(_list(owner))

    assert [item.depth for item in flat] == [0, 1, 1, 1, 1]
    assert flat[0].nested_list_overhead == pytest.approx(32)
    assert [item.leading_overhead for item in flat] == [0, 16, 16, 16, 16]
