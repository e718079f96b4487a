from __future__ import annotations

import math

import pytest

from folio.errors import FolioError, InvalidInputError
from folio.layout.layout_validate import validate_boxes
from folio.models import BoxKind, MeasuredBox

from helpers import atomic, heading, prose


@pytest.mark.parametrize(
    ("box", "path"),
    [
        (atomic(-5), "boxes[0].height"),
        (atomic(math.inf), "boxes[0].height"),
        (atomic(5, margin_top=math.nan), "boxes[0].margin_top"),
        (MeasuredBox(BoxKind.PROSE, 20, line_height=0, line_count=1), "boxes[0].line_height"),
        (MeasuredBox(BoxKind.LINE_BASED, 20, line_height=10, line_count=0), "boxes[0].line_count"),
        (atomic(5, can_split=True), "boxes[0].can_split"),
        (heading(10, level=7), "boxes[0].heading_level"),
        (MeasuredBox(BoxKind.PROSE, 20, line_height=20, line_count=1, heading_level=2), "boxes[0].heading_level"),
        (atomic(5, thead_height=3), "boxes[0].thead_height"),
        (MeasuredBox(BoxKind.TABLE, 5, thead_height=-1), "boxes[0].thead_height"),
        (atomic(5, depth=-1), "boxes[0].depth"),
    ],
)
def test_invalid_boxes_report_their_path(box: MeasuredBox, path: str) -> None:
    with pytest.raises(InvalidInputError) as excinfo:
        validate_boxes([box])

    assert excinfo.value.path == path
    assert str(excinfo.value).startswith(path)


def test_nested_children_are_checked() -> None:
    container = MeasuredBox(BoxKind.CONTAINER, 30, children=(atomic(10), atomic(-1)))

    with pytest.raises(InvalidInputError, match=r"boxes\[0\]\.children\[1\]\.height"):
        validate_boxes([container])


def test_invalid_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_boxes([atomic(-1)])
    assert issubclass(InvalidInputError, FolioError)


def test_valid_boxes_pass() -> None:
    validate_boxes([heading(20), prose(5), atomic(0)])
