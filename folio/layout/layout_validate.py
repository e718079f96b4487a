"""Boundary checks for measured boxes."""

from __future__ import annotations

import math
from typing import Sequence

from ..errors import InvalidInputError
from ..models import LINE_KINDS, NEVER_SPLIT, BoxKind, MeasuredBox


def validate_boxes(boxes: Sequence[MeasuredBox], *, path: str = "boxes") -> None:
    """Raise InvalidInputError for the first box that breaks the data model.

    Args:
        boxes: Boxes to check, recursively.
        path: Path prefix used in error messages.
    Returns:
        None.

    Example:
        >>> validate_boxes([MeasuredBox(BoxKind.ATOMIC, 10)])
    """

    for idx, box in enumerate(boxes):
        _validate_box(box=box, path=f"{path}[{idx}]")


def _validate_box(*, box: MeasuredBox, path: str) -> None:
    """Check a single box and its children.

    Args:
        box: Box to check.
        path: Location of the box.
    Returns:
        None.
    """

    if not isinstance(box.kind, BoxKind):
        raise InvalidInputError(path, f"unknown kind {box.kind!r}")
    for name in (
        "height",
        "margin_top",
        "margin_bottom",
        "leading_overhead",
        "nested_list_overhead",
    ):
        _check_length(value=getattr(box, name), path=f"{path}.{name}")
    if box.depth < 0:
        raise InvalidInputError(f"{path}.depth", "must be >= 0")
    _validate_lines(box=box, path=path)
    _validate_kind_fields(box=box, path=path)
    validate_boxes(box.children, path=f"{path}.children")


def _check_length(*, value: float, path: str) -> None:
    """Reject negative or non-finite lengths.

    Args:
        value: Length to check.
        path: Location used in the error.
    Returns:
        None.
    """

    if value is None or not math.isfinite(value) or value < 0:
        raise InvalidInputError(path, f"expected a non-negative length, got {value!r}")


def _validate_lines(*, box: MeasuredBox, path: str) -> None:
    """Check line metrics for prose and line-based boxes.

    Args:
        box: Box to check.
        path: Location of the box.
    Returns:
        None.
    """

    if box.kind not in LINE_KINDS:
        return
    if box.line_height is None or not math.isfinite(box.line_height) or box.line_height <= 0:
        raise InvalidInputError(
            f"{path}.line_height", f"{box.kind.value} box needs a positive line height"
        )
    if box.line_count is None or box.line_count < 1:
        raise InvalidInputError(
            f"{path}.line_count", f"{box.kind.value} box needs at least one line"
        )


def _validate_kind_fields(*, box: MeasuredBox, path: str) -> None:
    """Check fields that only make sense for some kinds.

    Args:
        box: Box to check.
        path: Location of the box.
    Returns:
        None.
    """

    if box.can_split and box.kind in NEVER_SPLIT:
        raise InvalidInputError(
            f"{path}.can_split", f"{box.kind.value} boxes never split"
        )
    if box.heading_level is not None:
        if box.kind is not BoxKind.HEADING_GROUP:
            raise InvalidInputError(
                f"{path}.heading_level", "only heading boxes carry a level"
            )
        if not 1 <= box.heading_level <= 6:
            raise InvalidInputError(f"{path}.heading_level", "must be within 1..6")
    if box.thead_height is not None:
        if box.kind is not BoxKind.TABLE:
            raise InvalidInputError(
                f"{path}.thead_height", "only tables carry a header height"
            )
        _check_length(value=box.thead_height, path=f"{path}.thead_height")
