from __future__ import annotations

import pytest
from reportlab.lib.pagesizes import A4, letter

from folio.errors import InvalidInputError
from folio.layout.layout_settings import (
    DEFAULT_PADDING,
    PaginationOptions,
    build_styles,
    resolve_options,
)


def test_defaults_follow_a4_with_default_padding() -> None:
    options = resolve_options()
    top, right, bottom, left = DEFAULT_PADDING

    assert options.content_height == pytest.approx(A4[1] - top - bottom)
    assert options.content_width == pytest.approx(A4[0] - left - right)
    assert (options.orphan_lines, options.widow_lines) == (2, 2)
    assert options.oversize_strategy == "scale"


def test_landscape_swaps_sides() -> None:
    options = resolve_options(page_size="Letter", orientation="landscape", padding=36)

    assert options.content_height == pytest.approx(letter[0] - 72)
    assert options.content_width == pytest.approx(letter[1] - 72)
    assert options.orientation == "landscape"


def test_explicit_page_size_and_overrides() -> None:
    options = resolve_options(
        page_width=400, page_height=600, padding=(10, 20, 30, 40), orphan_lines=3
    )

    assert options.content_height == pytest.approx(560)
    assert options.content_width == pytest.approx(340)
    assert options.orphan_lines == 3


def test_marker_height_can_be_disabled() -> None:
    assert PaginationOptions(100, 100).marker_height == 8
    assert PaginationOptions(100, 100, enable_line_wrap_markers=False).marker_height == 0


@pytest.mark.parametrize(
    ("kwargs", "path"),
    [
        ({"content_height": 0}, "options.content_height"),
        ({"orphan_lines": 0}, "options.orphan_lines"),
        ({"min_rows_for_split": 0}, "options.min_rows_for_split"),
        ({"prose_min_fragment_ratio": 1.5}, "options.prose_min_fragment_ratio"),
        ({"oversize_strategy": "shrink"}, "options.oversize_strategy"),
        ({"orientation": "sideways"}, "options.orientation"),
    ],
)
def test_invalid_options_are_rejected(kwargs: dict, path: str) -> None:
    values = {"content_height": 100, "content_width": 100, **kwargs}

    with pytest.raises(InvalidInputError) as excinfo:
        PaginationOptions(**values)

    assert excinfo.value.path == path


def test_unknown_page_size_and_bad_padding() -> None:
    with pytest.raises(InvalidInputError, match="page_size"):
        resolve_options(page_size="A3")
    with pytest.raises(InvalidInputError, match="padding"):
        resolve_options(padding=(1, 2))


def test_build_styles_has_body_and_headings() -> None:
    styles = build_styles()

    assert {"body", "code", "item", "cell", "caption"} <= set(styles)
    assert [styles[f"h{level}"].fontSize for level in range(1, 7)] == sorted(
        (styles[f"h{level}"].fontSize for level in range(1, 7)), reverse=True
    )
    assert styles["h1"].fontName == "Times-Bold"
