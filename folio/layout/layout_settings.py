"""Page geometry, pagination options, and measuring styles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Sequence

from reportlab.lib.enums import TA_JUSTIFY, TA_LEFT
from reportlab.lib.pagesizes import A4, legal, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet

from ..errors import InvalidInputError
from .layout_constants import (
    FALLBACK_LINE_HEIGHT,
    HEADING_MIN_CONTENT_RATIO,
    LINE_MARKER_HEIGHT,
    PROSE_MIN_FRAGMENT_RATIO,
)

PAGE_SIZES: Dict[str, tuple[float, float]] = {
    "A4": A4,
    "Letter": letter,
    "Legal": legal,
}
ORIENTATIONS = ("portrait", "landscape")
OVERSIZE_STRATEGIES = ("scale", "rotate", "clip")
DEFAULT_PADDING = (60.0, 60.0, 81.0, 60.0)


@dataclass(frozen=True, slots=True)
class PaginationOptions:
    """Resolved options consumed by the pagination engine.

    Example:
        >>> options = PaginationOptions(content_height=700, content_width=450)
        >>> options.orphan_lines
        2
    """

    content_height: float
    content_width: float
    orphan_lines: int = 2
    widow_lines: int = 2
    min_content_lines: int = 2
    min_items_for_split: int = 2
    min_rows_for_split: int = 2
    repeat_table_header: bool = False
    skip_empty_elements: bool = True
    enable_line_wrap_markers: bool = True
    line_marker_height: float = LINE_MARKER_HEIGHT
    prose_min_fragment_ratio: float = PROSE_MIN_FRAGMENT_RATIO
    heading_min_content_ratio: float = HEADING_MIN_CONTENT_RATIO
    fallback_line_height: float = FALLBACK_LINE_HEIGHT
    oversize_strategy: str = "scale"
    orientation: str = "portrait"

    def __post_init__(self) -> None:
        _check_positive(name="content_height", value=self.content_height)
        _check_positive(name="content_width", value=self.content_width)
        for name in (
            "orphan_lines",
            "widow_lines",
            "min_items_for_split",
            "min_rows_for_split",
        ):
            if getattr(self, name) < 1:
                raise InvalidInputError(f"options.{name}", "must be at least 1")
        if self.min_content_lines < 0:
            raise InvalidInputError("options.min_content_lines", "must be >= 0")
        for name in ("prose_min_fragment_ratio", "heading_min_content_ratio"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(f"options.{name}", "must be within [0, 1]")
        if self.line_marker_height < 0:
            raise InvalidInputError("options.line_marker_height", "must be >= 0")
        _check_positive(name="fallback_line_height", value=self.fallback_line_height)
        if self.oversize_strategy not in OVERSIZE_STRATEGIES:
            raise InvalidInputError(
                "options.oversize_strategy",
                f"expected one of {', '.join(OVERSIZE_STRATEGIES)}",
            )
        if self.orientation not in ORIENTATIONS:
            raise InvalidInputError(
                "options.orientation", f"expected one of {', '.join(ORIENTATIONS)}"
            )

    @property
    def marker_height(self) -> float:
        """Return the continuation marker allowance for line-based splits.

        Returns:
            Marker height in points, or 0 when markers are disabled.
        """

        return self.line_marker_height if self.enable_line_wrap_markers else 0.0


def _check_positive(*, name: str, value: float) -> None:
    """Raise InvalidInputError unless ``value`` is a finite positive number.

    Args:
        name: Option name for the error path.
        value: Value to check.
    Returns:
        None.
    """

    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"options.{name}", "must be a finite positive number")


def _padding_tuple(
    *, padding: float | Sequence[float] | None
) -> tuple[float, float, float, float]:
    """Normalize padding into (top, right, bottom, left).

    Args:
        padding: A single value, a 4-sequence, or None for the default.
    Returns:
        Padding tuple in points.
    """

    if padding is None:
        return DEFAULT_PADDING
    if isinstance(padding, (int, float)):
        value = float(padding)
        return value, value, value, value
    values = tuple(float(value) for value in padding)
    if len(values) != 4:
        raise InvalidInputError("options.padding", "expected 1 or 4 values")
    return values  # type: ignore[return-value]


def resolve_options(
    *,
    page_size: str = "A4",
    orientation: str = "portrait",
    padding: float | Sequence[float] | None = None,
    page_width: float | None = None,
    page_height: float | None = None,
    **overrides: object,
) -> PaginationOptions:
    """Build PaginationOptions from page geometry and overrides.

    Args:
        page_size: Preset name (A4, Letter, Legal).
        orientation: "portrait" or "landscape" (landscape swaps the sides).
        padding: Page padding as one value or (top, right, bottom, left).
        page_width: Explicit page width overriding the preset.
        page_height: Explicit page height overriding the preset.
        overrides: Any other PaginationOptions field.
    Returns:
        Validated PaginationOptions.

    Example:
        >>> options = resolve_options(page_size="Letter", padding=36)
        >>> round(options.content_height)
        720
    """

    if page_size not in PAGE_SIZES:
        raise InvalidInputError(
            "options.page_size", f"expected one of {', '.join(PAGE_SIZES)}"
        )
    width, height = PAGE_SIZES[page_size]
    if page_width:
        width = page_width
    if page_height:
        height = page_height
    if orientation == "landscape":
        width, height = height, width
    top, right, bottom, left = _padding_tuple(padding=padding)
    return PaginationOptions(
        content_height=height - top - bottom,
        content_width=width - left - right,
        orientation=orientation,
        **overrides,  # type: ignore[arg-type]
    )


def build_styles(font_name: str = "Times-Roman") -> Dict[str, ParagraphStyle]:
    """Create paragraph styles used when measuring HTML content.

    Args:
        font_name: Base font name registered with ReportLab.
    Returns:
        Mapping of style keys to ParagraphStyle objects.

    Example:
        >>> styles = build_styles()
        >>> "body" in styles and "h1" in styles
        True
    """

    base = getSampleStyleSheet()
    body = ParagraphStyle(
        "Body",
        parent=base["Normal"],
        fontName=font_name,
        fontSize=11,
        leading=14,
        alignment=TA_JUSTIFY,
        spaceBefore=0,
        spaceAfter=8,
    )
    code = ParagraphStyle(
        "Code",
        parent=base["Code"],
        fontSize=9,
        leading=12,
        spaceBefore=4,
        spaceAfter=8,
    )
    item = ParagraphStyle(
        "ListItem",
        parent=body,
        alignment=TA_LEFT,
        leftIndent=18,
        spaceAfter=2,
    )
    cell = ParagraphStyle(
        "Cell",
        parent=body,
        fontSize=10,
        leading=12,
        alignment=TA_LEFT,
        spaceAfter=0,
    )
    return {
        "body": body,
        "code": code,
        "item": item,
        "cell": cell,
        "caption": ParagraphStyle("Caption", parent=cell, fontSize=9, leading=11),
        **_heading_styles(base=base, font_name=font_name),
    }


def _heading_styles(*, base, font_name: str) -> Dict[str, ParagraphStyle]:
    """Return h1-h6 styles.

    Args:
        base: ReportLab sample styles.
        font_name: Base font name.
    Returns:
        Mapping of heading tag name to ParagraphStyle.
    """

    bold = "Times-Bold" if font_name == "Times-Roman" else f"{font_name}-Bold"
    sizes = (22, 18, 15, 13, 12, 11)
    styles: Dict[str, ParagraphStyle] = {}
    for level, size in enumerate(sizes, start=1):
        styles[f"h{level}"] = ParagraphStyle(
            f"Heading{level}",
            parent=base["Normal"],
            fontName=bold,
            fontSize=size,
            leading=size * 1.25,
            alignment=TA_LEFT,
            spaceBefore=size * 0.6,
            spaceAfter=size * 0.4,
            keepWithNext=False,
        )
    return styles
