"""
Measure HTML content into MeasuredBox sequences with ReportLab.

Every block element is wrapped at the content width of the page so the
pagination engine only ever sees heights in points.
"""

from __future__ import annotations

import html as htmllib
import re
from typing import Dict, List, Sequence

from bs4 import BeautifulSoup, Tag
from pyphen import Pyphen
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Flowable, KeepTogether, Paragraph, XPreformatted

from .classify import (
    MEDIA_TAGS,
    BreakFlags,
    block_children,
    break_flags,
    classify_tag,
    contains_media,
    derive_can_split,
    heading_level,
    inline_style,
    is_empty,
)
from .errors import InvalidInputError
from .layout.layout_flatten import flatten_list_box, flatten_table_box
from .layout.layout_settings import PaginationOptions, build_styles
from .models import BoxKind, MeasuredBox, children_height
from .text import hyphenate_html, inline_markup

DEFAULT_MEDIA_HEIGHT = 150.0
PX_TO_PT = 0.75
HR_HEIGHT = 1.0
HR_MARGIN = 6.0
LIST_PADDING = 4.0
CELL_PADDING = 3.0
_LENGTH_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px|pt)?\s*$", re.I)
_LIST_TAGS = frozenset({"ul", "ol"})


def measure_height(flowable: Flowable, width: float) -> float:
    """Return the wrapped height for a flowable at the given width."""

    if isinstance(flowable, KeepTogether):
        content = getattr(flowable, "_content", [])
        return sum(measure_height(child, width) for child in content)
    _, height = flowable.wrap(width, 10_000)
    return height


def wrapped_line_count(*, para: Paragraph, width: float) -> int:
    """Return how many lines ``para`` wraps into at ``width``.

    Args:
        para: Paragraph to wrap.
        width: Available width.
    Returns:
        Line count, at least 1.
    """

    setattr(para, "allowOrphans", 1)
    setattr(para, "allowWidows", 1)
    _, height = para.wrap(width, 10_000)
    bl_para = getattr(para, "blPara", None)
    lines = getattr(bl_para, "lines", None)
    if lines:
        return len(lines)
    leading = getattr(para.style, "leading", 0) or 1
    return max(1, round(height / leading))


def css_length(value: object) -> float | None:
    """Convert an HTML/CSS length (px or pt) to points.

    Example:
        >>> css_length("200px")
        150.0
        >>> css_length("auto") is None
        True
    """

    if value is None:
        return None
    match = _LENGTH_RE.match(str(value))
    if not match:
        return None
    amount = float(match.group(1))
    if (match.group(2) or "px").lower() == "pt":
        return amount
    return amount * PX_TO_PT


def _int_attr(tag: Tag, name: str) -> int:
    try:
        return max(1, int(str(tag.get(name, 1))))
    except ValueError:
        return 1


def rowspan_groups(rows: Sequence[Tag]) -> List[range]:
    """Group consecutive table rows joined by ``rowspan`` cells.

    Example:
        >>> soup = BeautifulSoup(
        ...     '<table><tr><td rowspan="2">a</td></tr><tr></tr><tr></tr></table>',
        ...     "html.parser",
        ... )
        >>> [list(group) for group in rowspan_groups(soup.find_all("tr"))]
        [[0, 1], [2]]
    """

    groups: List[range] = []
    start = 0
    reach = 0
    for idx, row in enumerate(rows):
        if idx > reach:
            groups.append(range(start, idx))
            start = idx
        span = max(
            (_int_attr(cell, "rowspan") for cell in row.find_all(["td", "th"])),
            default=1,
        )
        reach = max(reach, idx + span - 1)
    if rows:
        groups.append(range(start, len(rows)))
    return groups


class HtmlMeasurer:
    """Measure block elements of an HTML document.

    Args:
        options: Pagination options (content width, split thresholds).
        styles: Paragraph styles; defaults to build_styles().
        hyphenator: Pyphen dictionary used to insert soft hyphens, or None.
    """

    def __init__(
        self,
        *,
        options: PaginationOptions,
        styles: Dict[str, ParagraphStyle] | None = None,
        hyphenator: Pyphen | None = None,
    ) -> None:
        self.options = options
        self.styles = styles or build_styles()
        self.hyphenator = hyphenator
        self.width = options.content_width
        self._item_styles: Dict[int, ParagraphStyle] = {}

    def measure(self, html: str) -> List[MeasuredBox]:
        """Return one top-level box per block element of ``html``."""

        soup = BeautifulSoup(html, "html.parser")
        root = soup.body or soup
        boxes = self._measure_children(parent=root, ref="body")
        if not boxes:
            raise InvalidInputError("html", "no measurable block content")
        return boxes

    def _measure_children(self, *, parent: Tag, ref: str) -> List[MeasuredBox]:
        boxes: List[MeasuredBox] = []
        pending_break = False
        for idx, tag in enumerate(block_children(parent)):
            if self.options.skip_empty_elements and is_empty(tag):
                continue
            flags = break_flags(tag)
            box = self._measure(tag=tag, flags=flags, ref=f"{ref}/{tag.name}[{idx}]")
            if pending_break or flags.before:
                box = box.evolve(force_break_before=True)
            boxes.append(box)
            pending_break = flags.after
        return boxes

    def _measure(self, *, tag: Tag, flags: BreakFlags, ref: str) -> MeasuredBox:
        kind = classify_tag(tag)
        if kind is BoxKind.ATOMIC:
            return self._measure_atomic(tag=tag, ref=ref)
        if kind is BoxKind.HEADING_GROUP:
            return self._measure_heading(tag=tag, ref=ref)
        if kind is BoxKind.PROSE:
            return self._measure_prose(tag=tag, flags=flags, ref=ref)
        if kind is BoxKind.LINE_BASED:
            return self._measure_code(tag=tag, flags=flags, ref=ref)
        if kind is BoxKind.TABLE:
            return self._measure_table(tag=tag, flags=flags, ref=ref)
        if kind is BoxKind.SEMANTIC_SEQUENCE and tag.name in _LIST_TAGS:
            root = self._measure_list(tag=tag, ref=ref, depth=0)
            return flatten_list_box(
                root, options=self.options, keep_together=flags.keep_together
            )
        if kind is BoxKind.SEMANTIC_PAIR:
            return self._measure_pair(tag=tag, ref=ref)
        if kind is BoxKind.SEMANTIC_SEQUENCE:
            return self._measure_text_block(tag=tag, kind=kind, ref=ref)
        return self._measure_container(tag=tag, flags=flags, ref=ref)

    def _paragraph(self, *, markup: str, style: ParagraphStyle) -> Paragraph:
        if self.hyphenator is not None:
            markup = hyphenate_html(markup, self.hyphenator)
        return Paragraph(markup.strip() or "&nbsp;", style)

    def _text_lines(
        self, *, markup: str, style: ParagraphStyle, width: float
    ) -> int:
        para = self._paragraph(markup=markup, style=style)
        return wrapped_line_count(para=para, width=width)

    def _media_height(self, tag: Tag) -> float:
        name = (tag.name or "").lower()
        if name == "hr":
            return HR_HEIGHT
        for value in (tag.get("height"), inline_style(tag).get("height")):
            length = css_length(value)
            if length is not None:
                return length
        if name not in MEDIA_TAGS and tag.get_text().strip():
            para = self._paragraph(markup=inline_markup(tag), style=self.styles["body"])
            return measure_height(para, self.width)
        return DEFAULT_MEDIA_HEIGHT

    def _measure_atomic(self, *, tag: Tag, ref: str) -> MeasuredBox:
        margin = HR_MARGIN if tag.name == "hr" else 0.0
        return MeasuredBox(
            kind=BoxKind.ATOMIC,
            height=self._media_height(tag),
            margin_top=margin,
            margin_bottom=margin or self.styles["body"].spaceAfter,
            ref=ref,
        )

    def _measure_heading(self, *, tag: Tag, ref: str) -> MeasuredBox:
        level = heading_level(tag) or 6
        style = self.styles[f"h{level}"]
        lines = self._text_lines(
            markup=inline_markup(tag), style=style, width=self.width
        )
        return MeasuredBox(
            kind=BoxKind.HEADING_GROUP,
            height=lines * style.leading,
            margin_top=style.spaceBefore,
            margin_bottom=style.spaceAfter,
            heading_level=level,
            ref=ref,
        )

    def _measure_prose(self, *, tag: Tag, flags: BreakFlags, ref: str) -> MeasuredBox:
        style = self.styles["body"]
        lines = self._text_lines(
            markup=inline_markup(tag), style=style, width=self.width
        )
        height = lines * style.leading
        media = tag.find_all(list(MEDIA_TAGS))
        height += sum(self._media_height(item) for item in media)
        can_split = not contains_media(tag) and derive_can_split(
            kind=BoxKind.PROSE,
            line_count=lines,
            child_count=0,
            keep_together=flags.keep_together,
            options=self.options,
        )
        return MeasuredBox(
            kind=BoxKind.PROSE,
            height=height,
            margin_top=style.spaceBefore,
            margin_bottom=style.spaceAfter,
            line_height=style.leading,
            line_count=lines,
            can_split=can_split,
            ref=ref,
        )

    def _measure_code(self, *, tag: Tag, flags: BreakFlags, ref: str) -> MeasuredBox:
        style = self.styles["code"]
        source = tag.get_text().rstrip("\n")
        flow = XPreformatted(htmllib.escape(source, quote=False), style)
        height = measure_height(flow, self.width)
        lines = max(1, len(source.split("\n")), round(height / style.leading))
        return MeasuredBox(
            kind=BoxKind.LINE_BASED,
            height=lines * style.leading,
            margin_top=style.spaceBefore,
            margin_bottom=style.spaceAfter,
            line_height=style.leading,
            line_count=lines,
            can_split=derive_can_split(
                kind=BoxKind.LINE_BASED,
                line_count=lines,
                child_count=0,
                keep_together=flags.keep_together,
                options=self.options,
            ),
            ref=ref,
        )

    def _measure_text_block(self, *, tag: Tag, kind: BoxKind, ref: str) -> MeasuredBox:
        style = self.styles["body"]
        lines = self._text_lines(
            markup=inline_markup(tag), style=style, width=self.width
        )
        return MeasuredBox(
            kind=kind,
            height=lines * style.leading,
            margin_bottom=style.spaceAfter,
            ref=ref,
        )

    def _measure_pair(self, *, tag: Tag, ref: str) -> MeasuredBox:
        parts = self._measure_children(parent=tag, ref=ref)
        if not parts:
            style = self.styles["caption" if tag.name == "figcaption" else "body"]
            lines = self._text_lines(
                markup=inline_markup(tag), style=style, width=self.width
            )
            return MeasuredBox(
                kind=BoxKind.SEMANTIC_PAIR,
                height=lines * style.leading,
                margin_bottom=style.spaceAfter,
                ref=ref,
            )
        return MeasuredBox(
            kind=BoxKind.SEMANTIC_PAIR,
            height=children_height(parts),
            margin_bottom=self.styles["body"].spaceAfter,
            ref=ref,
        )

    def _measure_container(
        self, *, tag: Tag, flags: BreakFlags, ref: str
    ) -> MeasuredBox:
        children = self._measure_children(parent=tag, ref=ref)
        if not children:
            return self._measure_text_block(tag=tag, kind=BoxKind.CONTAINER, ref=ref)
        return MeasuredBox(
            kind=BoxKind.CONTAINER,
            height=children_height(children),
            children=tuple(children),
            can_split=derive_can_split(
                kind=BoxKind.CONTAINER,
                line_count=None,
                child_count=len(children),
                keep_together=flags.keep_together,
                options=self.options,
            ),
            ref=ref,
        )

    def _item_style(self, *, depth: int) -> ParagraphStyle:
        if depth not in self._item_styles:
            base = self.styles["item"]
            self._item_styles[depth] = ParagraphStyle(
                f"ListItem{depth}",
                parent=base,
                leftIndent=base.leftIndent * (depth + 1),
            )
        return self._item_styles[depth]

    def _measure_list(self, *, tag: Tag, ref: str, depth: int) -> MeasuredBox:
        items = [
            self._measure_item(tag=item, ref=f"{ref}/li[{idx}]", depth=depth)
            for idx, item in enumerate(tag.find_all("li", recursive=False))
        ]
        return MeasuredBox(
            kind=BoxKind.SEMANTIC_SEQUENCE,
            height=children_height(items) + 2 * LIST_PADDING,
            margin_bottom=self.styles["body"].spaceAfter if depth == 0 else 0.0,
            children=tuple(items),
            ref=ref,
        )

    def _measure_item(self, *, tag: Tag, ref: str, depth: int) -> MeasuredBox:
        style = self._item_style(depth=depth)
        markup = inline_markup(tag, skip=_LIST_TAGS)
        content = 0.0
        if markup.strip():
            lines = self._text_lines(markup=markup, style=style, width=self.width)
            content = lines * style.leading
        sub_lists = [
            self._measure_list(tag=sub, ref=f"{ref}/{sub.name}[{idx}]", depth=depth + 1)
            for idx, sub in enumerate(tag.find_all(list(_LIST_TAGS), recursive=False))
        ]
        return MeasuredBox(
            kind=BoxKind.SEMANTIC_SEQUENCE,
            height=content + children_height(sub_lists),
            margin_bottom=style.spaceAfter,
            children=tuple(sub_lists),
            ref=ref,
        )

    def _row_height(self, *, row: Tag, col_width: float) -> float:
        style = self.styles["cell"]
        heights = [
            measure_height(
                self._paragraph(markup=inline_markup(cell), style=style),
                max(1.0, col_width * _int_attr(cell, "colspan") - 2 * CELL_PADDING),
            )
            for cell in row.find_all(["td", "th"], recursive=False)
        ]
        return max(heights, default=style.leading) + 2 * CELL_PADDING

    def _measure_table(self, *, tag: Tag, flags: BreakFlags, ref: str) -> MeasuredBox:
        rows = [row for row in tag.find_all("tr") if row.find_parent("table") is tag]
        head = [row for row in rows if row.find_parent("thead") is not None]
        body = [row for row in rows if row.find_parent("thead") is None]
        if not head and body and body[0].find("th") and not body[0].find("td"):
            head, body = body[:1], body[1:]
        columns = max(
            (
                sum(_int_attr(cell, "colspan") for cell in row.find_all(["td", "th"]))
                for row in rows
            ),
            default=1,
        )
        col_width = self.width / max(1, columns)
        thead_height = sum(self._row_height(row=row, col_width=col_width) for row in head)
        units: List[MeasuredBox] = []
        for group in rowspan_groups(body):
            height = sum(
                self._row_height(row=body[idx], col_width=col_width) for idx in group
            )
            units.append(
                MeasuredBox(
                    kind=BoxKind.SEMANTIC_SEQUENCE
                    if len(group) == 1
                    else BoxKind.SEMANTIC_PAIR,
                    height=height,
                    ref=f"{ref}/tr[{group.start}]",
                )
            )
        root = MeasuredBox(
            kind=BoxKind.TABLE,
            height=thead_height + children_height(units),
            margin_bottom=self.styles["body"].spaceAfter,
            children=tuple(units),
            thead_height=thead_height,
            ref=ref,
        )
        return flatten_table_box(
            root, options=self.options, keep_together=flags.keep_together
        )


def measure_html(
    html: str,
    options: PaginationOptions,
    *,
    styles: Dict[str, ParagraphStyle] | None = None,
    hyphenator: Pyphen | None = None,
) -> List[MeasuredBox]:
    """Measure an HTML document into top-level boxes.

    Args:
        html: Document or fragment.
        options: Pagination options; ``content_width`` drives line wrapping.
        styles: Optional paragraph styles (see build_styles).
        hyphenator: Pyphen dictionary; en_US is used when omitted.
    Returns:
        MeasuredBox list ready for paginate().

    Example:
        >>> from folio.layout.layout_settings import resolve_options
        >>> boxes = measure_html("<h2>Title</h2><p>Body text.</p>", resolve_options())
        >>> [box.kind.value for box in boxes]
        ['heading-group', 'prose']
    """

    measurer = HtmlMeasurer(
        options=options,
        styles=styles,
        hyphenator=hyphenator or Pyphen(lang="en_US"),
    )
    return measurer.measure(html)
