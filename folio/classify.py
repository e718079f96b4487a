"""
Map HTML elements onto box kinds and page-break flags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List

from bs4 import Tag

from .layout.layout_settings import PaginationOptions
from .models import NEVER_SPLIT, BoxKind

ATOMIC_TAGS = frozenset({"img", "hr", "svg", "canvas", "video", "audio", "iframe"})
MEDIA_TAGS = frozenset({"img", "svg", "canvas", "video", "audio", "iframe"})
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
PAIR_TAGS = frozenset({"figure", "dt", "dd", "figcaption"})
SEQUENCE_TAGS = frozenset({"ul", "ol", "li", "tr"})
LINE_TAGS = frozenset({"pre", "code"})
BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "details",
        "div",
        "dl",
        "dd",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "header",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
    }
    | HEADING_TAGS
    | ATOMIC_TAGS
)
_ATOMIC_CLASS = re.compile(r"\b(math|katex|mathjax|mermaid|diagram|chart)\b", re.I)
_ADMONITION_CLASS = re.compile(
    r"\b(admonition|note|warning|info|tip|caution|danger|callout)\b", re.I
)
_TRUE_VALUES = {"", "true", "1", "yes"}


@dataclass(frozen=True, slots=True)
class BreakFlags:
    """Page-break controls read from an element.

    Attributes:
        before: Start a new page before the element.
        after: Start a new page after the element.
        keep_together: Never fragment the element.
    """

    before: bool = False
    after: bool = False
    keep_together: bool = False


def _class_string(tag: Tag) -> str:
    """Return the element's classes joined by spaces."""

    classes = tag.get("class") or []
    if isinstance(classes, str):
        return classes
    return " ".join(classes)


def classify_tag(tag: Tag) -> BoxKind:
    """Return the BoxKind for an HTML element.

    Args:
        tag: BeautifulSoup element.
    Returns:
        BoxKind decided from the tag name and classes.

    Example:
        >>> from bs4 import BeautifulSoup
        >>> classify_tag(BeautifulSoup("<pre>x</pre>", "html.parser").pre).value
        'line-based'
    """

    name = (tag.name or "").lower()
    if name in ATOMIC_TAGS:
        return BoxKind.ATOMIC
    if name in HEADING_TAGS:
        return BoxKind.HEADING_GROUP
    if name == "p":
        return BoxKind.PROSE
    if name in LINE_TAGS:
        return BoxKind.LINE_BASED
    if name == "table":
        return BoxKind.TABLE
    if name in PAIR_TAGS:
        return BoxKind.SEMANTIC_PAIR
    if name in SEQUENCE_TAGS:
        return BoxKind.SEMANTIC_SEQUENCE
    classes = _class_string(tag)
    if _ADMONITION_CLASS.search(classes):
        return BoxKind.CONTAINER
    if _ATOMIC_CLASS.search(classes):
        return BoxKind.ATOMIC
    return BoxKind.CONTAINER


def heading_level(tag: Tag) -> int | None:
    """Return 1-6 for h1-h6, otherwise None."""

    name = (tag.name or "").lower()
    if name in HEADING_TAGS:
        return int(name[1])
    return None


def inline_style(tag: Tag) -> Dict[str, str]:
    """Parse the ``style`` attribute into a lowercase property mapping.

    Example:
        >>> from bs4 import BeautifulSoup
        >>> tag = BeautifulSoup('<p style="Break-Before: page; color:red">x</p>', "html.parser").p
        >>> inline_style(tag)["break-before"]
        'page'
    """

    styles: Dict[str, str] = {}
    for declaration in str(tag.get("style") or "").split(";"):
        if ":" not in declaration:
            continue
        prop, value = declaration.split(":", 1)
        styles[prop.strip().lower()] = value.strip().lower()
    return styles


def _data_flag(tag: Tag, name: str) -> bool:
    value = tag.get(name)
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def break_flags(tag: Tag) -> BreakFlags:
    """Read break-before, break-after and keep-together flags.

    CSS ``break-*`` / ``page-break-*`` declarations and ``data-folio-*``
    attributes are both honored. An h1 always starts a new page.

    Args:
        tag: BeautifulSoup element.
    Returns:
        BreakFlags.
    """

    styles = inline_style(tag)
    forced = {"page", "always", "left", "right"}
    before = (
        styles.get("break-before") in forced
        or styles.get("page-break-before") in forced
        or _data_flag(tag, "data-folio-break-before")
        or (tag.name or "").lower() == "h1"
    )
    after = (
        styles.get("break-after") in forced
        or styles.get("page-break-after") in forced
        or _data_flag(tag, "data-folio-break-after")
    )
    keep_together = (
        styles.get("break-inside") in {"avoid", "avoid-page"}
        or styles.get("page-break-inside") == "avoid"
        or _data_flag(tag, "data-folio-keep-together")
    )
    return BreakFlags(before=before, after=after, keep_together=keep_together)


def contains_media(tag: Tag) -> bool:
    """Return True when the element is or embeds media."""

    if (tag.name or "").lower() in MEDIA_TAGS:
        return True
    return tag.find(list(MEDIA_TAGS)) is not None


def is_empty(tag: Tag) -> bool:
    """Return True for elements with neither text nor embedded media.

    Example:
        >>> from bs4 import BeautifulSoup
        >>> is_empty(BeautifulSoup("<p> \\u00a0</p>", "html.parser").p)
        True
    """

    if (tag.name or "").lower() in ATOMIC_TAGS:
        return False
    if tag.get_text().strip():
        return False
    return not contains_media(tag)


def block_children(tag: Tag) -> List[Tag]:
    """Return the direct children of ``tag`` that lay out as blocks."""

    return [
        child
        for child in tag.children
        if isinstance(child, Tag) and (child.name or "").lower() in BLOCK_TAGS
    ]


def derive_can_split(
    *,
    kind: BoxKind,
    line_count: int | None,
    child_count: int,
    keep_together: bool,
    options: PaginationOptions,
) -> bool:
    """Decide whether a measured box may be fragmented.

    Args:
        kind: Box kind.
        line_count: Wrapped line count for prose and line-based boxes.
        child_count: Number of child units.
        keep_together: Keep-together flag from the element.
        options: Pagination options.
    Returns:
        True when the engine may ask a resolver to split the box.
    """

    if kind in NEVER_SPLIT or keep_together:
        return False
    if kind is BoxKind.PROSE:
        return (line_count or 0) >= options.orphan_lines + options.widow_lines
    if kind is BoxKind.LINE_BASED:
        return (line_count or 0) > 1
    if kind is BoxKind.SEMANTIC_SEQUENCE:
        return child_count >= 2 * options.min_items_for_split
    if kind is BoxKind.TABLE:
        return child_count >= 2 * options.min_rows_for_split
    return child_count > 1
