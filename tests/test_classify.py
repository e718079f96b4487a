from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from folio.classify import (
    break_flags,
    classify_tag,
    derive_can_split,
    is_empty,
)
from folio.layout.layout_settings import PaginationOptions
from folio.models import BoxKind


def _tag(markup: str):
    return BeautifulSoup(markup, "html.parser").find()


@pytest.mark.parametrize(
    ("markup", "kind"),
    [
        ("<img src='a.png'>", BoxKind.ATOMIC),
        ("<hr>", BoxKind.ATOMIC),
        ("<div class='katex'>x</div>", BoxKind.ATOMIC),
        ("<h3>Title</h3>", BoxKind.HEADING_GROUP),
        ("<p>text</p>", BoxKind.PROSE),
        ("<pre>code</pre>", BoxKind.LINE_BASED),
        ("<table><tr><td>a</td></tr></table>", BoxKind.TABLE),
        ("<ul><li>a</li></ul>", BoxKind.SEMANTIC_SEQUENCE),
        ("<li>a</li>", BoxKind.SEMANTIC_SEQUENCE),
        ("<figure><img src='a.png'></figure>", BoxKind.SEMANTIC_PAIR),
        ("<dt>term</dt>", BoxKind.SEMANTIC_PAIR),
        ("<div class='note math'>x</div>", BoxKind.CONTAINER),
        ("<blockquote><p>x</p></blockquote>", BoxKind.CONTAINER),
        ("<section><p>x</p></section>", BoxKind.CONTAINER),
    ],
)
def test_classify_tag(markup: str, kind: BoxKind) -> None:
    assert classify_tag(_tag(markup)) is kind


def test_break_flags_from_css_and_data_attributes() -> None:
    flags = break_flags(_tag('<div style="break-before: page; break-inside: avoid">x</div>'))
    assert flags.before and flags.keep_together and not flags.after

    flags = break_flags(_tag("<p data-folio-break-before data-folio-keep-together='true'>x</p>"))
    assert flags.before and flags.keep_together

    flags = break_flags(_tag('<p style="page-break-after: always">x</p>'))
    assert flags.after and not flags.before

    assert not break_flags(_tag("<p data-folio-keep-together='false'>x</p>")).keep_together


def test_h1_always_breaks_before() -> None:
    assert break_flags(_tag("<h1>Chapter</h1>")).before
    assert not break_flags(_tag("<h2>Section</h2>")).before


def test_is_empty() -> None:
    assert is_empty(_tag("<p> \n </p>"))
    assert is_empty(_tag("<div><span></span></div>"))
    assert not is_empty(_tag("<p><img src='a.png'></p>"))
    assert not is_empty(_tag("<hr>"))
    assert not is_empty(_tag("<p>x</p>"))


@pytest.mark.parametrize(
    ("kind", "lines", "children", "keep", "expected"),
    [
        (BoxKind.ATOMIC, None, 0, False, False),
        (BoxKind.SEMANTIC_PAIR, None, 3, False, False),
        (BoxKind.HEADING_GROUP, 3, 0, False, False),
        (BoxKind.PROSE, 3, 0, False, False),
        (BoxKind.PROSE, 4, 0, False, True),
        (BoxKind.PROSE, 40, 0, True, False),
        (BoxKind.LINE_BASED, 1, 0, False, False),
        (BoxKind.LINE_BASED, 2, 0, False, True),
        (BoxKind.CONTAINER, None, 1, False, False),
        (BoxKind.CONTAINER, None, 2, False, True),
        (BoxKind.SEMANTIC_SEQUENCE, None, 3, False, False),
        (BoxKind.SEMANTIC_SEQUENCE, None, 4, False, True),
        (BoxKind.TABLE, None, 4, False, True),
        (BoxKind.TABLE, None, 4, True, False),
    ],
)
def test_derive_can_split(
    kind: BoxKind, lines: int | None, children: int, keep: bool, expected: bool
) -> None:
    options = PaginationOptions(1000, 500)

    assert (
        derive_can_split(
            kind=kind,
            line_count=lines,
            child_count=children,
            keep_together=keep,
            options=options,
        )
        is expected
    )
