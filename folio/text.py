"""
Text helpers for whitespace cleanup, inline markup, and hyphenation.
"""

from __future__ import annotations

import html as htmllib
import re

from bs4 import BeautifulSoup, NavigableString, Tag
from pyphen import Pyphen


WORD_RE = re.compile(r"[A-Za-z]{7,}")
SOFT_HYPHEN = "\u00ad"
_ZERO_WIDTH = re.compile("[\u200b\u200c\u200d\u2060]")
_NON_BREAKING_SPACES = re.compile("[\u00a0\u202f]")
_INLINE_TAGS = {
    "em": "i",
    "i": "i",
    "strong": "b",
    "b": "b",
    "u": "u",
    "sup": "sup",
    "sub": "sub",
    "strike": "strike",
    "s": "strike",
}


def normalize_whitespace(value: str) -> str:
    """Collapse unusual whitespace into single ASCII spaces.

    Example:
        >>> normalize_whitespace("a\\u00a0b\\u200bb")
        'a bb'
    """

    clean = _NON_BREAKING_SPACES.sub(" ", value)
    clean = _ZERO_WIDTH.sub("", clean)
    clean = re.sub(r"\s+", " ", clean)
    return clean.strip()


def inline_markup(fragment: Tag | NavigableString, *, skip: frozenset[str] = frozenset()) -> str:
    """Convert a BeautifulSoup fragment into ReportLab paragraph markup.

    Args:
        fragment: Element or text node.
        skip: Tag names whose subtrees are left out (e.g. nested lists).
    Returns:
        Markup using only tags ReportLab's Paragraph understands.

    Example:
        >>> soup = BeautifulSoup("<p>a <em>b</em> &amp; c</p>", "html.parser")
        >>> inline_markup(soup.p)
        'a <i>b</i> &amp; c'
    """

    if isinstance(fragment, NavigableString):
        return htmllib.escape(re.sub(r"\s+", " ", str(fragment)), quote=False)
    if fragment.name in skip:
        return ""
    if fragment.name == "br":
        return "<br/>"
    inner = "".join(
        inline_markup(child, skip=skip)
        for child in fragment.children
        if isinstance(child, (Tag, NavigableString))
    )
    mapped = _INLINE_TAGS.get(fragment.name or "")
    if mapped:
        return f"<{mapped}>{inner}</{mapped}>"
    if fragment.name == "a" and fragment.get("href"):
        href = htmllib.escape(str(fragment["href"]))
        return f'<a href="{href}">{inner}</a>'
    return inner


def hyphenate_html(markup: str, dic: Pyphen) -> str:
    """Insert soft hyphens into long words inside a markup fragment.

    Example:
        >>> dic = Pyphen(lang='en_US')
        >>> hyphenate_html('everlasting', dic).split(SOFT_HYPHEN)
        ['ev', 'er', 'last', 'ing']
    """

    soup = BeautifulSoup(markup, "html.parser")
    for text_node in list(soup.strings):

        def repl(match: re.Match[str]) -> str:
            return dic.inserted(match.group(0), hyphen=SOFT_HYPHEN)

        text_node.replace_with(WORD_RE.sub(repl, str(text_node)))
    return soup.decode(formatter="minimal")
