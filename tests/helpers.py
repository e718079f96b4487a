from __future__ import annotations

from folio.models import BoxKind, MeasuredBox


def prose(lines: int, line_height: float = 20.0, **kwargs) -> MeasuredBox:
    return MeasuredBox(
        kind=BoxKind.PROSE,
        height=lines * line_height,
        line_height=line_height,
        line_count=lines,
        can_split=kwargs.pop("can_split", True),
        **kwargs,
    )


def code(lines: int, line_height: float = 10.0, **kwargs) -> MeasuredBox:
    return MeasuredBox(
        kind=BoxKind.LINE_BASED,
        height=lines * line_height,
        line_height=line_height,
        line_count=lines,
        can_split=kwargs.pop("can_split", True),
        **kwargs,
    )


def atomic(height: float, **kwargs) -> MeasuredBox:
    return MeasuredBox(kind=BoxKind.ATOMIC, height=height, **kwargs)


def heading(height: float, level: int = 2, **kwargs) -> MeasuredBox:
    return MeasuredBox(
        kind=BoxKind.HEADING_GROUP, height=height, heading_level=level, **kwargs
    )


def rows(count: int, height: float = 20.0) -> tuple[MeasuredBox, ...]:
    return tuple(
        MeasuredBox(kind=BoxKind.SEMANTIC_SEQUENCE, height=height, ref=f"tr[{idx}]")
        for idx in range(count)
    )
