"""
Plain-data views of a pagination result for printing and JSON export.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .layout.layout_types import Fragment, PaginationResult
from .models import walk_boxes


def _fragment_payload(fragment: Fragment) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "box": fragment.box_index,
        "kind": fragment.box.kind.value,
        "ref": fragment.box.ref,
        "height": round(fragment.height, 2),
        "partial": fragment.is_partial,
    }
    if fragment.split_range is not None:
        payload["range"] = {
            "unit": fragment.split_range.unit.value,
            "start": fragment.split_range.start,
            "end": fragment.split_range.end,
        }
    return payload


def result_payload(result: PaginationResult) -> Dict[str, Any]:
    """Return a JSON-serializable description of ``result``.

    Args:
        result: Output of paginate().
    Returns:
        Dict with page geometry, pages, and warnings.
    """

    options = result.options
    return {
        "content_height": options.content_height,
        "content_width": options.content_width,
        "total_pages": result.total_pages,
        "box_count": len(result.boxes),
        "node_count": len(walk_boxes(result.boxes)),
        "pages": [
            {
                "index": page.index,
                "consumed_height": round(page.consumed_height, 2),
                "oversized": page.is_oversized,
                "fragments": [_fragment_payload(frag) for frag in page.fragments],
            }
            for page in result.pages
        ],
        "warnings": [
            {
                "box": warning.box_index,
                "ref": warning.box_ref,
                "page": warning.page_index,
                "excess_height": round(warning.excess_height, 2),
                "strategy": warning.strategy,
            }
            for warning in result.warnings
        ],
    }


def summary_lines(result: PaginationResult) -> List[str]:
    """Return one human-readable line per page followed by warnings.

    Example:
        >>> from folio.layout.layout_flow import paginate
        >>> from folio.layout.layout_settings import PaginationOptions
        >>> from folio.models import BoxKind, MeasuredBox
        >>> result = paginate([MeasuredBox(BoxKind.ATOMIC, 10)], PaginationOptions(100, 100))
        >>> summary_lines(result)
        ['page 1: 1 fragment(s), 10.00/100.00pt']
    """

    limit = result.options.content_height
    lines = []
    for page in result.pages:
        flag = " [oversized]" if page.is_oversized else ""
        lines.append(
            f"page {page.index + 1}: {len(page.fragments)} fragment(s), "
            f"{page.consumed_height:.2f}/{limit:.2f}pt{flag}"
        )
    for warning in result.warnings:
        lines.append(
            f"warning: box {warning.box_index} ({warning.box_ref or '-'}) exceeds "
            f"page {warning.page_index + 1} by {warning.excess_height:.2f}pt; "
            f"strategy={warning.strategy}"
        )
    return lines
