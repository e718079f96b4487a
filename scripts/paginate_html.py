"""
Measure an HTML document and print where each block lands on the page grid.
"""

import argparse
import json
import sys
from pathlib import Path

from tqdm import tqdm

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from folio.errors import FolioError
from folio.layout.layout_pagination import EventLog, paginate, resolve_options
from folio.layout.layout_settings import PAGE_SIZES
from folio.measure import measure_html
from folio.report import result_payload, summary_lines


def _parse_args() -> argparse.Namespace:
    """Return CLI arguments for the pagination script."""

    parser = argparse.ArgumentParser(
        description="Paginate an HTML document and report page assignments."
    )
    parser.add_argument("input", type=Path, help="HTML file to paginate.")
    parser.add_argument(
        "--page-size",
        choices=sorted(PAGE_SIZES),
        default="A4",
        help="Page size preset.",
    )
    parser.add_argument(
        "--landscape",
        action="store_true",
        help="Swap page width and height.",
    )
    parser.add_argument(
        "--padding",
        type=float,
        default=None,
        help="Page padding in points on every side (default 60/60/81/60).",
    )
    parser.add_argument("--orphans", type=int, default=2, help="Minimum lines kept at a page bottom.")
    parser.add_argument("--widows", type=int, default=2, help="Minimum lines carried to a page top.")
    parser.add_argument(
        "--repeat-table-header",
        action="store_true",
        help="Mark table headers for repetition on continuation pages.",
    )
    parser.add_argument(
        "--oversize",
        choices=("scale", "rotate", "clip"),
        default="scale",
        help="Strategy recorded on oversize warnings.",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    return parser.parse_args()


def main() -> int:
    """Paginate the input file and print a summary.

    Example:
        >>> main()  # doctest: +SKIP
    """

    args = _parse_args()
    try:
        options = resolve_options(
            page_size=args.page_size,
            orientation="landscape" if args.landscape else "portrait",
            padding=args.padding,
            orphan_lines=args.orphans,
            widow_lines=args.widows,
            repeat_table_header=args.repeat_table_header,
            oversize_strategy=args.oversize,
        )
        boxes = measure_html(args.input.read_text(encoding="utf-8"), options)
        log = EventLog()
        progress = tqdm(total=len(boxes), desc="Paginating", unit="box", disable=args.json)
        try:
            result = paginate(boxes, options, recorder=log, progress=progress)
        finally:
            progress.close()
    except FolioError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(result_payload(result), indent=2))
    else:
        for line in summary_lines(result):
            print(line)
        print(f"{len(log.events)} diagnostic event(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
