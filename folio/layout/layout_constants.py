"""Shared constants for pagination decisions."""

from __future__ import annotations

import os

EPSILON = 1e-4
LINE_MARKER_HEIGHT = 8.0
FALLBACK_LINE_HEIGHT = 15.0
PROSE_MIN_FRAGMENT_RATIO = 0.6
HEADING_MIN_CONTENT_RATIO = 1 / 3
DEBUG_PAGINATION = os.getenv("DEBUG_PAGINATION", "0") not in {
    "",
    "0",
    "false",
    "False",
}
