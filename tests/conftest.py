"""Test configuration ensuring local packages are importable."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from folio.layout.layout_settings import PaginationOptions  # noqa: E402


@pytest.fixture
def options() -> PaginationOptions:
    return PaginationOptions(content_height=1000, content_width=500)
