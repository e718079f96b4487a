"""Exceptions raised at the pagination boundary."""

from __future__ import annotations


class FolioError(Exception):
    """Base class for folio errors."""


class InvalidInputError(FolioError, ValueError):
    """A box or option violates the data model.

    Args:
        path: Location of the offending value, e.g. ``boxes[3].children[1]``.
        reason: Human-readable description of the violation.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
