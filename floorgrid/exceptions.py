"""Exception hierarchy for floorgrid."""

from __future__ import annotations


class FloorGridError(Exception):
    """Base exception for all floorgrid errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MapStorageError(FloorGridError):
    """Base class for map store failures."""
    pass


class MapReadError(MapStorageError):
    """Raised when a stored map cannot be read (missing or unreadable file)."""
    pass


class MapDecodeError(MapStorageError):
    """Raised when stored map content is malformed or incomplete."""
    pass
