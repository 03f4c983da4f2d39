from __future__ import annotations

INVALID_TILE_MESSAGE = "Bad parameter received from upstream filter"
REPROJECTION_FAILED_MESSAGE = "Unable to reproject tile coordinates"


class TileLocatorError(Exception):
    """Base class for per-record failures; `message` is what lands in `errmsg`."""

    message: str = ""

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.message)
        self.detail = detail


class InvalidTile(TileLocatorError):
    """Zoom level, row or column unusable (non-numeric, missing, out of range)."""

    message = INVALID_TILE_MESSAGE


class ReprojectionFailed(TileLocatorError):
    """The reprojector could not move the native point into the output CRS."""

    message = REPROJECTION_FAILED_MESSAGE


__all__ = [
    "TileLocatorError",
    "InvalidTile",
    "ReprojectionFailed",
    "INVALID_TILE_MESSAGE",
    "REPROJECTION_FAILED_MESSAGE",
]
