from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional, Tuple

from .errors import InvalidTile, ReprojectionFailed

# Swisstopo WMTS pyramid (LV03), one entry per zoom level starting at 0
SWISS_X_ORIGIN = 420000
SWISS_Y_ORIGIN = 350000
SWISS_RESOLUTIONS: Tuple[float, ...] = (
    4000, 3750, 3500, 3250, 3000, 2750, 2500, 2250, 2000,
    1750, 1500, 1250, 1000, 750, 650, 500, 250, 100, 50, 20, 10, 5, 2.5, 2, 1.5, 1, 0.5, 0.25, 0.1,
)

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class GridConfig:
    x_origin: float = SWISS_X_ORIGIN
    y_origin: float = SWISS_Y_ORIGIN
    tile_width: int = 256
    tile_height: int = 256
    resolutions: Tuple[float, ...] = SWISS_RESOLUTIONS

    def __post_init__(self):
        if not self.resolutions:
            raise ValueError("resolutions must contain at least one zoom level")
        # accept any sequence but keep the stored value hashable/immutable
        object.__setattr__(self, "resolutions", tuple(self.resolutions))

    def resolution(self, zoomlevel: int) -> Optional[float]:
        """Grid units per pixel at `zoomlevel`, or None outside the pyramid."""
        if 0 <= zoomlevel < len(self.resolutions):
            return self.resolutions[zoomlevel]
        return None


def parse_index(value: Any, name: str = "value") -> int:
    """Strictly coerce an upstream field into an integer.

    Integers pass through; strings must be a plain base-10 integer (surrounding
    whitespace tolerated). Floats, booleans, None and garbage raise InvalidTile.
    """
    if isinstance(value, bool):
        raise InvalidTile(f"{name} is a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_RE.match(value):
        try:
            return int(value)
        except ValueError as e:  # digit-count limit on str -> int
            raise InvalidTile(f"{name} is too long") from e
    raise InvalidTile(f"{name} is not an integer: {value!r}")


def resolve_tile(grid: GridConfig, zoomlevel: Any, col: Any, row: Any) -> Tuple[int, int]:
    """Map a (zoomlevel, col, row) tile reference onto the grid's native CRS.

    Returns the floored native coordinates of the tile centre. Rows grow
    downwards while the native y axis grows upwards, hence the subtraction.
    Raises InvalidTile before any arithmetic when an index is unusable, and
    ReprojectionFailed when the indices are too large for float arithmetic.
    """
    z = parse_index(zoomlevel, "zoomlevel")
    c = parse_index(col, "col")
    r = parse_index(row, "row")

    resolution = grid.resolution(z)
    if resolution is None:
        raise InvalidTile(f"zoomlevel {z} outside 0..{len(grid.resolutions) - 1}")

    try:
        dx = (c + 0.5) * grid.tile_width * resolution
        dy = (r + 0.5) * grid.tile_height * resolution
        # floor, not round/int(): negative values must go towards -inf
        x = math.floor(grid.x_origin + dx)
        y = math.floor(grid.y_origin - dy)
    except OverflowError as e:
        raise ReprojectionFailed(f"tile index at zoomlevel {z} overflows the grid") from e
    return x, y


__all__ = [
    "GridConfig",
    "Point",
    "SWISS_RESOLUTIONS",
    "SWISS_X_ORIGIN",
    "SWISS_Y_ORIGIN",
    "parse_index",
    "resolve_tile",
]
