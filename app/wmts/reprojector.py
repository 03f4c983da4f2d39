"""Reprojection capability used by the CRS normalizer.

The normalizer only depends on the `Reprojector` protocol; `PyprojReprojector`
is the production implementation backed by PROJ through pyproj.
"""
from __future__ import annotations

import logging
import math
import threading
from typing import Dict, Protocol, Tuple

from pyproj import Transformer

from .grid import Point

logger = logging.getLogger(__name__)


class Reprojector(Protocol):
    def reproject(self, point: Point, from_crs: str, to_crs: str) -> Point:
        ...


class PyprojReprojector:
    """Reproject single points with cached pyproj transformers.

    Axis order is always (x, y) = (easting/longitude, northing/latitude).
    Raises pyproj's CRSError for unknown CRS identifiers, ProjError when PROJ
    cannot transform the point, and ValueError for non-finite results.
    """

    def __init__(self):
        self._transformers: Dict[Tuple[str, str], Transformer] = {}
        self._lock = threading.Lock()

    def _transformer(self, from_crs: str, to_crs: str) -> Transformer:
        key = (from_crs, to_crs)
        with self._lock:
            tr = self._transformers.get(key)
            if tr is None:
                tr = Transformer.from_crs(from_crs, to_crs, always_xy=True)
                self._transformers[key] = tr
                logger.debug("Created transformer %s -> %s", from_crs, to_crs)
        return tr

    def reproject(self, point: Point, from_crs: str, to_crs: str) -> Point:
        x, y = self._transformer(from_crs, to_crs).transform(point.x, point.y, errcheck=True)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"non-finite result reprojecting {point} from {from_crs} to {to_crs}")
        return Point(float(x), float(y))

    def cache_stats(self) -> Dict[str, object]:
        with self._lock:
            pairs = [f"{a}->{b}" for a, b in self._transformers]
        return {"cached_transformers": len(pairs), "pairs": pairs}


__all__ = ["Reprojector", "PyprojReprojector"]
