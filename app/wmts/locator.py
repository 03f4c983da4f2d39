"""Tile Locator: enrich a WMTS request record with the coordinates it covers.

Two steps run in sequence for every record:
 1. grid.resolve_tile turns (zoomlevel, col, row) into a native-CRS point
 2. normalizer.normalize resolves the CRS alias and reprojects if the input
    CRS differs from the configured output CRS

`locate` exposes the typed result and raises InvalidTile/ReprojectionFailed;
`filter` is the record-level entry point and never raises those two.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, MutableMapping, Optional

from app.settings import LocatorSettings

from .errors import TileLocatorError
from .fields import get_field, set_group
from .grid import GridConfig, Point, resolve_tile
from .normalizer import ResolutionResult, normalize
from .reprojector import PyprojReprojector, Reprojector

logger = logging.getLogger(__name__)


class TileLocator:
    def __init__(self, settings: Optional[LocatorSettings] = None, reprojector: Optional[Reprojector] = None):
        self.settings = settings or LocatorSettings()
        self.grid: GridConfig = self.settings.grid()
        self.reprojector: Reprojector = reprojector if reprojector is not None else PyprojReprojector()

    def locate(self, zoomlevel: Any, col: Any, row: Any, ref_system: Any) -> ResolutionResult:
        x, y = resolve_tile(self.grid, zoomlevel, col, row)
        return normalize(
            ref_system,
            self.settings.epsg_mapping,
            self.settings.output_epsg,
            Point(x, y),
            self.reprojector,
        )

    def filter(self, record: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Annotate `record` in place under the target group and return it.

        On failure only `errmsg` is written; success fields are all-or-nothing.
        """
        s = self.settings
        try:
            result = self.locate(
                get_field(record, s.zoomlevel_field),
                get_field(record, s.column_field),
                get_field(record, s.row_field),
                get_field(record, s.refsys_field),
            )
        except TileLocatorError as e:
            logger.debug("wmts record rejected: %s", e, extra={"errmsg": e.message})
            set_group(record, s.target, {"errmsg": e.message})
            return record

        set_group(record, s.target, result.to_fields())
        logger.debug(
            "wmts record located at %s",
            result.output_xy,
            extra={"input_epsg": result.input_epsg, "output_epsg": result.output_epsg},
        )
        if s.add_tag:
            tags = record.get("tags")
            if not isinstance(tags, list):
                tags = [] if tags is None else [tags]
                record["tags"] = tags
            for t in s.add_tag:
                if t not in tags:
                    tags.append(t)
        return record

    def describe(self) -> Dict[str, Any]:
        return {
            "target": self.settings.target,
            "output_epsg": self.settings.output_epsg,
            "zoomlevels": len(self.grid.resolutions),
            "aliases": sorted(self.settings.epsg_mapping),
        }


__all__ = ["TileLocator"]
