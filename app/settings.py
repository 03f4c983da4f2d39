"""Tile Locator configuration.

Settings are built once at startup and are immutable afterwards.

Env vars (all optional):
  WMTS_CONFIG        path to a JSON document with any of the fields below
  WMTS_X_ORIGIN      grid origin abscissa (number)
  WMTS_Y_ORIGIN      grid origin ordinate (number)
  WMTS_TILE_WIDTH    tile width in pixels (int)
  WMTS_TILE_HEIGHT   tile height in pixels (int)
  WMTS_TARGET        field group receiving the results
  WMTS_OUTPUT_EPSG   output CRS identifier, e.g. epsg:4326
  WMTS_RESOLUTIONS   JSON array of per-zoomlevel resolutions
  WMTS_EPSG_MAPPING  JSON object alias -> EPSG code, e.g. {"swissgrid": 21781}
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.wmts.grid import SWISS_RESOLUTIONS, SWISS_X_ORIGIN, SWISS_Y_ORIGIN, GridConfig


class LocatorSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    x_origin: float = Field(default=SWISS_X_ORIGIN, description="Grid origin abscissa, native units")
    y_origin: float = Field(default=SWISS_Y_ORIGIN, description="Grid origin ordinate, native units")
    tile_width: int = Field(default=256, gt=0)
    tile_height: int = Field(default=256, gt=0)
    resolutions: List[float] = Field(default_factory=lambda: list(SWISS_RESOLUTIONS), min_length=1)
    target: str = Field(default="wmts", min_length=1)
    output_epsg: str = "epsg:4326"
    epsg_mapping: Dict[str, Union[int, str]] = Field(default_factory=dict)
    zoomlevel_field: str = "[wmts][zoomlevel]"
    column_field: str = "[wmts][col]"
    row_field: str = "[wmts][row]"
    refsys_field: str = "[wmts][reference-system]"
    add_tag: List[str] = Field(default_factory=list)

    @field_validator("resolutions")
    @classmethod
    def _positive_resolutions(cls, v: List[float]) -> List[float]:
        if any(r <= 0 for r in v):
            raise ValueError("resolutions must all be > 0")
        return v

    @field_validator("zoomlevel_field", "column_field", "row_field", "refsys_field")
    @classmethod
    def _non_empty_ref(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("field reference must not be empty")
        return v

    def grid(self) -> GridConfig:
        return GridConfig(
            x_origin=self.x_origin,
            y_origin=self.y_origin,
            tile_width=self.tile_width,
            tile_height=self.tile_height,
            resolutions=tuple(self.resolutions),
        )


_SCALAR_ENV = {
    "WMTS_X_ORIGIN": "x_origin",
    "WMTS_Y_ORIGIN": "y_origin",
    "WMTS_TILE_WIDTH": "tile_width",
    "WMTS_TILE_HEIGHT": "tile_height",
    "WMTS_TARGET": "target",
    "WMTS_OUTPUT_EPSG": "output_epsg",
}

_JSON_ENV = {
    "WMTS_RESOLUTIONS": "resolutions",
    "WMTS_EPSG_MAPPING": "epsg_mapping",
}


def load_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object at top level")
    return data


def build_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> LocatorSettings:
    """Defaults, then the WMTS_CONFIG file, then per-option env overrides."""
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    path = env.get("WMTS_CONFIG")
    if path:
        values.update(load_config_file(path))

    for key, name in _SCALAR_ENV.items():
        if key in env:
            # pydantic coerces "420000" / "256" to the declared types
            values[name] = env[key]
    for key, name in _JSON_ENV.items():
        if key in env:
            try:
                values[name] = json.loads(env[key])
            except json.JSONDecodeError as e:
                raise ValueError(f"{key} is not valid JSON: {e}") from e

    return LocatorSettings(**values)


__all__ = ["LocatorSettings", "build_settings_from_env", "load_config_file"]
