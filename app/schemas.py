from __future__ import annotations

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from app.wmts.normalizer import ResolutionResult


class TileRequest(BaseModel):
    """A WMTS tile reference as extracted from a request URL."""

    zoomlevel: Union[int, str, None] = Field(default=None, description="Zoom level (matrix index)")
    col: Union[int, str, None] = Field(default=None, description="Tile column")
    row: Union[int, str, None] = Field(default=None, description="Tile row")
    reference_system: Union[int, str, None] = Field(
        default=None,
        alias="reference-system",
        description="Raw EPSG code or an alias known to epsg_mapping",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"zoomlevel": "23", "col": "561", "row": "470", "reference-system": "21781"}
        },
    )


class TileLocation(BaseModel):
    service: str = "wmts"
    input_epsg: str
    input_x: int
    input_y: int
    input_xy: str
    output_epsg: str
    output_x: Union[int, float]
    output_y: Union[int, float]
    output_xy: str

    @classmethod
    def from_result(cls, result: ResolutionResult) -> "TileLocation":
        return cls(**result.to_fields())


class LocatorInfo(BaseModel):
    target: str
    output_epsg: str
    zoomlevels: int
    aliases: List[str] = Field(default_factory=list)
    reprojector: Optional[Dict[str, Any]] = None
