from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union

from .errors import ReprojectionFailed
from .grid import Point
from .reprojector import Reprojector

EPSG_PREFIX = "epsg:"


@dataclass(frozen=True)
class ResolutionResult:
    input_epsg: str
    input_x: int
    input_y: int
    output_epsg: str
    output_x: Union[int, float]
    output_y: Union[int, float]

    @property
    def input_xy(self) -> str:
        return f"{self.input_x},{self.input_y}"

    @property
    def output_xy(self) -> str:
        return f"{self.output_x},{self.output_y}"

    @property
    def reprojected(self) -> bool:
        return self.input_epsg != self.output_epsg

    def to_fields(self) -> Dict[str, Any]:
        """Flat field group written under the record's target."""
        return {
            "service": "wmts",
            "input_epsg": self.input_epsg,
            "input_x": self.input_x,
            "input_y": self.input_y,
            "input_xy": self.input_xy,
            "output_epsg": self.output_epsg,
            "output_x": self.output_x,
            "output_y": self.output_y,
            "output_xy": self.output_xy,
        }


def resolve_epsg(ref_system: Any, alias_map: Mapping[str, Any]) -> str:
    """Alias lookup first, otherwise the token verbatim.

    No validation happens here: an unknown code is the reprojector's problem.
    """
    token = "" if ref_system is None else str(ref_system)
    if token in alias_map:
        return str(alias_map[token])
    return token


def normalize(
    ref_system: Any,
    alias_map: Mapping[str, Any],
    output_epsg: str,
    native: Point,
    reprojector: Reprojector,
    prefix: str = EPSG_PREFIX,
) -> ResolutionResult:
    input_epsg = f"{prefix}{resolve_epsg(ref_system, alias_map)}"

    # plain string comparison: "epsg:4326" != "EPSG:4326" on purpose
    if input_epsg == output_epsg:
        out_x, out_y = native.x, native.y
    else:
        try:
            out = reprojector.reproject(native, input_epsg, output_epsg)
        except Exception as e:
            raise ReprojectionFailed(f"{input_epsg} -> {output_epsg}: {type(e).__name__}: {e}") from e
        out_x, out_y = out.x, out.y

    return ResolutionResult(
        input_epsg=input_epsg,
        input_x=native.x,
        input_y=native.y,
        output_epsg=output_epsg,
        output_x=out_x,
        output_y=out_y,
    )


__all__ = ["EPSG_PREFIX", "ResolutionResult", "normalize", "resolve_epsg"]
