"""WMTS tile location utilities.

Modules:
 - grid: tile pyramid parameters and (zoomlevel, col, row) -> native point
 - normalizer: EPSG alias resolution and reprojection decision
 - reprojector: Reprojector protocol and the pyproj-backed implementation
 - fields: nested field-reference access on records
 - locator: TileLocator composing the above per record
 - errors: InvalidTile / ReprojectionFailed
"""

__all__ = [
    "errors",
    "fields",
    "grid",
    "locator",
    "normalizer",
    "reprojector",
]
