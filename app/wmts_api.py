from fastapi import APIRouter, Body, Depends, HTTPException, Request
from typing import Any, Dict

from app.schemas import LocatorInfo, TileLocation, TileRequest
from app.wmts.errors import TileLocatorError
from app.wmts.locator import TileLocator

router = APIRouter()


def get_locator(request: Request) -> TileLocator:
    # Built once by create_app; tests may swap app.state.locator
    locator = getattr(request.app.state, "locator", None)
    if locator is None:
        raise HTTPException(status_code=503, detail="Tile locator not configured")
    return locator


@router.post("/wmts/locate", response_model=TileLocation)
async def locate(req: TileRequest, locator: TileLocator = Depends(get_locator)) -> TileLocation:
    """Resolve one tile reference into native and output coordinates.

    Body schema:
      {"zoomlevel": "23", "col": "561", "row": "470", "reference-system": "21781"}

    Both failure kinds answer 422 with the record-level message as detail.
    """
    try:
        result = locator.locate(req.zoomlevel, req.col, req.row, req.reference_system)
    except TileLocatorError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return TileLocation.from_result(result)


@router.post("/wmts/filter")
async def filter_record(payload: Dict[str, Any] = Body(...), locator: TileLocator = Depends(get_locator)):
    """Annotate an arbitrary record under the configured target group.

    Always 200: failures are reported in `[target][errmsg]`, like in the pipeline.
    """
    return locator.filter(payload)


@router.get("/wmts/info", response_model=LocatorInfo)
async def info(locator: TileLocator = Depends(get_locator)) -> LocatorInfo:
    stats = getattr(locator.reprojector, "cache_stats", None)
    return LocatorInfo(**locator.describe(), reprojector=stats() if callable(stats) else None)
