import dataclasses

import pytest

from app.wmts.errors import InvalidTile, ReprojectionFailed
from app.wmts.grid import GridConfig, SWISS_RESOLUTIONS, parse_index, resolve_tile


def test_swiss_grid_zoom_23():
    x, y = resolve_tile(GridConfig(), "23", "561", "470")
    assert (x, y) == (707488, 109104)
    assert isinstance(x, int) and isinstance(y, int)


def test_swiss_grid_zoom_9_goes_far_negative():
    assert resolve_tile(GridConfig(), "9", "714", "371") == (320516000, -166082000)


def test_custom_grid():
    grid = GridConfig(
        x_origin=420000,
        y_origin=350000,
        resolutions=(500, 250, 100, 50, 20, 10, 5, 2.5, 2, 1.5, 1, 0.5, 0.25, 0.1, 0.05),
    )
    assert resolve_tile(grid, 9, 731, 374) == (700896, 206192)


def test_floor_towards_negative_infinity():
    grid = GridConfig(x_origin=0, y_origin=0, tile_width=1, tile_height=1, resolutions=(1,))
    # y = floor(0 - 0.5) = -1, int() would give 0
    assert resolve_tile(grid, 0, 0, 0) == (0, -1)
    # x = floor(0 + (-1 + 0.5)) = -1
    assert resolve_tile(grid, 0, -1, 0)[0] == -1


def test_floor_applies_after_origin_offset():
    grid = GridConfig(x_origin=10, y_origin=10, tile_width=1, tile_height=1, resolutions=(0.3,))
    # dx = dy = 0.15 -> x = floor(10.15), y = floor(9.85)
    assert resolve_tile(grid, 0, 0, 0) == (10, 9)


def test_deterministic():
    grid = GridConfig()
    assert resolve_tile(grid, 17, 12, 34) == resolve_tile(grid, "17", "12", "34")


@pytest.mark.parametrize("zoom", [len(SWISS_RESOLUTIONS), -1, 10_000])
def test_zoom_out_of_range(zoom):
    with pytest.raises(InvalidTile):
        resolve_tile(GridConfig(), zoom, 1, 1)


@pytest.mark.parametrize("bad", ["", "abc", "2.5", None, 2.0, True, "1e3", " "])
def test_non_numeric_indices(bad):
    for args in ((bad, 1, 1), (1, bad, 1), (1, 1, bad)):
        with pytest.raises(InvalidTile) as ei:
            resolve_tile(GridConfig(), *args)
        assert ei.value.message == "Bad parameter received from upstream filter"


def test_parse_index_accepts_signed_and_padded():
    assert parse_index(" 42 ") == 42
    assert parse_index("-3") == -3
    assert parse_index("+7") == 7
    assert parse_index(5) == 5


def test_grid_config_is_immutable_and_non_empty():
    grid = GridConfig(resolutions=[1, 2])
    assert grid.resolutions == (1, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        grid.tile_width = 512  # type: ignore[misc]
    with pytest.raises(ValueError):
        GridConfig(resolutions=())


def test_resolution_lookup():
    grid = GridConfig()
    assert grid.resolution(0) == 4000
    assert grid.resolution(23) == 2
    assert grid.resolution(len(SWISS_RESOLUTIONS)) is None
    assert grid.resolution(-1) is None


@pytest.mark.parametrize("big", [10 ** 400, 10 ** 307])
def test_overflowing_index_is_reprojection_failure(big):
    # 10**400 cannot become a float; 10**307 can, but scaling it gives inf
    with pytest.raises(ReprojectionFailed):
        resolve_tile(GridConfig(), 0, big, 0)
