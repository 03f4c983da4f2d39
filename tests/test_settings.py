import json

import pytest
from pydantic import ValidationError

from app.settings import LocatorSettings, build_settings_from_env
from app.wmts.grid import SWISS_RESOLUTIONS


def test_defaults_match_swiss_grid():
    s = LocatorSettings()
    assert (s.x_origin, s.y_origin) == (420000, 350000)
    assert (s.tile_width, s.tile_height) == (256, 256)
    assert len(s.resolutions) == 29
    assert tuple(s.resolutions) == SWISS_RESOLUTIONS
    assert s.target == "wmts"
    assert s.output_epsg == "epsg:4326"
    assert s.epsg_mapping == {}
    assert s.refsys_field == "[wmts][reference-system]"


def test_grid_from_settings():
    g = LocatorSettings(x_origin=0, resolutions=[10, 5]).grid()
    assert g.x_origin == 0
    assert g.resolutions == (10, 5)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"resolutions": []},
        {"resolutions": [1, 0]},
        {"tile_width": 0},
        {"target": ""},
        {"row_field": "  "},
        {"unknown_option": 1},
    ],
)
def test_invalid_settings_rejected(kwargs):
    with pytest.raises(ValidationError):
        LocatorSettings(**kwargs)


def test_settings_are_frozen():
    s = LocatorSettings()
    with pytest.raises(ValidationError):
        s.output_epsg = "epsg:2056"  # type: ignore[misc]


def test_env_overrides():
    env = {
        "WMTS_X_ORIGIN": "2420000",
        "WMTS_TILE_WIDTH": "512",
        "WMTS_OUTPUT_EPSG": "epsg:3857",
        "WMTS_RESOLUTIONS": "[100, 50, 25]",
        "WMTS_EPSG_MAPPING": '{"swissgrid": 21781, "lv95": "2056"}',
    }
    s = build_settings_from_env(env)
    assert s.x_origin == 2420000
    assert s.tile_width == 512
    assert s.output_epsg == "epsg:3857"
    assert s.resolutions == [100, 50, 25]
    assert s.epsg_mapping == {"swissgrid": 21781, "lv95": "2056"}


def test_config_file_then_env(tmp_path):
    cfg = tmp_path / "wmts.json"
    cfg.write_text(json.dumps({"target": "tile", "epsg_mapping": {"swissgrid": 21781}, "output_epsg": "epsg:2056"}))
    s = build_settings_from_env({"WMTS_CONFIG": str(cfg), "WMTS_OUTPUT_EPSG": "epsg:4326"})
    assert s.target == "tile"
    assert s.epsg_mapping == {"swissgrid": 21781}
    # env wins over the file
    assert s.output_epsg == "epsg:4326"


def test_bad_json_override_is_an_error():
    with pytest.raises(ValueError, match="WMTS_RESOLUTIONS"):
        build_settings_from_env({"WMTS_RESOLUTIONS": "[1, 2"})


def test_config_file_must_be_object(tmp_path):
    cfg = tmp_path / "wmts.json"
    cfg.write_text("[1, 2]")
    with pytest.raises(ValueError):
        build_settings_from_env({"WMTS_CONFIG": str(cfg)})
