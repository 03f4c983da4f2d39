import os
import sys

import pytest

# Ensure imports like `from app.main import app` work when pytest is run from repo root
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from app.wmts.grid import Point  # noqa: E402


class FakeReprojector:
    """Returns canned points per (from, to) pair and records every call."""

    def __init__(self, answers=None, error=None):
        self.answers = dict(answers or {})
        self.error = error
        self.calls = []

    def reproject(self, point, from_crs, to_crs):
        self.calls.append((point, from_crs, to_crs))
        if self.error is not None:
            raise self.error
        if (from_crs, to_crs) not in self.answers:
            raise KeyError(f"unknown CRS pair {from_crs} -> {to_crs}")
        return Point(*self.answers[(from_crs, to_crs)])


SWISS_TO_WGS84 = {("epsg:21781", "epsg:4326"): (8.829295858079231, 46.12486163053951)}


@pytest.fixture
def fake_reprojector():
    return FakeReprojector(SWISS_TO_WGS84)


@pytest.fixture
def make_reprojector():
    def _make(answers=None, error=None):
        return FakeReprojector(answers if answers is not None else SWISS_TO_WGS84, error=error)
    return _make
