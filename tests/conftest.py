import pytest
import shapely

from wktkit import config


POINTS_WKT = "GEOMETRYCOLLECTION (POINT (0 0), POINT (5 5), POINT (2 8))"
MIXED_WKT = (
    "GEOMETRYCOLLECTION (POINT (1 2), LINESTRING (0 0, 3 4, 6 0), "
    "POLYGON ((0 0, 10 0, 10 10, 0 10, 0 0), (2 2, 4 2, 4 4, 2 4, 2 2)))"
)


@pytest.fixture
def points_wkt():
    return POINTS_WKT


@pytest.fixture
def mixed_wkt():
    return MIXED_WKT


@pytest.fixture
def wkt_file(tmp_path):
    path = tmp_path / "points.wkt"
    path.write_text(POINTS_WKT)
    return str(path)


@pytest.fixture
def mixed_file(tmp_path):
    path = tmp_path / "mixed.wkt"
    path.write_text(MIXED_WKT)
    return str(path)


@pytest.fixture
def wkb_file(tmp_path):
    path = tmp_path / "points.wkb"
    path.write_bytes(shapely.to_wkb(shapely.from_wkt(POINTS_WKT)))
    return str(path)


@pytest.fixture
def hex_file(tmp_path):
    path = tmp_path / "points.hex"
    path.write_text(shapely.to_wkb(shapely.from_wkt(POINTS_WKT), hex=True) + "\n")
    return str(path)


@pytest.fixture
def bad_wkt_file(tmp_path):
    path = tmp_path / "bad.wkt"
    path.write_text("POINT (1 2")
    return str(path)


@pytest.fixture
def make_configuration():
    def _make(**overrides):
        return config.configuration(config.config_parser_factory(None), overrides)
    return _make


@pytest.fixture
def configuration(make_configuration):
    return make_configuration()
