import pytest
import shapely

from wktkit import iterate
from wktkit.engine import EngineContext
from wktkit.errors import EngineError, UnsupportedDimensionError, WktError

# Unit tests for the 'iterate' module functions.
#
# The test boundary is the engine context; geometries are built from WKT
# literals so no files are involved.


@pytest.fixture
def context():
    ctx = EngineContext()
    yield ctx
    ctx.finish()


@pytest.fixture
def mixed(mixed_wkt):
    return shapely.from_wkt(mixed_wkt)


def test_members_in_tree_order(context, mixed):
    seen = []
    error = iterate.iterate(context, mixed, lambda member, gtype: seen.append(gtype))

    assert error is None
    assert seen == ["Point", "LineString", "Polygon"]


def test_single_geometry_is_its_own_member(context):
    line = shapely.from_wkt("LINESTRING (0 0, 1 1)")
    seen = []

    iterate.iterate(context, line, lambda member, gtype: seen.append((member, gtype)))

    assert len(seen) == 1
    assert seen[0][0].equals(line)
    assert seen[0][1] == "LineString"


def test_visitor_stop_ends_the_walk(context, mixed):
    seen = []
    failure = WktError("stop here")

    def visit(member, gtype):
        seen.append(gtype)
        if gtype == "LineString":
            return iterate.Stop(failure)
        return iterate.CONTINUE

    assert iterate.iterate(context, mixed, visit) is failure
    assert seen == ["Point", "LineString"]


def test_clean_stop_returns_no_error(context, mixed):
    seen = []

    def visit(member, gtype):
        seen.append(gtype)
        return iterate.Stop()

    assert iterate.iterate(context, mixed, visit) is None
    assert seen == ["Point"]


def test_coordinates_in_index_order(context):
    line = shapely.from_wkt("LINESTRING (0 0, 3 4, 6 0)")
    seen = []

    error = iterate.iterate_coordinates(context, line, lambda i, total, x, y: seen.append((i, total, x, y)))

    assert error is None
    assert seen == [(0, 3, 0.0, 0.0), (1, 3, 3.0, 4.0), (2, 3, 6.0, 0.0)]


def test_coordinates_stop(context):
    line = shapely.from_wkt("LINESTRING (0 0, 3 4, 6 0)")
    failure = WktError("enough")
    seen = []

    def visit(i, total, x, y):
        seen.append(i)
        return iterate.Stop(failure) if i == 1 else None

    assert iterate.iterate_coordinates(context, line, visit) is failure
    assert seen == [0, 1]


def test_three_dimensional_coordinates_rejected_before_any_visit(context):
    line = shapely.from_wkt("LINESTRING Z (0 0 1, 3 4 1)")
    seen = []

    with pytest.raises(UnsupportedDimensionError):
        iterate.iterate_coordinates(context, line, lambda *args: seen.append(args))

    assert seen == []


def test_polygon_has_no_coordinate_sequence(context):
    polygon = shapely.from_wkt("POLYGON ((0 0, 1 0, 1 1, 0 0))")
    with pytest.raises(EngineError):
        iterate.iterate_coordinates(context, polygon, lambda *args: None)


def test_rings_exterior_then_interior(context, mixed):
    polygon = shapely.get_geometry(mixed, 2)
    seen = []

    error = iterate.iterate_rings(context, polygon, lambda i, total, x, y: seen.append((i, x, y)))

    assert error is None
    assert len(seen) == 10
    assert [i for i, _, _ in seen] == [0, 1, 2, 3, 4, 0, 1, 2, 3, 4]
    assert seen[1] == (1, 10.0, 0.0)
    assert seen[6] == (1, 4.0, 2.0)


def test_rings_stop_in_exterior_skips_interior(context, mixed):
    polygon = shapely.get_geometry(mixed, 2)
    seen = []

    def visit(i, total, x, y):
        seen.append(i)
        return iterate.Stop() if i == total - 1 else iterate.CONTINUE

    assert iterate.iterate_rings(context, polygon, visit) is None
    assert seen == [0, 1, 2, 3, 4]
